"""Allow `python -m fareplay`."""

from fareplay.cli import main

main()
