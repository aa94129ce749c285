"""
FarePlay CLI

Key management, payload signing and heartbeats from the command line.

Usage:
    fareplay keygen
    fareplay pubkey --private-key <base58>
    fareplay sign '{"status": "online", "timestamp": 1000}'
    fareplay verify --public-key <base58> '{"status": "online", ..., "signature": "..."}'
    fareplay heartbeat --status online
    fareplay heartbeat --watch --interval 60000

Casino identity and service settings fall back to FAREPLAY_* environment
variables (a .env file is loaded automatically):
    FAREPLAY_DISCOVERY_URL, FAREPLAY_CASINO_ID, FAREPLAY_PRIVATE_KEY, ...
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from fareplay.clients.casino import CasinoClient
from fareplay.core.config import Settings, get_settings
from fareplay.core.errors import FareSdkError
from fareplay.core.signing import (
    create_signed_payload,
    generate_keypair,
    get_keypair_from_private_key,
    verify_signed_payload,
)
from fareplay.schemas.casino import CasinoStatus

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, quiet: bool = False, settings: Optional[Settings] = None):
    """Configure logging based on verbosity."""
    settings = settings or get_settings()
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=settings.log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _read_payload(text: str) -> Dict[str, Any]:
    """Parse a JSON object from an argument, or from stdin when text is '-'."""
    if text == "-":
        text = sys.stdin.read()
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("Payload must be a JSON object")
    return payload


def _require(value: Optional[str], name: str) -> str:
    if not value:
        raise ValueError(f"{name} is required (pass it as an option or set it in the environment)")
    return value


def cmd_keygen(args, settings: Settings) -> int:
    keypair = generate_keypair()
    if args.json:
        print(json.dumps({"publicKey": keypair.public_key, "privateKey": keypair.private_key}, indent=2))
    else:
        print(f"Public key:  {keypair.public_key}")
        print(f"Private key: {keypair.private_key}")
    return 0


def cmd_pubkey(args, settings: Settings) -> int:
    private_key = _require(args.private_key or settings.private_key, "FAREPLAY_PRIVATE_KEY")
    print(get_keypair_from_private_key(private_key).public_key)
    return 0


def cmd_sign(args, settings: Settings) -> int:
    private_key = _require(args.private_key or settings.private_key, "FAREPLAY_PRIVATE_KEY")
    signed = create_signed_payload(_read_payload(args.payload), private_key)
    print(json.dumps(signed, indent=2, ensure_ascii=False))
    return 0


def cmd_verify(args, settings: Settings) -> int:
    payload = _read_payload(args.payload)
    if verify_signed_payload(payload, args.public_key):
        print("valid")
        return 0
    print("invalid")
    return 1


async def _heartbeat(args, settings: Settings) -> int:
    client = CasinoClient(
        base_url=args.base_url or settings.discovery_url,
        casino_id=_require(args.casino_id or settings.casino_id, "FAREPLAY_CASINO_ID"),
        private_key=_require(args.private_key or settings.private_key, "FAREPLAY_PRIVATE_KEY"),
        timeout=settings.http_timeout,
        retries=settings.http_retries,
        retry_delay=settings.http_retry_delay,
    )

    response = await client.send_heartbeat(args.status)
    print(json.dumps(response.to_wire(), indent=2))

    if not args.watch:
        return 0

    interval = args.interval or settings.heartbeat_interval
    logger.info(f"Sending heartbeats every {interval}ms (Ctrl+C to stop)")
    scheduler = client.start_heartbeat(interval=interval, status=args.status)
    try:
        await scheduler.wait()
    finally:
        scheduler.stop()
    return 0


def cmd_heartbeat(args, settings: Settings) -> int:
    return asyncio.run(_heartbeat(args, settings))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fareplay",
        description="FarePlay SDK command-line tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s keygen                                   # New Ed25519 keypair
  %(prog)s sign '{"status":"online"}'               # Sign with FAREPLAY_PRIVATE_KEY
  echo '{...}' | %(prog)s verify -k <pubkey> -      # Verify a signed payload from stdin
  %(prog)s heartbeat --watch --interval 30000       # Heartbeat every 30 seconds
        """
    )

    # Output options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    keygen = subparsers.add_parser("keygen", help="Generate a new keypair")
    keygen.add_argument("--json", action="store_true", help="Print as JSON")
    keygen.set_defaults(handler=cmd_keygen)

    pubkey = subparsers.add_parser("pubkey", help="Print the public key of a private key")
    pubkey.add_argument("--private-key", help="Base58 secret key (default: FAREPLAY_PRIVATE_KEY)")
    pubkey.set_defaults(handler=cmd_pubkey)

    sign = subparsers.add_parser("sign", help="Sign a JSON payload")
    sign.add_argument("payload", help="JSON object, or '-' to read from stdin")
    sign.add_argument("--private-key", help="Base58 secret key (default: FAREPLAY_PRIVATE_KEY)")
    sign.set_defaults(handler=cmd_sign)

    verify = subparsers.add_parser("verify", help="Verify a signed JSON payload")
    verify.add_argument("payload", help="JSON object, or '-' to read from stdin")
    verify.add_argument("--public-key", "-k", required=True, help="Base58 public key")
    verify.set_defaults(handler=cmd_verify)

    heartbeat = subparsers.add_parser("heartbeat", help="Send a casino heartbeat")
    heartbeat.add_argument(
        "--status",
        choices=[status.value for status in CasinoStatus],
        default=CasinoStatus.ONLINE.value,
        help="Status to report (default: online)",
    )
    heartbeat.add_argument("--watch", action="store_true", help="Keep sending heartbeats until interrupted")
    heartbeat.add_argument("--interval", type=int, help="Heartbeat interval in ms (default: FAREPLAY_HEARTBEAT_INTERVAL)")
    heartbeat.add_argument("--base-url", help="Discovery Service URL (default: FAREPLAY_DISCOVERY_URL)")
    heartbeat.add_argument("--casino-id", help="Casino ID (default: FAREPLAY_CASINO_ID)")
    heartbeat.add_argument("--private-key", help="Base58 secret key (default: FAREPLAY_PRIVATE_KEY)")
    heartbeat.set_defaults(handler=cmd_heartbeat)

    return parser


def main(argv: Optional[List[str]] = None):
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(verbose=args.verbose, quiet=args.quiet, settings=settings)

    try:
        exit_code = args.handler(args, settings)
    except KeyboardInterrupt:
        print("Stopped", file=sys.stderr)
        exit_code = 0
    except (FareSdkError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
