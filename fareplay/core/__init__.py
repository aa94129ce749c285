"""
Core SDK: signing, transport and signed requests.
"""
