"""
Discovery Service clients.
"""

from fareplay.clients.casino import CasinoClient
from fareplay.clients.discovery import DiscoveryClient
from fareplay.clients.heartbeat import HeartbeatScheduler

__all__ = [
    "CasinoClient",
    "DiscoveryClient",
    "HeartbeatScheduler",
]
