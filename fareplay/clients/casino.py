"""
Casino Client

Casino-side operations: signed heartbeats and status updates sent to the
Discovery Service.

Every heartbeat body carries the casino's ID, a millisecond timestamp and a
signature over the canonical form of all other fields.

Example:
    client = CasinoClient(base_url, casino_id, private_key)
    await client.send_heartbeat_with_metrics("online", {"activePlayers": 42})
    scheduler = client.start_heartbeat(interval=60000)
"""

import logging
from typing import Any, Mapping, Optional, Union

import httpx

from fareplay.clients.heartbeat import HeartbeatScheduler
from fareplay.core.config import Settings, get_settings
from fareplay.core.constants import DEFAULT_HEARTBEAT_INTERVAL
from fareplay.core.http.client import create_http_client
from fareplay.core.signed_request import SignedRequestSender
from fareplay.schemas.casino import CasinoStatus
from fareplay.schemas.heartbeat import HeartbeatMetrics, HeartbeatPayload, HeartbeatResponse

logger = logging.getLogger(__name__)

HEARTBEAT_PATH = "/v1/casinos/heartbeat"

StatusLike = Union[CasinoStatus, str]
MetricsLike = Union[HeartbeatMetrics, Mapping[str, Any]]


def _status_value(status: StatusLike) -> str:
    return status.value if isinstance(status, CasinoStatus) else status


class CasinoClient:
    """
    Client for casino-side operations.

    Handles heartbeats and status updates with the Discovery Service.
    """

    def __init__(
        self,
        base_url: str,
        casino_id: str,
        private_key: str,
        timeout: Optional[int] = None,
        retries: Optional[int] = None,
        retry_delay: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Discovery Service base URL
            casino_id: Registered casino ID, added to every heartbeat
            private_key: Base58 64-byte Ed25519 secret key of the casino
            timeout: Per-attempt timeout (ms)
            retries: Retries after the first attempt
            retry_delay: Linear backoff unit (ms)
            headers: Extra default headers
            transport: Optional httpx transport (tests)

        Raises:
            KeyDecodeError: If the private key is malformed
        """
        self.http = create_http_client(
            base_url=base_url,
            timeout=timeout,
            retries=retries,
            retry_delay=retry_delay,
            headers=dict(headers) if headers else None,
            transport=transport,
        )
        self.casino_id = casino_id
        self._sender = SignedRequestSender(
            self.http,
            private_key,
            identity={"casinoId": casino_id},
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "CasinoClient":
        """
        Build a client from FAREPLAY_* settings.

        Raises:
            ValueError: If casino_id or private_key is not configured
        """
        settings = settings or get_settings()
        if not settings.casino_id or not settings.private_key:
            raise ValueError("FAREPLAY_CASINO_ID and FAREPLAY_PRIVATE_KEY must be set")

        config = settings.http_config()
        return cls(
            base_url=config.base_url,
            casino_id=settings.casino_id,
            private_key=settings.private_key,
            timeout=config.timeout,
            retries=config.retries,
            retry_delay=config.retry_delay,
            headers=config.headers,
            transport=transport,
        )

    @property
    def public_key(self) -> str:
        """Base58 public key matching the casino's private key."""
        return self._sender.public_key

    async def send_heartbeat(
        self,
        status: StatusLike = CasinoStatus.ONLINE,
        timestamp: Optional[int] = None,
        metrics: Optional[MetricsLike] = None,
    ) -> HeartbeatResponse:
        """
        Send a signed heartbeat.

        Args:
            status: Casino status to report
            timestamp: Milliseconds since epoch (defaults to now)
            metrics: Optional operational metrics

        Returns:
            Heartbeat response

        Raises:
            PayloadValidationError: If the heartbeat does not match its schema
            TransportError, ApiError, EmptyDataError: See SignedRequestSender.send
        """
        fields = {
            "status": _status_value(status),
            "timestamp": timestamp,
            "metrics": metrics,
        }
        response = await self._sender.send(
            "POST",
            HEARTBEAT_PATH,
            fields,
            data_contract=HeartbeatResponse,
            payload_contract=HeartbeatPayload,
        )
        logger.debug(f"Heartbeat accepted for casino {self.casino_id} ({_status_value(status)})")
        return response

    async def update_status(self, status: StatusLike) -> HeartbeatResponse:
        """
        Update casino status.

        Args:
            status: New casino status

        Returns:
            Heartbeat response
        """
        return await self.send_heartbeat(status)

    async def send_heartbeat_with_metrics(
        self,
        status: StatusLike,
        metrics: Optional[MetricsLike] = None,
    ) -> HeartbeatResponse:
        """Send a heartbeat with metrics, timestamped now."""
        return await self.send_heartbeat(status, metrics=metrics)

    async def go_online(self) -> HeartbeatResponse:
        return await self.update_status(CasinoStatus.ONLINE)

    async def go_offline(self) -> HeartbeatResponse:
        return await self.update_status(CasinoStatus.OFFLINE)

    async def go_maintenance(self) -> HeartbeatResponse:
        return await self.update_status(CasinoStatus.MAINTENANCE)

    def start_heartbeat(
        self,
        interval: int = DEFAULT_HEARTBEAT_INTERVAL,
        status: StatusLike = CasinoStatus.ONLINE,
    ) -> HeartbeatScheduler:
        """
        Start sending heartbeats every `interval` milliseconds.

        Must be called from a running event loop. Failed heartbeats are logged
        and the schedule continues.

        Args:
            interval: Milliseconds between heartbeats
            status: Status reported by every heartbeat

        Returns:
            Started scheduler; call stop() on it to end the schedule
        """
        async def beat() -> None:
            await self.send_heartbeat(status)

        return HeartbeatScheduler(beat, interval=interval, name=f"heartbeat-{self.casino_id}").start()
