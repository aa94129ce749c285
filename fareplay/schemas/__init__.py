"""
Fare Protocol v1.0.0 schemas.
"""

from fareplay.schemas.casino import (
    CasinoDetails,
    CasinoDetailsUpdate,
    CasinoFilters,
    CasinoList,
    CasinoMetadata,
    CasinoStats,
    CasinoStatus,
    CasinoUpdateRequest,
    GameType,
    RegistrationRequest,
    SocialLinks,
)
from fareplay.schemas.common import FareModel
from fareplay.schemas.heartbeat import (
    HeartbeatMetrics,
    HeartbeatPayload,
    HeartbeatResponse,
)
from fareplay.schemas.protocol import (
    FARE_PROTOCOL_SPEC,
    FARE_PROTOCOL_VERSION,
    ApiErrorBody,
    ApiResponse,
    ErrorCodes,
)

__all__ = [
    # Casino
    "CasinoDetails",
    "CasinoDetailsUpdate",
    "CasinoFilters",
    "CasinoList",
    "CasinoMetadata",
    "CasinoStats",
    "CasinoStatus",
    "CasinoUpdateRequest",
    "GameType",
    "RegistrationRequest",
    "SocialLinks",
    # Heartbeat
    "HeartbeatMetrics",
    "HeartbeatPayload",
    "HeartbeatResponse",
    # Protocol
    "FARE_PROTOCOL_SPEC",
    "FARE_PROTOCOL_VERSION",
    "ApiErrorBody",
    "ApiResponse",
    "ErrorCodes",
    "FareModel",
]
