"""
Heartbeat schemas

Sent by casinos to indicate they are alive and operational.
"""
from typing import Optional
from uuid import UUID

from pydantic import Field, NonNegativeFloat, NonNegativeInt, PositiveInt

from fareplay.schemas.casino import CasinoStatus
from fareplay.schemas.common import FareModel


class HeartbeatMetrics(FareModel):
    """Optional operational metrics attached to a heartbeat."""
    active_players: Optional[NonNegativeInt] = None
    total_bets24h: Optional[NonNegativeFloat] = Field(None, alias="totalBets24h")
    uptime: Optional[NonNegativeFloat] = Field(None, description="Seconds")
    response_time: Optional[float] = Field(None, gt=0, description="Milliseconds")


class HeartbeatPayload(FareModel):
    """Body of POST /v1/casinos/heartbeat."""
    casino_id: UUID
    status: CasinoStatus
    timestamp: PositiveInt
    metrics: Optional[HeartbeatMetrics] = None
    signature: str


class HeartbeatResponse(FareModel):
    success: bool
    timestamp: PositiveInt
    next_heartbeat_in: Optional[PositiveInt] = Field(None, description="Seconds")
