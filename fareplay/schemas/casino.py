"""
Casino schemas

Core data structures representing a casino in the Fare Protocol, plus the
request bodies used to register, update and query casinos.
"""
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field, PositiveInt

from fareplay.schemas.common import FareModel, Url


class CasinoStatus(str, Enum):
    """Casino availability as reported by heartbeats."""
    ONLINE = "online"
    OFFLINE = "offline"
    MAINTENANCE = "maintenance"
    SUSPENDED = "suspended"


class GameType(str, Enum):
    SLOTS = "slots"
    ROULETTE = "roulette"
    DICE = "dice"
    CRASH = "crash"
    COINFLIP = "coinflip"
    RPS = "rps"
    BOMBS = "bombs"
    CARDS = "cards"


class SocialLinks(FareModel):
    twitter: Optional[Url] = None
    discord: Optional[Url] = None
    telegram: Optional[Url] = None
    website: Optional[Url] = None


class CasinoDetails(FareModel):
    """Descriptive casino metadata shown in the directory."""
    description: Optional[str] = Field(None, max_length=500)
    games: List[GameType] = Field(default_factory=list)
    logo: Optional[Url] = None
    banner: Optional[Url] = None
    social_links: Optional[SocialLinks] = None
    max_bet_amount: Optional[float] = Field(None, gt=0)
    min_bet_amount: Optional[float] = Field(None, gt=0)
    supported_tokens: List[str] = Field(default_factory=lambda: ["SOL"])


class CasinoDetailsUpdate(FareModel):
    """Partial CasinoDetails; only the fields present are changed."""
    description: Optional[str] = Field(None, max_length=500)
    games: Optional[List[GameType]] = None
    logo: Optional[Url] = None
    banner: Optional[Url] = None
    social_links: Optional[SocialLinks] = None
    max_bet_amount: Optional[float] = Field(None, gt=0)
    min_bet_amount: Optional[float] = Field(None, gt=0)
    supported_tokens: Optional[List[str]] = None


class CasinoMetadata(FareModel):
    """A casino as stored by the Discovery Service."""
    id: UUID
    name: str = Field(..., min_length=1, max_length=100)
    url: Url
    public_key: str = Field(..., min_length=32, max_length=44, description="Base58 Ed25519 public key")
    status: CasinoStatus
    metadata: CasinoDetails
    created_at: PositiveInt
    updated_at: PositiveInt
    last_heartbeat: Optional[PositiveInt] = None
    version: str = Field("1.0.0", description="Protocol version")


class RegistrationRequest(FareModel):
    """Body of POST /api/casinos/register."""
    name: str = Field(..., min_length=1, max_length=100)
    url: Url
    public_key: str = Field(..., min_length=32, max_length=44)
    signature: str = Field(..., description="Signature over the canonical registration fields")
    metadata: CasinoDetails


class CasinoUpdateRequest(FareModel):
    """Body of PATCH /api/casinos."""
    casino_id: str = Field(..., min_length=1)
    timestamp: PositiveInt
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    url: Optional[Url] = None
    status: Optional[CasinoStatus] = None
    metadata: Optional[CasinoDetailsUpdate] = None
    signature: str = Field(..., description="Signature over the canonical update fields")


class CasinoFilters(FareModel):
    """Query filters for GET /api/casinos."""
    status: Optional[CasinoStatus] = None
    games: Optional[List[GameType]] = None
    limit: int = Field(20, ge=1, le=100)
    offset: int = Field(0, ge=0)

    def to_query_params(self) -> Dict[str, Any]:
        """
        Render the filters as query parameters.

        Games are joined with commas; limit and offset are always present.
        """
        params: Dict[str, Any] = {}
        if self.status:
            params["status"] = CasinoStatus(self.status).value
        if self.games:
            params["games"] = ",".join(GameType(game).value for game in self.games)
        params["limit"] = self.limit
        params["offset"] = self.offset
        return params


class CasinoList(FareModel):
    """One page of casinos."""
    casinos: List[CasinoMetadata]
    total: int
    limit: int
    offset: int


class CasinoStats(FareModel):
    """Network-wide casino statistics."""
    total_casinos: int
    online_casinos: int
    heartbeats_last24h: int = Field(..., alias="heartbeatsLast24h")
