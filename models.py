# Filename: models.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Generic, List, Optional, TypeVar

from solders.pubkey import Pubkey

T = TypeVar("T")


@dataclass(frozen=True)
class CreationEvent:
    """
    CreationEvent is the decoded payload of a pump.fun Create instruction.
    Lives for one pipeline pass; never persisted.
    """
    name: str                        # Token name
    symbol: str                      # Token symbol (short name)
    uri: str                         # Metadata URI
    mint: Pubkey                     # Token mint address
    bonding_curve: Pubkey            # Bonding curve account
    creator: Pubkey                  # Creator wallet


@dataclass(frozen=True)
class MarketSnapshot:
    """Best-effort market data. None means unknown, never zero."""
    price: Optional[float] = None
    market_cap: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.price is None and self.market_cap is None


@dataclass(frozen=True)
class LogNotification:
    """One logsNotification delivered by the subscription."""
    logs: List[str]
    signature: str
    has_error: bool = False


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Settled result of a lookup: a value or the classified error."""
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def settle(awaitable: Awaitable[T]) -> "Outcome[T]":
    """Await and wrap the result so a failure never cancels sibling lookups."""
    try:
        return Outcome(value=await awaitable)
    except Exception as e:
        return Outcome(error=e)


@dataclass(frozen=True)
class ScoreBreakdown:
    name_ok: bool
    symbol_ok: bool
    uri_ok: bool
    reputable: bool
    reputation_error: Optional[Exception] = None

    @property
    def total(self) -> int:
        return (
            (20 if self.name_ok else 0)
            + (20 if self.symbol_ok else 0)
            + (30 if self.uri_ok else 0)
            + (30 if self.reputable else 0)
        )


class PipelineState(Enum):
    RECEIVED = "received"
    DECODED = "decoded"
    ENRICHING = "enriching"
    SCORED = "scored"
    ALERTED = "alerted"
    SUPPRESSED = "suppressed"
    DROPPED = "dropped"
    IGNORED = "ignored"


TERMINAL_STATES = (
    PipelineState.ALERTED,
    PipelineState.SUPPRESSED,
    PipelineState.DROPPED,
    PipelineState.IGNORED,
)


@dataclass
class PipelineResult:
    signature: str
    state: PipelineState = PipelineState.RECEIVED
    history: List[PipelineState] = field(default_factory=lambda: [PipelineState.RECEIVED])
    event: Optional[CreationEvent] = None
    derived_address: Optional[Pubkey] = None
    snapshot: Optional[MarketSnapshot] = None
    score: Optional[int] = None
    message: Optional[str] = None
    delivered: bool = False
    error: Optional[Any] = None

    def advance(self, state: PipelineState) -> "PipelineResult":
        self.state = state
        self.history.append(state)
        return self
