"""
Data models for treasury balances, fee sources and audited actions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")


class Chain(str, Enum):
    """Chains the treasury holds funds on."""

    BASE = "base"
    SOLANA = "solana"
    ETHEREUM = "ethereum"


class ActionType(str, Enum):
    """Treasury actions that can be wrapped in a commit-reveal audit."""

    REBALANCE = "rebalance"
    TRANSFER = "transfer"
    ALLOCATION = "allocation"
    FEE_COLLECTION = "fee_collection"
    YIELD_DEPLOYMENT = "yield_deployment"
    PAYMENT = "payment"
    SWAP = "swap"
    EMERGENCY_WITHDRAWAL = "emergency_withdrawal"


class RiskLevel(str, Enum):
    """Risk level assessed by the agent before executing."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Treasury state


@dataclass
class TreasuryBalance:
    """Native balance of one wallet on one chain."""

    chain: Chain
    token: str  # Token symbol or address
    amount: int  # Smallest unit (wei / lamports)
    usd_value: float
    last_updated: datetime


@dataclass
class FeeSource:
    """Claimable fees held by a fee contract."""

    protocol: str  # "clawnch", "morpho", "custom"
    chain: Chain
    contract: str
    token_address: str
    amount_available: int


@dataclass
class RunwayMetrics:
    """Operational runway derived from balance and burn rate."""

    total_balance_usd: float
    monthly_burn_rate_usd: float
    days_remaining: float
    alert_threshold: int  # Days before alert
    last_calculated: datetime


@dataclass
class TreasuryStatus:
    """Balances, runway and alerts at one point in time."""

    balances: list[TreasuryBalance]
    runway: RunwayMetrics
    alerts: list[str] = field(default_factory=list)


# Audited actions


@dataclass(frozen=True)
class RiskAssessment:
    """Risk level plus the factors behind it."""

    level: RiskLevel
    factors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Coerce raw strings so an unknown level fails at construction
        object.__setattr__(self, "level", RiskLevel(self.level))
        object.__setattr__(self, "factors", tuple(self.factors))


@dataclass(frozen=True)
class PortfolioContext:
    """Portfolio state at decision time."""

    total_value_usd: float
    positions: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only copy so neither the caller nor a reader can alter committed weights
        object.__setattr__(self, "positions", MappingProxyType(dict(self.positions)))


@dataclass(frozen=True)
class TreasuryReasoning:
    """The reasoning an agent commits before a treasury action."""

    action: ActionType
    rationale: str
    risk: RiskAssessment
    expected_outcome: str
    portfolio_context: Optional[PortfolioContext] = None
    constraints: Optional[tuple[str, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "action", ActionType(self.action))
        if self.constraints is not None:
            object.__setattr__(self, "constraints", tuple(self.constraints))


@dataclass(frozen=True)
class CommitResult:
    """Commitment created by the protocol client."""

    commitment_hash: str
    commitment_address: str
    signature: str  # Transaction reference


@dataclass(frozen=True)
class RevealResult:
    """Reveal published by the protocol client."""

    reasoning_uri: str
    signature: str  # Transaction reference


@dataclass(frozen=True)
class VerifyOutcome:
    """Raw verification answer from the protocol client."""

    valid: bool
    message: str


@dataclass(frozen=True)
class VerificationResult:
    """Verification answer plus the explorer link for the commitment."""

    valid: bool
    message: str
    explorer_url: str


@dataclass(frozen=True)
class AuditTimestamps:
    committed: datetime
    executed: datetime
    revealed: datetime


@dataclass(frozen=True)
class AuditedActionResult(Generic[T]):
    """Result of a commit-reveal wrapped treasury action."""

    reasoning: TreasuryReasoning
    commit: CommitResult
    reveal: RevealResult
    action_result: T
    explorer_url: str
    timestamps: AuditTimestamps


@dataclass(frozen=True)
class CommitmentRecord:
    """A past commitment as reported by the protocol client."""

    commitment_address: str
    commitment_hash: str
    action_type: str
    confidence: int
    revealed: bool
    reasoning_uri: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)
