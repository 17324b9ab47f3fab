"""
Agent Treasury Manager

Tracks an agent's treasury across Base and Solana, claims Clawnch fees, and
wraps treasury actions in a SOLPRISM commit-reveal audit trail.

Usage:
    # Check balances on both chains
    agent-treasury balance

    # Claim FeeLocker fees for WETH and extra tokens
    agent-treasury collect --tokens 0x...

    # Balances plus runway for a monthly burn
    agent-treasury status --burn 500
"""

__version__ = "0.1.0"

from .audit import AuditedTreasury, SessionLedger
from .collector import ClawnchFeeCollector
from .config import AuditConfig, Settings, TreasuryConfig, Wallets
from .errors import (
    CommitFailedError,
    ConfigError,
    NotInitializedError,
    RevealFailedError,
    TreasuryError,
)
from .models import (
    ActionType,
    AuditedActionResult,
    PortfolioContext,
    RiskAssessment,
    RiskLevel,
    TreasuryReasoning,
)
from .protocol import MockProtocolClient, ProtocolClient
from .reasoning import to_reasoning_trace
from .treasury import TreasuryManager

__all__ = [
    "__version__",
    "AuditedTreasury",
    "SessionLedger",
    "ClawnchFeeCollector",
    "AuditConfig",
    "Settings",
    "TreasuryConfig",
    "Wallets",
    "TreasuryError",
    "ConfigError",
    "NotInitializedError",
    "CommitFailedError",
    "RevealFailedError",
    "ActionType",
    "RiskLevel",
    "RiskAssessment",
    "PortfolioContext",
    "TreasuryReasoning",
    "AuditedActionResult",
    "ProtocolClient",
    "MockProtocolClient",
    "to_reasoning_trace",
    "TreasuryManager",
]
