"""
Conversion of treasury reasoning into SOLPRISM reasoning traces.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from .models import CommitResult, RiskLevel, TreasuryReasoning

SOLPRISM_PROGRAM_ID = "CZcvoryaQNrtZ3qb3gC1h9opcYpzEP1D9Mu1RVwFQeBu"
SOLPRISM_EXPLORER = "https://www.solprism.app"

# Map risk levels to confidence scores (0-100)
RISK_TO_CONFIDENCE: dict[RiskLevel, int] = {
    RiskLevel.LOW: 90,
    RiskLevel.MEDIUM: 70,
    RiskLevel.HIGH: 45,
    RiskLevel.CRITICAL: 20,
}


@dataclass(frozen=True)
class TraceAction:
    """What the agent is about to do."""

    type: str
    description: str
    parameters: dict[str, Any]


@dataclass(frozen=True)
class TraceDecision:
    """How confident the agent is and what it expects."""

    confidence: int
    reasoning: str
    expected_outcome: str


@dataclass(frozen=True)
class ReasoningTrace:
    """Reasoning trace in the shape the protocol client commits."""

    action: TraceAction
    decision: TraceDecision

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase JSON shape used by the protocol."""
        return {
            "action": {
                "type": self.action.type,
                "description": self.action.description,
                "parameters": self.action.parameters,
            },
            "decision": {
                "confidence": self.decision.confidence,
                "reasoning": self.decision.reasoning,
                "expectedOutcome": self.decision.expected_outcome,
            },
        }

    def canonical_json(self) -> str:
        """Stable JSON encoding (sorted keys, no whitespace)."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


def confidence_for(level: RiskLevel) -> int:
    """Confidence score for a risk level."""
    return RISK_TO_CONFIDENCE[RiskLevel(level)]


def to_reasoning_trace(reasoning: TreasuryReasoning) -> ReasoningTrace:
    """
    Convert TreasuryReasoning into a ReasoningTrace.

    Portfolio and constraint parameters are only included when present.
    """
    parameters: dict[str, Any] = {
        "risk_level": reasoning.risk.level.value,
        "risk_factors": list(reasoning.risk.factors),
    }

    if reasoning.portfolio_context is not None:
        parameters["portfolio_value_usd"] = reasoning.portfolio_context.total_value_usd
        parameters["positions"] = dict(reasoning.portfolio_context.positions)

    if reasoning.constraints is not None:
        parameters["constraints"] = list(reasoning.constraints)

    return ReasoningTrace(
        action=TraceAction(
            type=reasoning.action.value,
            description=reasoning.rationale,
            parameters=parameters,
        ),
        decision=TraceDecision(
            confidence=confidence_for(reasoning.risk.level),
            reasoning=reasoning.rationale,
            expected_outcome=reasoning.expected_outcome,
        ),
    )


def build_explorer_url(commitment_address: str) -> str:
    """Build a SOLPRISM explorer URL for a commitment address."""
    return f"{SOLPRISM_EXPLORER}/commitment/{commitment_address}"


def build_reasoning_uri(commit: CommitResult, storage_uri: Optional[str] = None) -> str:
    """
    Build the URI the full reasoning is published under.

    With a storage base URI (IPFS gateway, Arweave, API) the commitment hash is
    appended to it. Without one, the explorer page of the commitment is used.
    """
    if storage_uri:
        return f"{storage_uri}/{commit.commitment_hash}"
    return build_explorer_url(commit.commitment_address)
