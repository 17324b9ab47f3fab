"""
Shared fixtures for Agent Treasury tests.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from agent_treasury.config import AuditConfig
from agent_treasury.models import (
    ActionType,
    AuditedActionResult,
    AuditTimestamps,
    CommitResult,
    PortfolioContext,
    RevealResult,
    RiskAssessment,
    RiskLevel,
    TreasuryReasoning,
)
from agent_treasury.protocol import MockProtocolClient


@dataclass(frozen=True)
class FakeIdentity:
    public_key: str = "AgentPubkey1111111111111111111111111111111"


class RecordingClient(MockProtocolClient):
    """MockProtocolClient that records calls and can be told to fail."""

    def __init__(
        self,
        commit_error: Optional[Exception] = None,
        reveal_error: Optional[Exception] = None,
    ) -> None:
        super().__init__()
        self.calls: list[str] = []
        self.commit_error = commit_error
        self.reveal_error = reveal_error

    async def is_agent_registered(self, public_key):
        self.calls.append("is_agent_registered")
        return await super().is_agent_registered(public_key)

    async def register_agent(self, identity, name):
        self.calls.append("register_agent")
        await super().register_agent(identity, name)

    async def commit_reasoning(self, identity, trace):
        self.calls.append("commit_reasoning")
        if self.commit_error is not None:
            raise self.commit_error
        return await super().commit_reasoning(identity, trace)

    async def reveal_reasoning(self, identity, commitment_address, reasoning_uri):
        self.calls.append("reveal_reasoning")
        if self.reveal_error is not None:
            raise self.reveal_error
        return await super().reveal_reasoning(identity, commitment_address, reasoning_uri)

    async def verify_reasoning(self, commitment_address, trace):
        self.calls.append("verify_reasoning")
        return await super().verify_reasoning(commitment_address, trace)


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def audit_config() -> AuditConfig:
    return AuditConfig(agent_name="Skippy Treasury Agent")


@pytest.fixture
def client() -> RecordingClient:
    return RecordingClient()


@pytest.fixture
def reasoning() -> TreasuryReasoning:
    """A low-risk rebalance with portfolio context."""
    return TreasuryReasoning(
        action=ActionType.REBALANCE,
        rationale="SOL allocation drifted to 68%, target is 50%.",
        risk=RiskAssessment(
            level=RiskLevel.LOW,
            factors=("Small position adjustment", "High liquidity"),
        ),
        expected_outcome="Portfolio returns to 50/50 SOL/USDC split",
        portfolio_context=PortfolioContext(
            total_value_usd=15000,
            positions={"SOL": 0.68, "USDC": 0.32},
        ),
    )


def make_record(
    action: ActionType = ActionType.TRANSFER,
    commitment_hash: str = "ab" * 32,
    commitment_address: str = "Commit1111",
    committed: Optional[datetime] = None,
) -> AuditedActionResult:
    """Build an audit record without going through the protocol client."""
    committed = committed or datetime(2026, 2, 1, 12, 0, tzinfo=timezone.utc)
    return AuditedActionResult(
        reasoning=TreasuryReasoning(
            action=action,
            rationale=f"Reason for {action.value}",
            risk=RiskAssessment(level=RiskLevel.MEDIUM, factors=("Counterparty",)),
            expected_outcome="Done",
        ),
        commit=CommitResult(
            commitment_hash=commitment_hash,
            commitment_address=commitment_address,
            signature="sig-commit",
        ),
        reveal=RevealResult(reasoning_uri="https://example.org/r", signature="sig-reveal"),
        action_result=None,
        explorer_url=f"https://www.solprism.app/commitment/{commitment_address}",
        timestamps=AuditTimestamps(
            committed=committed,
            executed=committed + timedelta(seconds=1),
            revealed=committed + timedelta(seconds=2),
        ),
    )
