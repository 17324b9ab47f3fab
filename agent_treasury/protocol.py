"""
SOLPRISM commit-reveal protocol client interface.

The audit layer only sequences calls to a client implementing
ProtocolClient; hashing, signing and on-chain storage live behind it.
"""

import hashlib
from typing import Optional, Protocol

import structlog

from .models import CommitmentRecord, CommitResult, RevealResult, VerifyOutcome
from .reasoning import ReasoningTrace

logger = structlog.get_logger()


class AgentIdentity(Protocol):
    """Signing identity of the agent (e.g. a Solana keypair wrapper)."""

    @property
    def public_key(self) -> str: ...


class ProtocolClient(Protocol):
    """Operations the commit-reveal protocol exposes."""

    async def is_agent_registered(self, public_key: str) -> bool: ...

    async def register_agent(self, identity: AgentIdentity, name: str) -> None: ...

    async def commit_reasoning(
        self, identity: AgentIdentity, trace: ReasoningTrace
    ) -> CommitResult: ...

    async def reveal_reasoning(
        self, identity: AgentIdentity, commitment_address: str, reasoning_uri: str
    ) -> RevealResult: ...

    async def verify_reasoning(
        self, commitment_address: str, trace: ReasoningTrace
    ) -> VerifyOutcome: ...

    async def get_accountability(self, public_key: str) -> Optional[float]: ...

    async def get_agent_commitments(
        self, public_key: str, limit: int = 50
    ) -> list[CommitmentRecord]: ...


def hash_trace(trace: ReasoningTrace) -> str:
    """SHA-256 of the canonical trace JSON, hex encoded."""
    return hashlib.sha256(trace.canonical_json().encode()).hexdigest()


class MockProtocolClient:
    """
    In-memory protocol client for dry runs and testing without a cluster.

    Commitments are keyed by a derived address and kept for the lifetime of
    the instance.
    """

    def __init__(self) -> None:
        self._agents: dict[str, str] = {}
        self._commitments: dict[str, CommitmentRecord] = {}
        self._owners: dict[str, str] = {}
        self._order: list[str] = []
        self._tx_counter = 0

    def _next_signature(self, kind: str) -> str:
        self._tx_counter += 1
        return f"mock-{kind}-{self._tx_counter:08d}"

    async def is_agent_registered(self, public_key: str) -> bool:
        return public_key in self._agents

    async def register_agent(self, identity: AgentIdentity, name: str) -> None:
        self._agents[identity.public_key] = name
        logger.debug("mock_agent_registered", agent=identity.public_key, name=name)

    async def commit_reasoning(
        self, identity: AgentIdentity, trace: ReasoningTrace
    ) -> CommitResult:
        if identity.public_key not in self._agents:
            raise ValueError(f"Agent {identity.public_key} is not registered")

        commitment_hash = hash_trace(trace)
        nonce = len(self._order)
        commitment_address = hashlib.sha256(
            f"{identity.public_key}:{commitment_hash}:{nonce}".encode()
        ).hexdigest()[:44]

        self._commitments[commitment_address] = CommitmentRecord(
            commitment_address=commitment_address,
            commitment_hash=commitment_hash,
            action_type=trace.action.type,
            confidence=trace.decision.confidence,
            revealed=False,
        )
        self._owners[commitment_address] = identity.public_key
        self._order.append(commitment_address)

        return CommitResult(
            commitment_hash=commitment_hash,
            commitment_address=commitment_address,
            signature=self._next_signature("commit"),
        )

    async def reveal_reasoning(
        self, identity: AgentIdentity, commitment_address: str, reasoning_uri: str
    ) -> RevealResult:
        record = self._commitments.get(commitment_address)
        if record is None:
            raise ValueError(f"Commitment {commitment_address} not found")
        if self._owners[commitment_address] != identity.public_key:
            raise ValueError("Only the committing agent can reveal")
        if record.revealed:
            raise ValueError(f"Commitment {commitment_address} already revealed")

        self._commitments[commitment_address] = CommitmentRecord(
            commitment_address=record.commitment_address,
            commitment_hash=record.commitment_hash,
            action_type=record.action_type,
            confidence=record.confidence,
            revealed=True,
            reasoning_uri=reasoning_uri,
        )
        return RevealResult(
            reasoning_uri=reasoning_uri,
            signature=self._next_signature("reveal"),
        )

    async def verify_reasoning(
        self, commitment_address: str, trace: ReasoningTrace
    ) -> VerifyOutcome:
        record = self._commitments.get(commitment_address)
        if record is None:
            return VerifyOutcome(valid=False, message="Commitment not found")
        if hash_trace(trace) != record.commitment_hash:
            return VerifyOutcome(
                valid=False,
                message="Hash mismatch: reasoning differs from the onchain commitment",
            )
        return VerifyOutcome(valid=True, message="Reasoning verified: hash matches the onchain commitment")

    async def get_accountability(self, public_key: str) -> Optional[float]:
        owned = [self._commitments[a] for a in self._order if self._owners[a] == public_key]
        if not owned:
            return None
        revealed = sum(1 for c in owned if c.revealed)
        return revealed / len(owned) * 100

    async def get_agent_commitments(
        self, public_key: str, limit: int = 50
    ) -> list[CommitmentRecord]:
        owned = [
            self._commitments[a]
            for a in reversed(self._order)
            if self._owners[a] == public_key
        ]
        return owned[:limit]
