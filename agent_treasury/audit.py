"""
SOLPRISM-audited treasury operations.

Wraps treasury actions with commit-reveal reasoning so every rebalance,
transfer and allocation decision is committed onchain BEFORE execution and
revealed afterward.

Flow:
    1. Agent decides on a treasury action
    2. The hash of the reasoning is committed through the protocol client
    3. The treasury action executes
    4. The full reasoning is revealed onchain
    5. Anyone can verify the reasoning wasn't fabricated after the fact
"""

import threading
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

import structlog

from .config import AuditConfig
from .errors import CommitFailedError, NotInitializedError, RevealFailedError
from .models import (
    ActionType,
    AuditedActionResult,
    AuditTimestamps,
    CommitmentRecord,
    PortfolioContext,
    RiskAssessment,
    RiskLevel,
    TreasuryReasoning,
    VerificationResult,
)
from .protocol import AgentIdentity, ProtocolClient
from .reasoning import (
    SOLPRISM_EXPLORER,
    build_explorer_url,
    build_reasoning_uri,
    to_reasoning_trace,
)

logger = structlog.get_logger()

T = TypeVar("T")

EMPTY_REPORT = "No audited actions in this session."
REPORT_RULE = "═" * 51


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SessionLedger:
    """
    Append-only log of audited actions for the current process.

    Appends are serialized so insertion order is well defined when several
    audited actions complete concurrently.
    """

    def __init__(self) -> None:
        self._records: list[AuditedActionResult] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def append(self, record: AuditedActionResult) -> None:
        with self._lock:
            self._records.append(record)

    def snapshot(self) -> list[AuditedActionResult]:
        """Copy of the records in insertion order."""
        with self._lock:
            return list(self._records)

    def format_report(self, agent_name: str) -> str:
        """Format a human-readable audit report for the session."""
        records = self.snapshot()
        if not records:
            return EMPTY_REPORT

        lines = [
            REPORT_RULE,
            "  SOLPRISM Audit Report: Agent Treasury Manager",
            REPORT_RULE,
            "",
            f"  Agent: {agent_name}",
            f"  Actions: {len(records)}",
            f"  Session: {records[0].timestamps.committed.isoformat()}",
            "",
        ]

        for entry in records:
            reasoning = entry.reasoning
            lines.append(f"  ┌─ {reasoning.action.value.upper()}")
            lines.append(f"  │  Rationale: {reasoning.rationale}")
            lines.append(
                f"  │  Risk: {reasoning.risk.level.value} ({', '.join(reasoning.risk.factors)})"
            )
            lines.append(f"  │  Expected: {reasoning.expected_outcome}")
            lines.append(f"  │  Commitment: {entry.commit.commitment_hash[:16]}...")
            lines.append(f"  │  Explorer: {entry.explorer_url}")
            lines.append(f"  └─ Committed {entry.timestamps.committed.isoformat()}")
            lines.append("")

        lines.append(REPORT_RULE)
        lines.append(f"  Verify any action: {SOLPRISM_EXPLORER}/")
        lines.append(REPORT_RULE)

        return "\n".join(lines)


class AuditedTreasury:
    """
    Runs treasury actions inside a commit-reveal cycle so stakeholders can
    verify that the agent's reasoning was locked in before execution.

    If the action fails, the commitment still exists onchain, showing the
    agent intended to act. Nothing is recorded in the session ledger and the
    action's exception reaches the caller unchanged.
    """

    def __init__(
        self,
        config: AuditConfig,
        client: ProtocolClient,
        ledger: Optional[SessionLedger] = None,
    ):
        self.config = config
        self.client = client
        self.ledger = ledger if ledger is not None else SessionLedger()
        self._identity: Optional[AgentIdentity] = None
        self._ready = False

        logger.info(
            "audit_integration_configured",
            agent_name=config.agent_name,
            rpc_url=config.rpc_url,
            program_id=config.program_id,
        )

    async def initialize(self, identity: AgentIdentity) -> None:
        """
        Attach the signing identity.

        Registers the agent first when auto_register is on and it is not
        registered yet.
        """
        if self.config.auto_register:
            registered = await self.client.is_agent_registered(identity.public_key)
            if not registered:
                logger.info("registering_agent", agent_name=self.config.agent_name)
                await self.client.register_agent(identity, self.config.agent_name)
                logger.info("agent_registered", agent=identity.public_key)

        self._identity = identity
        self._ready = True

    def is_ready(self) -> bool:
        return self._identity is not None and self._ready

    def _ensure_ready(self) -> AgentIdentity:
        if self._identity is None or not self._ready:
            raise NotInitializedError()
        return self._identity

    async def execute_audited(
        self,
        reasoning: TreasuryReasoning,
        action: Callable[[], Awaitable[T]],
    ) -> AuditedActionResult[T]:
        """
        Execute a treasury action with a full audit trail.

        Commits the reasoning hash, runs ``action``, then reveals the full
        reasoning. Nothing is retried. A commit or reveal failure is raised as
        CommitFailedError or RevealFailedError with the client error as its
        cause. Errors raised by ``action`` propagate unchanged.
        """
        identity = self._ensure_ready()
        trace = to_reasoning_trace(reasoning)
        log = logger.bind(action=reasoning.action.value)

        # Step 1: commit reasoning hash onchain
        log.info("committing_reasoning")
        try:
            commit = await self.client.commit_reasoning(identity, trace)
        except CommitFailedError:
            raise
        except Exception as e:
            log.error("commit_failed", error=str(e))
            raise CommitFailedError(
                f"Failed to commit reasoning for {reasoning.action.value}: {e}", cause=e
            ) from e
        committed_at = _now()
        log.info(
            "reasoning_committed",
            commitment_hash=commit.commitment_hash[:16],
            commitment_address=commit.commitment_address,
        )

        # Step 2: execute the treasury action
        log.info("executing_action")
        try:
            action_result = await action()
        except Exception as e:
            log.error(
                "action_failed_commitment_retained",
                commitment_address=commit.commitment_address,
                executed_at=_now().isoformat(),
                error=str(e),
            )
            raise
        executed_at = _now()
        log.info("action_completed")

        # Step 3: reveal reasoning onchain
        reasoning_uri = build_reasoning_uri(commit, self.config.reasoning_storage_uri)
        log.info("revealing_reasoning", reasoning_uri=reasoning_uri)
        try:
            reveal = await self.client.reveal_reasoning(
                identity, commit.commitment_address, reasoning_uri
            )
        except RevealFailedError:
            raise
        except Exception as e:
            log.error("reveal_failed", commitment_address=commit.commitment_address, error=str(e))
            raise RevealFailedError(
                f"Failed to reveal reasoning for {commit.commitment_address}: {e}",
                commitment_address=commit.commitment_address,
                cause=e,
            ) from e
        revealed_at = _now()
        log.info("reasoning_revealed", reasoning_uri=reveal.reasoning_uri)

        result: AuditedActionResult[T] = AuditedActionResult(
            reasoning=reasoning,
            commit=commit,
            reveal=reveal,
            action_result=action_result,
            explorer_url=build_explorer_url(commit.commitment_address),
            timestamps=AuditTimestamps(
                committed=committed_at,
                executed=executed_at,
                revealed=revealed_at,
            ),
        )

        self.ledger.append(result)
        return result

    # Convenience wrappers

    async def audited_rebalance(
        self,
        rationale: str,
        risk_level: RiskLevel,
        risk_factors: Sequence[str],
        expected_outcome: str,
        portfolio_context: PortfolioContext,
        rebalance_fn: Callable[[], Awaitable[T]],
    ) -> AuditedActionResult[T]:
        """Wrap a rebalance operation with auditable reasoning."""
        return await self.execute_audited(
            TreasuryReasoning(
                action=ActionType.REBALANCE,
                rationale=rationale,
                risk=RiskAssessment(level=risk_level, factors=tuple(risk_factors)),
                expected_outcome=expected_outcome,
                portfolio_context=portfolio_context,
            ),
            rebalance_fn,
        )

    async def audited_transfer(
        self,
        rationale: str,
        risk_level: RiskLevel,
        risk_factors: Sequence[str],
        expected_outcome: str,
        transfer_fn: Callable[[], Awaitable[T]],
    ) -> AuditedActionResult[T]:
        """Wrap a transfer operation with auditable reasoning."""
        return await self._audited(
            ActionType.TRANSFER, rationale, risk_level, risk_factors, expected_outcome, transfer_fn
        )

    async def audited_yield_deployment(
        self,
        rationale: str,
        risk_level: RiskLevel,
        risk_factors: Sequence[str],
        expected_outcome: str,
        deploy_fn: Callable[[], Awaitable[T]],
    ) -> AuditedActionResult[T]:
        """Wrap a yield deployment with auditable reasoning."""
        return await self._audited(
            ActionType.YIELD_DEPLOYMENT, rationale, risk_level, risk_factors, expected_outcome, deploy_fn
        )

    async def audited_fee_collection(
        self,
        rationale: str,
        expected_outcome: str,
        collect_fn: Callable[[], Awaitable[T]],
    ) -> AuditedActionResult[T]:
        """Wrap a fee collection; always low risk."""
        return await self._audited(
            ActionType.FEE_COLLECTION,
            rationale,
            RiskLevel.LOW,
            ["Routine fee collection"],
            expected_outcome,
            collect_fn,
        )

    async def audited_payment(
        self,
        rationale: str,
        risk_level: RiskLevel,
        risk_factors: Sequence[str],
        expected_outcome: str,
        payment_fn: Callable[[], Awaitable[T]],
    ) -> AuditedActionResult[T]:
        """Wrap a payment with auditable reasoning."""
        return await self._audited(
            ActionType.PAYMENT, rationale, risk_level, risk_factors, expected_outcome, payment_fn
        )

    async def _audited(
        self,
        action_type: ActionType,
        rationale: str,
        risk_level: RiskLevel,
        risk_factors: Sequence[str],
        expected_outcome: str,
        fn: Callable[[], Awaitable[T]],
    ) -> AuditedActionResult[T]:
        return await self.execute_audited(
            TreasuryReasoning(
                action=action_type,
                rationale=rationale,
                risk=RiskAssessment(level=risk_level, factors=tuple(risk_factors)),
                expected_outcome=expected_outcome,
            ),
            fn,
        )

    # Verification & audit

    async def verify_action(
        self, commitment_address: str, reasoning: TreasuryReasoning
    ) -> VerificationResult:
        """
        Verify that a past action's reasoning matches what was committed.

        Does not need a signing identity.
        """
        trace = to_reasoning_trace(reasoning)
        outcome = await self.client.verify_reasoning(commitment_address, trace)

        logger.info(
            "action_verified",
            commitment_address=commitment_address,
            valid=outcome.valid,
        )
        return VerificationResult(
            valid=outcome.valid,
            message=outcome.message,
            explorer_url=build_explorer_url(commitment_address),
        )

    async def get_accountability_score(self) -> Optional[float]:
        """Share of this agent's commitments that were revealed."""
        identity = self._ensure_ready()
        return await self.client.get_accountability(identity.public_key)

    async def get_audit_history(self, limit: int = 50) -> list[CommitmentRecord]:
        """Past commitments for this agent, newest first."""
        identity = self._ensure_ready()
        return await self.client.get_agent_commitments(identity.public_key, limit)

    def get_session_log(self) -> list[AuditedActionResult]:
        return self.ledger.snapshot()

    def format_audit_report(self) -> str:
        return self.ledger.format_report(self.config.agent_name)
