"""
Treasury tracking and runway calculation.
"""

import math
from datetime import datetime, timezone
from typing import Optional, Protocol

import structlog

from .config import TreasuryConfig
from .evm import EVMClient, EVMConfig
from .models import Chain, RunwayMetrics, TreasuryBalance, TreasuryStatus
from .solana import SolanaRPC, SolanaRPCConfig
from .units import format_ether, format_sol

logger = structlog.get_logger()

DAYS_PER_MONTH = 30


class BalanceReader(Protocol):
    async def get_balance(self, address: str) -> int: ...


class TreasuryManager:
    """
    Reads treasury balances on Base and Solana and derives runway.

    USD values are reported as 0 until a price source is wired in.
    """

    def __init__(
        self,
        config: TreasuryConfig,
        base_client: Optional[BalanceReader] = None,
        solana_client: Optional[BalanceReader] = None,
    ):
        self.config = config
        self.base = base_client or EVMClient(EVMConfig(rpc_url=config.base_rpc_url))
        self.solana = solana_client or SolanaRPC(SolanaRPCConfig(url=config.solana_rpc_url))

    async def get_base_eth_balance(self) -> TreasuryBalance:
        """Get ETH balance on Base."""
        amount = await self.base.get_balance(self.config.wallets.base)
        return TreasuryBalance(
            chain=Chain.BASE,
            token="ETH",
            amount=amount,
            usd_value=0.0,
            last_updated=datetime.now(timezone.utc),
        )

    async def get_solana_sol_balance(self) -> TreasuryBalance:
        """Get SOL balance on Solana."""
        amount = await self.solana.get_balance(self.config.wallets.solana)
        return TreasuryBalance(
            chain=Chain.SOLANA,
            token="SOL",
            amount=amount,
            usd_value=0.0,
            last_updated=datetime.now(timezone.utc),
        )

    async def get_all_balances(self) -> list[TreasuryBalance]:
        """
        Get all treasury balances.

        A chain that fails to respond is logged and left out.
        """
        balances = []

        try:
            balances.append(await self.get_base_eth_balance())
        except Exception as e:
            logger.error("balance_fetch_error", chain=Chain.BASE.value, error=str(e))

        try:
            balances.append(await self.get_solana_sol_balance())
        except Exception as e:
            logger.error("balance_fetch_error", chain=Chain.SOLANA.value, error=str(e))

        return balances

    def calculate_runway(self, total_balance_usd: float, monthly_burn_rate_usd: float) -> RunwayMetrics:
        """Calculate runway metrics from a USD balance and monthly burn."""
        if total_balance_usd > 0 and monthly_burn_rate_usd > 0:
            days_remaining = total_balance_usd / monthly_burn_rate_usd * DAYS_PER_MONTH
        else:
            days_remaining = math.inf

        return RunwayMetrics(
            total_balance_usd=total_balance_usd,
            monthly_burn_rate_usd=monthly_burn_rate_usd,
            days_remaining=days_remaining,
            alert_threshold=self.config.runway_alert_days,
            last_calculated=datetime.now(timezone.utc),
        )

    async def get_status(self, monthly_burn_rate_usd: float = 0.0) -> TreasuryStatus:
        """Get balances, runway and alerts."""
        balances = await self.get_all_balances()
        total_balance_usd = sum(b.usd_value for b in balances)
        runway = self.calculate_runway(total_balance_usd, monthly_burn_rate_usd)

        alerts = []
        if runway.days_remaining < self.config.runway_alert_days:
            alerts.append(f"LOW RUNWAY: Only {runway.days_remaining:.1f} days remaining!")
            logger.warning("low_runway", days_remaining=round(runway.days_remaining, 1))

        return TreasuryStatus(balances=balances, runway=runway, alerts=alerts)

    @staticmethod
    def format_balances(balances: list[TreasuryBalance]) -> str:
        """Format balances for display."""
        lines = []
        for b in balances:
            if b.token == "ETH":
                amount = format_ether(b.amount)
            elif b.token == "SOL":
                amount = format_sol(b.amount)
            else:
                amount = str(b.amount)
            lines.append(f"{b.chain.value.upper()} - {amount} {b.token}")
        return "\n".join(lines)

    @staticmethod
    def format_runway(runway: RunwayMetrics) -> str:
        """Format runway metrics for display."""
        days = "∞" if math.isinf(runway.days_remaining) else f"{runway.days_remaining:.1f}"
        return "\n".join(
            [
                f"Total Balance: ${runway.total_balance_usd:.2f}",
                f"Monthly Burn: ${runway.monthly_burn_rate_usd:.2f}",
                f"Days Remaining: {days}",
                f"Alert Threshold: {runway.alert_threshold} days",
            ]
        )
