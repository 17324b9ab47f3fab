"""
Clawnch fee collector.

Collects trading fees from the Clanker FeeLocker contract on Base.
"""

from dataclasses import dataclass, field
from typing import Optional

import structlog
from web3 import Web3

from .errors import ClaimFailedError
from .evm import EVMClient
from .models import Chain, FeeSource
from .units import format_ether

logger = structlog.get_logger()

# Clanker FeeLocker contract on Base
FEE_LOCKER_ADDRESS = "0xF3622742b1E446D92e45E22923Ef11C2fcD55D68"
WETH_ADDRESS = "0x4200000000000000000000000000000000000006"
BASESCAN_TX_URL = "https://basescan.org/tx"

FEE_LOCKER_ABI = [
    {
        "inputs": [
            {"name": "feeOwner", "type": "address"},
            {"name": "token", "type": "address"},
        ],
        "name": "feesToClaim",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "feeOwner", "type": "address"},
            {"name": "token", "type": "address"},
        ],
        "name": "claim",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


@dataclass
class CollectionResult:
    """Outcome of a collect-all run."""

    weth_claimed: bool = False
    weth_amount: str = "0"
    weth_tx_hash: Optional[str] = None
    tokens_claimed: list[str] = field(default_factory=list)


class ClawnchFeeCollector:
    """Checks and claims fees held for the treasury by the FeeLocker."""

    def __init__(self, client: EVMClient, fee_locker_address: str = FEE_LOCKER_ADDRESS):
        self.client = client
        self.fee_locker_address = fee_locker_address
        self.fee_locker = client.contract(fee_locker_address, FEE_LOCKER_ABI)

    @property
    def owner(self) -> str:
        return self.client.address

    async def check_fees(self, token_address: str) -> FeeSource:
        """Check fees available to claim for a token."""
        amount = await self.fee_locker.functions.feesToClaim(
            self.owner, Web3.to_checksum_address(token_address)
        ).call()

        return FeeSource(
            protocol="clawnch",
            chain=Chain.BASE,
            contract=self.fee_locker_address,
            token_address=token_address,
            amount_available=int(amount),
        )

    async def check_weth_fees(self) -> FeeSource:
        """Check WETH fees available to claim."""
        return await self.check_fees(WETH_ADDRESS)

    async def check_token_fees(self, token_address: str) -> FeeSource:
        """Check token fees available to claim."""
        return await self.check_fees(token_address)

    async def claim_fees(self, token_address: str) -> str:
        """
        Claim fees for a token and wait for the receipt.

        Returns the transaction hash. Raises ClaimFailedError on revert.
        """
        logger.info("claiming_fees", token=token_address, fee_locker=self.fee_locker_address)

        function = self.fee_locker.functions.claim(
            self.owner, Web3.to_checksum_address(token_address)
        )
        tx_hash, receipt = await self.client.send_function(function)

        if receipt["status"] != 1:
            logger.error("claim_tx_reverted", tx_hash=tx_hash, token=token_address)
            raise ClaimFailedError(tx_hash, token_address)

        logger.info(
            "fees_claimed",
            token=token_address,
            tx_hash=tx_hash,
            explorer=f"{BASESCAN_TX_URL}/{tx_hash}",
            gas_used=receipt["gasUsed"],
        )
        return tx_hash

    async def claim_weth_fees(self) -> str:
        """Claim WETH fees."""
        return await self.claim_fees(WETH_ADDRESS)

    async def claim_token_fees(self, token_address: str) -> str:
        """Claim token fees."""
        return await self.claim_fees(token_address)

    async def collect_all_fees(self, token_addresses: Optional[list[str]] = None) -> CollectionResult:
        """Check and claim all available fees."""
        result = CollectionResult()

        weth_fees = await self.check_weth_fees()
        if weth_fees.amount_available > 0:
            logger.info("weth_fees_available", amount=format_ether(weth_fees.amount_available))
            result.weth_tx_hash = await self.claim_weth_fees()
            result.weth_claimed = True
            result.weth_amount = format_ether(weth_fees.amount_available)
        else:
            logger.info("no_weth_fees")

        for token_address in token_addresses or []:
            token_fees = await self.check_token_fees(token_address)
            if token_fees.amount_available > 0:
                logger.info(
                    "token_fees_available",
                    token=token_address,
                    amount=format_ether(token_fees.amount_available),
                )
                await self.claim_token_fees(token_address)
                result.tokens_claimed.append(token_address)

        return result
