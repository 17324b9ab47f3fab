"""
EVM utilities for reading balances and interacting with contracts on Base.
"""

from typing import Any

import structlog
from eth_account import Account
from pydantic import BaseModel
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.types import TxReceipt

logger = structlog.get_logger()

BASE_CHAIN_ID = 8453


class EVMConfig(BaseModel):
    """Configuration for EVM connection."""

    rpc_url: str = "https://mainnet.base.org"
    chain_id: int = BASE_CHAIN_ID
    private_key: str = ""


class EVMClient:
    """
    Async EVM client.

    Read calls work without a private key; sending transactions needs one.
    """

    def __init__(self, config: EVMConfig):
        self.config = config
        self.w3 = AsyncWeb3(AsyncHTTPProvider(config.rpc_url))
        self.account = Account.from_key(config.private_key) if config.private_key else None

    @property
    def address(self) -> str:
        """Get account address."""
        if not self.account:
            raise ValueError("No private key configured")
        return self.account.address

    async def get_balance(self, address: str) -> int:
        """Get native balance in wei."""
        return await self.w3.eth.get_balance(Web3.to_checksum_address(address))

    def contract(self, address: str, abi: list[dict[str, Any]]) -> Any:
        """Get contract instance."""
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    async def send_function(self, function: Any, gas_limit: int = 300_000) -> tuple[str, TxReceipt]:
        """
        Build, sign and send a contract function call, then wait for receipt.

        Returns the transaction hash (0x-prefixed) and the receipt.
        """
        if not self.account:
            raise ValueError("No private key configured")

        nonce = await self.w3.eth.get_transaction_count(self.account.address)
        gas_price = await self.w3.eth.gas_price

        tx = await function.build_transaction(
            {
                "chainId": self.config.chain_id,
                "from": self.account.address,
                "nonce": nonce,
                "gasPrice": gas_price,
                "gas": gas_limit,
            }
        )

        signed = self.account.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info("evm_tx_sent", tx_hash=tx_hash_hex, sender=self.account.address)

        receipt: TxReceipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=120)
        return tx_hash_hex, receipt
