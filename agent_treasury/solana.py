"""
Solana JSON-RPC client for reading wallet balances.
"""

from typing import Any

import httpx
from pydantic import BaseModel


class SolanaRPCConfig(BaseModel):
    """Configuration for Solana RPC connection."""

    url: str = "https://api.mainnet-beta.solana.com"
    commitment: str = "confirmed"
    timeout: float = 30.0


class SolanaRPCError(Exception):
    """Error from Solana RPC call."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"RPC Error {code}: {message}")


class SolanaRPC:
    """Async Solana RPC client."""

    def __init__(self, config: SolanaRPCConfig):
        self.config = config
        self._request_id = 0

    async def _call(self, method: str, params: list[Any] | None = None) -> Any:
        """Make RPC call."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params or [],
        }

        async with httpx.AsyncClient(timeout=self.config.timeout) as client:
            response = await client.post(self.config.url, json=payload)
            response.raise_for_status()
            result = response.json()

        if result.get("error"):
            error = result["error"]
            raise SolanaRPCError(error.get("code", -1), error.get("message", "Unknown error"))

        return result.get("result")

    async def get_balance(self, address: str) -> int:
        """Get balance of an account in lamports."""
        result = await self._call(
            "getBalance", [address, {"commitment": self.config.commitment}]
        )
        # Context-wrapped response: {"context": {...}, "value": lamports}
        return int(result["value"])
