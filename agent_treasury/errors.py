"""
Exceptions raised by the treasury and its audit layer.
"""

from typing import Optional


class TreasuryError(Exception):
    """Base class for treasury errors."""


class ConfigError(TreasuryError):
    """Required configuration is missing or invalid."""


class NotInitializedError(TreasuryError):
    """The audit integration has no signing identity yet."""

    def __init__(self, message: str = "AuditedTreasury not initialized. Call initialize(identity) first."):
        super().__init__(message)


class CommitFailedError(TreasuryError):
    """The protocol client failed to commit the reasoning."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class RevealFailedError(TreasuryError):
    """The protocol client failed to reveal a commitment."""

    def __init__(self, message: str, commitment_address: str, cause: Optional[BaseException] = None):
        self.commitment_address = commitment_address
        self.cause = cause
        super().__init__(message)


class ClaimFailedError(TreasuryError):
    """A fee claim transaction reverted."""

    def __init__(self, tx_hash: str, token_address: str):
        self.tx_hash = tx_hash
        self.token_address = token_address
        super().__init__(f"Claim transaction {tx_hash} reverted for token {token_address}")
