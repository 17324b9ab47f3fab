"""
Configuration management for Agent Treasury.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError
from .reasoning import SOLPRISM_PROGRAM_ID

DEFAULT_BASE_RPC = "https://mainnet.base.org"
DEFAULT_SOLANA_RPC = "https://api.mainnet-beta.solana.com"
DEFAULT_SOLPRISM_RPC = "https://api.devnet.solana.com"


class Settings(BaseSettings):
    """
    Environment-based settings.

    All settings can be overridden via environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Base (EVM)
    base_rpc_url: str = Field(default=DEFAULT_BASE_RPC, description="Base RPC URL")
    base_private_key: str = Field(default="", description="Key used to claim fees on Base")
    base_wallet: str = Field(default="", description="Treasury wallet on Base")

    # Solana
    solana_rpc_url: str = Field(default=DEFAULT_SOLANA_RPC, description="Solana RPC URL")
    solana_wallet: str = Field(default="", description="Treasury wallet on Solana")

    # Runway
    runway_alert_days: int = Field(default=30, description="Alert when runway drops below this")

    # SOLPRISM audit trail
    solprism_rpc_url: str = Field(default=DEFAULT_SOLPRISM_RPC, description="SOLPRISM cluster RPC URL")
    solprism_program_id: str = Field(default=SOLPRISM_PROGRAM_ID, description="SOLPRISM program ID")
    agent_name: str = Field(default="Agent Treasury Manager", description="Agent name for registration")
    reasoning_storage_uri: Optional[str] = Field(
        default=None,
        description="Base URI where full reasoning is stored (IPFS gateway, Arweave, API)",
    )
    auto_register: bool = Field(default=True, description="Register the agent if not registered yet")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class AuditConfig(BaseModel):
    """Configuration for the SOLPRISM audit integration."""

    agent_name: str
    rpc_url: str = DEFAULT_SOLPRISM_RPC
    program_id: str = SOLPRISM_PROGRAM_ID
    reasoning_storage_uri: Optional[str] = None
    auto_register: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuditConfig":
        return cls(
            agent_name=settings.agent_name,
            rpc_url=settings.solprism_rpc_url,
            program_id=settings.solprism_program_id,
            reasoning_storage_uri=settings.reasoning_storage_uri,
            auto_register=settings.auto_register,
        )


@dataclass
class Wallets:
    """Treasury wallet addresses."""

    base: str = ""
    solana: str = ""


@dataclass
class TreasuryConfig:
    """Full treasury configuration."""

    wallets: Wallets
    runway_alert_days: int = 30
    base_rpc_url: str = DEFAULT_BASE_RPC
    solana_rpc_url: str = DEFAULT_SOLANA_RPC

    @classmethod
    def from_settings(cls, settings: Settings) -> "TreasuryConfig":
        return cls(
            wallets=Wallets(base=settings.base_wallet, solana=settings.solana_wallet),
            runway_alert_days=settings.runway_alert_days,
            base_rpc_url=settings.base_rpc_url,
            solana_rpc_url=settings.solana_rpc_url,
        )

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "TreasuryConfig":
        """Load configuration from environment."""
        settings = Settings(_env_file=env_path) if env_path else Settings()
        return cls.from_settings(settings)

    def require_wallets(self) -> None:
        """Raise ConfigError unless both wallets are set."""
        if not self.wallets.base or not self.wallets.solana:
            raise ConfigError("BASE_WALLET and SOLANA_WALLET must be set in environment")
