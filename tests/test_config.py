"""
Tests for configuration loading.
"""

from dataclasses import fields

import pytest

from agent_treasury.config import AuditConfig, Settings, TreasuryConfig, Wallets
from agent_treasury.errors import ConfigError
from agent_treasury.reasoning import SOLPRISM_PROGRAM_ID


def test_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("BASE_WALLET", "0xabc")
    monkeypatch.setenv("SOLANA_WALLET", "SoLWallet")
    monkeypatch.setenv("RUNWAY_ALERT_DAYS", "45")
    monkeypatch.setenv("AUTO_REGISTER", "false")

    settings = Settings(_env_file=None)
    config = TreasuryConfig.from_settings(settings)

    assert config.wallets == Wallets(base="0xabc", solana="SoLWallet")
    assert config.runway_alert_days == 45
    assert settings.auto_register is False


def test_env_file(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("BASE_WALLET=0xfile\nSOLANA_WALLET=SolFile\nAGENT_NAME=File Agent\n")

    config = TreasuryConfig.from_env(env_file)

    assert config.wallets.base == "0xfile"
    assert config.wallets.solana == "SolFile"


def test_audit_config_defaults() -> None:
    config = AuditConfig(agent_name="Agent")

    assert config.rpc_url == "https://api.devnet.solana.com"
    assert config.program_id == SOLPRISM_PROGRAM_ID
    assert config.reasoning_storage_uri is None
    assert config.auto_register is True


def test_audit_config_from_settings(monkeypatch) -> None:
    monkeypatch.setenv("AGENT_NAME", "Skippy")
    monkeypatch.setenv("REASONING_STORAGE_URI", "https://arweave.net")

    config = AuditConfig.from_settings(Settings(_env_file=None))

    assert config.agent_name == "Skippy"
    assert config.reasoning_storage_uri == "https://arweave.net"


@pytest.mark.parametrize("wallets", [Wallets(base="0xabc"), Wallets(solana="Sol"), Wallets()])
def test_require_wallets(wallets) -> None:
    with pytest.raises(ConfigError, match="BASE_WALLET and SOLANA_WALLET"):
        TreasuryConfig(wallets=wallets).require_wallets()


def test_treasury_config_fields() -> None:
    assert [f.name for f in fields(TreasuryConfig)] == [
        "wallets",
        "runway_alert_days",
        "base_rpc_url",
        "solana_rpc_url",
    ]
