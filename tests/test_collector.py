"""
Tests for the Clawnch FeeLocker collector.
"""

from types import SimpleNamespace
from typing import Any

import pytest

from agent_treasury.collector import FEE_LOCKER_ADDRESS, WETH_ADDRESS, ClawnchFeeCollector
from agent_treasury.errors import ClaimFailedError
from agent_treasury.models import Chain

OWNER = "0x1234567890123456789012345678901234567890"
TOKEN_A = "0x00000000000000000000000000000000000000aa"
TOKEN_B = "0x00000000000000000000000000000000000000bb"


class _FakeCall:
    def __init__(self, value: int):
        self.value = value

    async def call(self) -> int:
        return self.value


class _FakeFunctions:
    def __init__(self, fees: dict[str, int]):
        self.fees = {k.lower(): v for k, v in fees.items()}

    def feesToClaim(self, owner: str, token: str) -> _FakeCall:
        assert owner == OWNER
        return _FakeCall(self.fees.get(token.lower(), 0))

    def claim(self, owner: str, token: str) -> tuple[str, str, str]:
        return ("claim", owner, token.lower())


class _FakeEVMClient:
    address = OWNER

    def __init__(self, fees: dict[str, int], status: int = 1):
        self.functions = _FakeFunctions(fees)
        self.status = status
        self.sent: list[Any] = []
        self.contract_address = None

    def contract(self, address: str, abi: list[dict[str, Any]]) -> Any:
        self.contract_address = address
        return SimpleNamespace(functions=self.functions)

    async def send_function(self, function: Any) -> tuple[str, dict[str, int]]:
        self.sent.append(function)
        return f"0x{len(self.sent):064x}", {"status": self.status, "gasUsed": 50_000}


class TestCheckFees:
    """Tests for fee lookups."""

    @pytest.mark.asyncio
    async def test_check_weth_fees(self) -> None:
        client = _FakeEVMClient({WETH_ADDRESS: 5 * 10**17})
        collector = ClawnchFeeCollector(client)

        source = await collector.check_weth_fees()

        assert client.contract_address == FEE_LOCKER_ADDRESS
        assert source.protocol == "clawnch"
        assert source.chain is Chain.BASE
        assert source.contract == FEE_LOCKER_ADDRESS
        assert source.token_address == WETH_ADDRESS
        assert source.amount_available == 5 * 10**17

    @pytest.mark.asyncio
    async def test_check_token_fees(self) -> None:
        collector = ClawnchFeeCollector(_FakeEVMClient({TOKEN_A: 7}))

        source = await collector.check_token_fees(TOKEN_A)

        assert source.token_address == TOKEN_A
        assert source.amount_available == 7


class TestClaim:
    """Tests for claiming."""

    @pytest.mark.asyncio
    async def test_claim_returns_tx_hash(self) -> None:
        client = _FakeEVMClient({})
        collector = ClawnchFeeCollector(client)

        tx_hash = await collector.claim_weth_fees()

        assert tx_hash == "0x" + "0" * 63 + "1"
        assert client.sent == [("claim", OWNER, WETH_ADDRESS.lower())]

    @pytest.mark.asyncio
    async def test_reverted_claim_raises(self) -> None:
        collector = ClawnchFeeCollector(_FakeEVMClient({}, status=0))

        with pytest.raises(ClaimFailedError) as exc_info:
            await collector.claim_token_fees(TOKEN_A)

        assert exc_info.value.token_address == TOKEN_A


class TestCollectAll:
    """Tests for collect_all_fees."""

    @pytest.mark.asyncio
    async def test_claims_only_nonzero(self) -> None:
        client = _FakeEVMClient({WETH_ADDRESS: 15 * 10**17, TOKEN_B: 3})
        collector = ClawnchFeeCollector(client)

        result = await collector.collect_all_fees([TOKEN_A, TOKEN_B])

        assert result.weth_claimed
        assert result.weth_amount == "1.5"
        assert result.weth_tx_hash is not None
        assert result.tokens_claimed == [TOKEN_B]
        assert [call[2] for call in client.sent] == [WETH_ADDRESS.lower(), TOKEN_B.lower()]

    @pytest.mark.asyncio
    async def test_nothing_to_claim(self) -> None:
        client = _FakeEVMClient({})

        result = await ClawnchFeeCollector(client).collect_all_fees()

        assert not result.weth_claimed
        assert result.weth_amount == "0"
        assert result.tokens_claimed == []
        assert client.sent == []


class TestAuditedCollection:
    """Fee collection wrapped in a commit-reveal audit."""

    @pytest.mark.asyncio
    async def test_audited_fee_collection(self, audit_config, client, identity) -> None:
        from agent_treasury.audit import AuditedTreasury

        collector = ClawnchFeeCollector(_FakeEVMClient({WETH_ADDRESS: 10**18}))
        treasury = AuditedTreasury(audit_config, client)
        await treasury.initialize(identity)

        record = await treasury.audited_fee_collection(
            "Weekly WETH sweep",
            "1 WETH moved to treasury",
            lambda: collector.collect_all_fees([]),
        )

        assert record.action_result.weth_claimed
        assert record.action_result.weth_amount == "1"
        assert "Weekly WETH sweep" in treasury.format_audit_report()
