"""Pytest configuration and fixtures for airdrop analytics tests."""

from pathlib import Path

import httpx
import pytest

from airdrop_analytics.core import config as config_module
from airdrop_analytics.core.models import AllocationRecord

DUPLICATE_ROW_CSV = "address,amount\n0xAAA,10000\n0xbbb,3000\n0xaaa,20000\n"

WALLET_A = "0x" + "a1" * 20
WALLET_B = "0x" + "b2" * 20
WALLET_C = "0x" + "c3" * 20


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch):
    """Keep developer environment variables out of the tests."""
    for name in (
        "AIRDROP_CSV_URL",
        "AIRDROP_FETCH_TIMEOUT",
        "AIRDROP_BUCKETS_CONFIG",
        "AIRDROP_STRICT_ADDRESSES",
        "AIRDROP_TOKEN_SYMBOL",
        "AIRDROP_PAGE_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_config", None)
    yield
    config_module._config = None


@pytest.fixture
def scenario_csv() -> str:
    """Three rows, one repeated address differing only in case."""
    return DUPLICATE_ROW_CSV


@pytest.fixture
def messy_csv() -> str:
    """Valid rows mixed with every kind of malformed row."""
    return "\n".join([
        "address,amount",
        f"{WALLET_A},150000",
        "",
        f"  {WALLET_B.upper()}  ,  7500  ",
        "0xmissing",
        "0xnoamount,",
        ",1000",
        "0xtext,abc",
        "0xthird,100,extra",
        "0xnegative,-5",
        "   ",
        f"{WALLET_C},42.9",
    ])


@pytest.fixture
def sample_records() -> list[AllocationRecord]:
    """Records covering several buckets, with ties and a duplicate."""
    return [
        AllocationRecord(address="0x01", amount=4_999),
        AllocationRecord(address="0x02", amount=5_000),
        AllocationRecord(address="0x03", amount=750_000),
        AllocationRecord(address="0x04", amount=5_000),
        AllocationRecord(address="0x05", amount=0),
        AllocationRecord(address="0x06", amount=100_000),
        AllocationRecord(address="0x01", amount=20_000),
        AllocationRecord(address="0x07", amount=499_999),
    ]


@pytest.fixture
def scenario_file(tmp_path: Path, scenario_csv: str) -> Path:
    """Scenario CSV written to disk."""
    path = tmp_path / "airdrop.csv"
    path.write_text(scenario_csv, encoding="utf-8")
    return path


@pytest.fixture
def csv_transport():
    """Build an httpx.MockTransport that serves fixed content."""

    def _make(content: bytes | str, status_code: int = 200) -> httpx.MockTransport:
        body = content.encode("utf-8") if isinstance(content, str) else content

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                status_code,
                content=body,
                headers={"content-type": "text/plain; charset=utf-8"},
            )

        return httpx.MockTransport(handler)

    return _make


@pytest.fixture
def wallets() -> tuple[str, str, str]:
    """Three well-formed, normalized wallet addresses."""
    return WALLET_A, WALLET_B, WALLET_C
