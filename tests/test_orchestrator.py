"""Tests for the analysis orchestrator."""

import pytest

from airdrop_analytics.core.exceptions import ConfigurationError, SourceUnavailableError
from airdrop_analytics.core.models import BucketSpec
from airdrop_analytics.core.types import DataSource
from airdrop_analytics.orchestrator import AirdropAnalyticsOrchestrator

URL = "https://example.com/airdrop.csv"


class TestAnalyze:
    """End-to-end runs through fetch, parse and aggregate."""

    def test_remote_scenario(self, csv_transport, scenario_csv):
        """Test the full pipeline against a mocked HTTP source."""
        orchestrator = AirdropAnalyticsOrchestrator(source_url=URL, transport=csv_transport(scenario_csv))

        result = orchestrator.analyze()

        assert result.source == URL
        assert result.summary.table == {"0xaaa": 20000, "0xbbb": 3000}
        assert result.summary.total_amount == 23000
        assert [entry.action for entry in result.audit_trail] == ["fetch", "parse", "aggregate"]
        assert all(entry.source == DataSource.REMOTE_CSV for entry in result.audit_trail)
        assert [flag.field for flag in result.quality_flags] == ["duplicate_addresses"]

    def test_local_file(self, scenario_file):
        """Test a run against a file on disk."""
        result = AirdropAnalyticsOrchestrator().analyze(scenario_file)

        assert result.source == str(scenario_file)
        assert result.summary.wallet_count == 2
        assert result.audit_trail[0].source == DataSource.LOCAL_FILE

    def test_source_from_environment(self, monkeypatch, scenario_file):
        """Test that AIRDROP_CSV_URL selects the default source."""
        monkeypatch.setenv("AIRDROP_CSV_URL", str(scenario_file))

        orchestrator = AirdropAnalyticsOrchestrator()

        assert orchestrator.source_url == str(scenario_file)
        assert orchestrator.analyze().summary.median_allocation == 3000

    def test_source_unavailable(self, csv_transport):
        """Test that fetch failures propagate with no partial result."""
        orchestrator = AirdropAnalyticsOrchestrator(source_url=URL, transport=csv_transport("", 404))

        with pytest.raises(SourceUnavailableError):
            orchestrator.analyze()

    def test_skipped_rows_flagged(self, messy_csv):
        """Test that malformed rows surface as a quality flag."""
        result = AirdropAnalyticsOrchestrator().analyze_text(messy_csv)

        assert result.source == "inline"
        assert result.skipped_count == 6
        assert result.blank_lines == 2
        assert result.summary.wallet_count == 3

        flag = next(f for f in result.quality_flags if f.field == "skipped_rows")
        assert flag.severity == "warning"
        assert "6 malformed rows" in flag.issue
        assert "missing_field=3" in flag.issue

    def test_empty_dataset_flagged(self):
        """Test that a header-only source is flagged and yields sentinels."""
        result = AirdropAnalyticsOrchestrator().analyze_text("address,amount\n")

        assert result.summary.is_empty
        assert result.summary.average_allocation is None
        assert any(f.field == "empty_dataset" for f in result.quality_flags)

    def test_strict_addresses(self, messy_csv):
        """Test that strict mode drops non-wallet addresses."""
        lenient = AirdropAnalyticsOrchestrator(strict_addresses=False).analyze_text(messy_csv)
        strict = AirdropAnalyticsOrchestrator(strict_addresses=True).analyze_text(messy_csv)

        assert lenient.summary.wallet_count == strict.summary.wallet_count
        assert strict.summary.wallet_count == 3

        mixed = "address,amount\n0xshort,5\n" + "0x" + "ab" * 20 + ",7\n"
        strict_mixed = AirdropAnalyticsOrchestrator(strict_addresses=True).analyze_text(mixed)
        assert strict_mixed.summary.wallet_count == 1
        assert strict_mixed.skipped_rows[0].reason.value == "invalid_address"

    def test_strict_addresses_from_environment(self, monkeypatch):
        monkeypatch.setenv("AIRDROP_STRICT_ADDRESSES", "true")

        assert AirdropAnalyticsOrchestrator().strict_addresses is True

    def test_custom_buckets(self, scenario_csv):
        """Test that an explicit scheme reaches the aggregator."""
        buckets = [
            BucketSpec(lower_bound=0, upper_bound=10_000, label="small"),
            BucketSpec(lower_bound=10_000, upper_bound=None, label="large"),
        ]
        result = AirdropAnalyticsOrchestrator(buckets=buckets).analyze_text(scenario_csv)

        assert [(b.label, b.count) for b in result.summary.distribution] == [("small", 1), ("large", 1)]
        assert result.buckets == buckets
        assert result.strict_addresses is False

    def test_buckets_config_from_environment(self, monkeypatch, tmp_path):
        """Test that a missing AIRDROP_BUCKETS_CONFIG file is a configuration error."""
        monkeypatch.setenv("AIRDROP_BUCKETS_CONFIG", str(tmp_path / "missing.yaml"))

        with pytest.raises(ConfigurationError):
            AirdropAnalyticsOrchestrator()

    def test_repeated_runs_do_not_accumulate(self, scenario_file):
        """Test that each run starts with a fresh audit trail."""
        orchestrator = AirdropAnalyticsOrchestrator()

        first = orchestrator.analyze(scenario_file)
        second = orchestrator.analyze(scenario_file)

        assert len(first.audit_trail) == len(second.audit_trail) == 3
        assert len(second.quality_flags) == 1

    def test_describe(self):
        description = AirdropAnalyticsOrchestrator(source_url="data.csv").describe()

        assert description["source"] == "data.csv"
        assert description["strict_addresses"] is False
        assert description["buckets"][0] == "0-5K"
        assert description["buckets"][-1] == "500K+"
