"""Configuration management for the data source and display settings.

Loads configuration from environment variables or .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_SOURCE_URL = (
    "https://raw.githubusercontent.com/monad-crypto/airdrop-addresses/"
    "refs/heads/main/monad_airdrop_results.csv"
)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class AppConfig:
    """Settings for fetching and presenting allocation data."""

    # Where the allocation CSV lives (URL or local path)
    source_url: str = DEFAULT_SOURCE_URL

    # Single fetch attempt; no retry
    fetch_timeout_seconds: float = 30.0

    # Optional YAML bucket scheme (defaults to the built-in 7 buckets)
    buckets_config_path: Optional[Path] = None

    # Skip rows whose address is not 0x + 40 hex chars
    strict_addresses: bool = False

    # Display only
    token_symbol: str = "MON"
    page_size: int = 50

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables."""
        buckets_path = os.getenv("AIRDROP_BUCKETS_CONFIG")
        return cls(
            source_url=os.getenv("AIRDROP_CSV_URL", DEFAULT_SOURCE_URL),
            fetch_timeout_seconds=float(os.getenv("AIRDROP_FETCH_TIMEOUT", "30")),
            buckets_config_path=Path(buckets_path) if buckets_path else None,
            strict_addresses=os.getenv("AIRDROP_STRICT_ADDRESSES", "").lower() in _TRUTHY,
            token_symbol=os.getenv("AIRDROP_TOKEN_SYMBOL", "MON"),
            page_size=int(os.getenv("AIRDROP_PAGE_SIZE", "50")),
        )

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> "AppConfig":
        """
        Load configuration from .env file and environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                      looks for .env in the project root.

        Returns:
            AppConfig instance with loaded values
        """
        if env_file:
            load_dotenv(env_file)
        else:
            project_root = Path(__file__).parent.parent.parent
            env_path = project_root / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        return cls.from_env()

    def is_remote_source(self) -> bool:
        """Check if the configured source is fetched over HTTP."""
        return self.source_url.startswith(("http://", "https://"))


# Global config instance (lazy loaded)
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.load()
    return _config


def reload_config(env_file: Optional[Path] = None) -> AppConfig:
    """Reload configuration from environment."""
    global _config
    _config = AppConfig.load(env_file)
    return _config
