"""Data providers for the airdrop analytics tool.

This module contains the provider for the allocation CSV, fetched over
HTTP or read from a local file.
"""

from .base import BaseProvider
from .csv_source import AirdropCSVProvider

__all__ = ["BaseProvider", "AirdropCSVProvider"]
