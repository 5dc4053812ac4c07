"""Airdrop CSV source provider.

Fetches the allocation CSV as text, either over HTTP or from a local file.
There is exactly one attempt: any failure surfaces as a
SourceUnavailableError and no retry is made.
"""

import logging
from pathlib import Path

import httpx

from ..core.config import DEFAULT_SOURCE_URL
from ..core.exceptions import SourceUnavailableError
from ..core.types import DataSource
from .base import BaseProvider

logger = logging.getLogger(__name__)


def is_remote(source: str) -> bool:
    """Check whether a source string is an HTTP(S) URL."""
    return source.startswith(("http://", "https://"))


def _decode(content: bytes, source: DataSource, endpoint: str) -> str:
    """Decode UTF-8 bytes (BOM tolerated), treating anything else as unavailable."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SourceUnavailableError(
            source=source.value,
            reason=f"content is not UTF-8 text ({e.reason})",
            endpoint=endpoint,
        ) from e


class AirdropCSVProvider(BaseProvider):
    """Loads the raw allocation CSV text."""

    SOURCE = DataSource.REMOTE_CSV

    def __init__(
        self,
        source_url: str | None = None,
        timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize CSV source provider.

        Args:
            source_url: Default URL or file path to read from
            timeout_seconds: HTTP timeout for the single fetch attempt
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        super().__init__()
        self.source_url = source_url or DEFAULT_SOURCE_URL
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout_seconds,
            transport=self.transport,
            follow_redirects=True,
        )

    def is_available(self) -> bool:
        """Check if the default source can be reached."""
        if not is_remote(self.source_url):
            return Path(self.source_url).is_file()
        try:
            with self._client() as client:
                response = client.head(self.source_url)
                return response.status_code < 400
        except httpx.HTTPError:
            return False

    def fetch_text(self, source: str | Path | None = None) -> str:
        """
        Fetch the allocation CSV as text.

        Args:
            source: URL or local file path. Defaults to the configured URL.

        Returns:
            The CSV text

        Raises:
            SourceUnavailableError: If the request fails, the status is an
                error, the file cannot be read, or the bytes are not UTF-8
        """
        target = str(source) if source is not None else self.source_url

        if is_remote(target):
            return self._fetch_remote(target)
        return self._read_local(Path(target))

    def _fetch_remote(self, url: str) -> str:
        """Single HTTP GET, no retry."""
        logger.info(f"Fetching allocation CSV from {url}")

        with self._audited("fetch", url) as audit:
            try:
                with self._client() as client:
                    response = client.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise SourceUnavailableError(
                    source=DataSource.REMOTE_CSV.value,
                    reason=f"HTTP {e.response.status_code}",
                    endpoint=url,
                    status_code=e.response.status_code,
                ) from e
            except httpx.RequestError as e:
                raise SourceUnavailableError(
                    source=DataSource.REMOTE_CSV.value,
                    reason=str(e) or type(e).__name__,
                    endpoint=url,
                ) from e

            text = _decode(response.content, DataSource.REMOTE_CSV, url)
            audit["notes"] = f"{len(response.content)} bytes"

        return text

    def _read_local(self, path: Path) -> str:
        """Read a CSV file from disk."""
        logger.info(f"Reading allocation CSV from {path}")

        with self._audited("read", str(path), source=DataSource.LOCAL_FILE) as audit:
            try:
                content = path.read_bytes()
            except OSError as e:
                raise SourceUnavailableError(
                    source=DataSource.LOCAL_FILE.value,
                    reason=f"cannot read file: {e.strerror or e}",
                    endpoint=str(path),
                ) from e

            text = _decode(content, DataSource.LOCAL_FILE, str(path))
            audit["notes"] = f"{len(content)} bytes"

        return text
