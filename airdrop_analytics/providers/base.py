"""Base class for allocation text sources."""

import logging
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from ..core.exceptions import SourceUnavailableError
from ..core.models import AuditEntry
from ..core.types import DataSource

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for providers that load allocation text."""

    # Subclasses must define their data source
    SOURCE: DataSource = DataSource.UNKNOWN

    def __init__(self) -> None:
        self._audit_entries: list[AuditEntry] = []

    def _record_audit(
        self,
        action: str,
        source: DataSource | None = None,
        endpoint: str | None = None,
        success: bool = True,
        error_message: str | None = None,
        duration_ms: int | None = None,
        notes: str | None = None,
    ) -> AuditEntry:
        """Record an audit entry; ``source`` defaults to the provider's SOURCE."""
        entry = AuditEntry(
            source=source or self.SOURCE,
            action=action,
            endpoint=endpoint,
            success=success,
            error_message=error_message,
            duration_ms=duration_ms,
            notes=notes,
        )
        self._audit_entries.append(entry)
        return entry

    @contextmanager
    def _audited(
        self,
        action: str,
        endpoint: str,
        source: DataSource | None = None,
    ) -> Iterator[dict[str, str]]:
        """
        Time one load step and record how it ended.

        The body may set ``notes`` in the yielded dict. A
        SourceUnavailableError escaping the body is recorded as a failed
        step and re-raised unchanged.

        Example:
            ```python
            with self._audited("read", str(path)) as audit:
                content = path.read_bytes()
                audit["notes"] = f"{len(content)} bytes"
            ```
        """
        start_time = time.time()
        outcome: dict[str, str] = {}
        try:
            yield outcome
        except SourceUnavailableError as e:
            logger.debug(f"[{(source or self.SOURCE).value}] {action} failed: {e.reason}")
            self._record_audit(
                action,
                source=source,
                endpoint=endpoint,
                success=False,
                error_message=e.reason,
                duration_ms=int((time.time() - start_time) * 1000),
            )
            raise

        self._record_audit(
            action,
            source=source,
            endpoint=endpoint,
            success=True,
            duration_ms=int((time.time() - start_time) * 1000),
            notes=outcome.get("notes"),
        )

    def get_audit_trail(self) -> list[AuditEntry]:
        """Return all audit entries recorded by this provider."""
        return self._audit_entries.copy()

    def clear_audit_trail(self) -> None:
        self._audit_entries.clear()

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the configured source can be read."""
        pass
