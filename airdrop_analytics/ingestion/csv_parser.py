"""CSV parser for airdrop allocation files.

The input is a header line followed by ``<address>,<amount>`` rows. There
is no quoting or escaping. Malformed rows never raise: they are dropped
and reported back as ``SkippedRow`` entries so callers can surface data
quality without losing the rest of the dataset.
"""

import logging
import re

from ..core.addresses import is_wallet_address, normalize_address
from ..core.models import AllocationRecord, ParseResult, SkippedRow
from ..core.types import SkipReason

logger = logging.getLogger(__name__)

# Integer or decimal literal; the fractional part is truncated, not rounded.
# Thousands separators, exponents and hex are rejected.
AMOUNT_PATTERN = re.compile(r"^([+-]?\d+)(?:\.\d*)?$")

# Rows are separated by LF or CRLF only; other Unicode line breaks stay
# inside the row.
LINE_BREAK_PATTERN = re.compile(r"\r?\n")


def parse_amount(raw_amount: str) -> int | None:
    """
    Parse an amount field, truncating any decimal part toward zero.

    Args:
        raw_amount: Amount text as it appears in the CSV

    Returns:
        Integer amount, or None if the text is not a numeric literal

    Example:
        ```python
        parse_amount(" 12.9 ")   # 12
        parse_amount("1,000")    # None
        ```
    """
    match = AMOUNT_PATTERN.match(raw_amount.strip())
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # Beyond the interpreter's int conversion digit limit
        return None


def _classify(
    line: str,
    strict_addresses: bool,
) -> tuple[AllocationRecord | None, SkipReason | None]:
    """Turn one data line into a record, or the reason it was skipped."""
    address_raw, sep, amount_raw = line.partition(",")
    address = normalize_address(address_raw)
    amount_text = amount_raw.strip()

    if not sep or not address or not amount_text:
        return None, SkipReason.MISSING_FIELD

    amount = parse_amount(amount_text)
    if amount is None:
        return None, SkipReason.INVALID_AMOUNT
    if amount < 0:
        return None, SkipReason.NEGATIVE_AMOUNT

    if strict_addresses and not is_wallet_address(address):
        return None, SkipReason.INVALID_ADDRESS

    return AllocationRecord(address=address, amount=amount), None


def parse_allocations(raw_text: str, strict_addresses: bool = False) -> ParseResult:
    """
    Parse raw CSV text into allocation records.

    The first line is treated as a header and discarded without looking at
    its content. Blank lines are ignored. Each other line is split on its
    first comma into address and amount.

    Args:
        raw_text: Complete CSV text
        strict_addresses: Also skip rows whose address is not a
            ``0x`` + 40 hex character wallet address

    Returns:
        ParseResult with records in input order plus skipped-row details
    """
    lines = LINE_BREAK_PATTERN.split(raw_text.strip())

    records: list[AllocationRecord] = []
    skipped: list[SkippedRow] = []
    blank_lines = 0

    # Line numbers are 1-based with the header as line 1
    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            blank_lines += 1
            continue

        record, reason = _classify(line, strict_addresses)
        if record is not None:
            records.append(record)
            continue

        logger.debug(f"Skipping line {line_number} ({reason.value}): {line!r}")
        skipped.append(SkippedRow(line_number=line_number, raw_line=line, reason=reason))

    if skipped:
        logger.info(f"Parsed {len(records)} rows, skipped {len(skipped)} malformed rows")
    else:
        logger.debug(f"Parsed {len(records)} rows")

    return ParseResult(records=records, skipped_rows=skipped, blank_lines=blank_lines)
