"""Import Google Keyword Planner exports into the keyword store.

Keyword Planner writes either UTF-16 tab-separated files (the default
"CSV" download) or UTF-8 comma-separated ones, usually with a couple of
title lines above the real header. Expected columns:

- Keyword
- Avg. monthly searches
- Competition
- Competition (indexed value)
- Three month change
- YoY change
- Top of page bid (low range)
- Top of page bid (high range)
"""

from __future__ import annotations

import codecs
import csv
import logging
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path

from blogdesk.errors import (
    DuplicateKeyword,
    EmptyFile,
    HeaderNotFound,
    ReadFailure,
    ValidationError,
)
from blogdesk.keywords.derive import build_keyword
from blogdesk.storage.models import ImportResult, RawKeywordRow
from blogdesk.storage.repository import KeywordRepository

log = logging.getLogger(__name__)

BOM_UTF16_LE = b"\xff\xfe"
BOM_UTF16_BE = b"\xfe\xff"
BOM_UTF8 = b"\xef\xbb\xbf"

# Normalized header name -> RawKeywordRow field
COLUMN_FIELDS = {
    "keyword": "keyword",
    "avg_monthly_searches": "monthly_searches",
    "competition": "competition",
    "competition_indexed_value": "competition_index",
    "three_month_change": "three_month_change",
    "yoy_change": "yoy_change",
    "top_of_page_bid_low_range": "top_bid_low",
    "top_of_page_bid_high_range": "top_bid_high",
}
INTEGER_FIELDS = {"monthly_searches", "competition_index"}
DECIMAL_FIELDS = {"top_bid_low", "top_bid_high"}

_NON_DIGITS = re.compile(r"[^0-9]")
_CURRENCY = re.compile(r"[$€£,]")
_DECIMAL_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_HEADER_JUNK = re.compile(r"[^a-z0-9]+")


# ── Decoding ───────────────────────────────────────────────────────


def _decode_utf16(data: bytes, codec: str) -> str:
    # A truncated trailing code unit is buffered, not an error, so the
    # converted prefix survives. Malformed input yields nothing.
    decoder = codecs.getincrementaldecoder(codec)()
    try:
        return decoder.decode(data, final=False)
    except UnicodeDecodeError:
        log.warning("Could not decode %s content, treating as empty", codec)
        return ""


def decode_to_text(raw: bytes) -> str:
    """Decode raw export bytes using the byte-order mark, if any."""
    if raw.startswith(BOM_UTF16_LE):
        return _decode_utf16(raw[2:], "utf-16-le")
    if raw.startswith(BOM_UTF16_BE):
        return _decode_utf16(raw[2:], "utf-16-be")
    if raw.startswith(BOM_UTF8):
        raw = raw[3:]
    return raw.decode("utf-8", errors="replace")


# ── Parsing ────────────────────────────────────────────────────────


def normalize_header(name: str) -> str:
    """'Avg. monthly searches' -> 'avg_monthly_searches'."""
    return _HEADER_JUNK.sub("_", name.strip().lower()).strip("_")


def split_line(line: str, delimiter: str) -> list[str]:
    """Split one line, honoring double-quoted cells."""
    if delimiter == "\t":
        return line.split("\t")
    return next(csv.reader([line], delimiter=delimiter))


def detect_delimiter(header_line: str) -> str:
    return "\t" if header_line.count("\t") > header_line.count(",") else ","


def parse_integer(value: str | None) -> int | None:
    if not value:
        return None
    cleaned = _NON_DIGITS.sub("", value)
    return int(cleaned) if cleaned else None


def parse_decimal(value: str | None) -> Decimal | None:
    if not value:
        return None
    match = _DECIMAL_PREFIX.match(_CURRENCY.sub("", value).strip())
    if not match:
        return None
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return None


def _find_header(lines: list[str]) -> int | None:
    for i, line in enumerate(lines):
        lower = line.lower()
        if lower.startswith("keyword\t") or lower.startswith("keyword,"):
            return i
    return None


def parse_csv(text: str) -> list[RawKeywordRow]:
    """Parse decoded export text into raw rows.

    Raises HeaderNotFound when no line starts with a Keyword column and
    EmptyFile when the header has no data rows after it.
    """
    lines = [line.strip() for line in re.split(r"\r?\n", text)]
    lines = [line for line in lines if line]

    header_index = _find_header(lines)
    if header_index is None:
        raise HeaderNotFound()
    header, data_lines = lines[header_index], lines[header_index + 1:]
    if not data_lines:
        raise EmptyFile()

    delimiter = detect_delimiter(header)
    try:
        header_cells = split_line(header, delimiter)
    except csv.Error as e:
        raise HeaderNotFound(f"Could not read header row: {e}") from e
    # Later duplicates overwrite earlier ones
    columns = {normalize_header(name): i for i, name in enumerate(header_cells)}

    rows = []
    for line in data_lines:
        try:
            values = [v.strip() for v in split_line(line, delimiter)]
        except csv.Error as e:
            label = line.split(delimiter, 1)[0].strip().strip('"')[:100]
            log.warning("Unreadable keyword row %r: %s", label, e)
            rows.append(RawKeywordRow(keyword=label, error=str(e)))
            continue
        fields = {}
        for column, field_name in COLUMN_FIELDS.items():
            index = columns.get(column)
            value = values[index] if index is not None and index < len(values) else None
            if field_name in INTEGER_FIELDS:
                value = parse_integer(value)
            elif field_name in DECIMAL_FIELDS:
                value = parse_decimal(value)
            fields[field_name] = value
        rows.append(RawKeywordRow(**fields))
    return rows


# ── Importing ──────────────────────────────────────────────────────


def import_rows(repo: KeywordRepository, rows: list[RawKeywordRow]) -> ImportResult:
    """Insert each row as a keyword, counting imports, skips and errors."""
    result = ImportResult()

    for row in rows:
        if row.error:
            result.errors.append(f"{row.keyword}: {row.error}")
            continue

        if not row.keyword:
            result.skipped += 1
            continue

        if repo.find_by_text(row.keyword) is not None:
            log.debug("Skipping existing keyword: %s", row.keyword)
            result.skipped += 1
            continue

        try:
            repo.insert(build_keyword(row.to_fields()))
        except DuplicateKeyword:
            log.debug("Skipping duplicate keyword: %s", row.keyword)
            result.skipped += 1
            continue
        except ValidationError as e:
            log.warning("Invalid keyword row %r: %s", row.keyword, e.describe())
            result.errors.append(f"{row.keyword}: {e.describe()}")
            continue

        result.imported += 1

    log.info(
        "Keyword import: %d imported, %d skipped, %d errors",
        result.imported, result.skipped, len(result.errors),
    )
    return result


def import_from_content(repo: KeywordRepository, content: str | bytes) -> ImportResult:
    """Import from export content, either decoded text or raw bytes."""
    if isinstance(content, bytes):
        content = decode_to_text(content)
    return import_rows(repo, parse_csv(content))


def import_from_file(repo: KeywordRepository, path: Path) -> ImportResult:
    """Import a keyword planner export from disk."""
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise ReadFailure(f"Failed to read file: {e.strerror or e}") from e
    log.info("Importing keywords from %s", path)
    return import_rows(repo, parse_csv(decode_to_text(raw)))
