"""CSV structure detection for bank statement files.

Detection is advisory: it proposes a delimiter and a column mapping that the
user confirms before saving a CSV mapping. Nothing is persisted here.
"""

import csv
import io
import re
from typing import Optional, Sequence

from cashbook.domain.entities import CSVStructure, SuggestedMapping
from cashbook.domain.errors import MalformedCSVError

DATE_KEYWORDS = ("date", "time", "posted", "transaction date", "datetime")
DESCRIPTION_KEYWORDS = ("description", "memo", "details", "merchant", "payee", "name")
AMOUNT_KEYWORDS = ("amount", "value", "total", "sum", "debit", "credit")
TYPE_KEYWORDS = ("type", "transaction type", "debit/credit")
BALANCE_KEYWORDS = ("balance", "running balance", "account balance", "current balance")

_DIGIT_RE = re.compile(r"\d")


def detect_delimiter(csv_text: str) -> str:
    """Pick ';' or ',' from the first line.

    Semicolons win only when strictly more frequent than commas.
    """
    first_line = csv_text.lstrip("\ufeff").split("\n", 1)[0]
    return ";" if first_line.count(";") > first_line.count(",") else ","


def read_csv(
    csv_text: str,
    delimiter: str,
    limit: Optional[int] = None,
    has_header: bool = True,
) -> tuple[list[str], list[dict[str, str]]]:
    """Parse CSV text into headers and row dicts.

    Blank lines are skipped. Missing trailing cells become empty strings.
    Without a header row, columns are named by 1-based position ("1", "2", ...).

    Args:
        csv_text: Raw CSV content
        delimiter: Field delimiter
        limit: Optional maximum number of data rows to return
        has_header: Whether the first non-blank row holds column names

    Returns:
        Tuple of (headers, rows)

    Raises:
        MalformedCSVError: If the text is empty, has no header row, or
            cannot be parsed
    """
    if not csv_text or not csv_text.strip():
        raise MalformedCSVError("CSV file is empty")

    reader = csv.reader(io.StringIO(csv_text.lstrip("\ufeff")), delimiter=delimiter)
    headers: list[str] = []
    rows: list[dict[str, str]] = []
    try:
        for record in reader:
            if not any(cell.strip() for cell in record):
                continue
            if not headers:
                if has_header:
                    headers = [cell.strip() for cell in record]
                    continue
                headers = [str(position) for position in range(1, len(record) + 1)]
            if limit is not None and len(rows) >= limit:
                break
            padded = list(record) + [""] * (len(headers) - len(record))
            rows.append(dict(zip(headers, padded)))
    except csv.Error as e:
        raise MalformedCSVError(f"Could not parse CSV: {e}") from e

    if not headers:
        raise MalformedCSVError("CSV file has no header row")
    return headers, rows


def _find_header(headers: Sequence[str], keywords: Sequence[str]) -> Optional[str]:
    for header in headers:
        lowered = header.lower()
        if any(keyword in lowered for keyword in keywords):
            return header
    return None


def _find_amount_header(headers: Sequence[str], samples: Sequence[dict[str, str]]) -> Optional[str]:
    first = samples[0] if samples else {}
    for header in headers:
        lowered = header.lower()
        if any(keyword in lowered for keyword in AMOUNT_KEYWORDS):
            if _DIGIT_RE.search(first.get(header) or ""):
                return header
    return None


def suggest_mapping(headers: Sequence[str], samples: Sequence[dict[str, str]]) -> SuggestedMapping:
    """Guess the role of each column from header names and sample values."""
    date_column = _find_header(headers, DATE_KEYWORDS)
    if date_column is None and headers:
        date_column = headers[0]

    description_column = _find_header(headers, DESCRIPTION_KEYWORDS)
    if description_column is None and len(headers) > 1:
        description_column = headers[1]

    return SuggestedMapping(
        date_column=date_column,
        description_column=description_column,
        amount_column=_find_amount_header(headers, samples),
        type_column=_find_header(headers, TYPE_KEYWORDS),
        balance_column=_find_header(headers, BALANCE_KEYWORDS),
    )


def detect_structure(csv_text: str, preview_rows: int = 10) -> CSVStructure:
    """Detect delimiter, headers and a suggested column mapping.

    Args:
        csv_text: Raw CSV content
        preview_rows: Number of sample rows to return

    Returns:
        CSVStructure with up to preview_rows sample rows

    Raises:
        MalformedCSVError: If the text is empty or has no header row
    """
    delimiter = detect_delimiter(csv_text)
    headers, samples = read_csv(csv_text, delimiter, limit=preview_rows)
    return CSVStructure(
        delimiter=delimiter,
        headers=headers,
        sample_rows=samples,
        suggested_mapping=suggest_mapping(headers, samples),
    )
