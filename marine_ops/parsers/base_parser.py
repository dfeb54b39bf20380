"""Base class for tabular import parsers.

Provides shared infrastructure for loading CSV or Excel uploads into a
DataFrame and normalising cell values before entity-specific subclasses
turn rows into model keyword arguments.
"""

from __future__ import annotations

import datetime
import io
import logging
import re
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

_EXCEL_SUFFIXES = (".xlsx", ".xlsm")
_TRUE_VALUES = {"true", "1", "yes", "y", "paid", "t"}
_FALSE_VALUES = {"false", "0", "no", "n", "unpaid", "f"}


class CellError(ValueError):
    """A single cell cannot be converted to the column's type."""


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass
class ParseResult:
    """Container returned by every parser after processing an upload.

    Attributes:
        records: List of dicts ready to be passed to the model constructor.
            Each dict key matches a model attribute name.
        errors: Fatal row-level or structural problems.  Any error blocks
            the import so nothing is written.
        warnings: Non-fatal oddities (e.g. ignored columns).
        format_name: ``"CSV"`` or ``"XLSX"``.
    """

    records: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    format_name: str = "CSV"

    @property
    def ok(self) -> bool:
        """True when no fatal errors were collected."""
        return len(self.errors) == 0

    @property
    def record_count(self) -> int:
        return len(self.records)

    def summary(self) -> str:
        """One-line human-readable summary of the parse run."""
        status = "OK" if self.ok else "ERROR"
        return (
            f"[{status}] format={self.format_name} "
            f"records={self.record_count} "
            f"errors={len(self.errors)} "
            f"warnings={len(self.warnings)}"
        )


# ---------------------------------------------------------------------------
# Base parser
# ---------------------------------------------------------------------------


class BaseParser(ABC):
    """Abstract base for upload parsers.

    The constructor takes the raw bytes of the upload (as returned by
    FastAPI ``UploadFile.read()``) and its filename; the suffix decides
    between ``pd.read_excel`` (openpyxl engine) and ``pd.read_csv``.

    Attributes:
        raw: Raw bytes of the upload.
        filename: Original filename, used to pick the reader.
        result: Accumulated ``ParseResult`` (populated during ``parse()``).
    """

    def __init__(self, raw: bytes, filename: str = "upload.csv") -> None:
        self.raw = raw
        self.filename = filename
        is_excel = filename.lower().endswith(_EXCEL_SUFFIXES)
        self.result = ParseResult(format_name="XLSX" if is_excel else "CSV")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load_frame(self) -> pd.DataFrame:
        """Load the upload with every cell as a string.

        Reading as strings keeps ids and dates exactly as typed; typed
        conversion happens per column in the subclass.  A file that cannot
        be read is recorded in ``result.errors`` and yields an empty frame.
        """
        try:
            if self.result.format_name == "XLSX":
                df = pd.read_excel(io.BytesIO(self.raw), dtype=str, engine="openpyxl")
            else:
                df = pd.read_csv(
                    io.BytesIO(self.raw),
                    dtype=str,
                    keep_default_na=False,
                    skipinitialspace=True,
                )
        except (
            ValueError,
            zipfile.BadZipFile,
            pd.errors.ParserError,
            pd.errors.EmptyDataError,
        ) as exc:
            msg = f"Failed to read '{self.filename}': {exc}"
            logger.error(msg)
            self.result.errors.append(msg)
            return pd.DataFrame()

        df.columns = [self._clean_str(c).lower() for c in df.columns]
        return df

    # ------------------------------------------------------------------
    # Value normalisation helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _clean_str(value: Any) -> str:
        """Return a stripped string, converting NaN/None to empty string."""
        if value is None:
            return ""
        if isinstance(value, float) and pd.isna(value):
            return ""
        return str(value).strip()

    @staticmethod
    def _to_decimal(value: str) -> Decimal:
        """Parse a number, tolerating thousands separators and currency marks."""
        cleaned = re.sub(r"[,\s]", "", value.lstrip("Rp$ "))
        try:
            return Decimal(cleaned)
        except InvalidOperation as exc:
            raise CellError(f"'{value}' is not a number") from exc

    @staticmethod
    def _to_int(value: str) -> int:
        try:
            return int(float(value))
        except ValueError as exc:
            raise CellError(f"'{value}' is not an integer") from exc

    @staticmethod
    def _to_date(value: str) -> datetime.date:
        """Parse an ISO date; Excel cells read as text carry a time part."""
        try:
            return datetime.date.fromisoformat(value[:10])
        except ValueError as exc:
            raise CellError(f"'{value}' is not a YYYY-MM-DD date") from exc

    @staticmethod
    def _to_bool(value: str) -> bool:
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise CellError(f"'{value}' is not a boolean")

    @staticmethod
    def _is_empty_row(row: pd.Series) -> bool:
        """True when every cell in the row is blank."""
        return not any(BaseParser._clean_str(val) for val in row)

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @abstractmethod
    def validate_structure(self, df: pd.DataFrame) -> list[str]:
        """Verify that the DataFrame has the required columns.

        Returns:
            List of error messages.  Empty list means structure is valid.
        """

    @abstractmethod
    def parse(self) -> ParseResult:
        """Execute the full parsing pipeline and return a ``ParseResult``."""
