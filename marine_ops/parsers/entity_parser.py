"""Parser for the importable entities.

Each entity declares its columns with a type and whether a value is
required.  Header names are matched case-insensitively; unknown columns
are ignored with a warning, blank optional cells become ``None``.

Example::

    result = EntityParser(raw_bytes, "vessels", "fleet.csv").parse()
    if result.ok:
        rows = result.records   # [{"name": "KM Bahari", "type": "Tug", ...}]
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

import pandas as pd

from marine_ops.parsers.base_parser import BaseParser, CellError, ParseResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportColumn:
    name: str
    kind: str = "str"  # str | int | decimal | date | bool
    required: bool = False


def _cols(*specs: tuple) -> tuple[ImportColumn, ...]:
    return tuple(ImportColumn(*spec) for spec in specs)


ENTITY_COLUMNS: Final[Mapping[str, tuple[ImportColumn, ...]]] = {
    "vessels": _cols(
        ("id", "int"),
        ("name", "str", True),
        ("type",),
        ("company",),
    ),
    "work_orders": _cols(
        ("id", "int"),
        ("vessel_id", "int", True),
        ("customer_wo_number",),
        ("customer_wo_date", "date"),
        ("shipyard_wo_number",),
        ("shipyard_wo_date", "date"),
        ("wo_document_delivery_date", "date"),
        ("wo_location",),
        ("wo_description",),
    ),
    "work_details": _cols(
        ("id", "int"),
        ("work_order_id", "int", True),
        ("description", "str", True),
        ("location",),
        ("pic",),
        ("planned_start_date", "date"),
        ("target_close_date", "date"),
        ("period_close_target",),
        ("actual_start_date", "date"),
        ("actual_close_date", "date"),
    ),
    "work_progress": _cols(
        ("id", "int"),
        ("work_details_id", "int", True),
        ("progress_percentage", "decimal", True),
        ("report_date", "date", True),
        ("notes",),
        ("evidence_url",),
        ("storage_path",),
    ),
    "invoice_details": _cols(
        ("id", "int"),
        ("work_order_id", "int", True),
        ("wo_document_collection_date", "date"),
        ("invoice_number",),
        ("faktur_number",),
        ("due_date", "date"),
        ("delivery_date", "date"),
        ("collection_date", "date"),
        ("receiver_name",),
        ("payment_price", "decimal"),
        ("payment_status", "bool"),
        ("payment_date", "date"),
        ("remarks",),
    ),
}


class EntityParser(BaseParser):
    """Parse an upload into records for one importable entity."""

    def __init__(self, raw: bytes, entity: str, filename: str = "upload.csv") -> None:
        if entity not in ENTITY_COLUMNS:
            raise ValueError(f"Unknown import entity '{entity}'")
        super().__init__(raw, filename)
        self.entity = entity
        self.columns = ENTITY_COLUMNS[entity]

    def validate_structure(self, df: pd.DataFrame) -> list[str]:
        present = set(df.columns)
        return [
            f"Missing required column '{col.name}'"
            for col in self.columns
            if col.required and col.name not in present
        ]

    def _convert(self, col: ImportColumn, text: str) -> Any:
        if col.kind == "int":
            return self._to_int(text)
        if col.kind == "decimal":
            return self._to_decimal(text)
        if col.kind == "date":
            return self._to_date(text)
        if col.kind == "bool":
            return self._to_bool(text)
        return text

    def _parse_row(self, row: pd.Series, line: int) -> dict[str, Any] | None:
        record: dict[str, Any] = {}
        row_errors = []
        for col in self.columns:
            if col.name not in row.index:
                continue
            text = self._clean_str(row[col.name])
            if not text:
                if col.required:
                    row_errors.append(f"Row {line}: '{col.name}' is required")
                elif col.name != "id" and col.kind != "bool":
                    # Blank id means "new row"; blank flags keep the model default
                    record[col.name] = None
                continue
            try:
                record[col.name] = self._convert(col, text)
            except CellError as exc:
                row_errors.append(f"Row {line}: '{col.name}' {exc}")

        if row_errors:
            self.result.errors.extend(row_errors)
            return None
        return record

    def parse(self) -> ParseResult:
        df = self._load_frame()
        if not self.result.ok:
            return self.result
        if df.empty and not len(df.columns):
            self.result.errors.append("The file has no header row.")
            return self.result

        structure_errors = self.validate_structure(df)
        if structure_errors:
            self.result.errors.extend(structure_errors)
            return self.result

        known = {col.name for col in self.columns}
        ignored = [c for c in df.columns if c not in known]
        if ignored:
            self.result.warnings.append(f"Ignored columns: {', '.join(ignored)}")

        for idx, row in df.iterrows():
            if self._is_empty_row(row):
                continue
            # Header is line 1
            record = self._parse_row(row, int(idx) + 2)
            if record is not None:
                self.result.records.append(record)

        logger.debug("EntityParser(%s): %s", self.entity, self.result.summary())
        return self.result
