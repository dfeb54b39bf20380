"""
Labelled export tree and its flattener.

The export is built in two steps so that the flattening rules do not depend
on the shape of any particular query:

1. A loader turns ORM rows into ``ExportNode`` trees (vessel → work order →
   work detail → progress report), attaching single companion records such
   as the work order's invoice or the work detail's verification.
2. ``flatten_tree`` walks the trees depth-first against a list of
   ``ExportLevel`` definitions and emits one row per leaf.

Row policy
----------
- Every row repeats all ancestor columns; denormalisation is intentional so
  each row can be filtered on its own in a spreadsheet.
- A node without children still yields exactly one row, with every
  descendant column set to ``None``.
- Attached groups contribute their first record only; a missing record
  yields ``None`` columns.
- All rows share the same ordered column set.  ``exclude_columns`` drops
  columns from every row (financial redaction is applied by the caller).
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ColumnGroup:
    """Ordered mapping of output column names to source keys for one entity.

    Attributes:
        name: Entity label, e.g. ``"vessel"`` or ``"invoice"``.
        columns: ``(output_column, source_key)`` pairs in output order.
    """

    name: str
    columns: tuple[tuple[str, str], ...]

    @property
    def column_names(self) -> list[str]:
        return [output for output, _ in self.columns]

    def project(self, record: Mapping[str, Any] | None) -> dict[str, Any]:
        """Map a source record to output columns; ``None`` gives a blank segment."""
        if record is None:
            return dict.fromkeys(self.column_names)
        return {output: record.get(source) for output, source in self.columns}


@dataclass(frozen=True)
class ExportLevel:
    """One branching level of the tree.

    Attributes:
        group: Columns of the entity at this level.
        attached: Groups of single companion records carried on this level
            (only the first record of each is exported).
    """

    group: ColumnGroup
    attached: tuple[ColumnGroup, ...] = ()

    @property
    def column_names(self) -> list[str]:
        names = self.group.column_names
        for extra in self.attached:
            names.extend(extra.column_names)
        return names


@dataclass
class ExportNode:
    """One entity in the labelled tree.

    Attributes:
        fields: Source values keyed by the level group's source keys.
        attached: Companion records keyed by attached group name; each value
            is the list returned by the backend (first one is exported).
        children: Nodes of the next level down.
    """

    fields: Mapping[str, Any]
    attached: dict[str, Sequence[Mapping[str, Any]]] = field(default_factory=dict)
    children: list[ExportNode] = field(default_factory=list)


def export_columns(
    levels: Sequence[ExportLevel],
    exclude_columns: Collection[str] = (),
) -> list[str]:
    """Return the ordered output columns for ``levels`` minus exclusions."""
    columns: list[str] = []
    for level in levels:
        columns.extend(c for c in level.column_names if c not in exclude_columns)
    return columns


def _project_level(level: ExportLevel, node: ExportNode) -> dict[str, Any]:
    row = level.group.project(node.fields)
    for group in level.attached:
        records = node.attached.get(group.name) or ()
        row.update(group.project(records[0] if records else None))
    return row


def _walk(
    node: ExportNode,
    levels: Sequence[ExportLevel],
    depth: int,
    inherited: dict[str, Any],
    out: list[dict[str, Any]],
) -> None:
    row = {**inherited, **_project_level(levels[depth], node)}

    if depth + 1 == len(levels):
        out.append(row)
        return

    if not node.children:
        for level in levels[depth + 1:]:
            row.update(dict.fromkeys(level.column_names))
        out.append(row)
        return

    for child in node.children:
        _walk(child, levels, depth + 1, row, out)


def flatten_tree(
    roots: Iterable[ExportNode],
    levels: Sequence[ExportLevel],
    exclude_columns: Collection[str] = (),
) -> list[dict[str, Any]]:
    """Flatten export trees into uniform rows.

    Args:
        roots: Top-level nodes (one per vessel for the vessel export).
        levels: Level definitions, root level first.
        exclude_columns: Output columns removed from every row.

    Returns:
        One dict per leaf, or per childless node, each with the same ordered
        keys as ``export_columns(levels, exclude_columns)``.

    Raises:
        ValueError: If ``levels`` is empty.
    """
    if not levels:
        raise ValueError("flatten_tree needs at least one export level")

    columns = export_columns(levels, exclude_columns)
    raw: list[dict[str, Any]] = []
    for root in roots:
        _walk(root, levels, 0, {}, raw)

    return [{column: row[column] for column in columns} for row in raw]
