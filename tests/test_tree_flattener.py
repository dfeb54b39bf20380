import pytest

from marine_ops.exporters.tree import (
    ColumnGroup,
    ExportLevel,
    ExportNode,
    export_columns,
    flatten_tree,
)

PARENT = ColumnGroup("parent", (("parent_id", "id"), ("parent_name", "name")))
NOTE = ColumnGroup("note", (("note_text", "text"),))
CHILD = ColumnGroup("child", (("child_id", "id"), ("amount", "amount")))

LEVELS = (ExportLevel(PARENT, attached=(NOTE,)), ExportLevel(CHILD))


def test_one_row_per_leaf_with_ancestor_columns():
    root = ExportNode(
        fields={"id": 1, "name": "A"},
        children=[
            ExportNode(fields={"id": 10, "amount": 5}),
            ExportNode(fields={"id": 11, "amount": 7}),
        ],
    )

    rows = flatten_tree([root], LEVELS)

    assert rows == [
        {"parent_id": 1, "parent_name": "A", "note_text": None, "child_id": 10, "amount": 5},
        {"parent_id": 1, "parent_name": "A", "note_text": None, "child_id": 11, "amount": 7},
    ]


def test_childless_node_gives_single_row_with_blank_descendants():
    rows = flatten_tree([ExportNode(fields={"id": 2, "name": "B"})], LEVELS)

    assert rows == [
        {"parent_id": 2, "parent_name": "B", "note_text": None, "child_id": None, "amount": None}
    ]


def test_attached_group_uses_first_record():
    root = ExportNode(
        fields={"id": 3, "name": "C"},
        attached={"note": [{"text": "first"}, {"text": "second"}]},
    )

    rows = flatten_tree([root], LEVELS)

    assert rows[0]["note_text"] == "first"


def test_rows_share_column_order_and_exclusions():
    roots = [
        ExportNode(fields={"id": 1, "name": "A"}, children=[ExportNode(fields={"id": 10, "amount": 5})]),
        ExportNode(fields={"id": 2, "name": "B"}),
    ]

    rows = flatten_tree(roots, LEVELS, exclude_columns={"amount"})

    expected = ["parent_id", "parent_name", "note_text", "child_id"]
    assert export_columns(LEVELS, {"amount"}) == expected
    assert [list(r) for r in rows] == [expected, expected]


def test_missing_source_keys_become_none():
    rows = flatten_tree([ExportNode(fields={"id": 4})], LEVELS[:1])
    assert rows == [{"parent_id": 4, "parent_name": None, "note_text": None}]


def test_empty_roots():
    assert flatten_tree([], LEVELS) == []


def test_levels_required():
    with pytest.raises(ValueError):
        flatten_tree([ExportNode(fields={})], [])
