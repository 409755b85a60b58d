import pytest

from app.utils.category_tree import (
    CategoryCount, CategoryTreeError, aggregate_product_count,
    aggregate_product_counts, build_tree,
)


def sample_nodes():
    # root(1) -> body(2) -> doors(3), mirrors(3); root2(1) sin hijas
    return [
        CategoryCount("root", None, 1),
        CategoryCount("body", "root", 2),
        CategoryCount("doors", "body", 4),
        CategoryCount("mirrors", "body", 0),
        CategoryCount("root2", None, 3),
    ]


def test_aggregate_counts_are_recursive_closure():
    nodes = sample_nodes()
    totals = aggregate_product_counts(nodes)

    assert totals == {"root": 7, "body": 6, "doors": 4, "mirrors": 0, "root2": 3}
    children = {}
    for n in nodes:
        children.setdefault(n.parent_id, []).append(n.id)
    for n in nodes:
        expected = n.direct_count + sum(totals[c] for c in children.get(n.id, []))
        assert totals[n.id] == expected


def test_leaf_total_equals_direct_count():
    assert aggregate_product_count(sample_nodes(), "doors") == 4


def test_unknown_category_counts_zero():
    assert aggregate_product_count(sample_nodes(), "missing") == 0


def test_orphan_parent_is_ignored():
    totals = aggregate_product_counts([CategoryCount("a", "ghost", 2)])

    assert totals == {"a": 2}


def test_depth_guard_raises():
    nodes = [CategoryCount(0, None, 1)] + [CategoryCount(i, i - 1, 1) for i in range(1, 6)]

    with pytest.raises(CategoryTreeError):
        aggregate_product_counts(nodes, max_depth=3)


def test_cycle_raises_instead_of_recursing_forever():
    nodes = [CategoryCount("a", "b", 1), CategoryCount("b", "a", 1)]

    with pytest.raises(CategoryTreeError):
        aggregate_product_counts(nodes, max_depth=4)


def test_build_tree_preserves_order():
    items = [
        {"id": 1, "parent_id": None, "name": "Body"},
        {"id": 2, "parent_id": 1, "name": "Mirrors"},
        {"id": 3, "parent_id": 1, "name": "Doors"},
        {"id": 4, "parent_id": 99, "name": "Orphan"},
    ]

    tree = build_tree(items)

    assert [n["name"] for n in tree] == ["Body", "Orphan"]
    assert [c["name"] for c in tree[0]["children"]] == ["Mirrors", "Doors"]
