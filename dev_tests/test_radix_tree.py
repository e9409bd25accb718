import logging
import random

import pytest

from radixtree import (
    InvalidKeyError,
    RadixTreeError,
    Tree,
    common_prefix_length,
    index_for_prefix,
    render,
)
from radixtree.radix_tree import RadixNode


# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------
def build(*pairs):
    t = Tree()
    for key, value in pairs:
        t.set(key, value)
    return t


def assert_invariants(tree):
    stack = [tree.root]
    while stack:
        node = stack.pop()
        labels = [c.label for c in node.children]
        assert labels == sorted(labels), f"children out of order: {labels}"
        assert all(labels), "empty edge label"
        firsts = [lbl[:1] for lbl in labels]
        assert len(firsts) == len(set(firsts)), f"siblings share a first byte: {labels}"
        if node is not tree.root and not node.has_value():
            assert len(node.children) >= 2, f"idle branch node {node!r}"
        stack.extend(node.children)


# ------------------------------------------------------------------------------
# Search primitives
# ------------------------------------------------------------------------------
@pytest.mark.parametrize("a, b, want", [
    (b"", b"", 0),
    (b"te", b"tea", 2),
    (b"tea", b"te", 2),
    (b"test", b"toast", 1),
    (b"team", b"test", 2),
    (b"test", b"water", 0),
    (b"abc", b"", 0),
    (b"\xff\x00", b"\xff\x01", 1),
])
def test_common_prefix_length(a, b, want):
    assert common_prefix_length(a, b) == want


@pytest.mark.parametrize("prefix, want", [
    (b"am", 0),
    (b"amx", 0),
    (b"a", 0),
    (b"b", 1),
    (b"sa", 1),
    (b"stop", 1),
    (b"t", 2),
    (b"\x00", 0),
])
def test_index_for_prefix(prefix, want):
    children = [RadixNode(b"am", 1), RadixNode(b"st", 2)]
    assert index_for_prefix(children, prefix) == want


def test_index_for_prefix_no_children():
    assert index_for_prefix([], b"abc") == 0


# ------------------------------------------------------------------------------
# Set, checked against the rendered shape
# ------------------------------------------------------------------------------
@pytest.mark.parametrize("pairs, want", [
    ([], ".\n"),
    ([(b"", 0)], ". 0\n"),
    ([(b"tea", 1)], '.\n`-- "tea" 1\n'),
    ([(b"tea", 1), (b"tea", 2)], '.\n`-- "tea" 2\n'),
    ([(b"tea", 1), (b"team", 2)],
     '.\n'
     '`-- "tea" 1\n'
     '   `-- "m" 2\n'),
    ([(b"team", 1), (b"tea", 2)],
     '.\n'
     '`-- "tea" 2\n'
     '   `-- "m" 1\n'),
    ([(b"team", 1), (b"tear", 2)],
     '.\n'
     '`-- "tea"\n'
     '   |-- "m" 1\n'
     '   `-- "r" 2\n'),
    ([(b"tear", 1), (b"team", 2)],
     '.\n'
     '`-- "tea"\n'
     '   |-- "m" 2\n'
     '   `-- "r" 1\n'),
    ([(b"tea", 1), (b"team", 2), (b"teamwork", 3)],
     '.\n'
     '`-- "tea" 1\n'
     '   `-- "m" 2\n'
     '      `-- "work" 3\n'),
    ([(b"team", 1), (b"tea", 2), (b"teamwork", 3)],
     '.\n'
     '`-- "tea" 2\n'
     '   `-- "m" 1\n'
     '      `-- "work" 3\n'),
    ([(b"tea", 1), (b"team", 2), (b"teamwork", 3), (b"teammate", 4)],
     '.\n'
     '`-- "tea" 1\n'
     '   `-- "m" 2\n'
     '      |-- "mate" 4\n'
     '      `-- "work" 3\n'),
    ([(b"tea", 1), (b"water", 2)],
     '.\n'
     '|-- "tea" 1\n'
     '`-- "water" 2\n'),
    ([(b"", 0), (b"team", 1), (b"test", 2), (b"water", 3)],
     '. 0\n'
     '|-- "te"\n'
     '|  |-- "am" 1\n'
     '|  `-- "st" 2\n'
     '`-- "water" 3\n'),
])
def test_set_shapes(pairs, want):
    t = build(*pairs)
    assert render(t) == want
    assert_invariants(t)


def test_set_orders_bytes_unsigned():
    t = build((b"\xff", 1), (b"\x01", 2), (b"a", 3))
    assert [c.label for c in t.root.children] == [b"\x01", b"a", b"\xff"]


def test_set_accepts_bytearray_memoryview_and_str():
    t = Tree()
    t.set(bytearray(b"tea"), 1)
    t.set(memoryview(b"team"), 2)
    t.set("tear", 3)
    assert t.get(b"tea") == (1, True)
    assert t.get("team") == (2, True)
    assert t.get(bytearray(b"tear")) == (3, True)
    assert_invariants(t)


def test_set_str_key_is_utf8():
    t = build(("café", 1))
    assert t.get("café".encode("utf-8")) == (1, True)


@pytest.mark.parametrize("bad", [1, 1.5, None, ("a",), [b"a"]])
def test_invalid_key_raises(bad):
    t = Tree()
    with pytest.raises(InvalidKeyError):
        t.set(bad, 1)
    with pytest.raises(TypeError):
        t.get(bad)
    with pytest.raises(RadixTreeError):
        t.delete(bad)


def test_none_is_a_real_value():
    t = build((b"k", None), (b"ka", 1))
    assert t.get(b"k") == (None, True)
    assert b"k" in t
    assert render(t) == '.\n`-- "k" None\n   `-- "a" 1\n'


def test_overwrite_branch_node_value():
    t = build((b"team", 1), (b"tear", 2))
    t.set(b"tea", 0)
    assert render(t) == '.\n`-- "tea" 0\n   |-- "m" 1\n   `-- "r" 2\n'
    assert_invariants(t)


def test_set_logs_fork(caplog):
    with caplog.at_level(logging.DEBUG, logger="radixtree.radix_tree"):
        build((b"team", 1), (b"tear", 2))
    assert "forked" in caplog.text


# ------------------------------------------------------------------------------
# Get
# ------------------------------------------------------------------------------
@pytest.fixture
def tree1():
    return build((b"", 0), (b"team", 1), (b"test", 2), (b"water", 3))


@pytest.mark.parametrize("key, want", [
    (b"", (0, True)),
    (b"team", (1, True)),
    (b"test", (2, True)),
    (b"water", (3, True)),
    (b"te", (None, False)),
    (b"tea", (None, False)),
    (b"tear", (None, False)),
    (b"testable", (None, False)),
    (b"w", (None, False)),
    (b"zebra", (None, False)),
])
def test_get(tree1, key, want):
    assert tree1.get(key) == want


def test_get_empty_tree():
    t = Tree()
    assert t.get(b"") == (None, False)
    assert t.get(b"a") == (None, False)
    assert b"" not in t


# ------------------------------------------------------------------------------
# Delete
# ------------------------------------------------------------------------------
@pytest.mark.parametrize("pairs, key, deleted, want", [
    ([], b"tea", False, ".\n"),
    ([(b"tea", 1)], b"tea", True, ".\n"),
    ([(b"tea", 1), (b"water", 2)], b"tea", True,
     '.\n`-- "water" 2\n'),
    ([(b"tea", 1), (b"team", 2)], b"team", True,
     '.\n`-- "tea" 1\n'),
    ([(b"tea", 1), (b"team", 2)], b"tea", True,
     '.\n`-- "team" 2\n'),
    ([(b"tea", 1), (b"team", 2), (b"tear", 3)], b"tea", True,
     '.\n'
     '`-- "tea"\n'
     '   |-- "m" 2\n'
     '   `-- "r" 3\n'),
    ([(b"tea", 1), (b"team", 2), (b"tear", 3)], b"tear", True,
     '.\n'
     '`-- "tea" 1\n'
     '   `-- "m" 2\n'),
    ([(b"team", 1), (b"tear", 2)], b"team", True,
     '.\n`-- "tear" 2\n'),
    ([(b"team", 1), (b"tear", 2)], b"tea", False,
     '.\n'
     '`-- "tea"\n'
     '   |-- "m" 1\n'
     '   `-- "r" 2\n'),
    ([(b"team", 1), (b"tear", 2)], b"te", False,
     '.\n'
     '`-- "tea"\n'
     '   |-- "m" 1\n'
     '   `-- "r" 2\n'),
    ([(b"tea", 1), (b"team", 2), (b"teamwork", 3)], b"team", True,
     '.\n'
     '`-- "tea" 1\n'
     '   `-- "mwork" 3\n'),
])
def test_delete(pairs, key, deleted, want):
    t = build(*pairs)
    assert t.delete(key) is deleted
    assert render(t) == want
    assert_invariants(t)


def test_delete_merges_remaining_branch():
    t = build((b"team", 1), (b"tear", 2), (b"test", 3))
    assert render(t) == (
        '.\n'
        '`-- "te"\n'
        '   |-- "a"\n'
        '   |  |-- "m" 1\n'
        '   |  `-- "r" 2\n'
        '   `-- "st" 3\n'
    )
    assert t.delete(b"test") is True
    assert render(t) == (
        '.\n'
        '`-- "tea"\n'
        '   |-- "m" 1\n'
        '   `-- "r" 2\n'
    )
    assert t.get(b"team") == (1, True)
    assert t.get(b"tear") == (2, True)
    assert_invariants(t)


def test_delete_root_value():
    t = build((b"", 0), (b"a", 1))
    assert t.delete(b"") is True
    assert t.get(b"") == (None, False)
    assert t.delete(b"") is False
    assert render(t) == '.\n`-- "a" 1\n'


def test_delete_absent_key_leaves_tree_identical(tree1):
    before = render(tree1)
    for key in [b"tea", b"te", b"tests", b"wat", b"x", b"teamwork"]:
        assert tree1.delete(key) is False
        assert render(tree1) == before


def test_delete_twice():
    t = build((b"tea", 1), (b"team", 2))
    assert t.delete(b"tea") is True
    assert t.delete(b"tea") is False
    assert t.get(b"team") == (2, True)


# ------------------------------------------------------------------------------
# Delete subtree
# ------------------------------------------------------------------------------
def test_delete_subtree_empties_tree():
    t = build((b"team", 1), (b"tear", 2))
    assert t.delete_subtree(b"tea") is True
    assert render(t) == ".\n"


def test_delete_subtree_folds_parent():
    t = build((b"team", 1), (b"tear", 2), (b"test", 3))
    assert t.delete_subtree(b"tea") is True
    assert render(t) == '.\n`-- "test" 3\n'
    assert t.get(b"team") == (None, False)
    assert t.get(b"test") == (3, True)
    assert_invariants(t)


def test_delete_subtree_keeps_valued_parent():
    t = build((b"tea", 1), (b"team", 2), (b"teamwork", 3), (b"tear", 4))
    assert t.delete_subtree(b"team") is True
    assert render(t) == '.\n`-- "tea" 1\n   `-- "r" 4\n'
    assert_invariants(t)


@pytest.mark.parametrize("prefix", [b"te", b"teams", b"x", b"tead"])
def test_delete_subtree_requires_node_boundary(prefix):
    t = build((b"team", 1), (b"tear", 2))
    before = render(t)
    assert t.delete_subtree(prefix) is False
    assert render(t) == before


def test_delete_subtree_empty_prefix_clears_everything():
    t = build((b"", 0), (b"a", 1), (b"b", 2))
    assert t.delete_subtree(b"") is True
    assert render(t) == ".\n"
    assert t.delete_subtree(b"") is False


def test_delete_subtree_removes_only_prefixed_keys():
    keys = [b"app", b"apple", b"apply", b"apt", b"bat", b"batch", b"bath"]
    t = build(*[(k, i) for i, k in enumerate(keys)])
    assert t.delete_subtree(b"app") is True
    for i, k in enumerate(keys):
        if k.startswith(b"app"):
            assert t.get(k) == (None, False)
        else:
            assert t.get(k) == (i, True)
    assert_invariants(t)


# ------------------------------------------------------------------------------
# Iteration, counting, batches
# ------------------------------------------------------------------------------
def test_items_sorted_and_prefixed():
    words = [b"bath", b"apple", b"app", b"bat", b"apply", b"", b"batch"]
    t = build(*[(w, w.upper()) for w in words])
    assert list(t.keys()) == sorted(words)
    assert list(t.keys(b"ba")) == [b"bat", b"batch", b"bath"]
    assert list(t.items(b"appl")) == [(b"apple", b"APPLE"), (b"apply", b"APPLY")]
    assert list(t.keys(b"bz")) == []
    assert list(t.keys(b"app", limit=2)) == [b"app", b"apple"]
    assert list(t.keys(limit=0)) == []


def test_items_mid_edge_prefix():
    t = build((b"international", 1), (b"internet", 2))
    assert list(t.keys(b"inter")) == [b"international", b"internet"]
    assert list(t.keys(b"internat")) == [b"international"]
    assert list(t.keys(b"internal")) == []


def test_count_nodes():
    t = build((b"a", 1), (b"ab", 2), (b"ac", 3), (b"b", 4))
    # root, a, b, c under a, b
    assert t.count_nodes() == 5
    assert t.count_nodes(get_avg_branch_factor=True) == pytest.approx(2.0)
    assert Tree().count_nodes(get_avg_branch_factor=True) == 0.0


def test_batch_set_and_delete():
    t = Tree()
    t.batch_set([(b"apply", 1), (b"bath", 2), (b"apple", 3), (b"bath", 4)])
    assert t.get(b"bath") == (4, True)
    deleted, missing = t.batch_delete([b"apply", b"bath", b"zzz"])
    assert (deleted, missing) == (2, 1)
    assert list(t.keys()) == [b"apple"]


# ------------------------------------------------------------------------------
# Randomized comparison with a dict
# ------------------------------------------------------------------------------
def random_key(rng):
    return bytes(rng.choice(b"ab\xff") for _ in range(rng.randint(0, 6)))


@pytest.mark.parametrize("seed", [1, 7, 1337])
def test_random_operations_match_dict(seed):
    rng = random.Random(seed)
    t = Tree()
    model = {}
    for step in range(2000):
        key = random_key(rng)
        roll = rng.random()
        if roll < 0.55:
            t.set(key, step)
            model[key] = step
        elif roll < 0.9:
            assert t.delete(key) is (key in model)
            model.pop(key, None)
        else:
            before = sorted(model.items())
            if t.delete_subtree(key):
                model = {k: v for k, v in model.items() if not k.startswith(key)}
            else:
                assert list(t.items()) == before
        assert_invariants(t)

    assert list(t.items()) == sorted(model.items())
    for _ in range(200):
        key = random_key(rng)
        assert t.get(key) == ((model[key], True) if key in model else (None, False))


@pytest.mark.parametrize("seed", range(5))
def test_random_operations_with_none_values_keep_shape_on_miss(seed):
    rng = random.Random(seed)
    t = Tree()
    model = {}
    for step in range(1500):
        key = bytes(rng.choice(b"\x00abc\xff") for _ in range(rng.randint(0, 5)))
        roll = rng.random()
        if roll < 0.5:
            value = None if rng.random() < 0.3 else step
            t.set(key, value)
            model[key] = value
        else:
            before = render(t)
            if roll < 0.85:
                deleted = t.delete(key)
                assert deleted is (key in model)
                model.pop(key, None)
            else:
                deleted = t.delete_subtree(key)
                if deleted:
                    model = {k: v for k, v in model.items() if not k.startswith(key)}
            if not deleted:
                assert render(t) == before
        assert_invariants(t)
        assert list(t.items()) == sorted(model.items())
