"""
Radix tree (compressed prefix tree) over byte-string keys.

Each edge carries a multi-byte label, so the number of nodes is bounded by the
number of branching points instead of the total key length. Keys are `bytes`
and values are arbitrary Python objects, `None` included.

Classes
-------
RadixNode
    Internal node type. Holds `label`, `value` and the sorted `children` list.

Tree
    Public API: `get`, `set`, `delete`, `delete_subtree` plus ordered
    iteration (`items`, `keys`), `count_nodes` and the batch helpers.

Conventions & invariants
------------------------
- **Disjoint siblings:** no two children of a node share a leading byte, so at
  most one child can match a key's next bytes.
- **Sorted children:** `children` is always sorted ascending by label (plain
  `bytes` ordering), which lets `index_for_prefix` binary search.
- **No idle branch nodes:** a non-root node without a value has at least two
  children. The root is exempt and may hold 0 or 1 children while value-less.
- **No value:** absence is the private `_NO_VALUE` marker, never `None`.

Complexity (typical)
--------------------
Let L be the key length and c the fanout of a node.
- get / set / delete / delete_subtree: O(L + depth * log c).
- items(prefix): O(L + K * A) for K results with average suffix length A.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from typing import Any, Iterable, Iterator

from .errors import InvalidKeyError

logger = logging.getLogger(__name__)


class _NoValue:
  __slots__ = ()

  def __repr__(self):
    return "<no value>"


_NO_VALUE = _NoValue()


class RadixNode:
  __slots__ = ("label", "value", "children")

  def __init__(self, label=b"", value=_NO_VALUE, children=None):
    self.label = label
    self.value = value
    self.children = children if children is not None else []

  def has_value(self):
    return self.value is not _NO_VALUE

  def __repr__(self):
    return f"RadixNode({self.label!r}, value={self.value!r}, children={len(self.children)})"


def common_prefix_length(a, b):
  """Return the length of the longest common leading byte run of a and b."""
  i = 0
  n = min(len(a), len(b))
  while i < n and a[i] == b[i]:
    i += 1
  return i


def index_for_prefix(children, prefix):
  """Return the match/insertion index for `prefix` among sorted `children`.

  The result is the smallest index whose child label either shares a nonempty
  common prefix with `prefix` or sorts at or after it. A label sharing a
  leading byte but sorting before `prefix` can only sit right before the
  bisection point, since anything between them would share that byte too.
  """
  i = bisect_left(children, prefix, key=_label)
  if i > 0 and common_prefix_length(children[i - 1].label, prefix) > 0:
    i -= 1
  return i


def _label(node):
  return node.label


def _as_key(key):
  if isinstance(key, bytes):
    return key
  if isinstance(key, (bytearray, memoryview)):
    return bytes(key)
  if isinstance(key, str):
    return key.encode("utf-8")
  raise InvalidKeyError(f"key must be bytes-like or str, not {type(key).__name__}")


#### ===================================================  ####
#    Radix Tree
#### ===================================================  ####

class Tree:
  __slots__ = ("root", )

  def __init__(self):
    self.root = RadixNode()

  def _find(self, key):
    """Return `(parent, index, node)` for the node spelling `key` exactly.

    `parent` is None and `index` is -1 when `key` is empty (the root).
    Returns None when no node boundary falls exactly at the end of `key`.
    """
    parent, index, node = None, -1, self.root
    rem = key
    while rem:
      children = node.children
      i = index_for_prefix(children, rem)
      logger.debug("search prefix=%r index=%d of %d", rem, i, len(children))
      if i == len(children) or not rem.startswith(children[i].label):
        return None
      parent, index, node = node, i, children[i]
      rem = rem[len(node.label):]
    return parent, index, node

  def get(self, key):
    """Look up `key`.

    Returns:
        tuple[Any, bool]: `(value, True)` when the key is stored, otherwise
        `(None, False)`. A miss is an ordinary result, not an error.
    """
    hit = self._find(_as_key(key))
    if hit is None:
      return None, False
    node = hit[2]
    if not node.has_value():
      return None, False
    return node.value, True

  def __contains__(self, key):
    return self.get(key)[1]

  def set(self, key, value):
    """Insert `key` with `value`, overwriting any existing value.

    - The empty key stores its value on the root.
    - With no child sharing a leading byte, a new leaf is inserted in sorted
      position.
    - When the key diverges inside an edge, the edge is forked: a value-less
      node labelled with the shared prefix takes the shortened old child and
      a new leaf as its two children.
    - When the key ends inside an edge, a node for the key is spliced in
      above the shortened old child.
    - When a label is fully matched, the remainder descends into that child.

    Args:
        key (bytes | bytearray | memoryview | str): Key to store.
        value (Any): Payload; `None` is a legitimate value.

    Returns:
        None
    """
    key = _as_key(key)
    node = self.root
    rem = key

    while rem:
      children = node.children
      i = index_for_prefix(children, rem)
      lcp = common_prefix_length(rem, children[i].label) if i < len(children) else 0
      if lcp == 0:
        children.insert(i, RadixNode(rem, value))
        return

      child = children[i]
      label = child.label
      if lcp == len(label):
        rem = rem[lcp:]
        node = child
        continue

      child.label = label[lcp:]
      if lcp < len(rem):
        leaf = RadixNode(rem[lcp:], value)
        pair = [child, leaf] if child.label < leaf.label else [leaf, child]
        children[i] = RadixNode(rem[:lcp], children=pair)
        logger.debug("forked %r at %d into %r / %r", label, lcp, child.label, leaf.label)
      else:
        children[i] = RadixNode(rem, value, [child])
        logger.debug("split %r above %r", rem, child.label)
      return
    node.value = value

  def _fold(self, node):
    """Merge a value-less, single-child non-root node with its child in place."""
    if node is self.root or node.has_value() or len(node.children) != 1:
      return
    only = node.children[0]
    logger.debug("folding %r + %r", node.label, only.label)
    node.label = node.label + only.label
    node.value = only.value
    node.children = only.children

  def delete(self, key):
    """Delete one key; return True if it was stored.

    - A key that does not end exactly on a node, or ends on a value-less
      branch node, leaves the tree untouched and returns False.
    - A leaf is unlinked; a value-less parent left with one child is folded.
    - A node with a single child is merged with that child.
    - A node with several children just drops its value.
    - The empty key clears the root's value.

    Complexity:
        O(L + depth * log c); no upward cascade beyond the parent.
    """
    hit = self._find(_as_key(key))
    if hit is None:
      return False
    parent, index, node = hit
    if not node.has_value():
      return False

    if parent is None or len(node.children) > 1:
      node.value = _NO_VALUE
    elif not node.children:
      del parent.children[index]
      self._fold(parent)
    else:
      only = node.children[0]
      parent.children[index] = RadixNode(node.label + only.label, only.value, only.children)
    return True

  def delete_subtree(self, prefix):
    """Remove the node spelling `prefix` together with everything below it.

    The prefix must end exactly on a node boundary, otherwise nothing is
    removed and False is returned. The empty prefix clears the whole tree.
    """
    hit = self._find(_as_key(prefix))
    if hit is None:
      return False
    parent, index, node = hit
    if parent is None:
      had_any = node.has_value() or bool(node.children)
      node.value = _NO_VALUE
      node.children = []
      return had_any
    del parent.children[index]
    self._fold(parent)
    return True

  def batch_set(self, pairs: Iterable[tuple[Any, Any]]) -> None:
    """Set every `(key, value)` pair in order; later duplicates win."""
    for key, value in pairs:
      self.set(key, value)

  def batch_delete(self, keys: Iterable[Any]) -> tuple[int, int]:
    """Delete many keys; returns (deleted_count, missing_count)."""
    deleted = 0
    missing = 0
    for key in keys:
      if self.delete(key):
        deleted += 1
      else:
        missing += 1
    return deleted, missing

  def _locate(self, prefix):
    """Return `(node, path)` for the shallowest node whose path starts with `prefix`.

    `path` is the full key spelled by `node`; it extends `prefix` by the rest
    of an edge when the prefix ends mid-edge. Returns `(None, b"")` on a miss.
    """
    node = self.root
    path = b""
    rem = prefix
    while rem:
      children = node.children
      i = index_for_prefix(children, rem)
      if i == len(children):
        return None, b""
      child = children[i]
      lcp = common_prefix_length(rem, child.label)
      if lcp == len(rem) or lcp == len(child.label):
        path += child.label
        rem = rem[lcp:]
        node = child
        continue
      return None, b""
    return node, path

  def items(self, prefix=b"", limit=None) -> Iterator[tuple[bytes, Any]]:
    """Yield `(key, value)` for stored keys starting with `prefix`, in byte order.

    Args:
        prefix (bytes | str): Prefix to enumerate from (b"" walks the tree).
        limit (int | None): Optional cap on the number of results.

    Yields:
        tuple[bytes, Any]: Stored keys and their values.

    Notes:
        A prefix ending inside an edge starts from that edge's child.
        Traversal is iterative with an explicit stack.
    """
    if limit is not None and limit <= 0:
      return
    node, path = self._locate(_as_key(prefix))
    if node is None:
      return

    yielded = 0
    stack = [(node, path)]
    while stack:
      node, path = stack.pop()
      if node.has_value():
        yield path, node.value
        yielded += 1
        if limit is not None and yielded >= limit:
          return
      for child in reversed(node.children):
        stack.append((child, path + child.label))

  def keys(self, prefix=b"", limit=None) -> Iterator[bytes]:
    for key, _ in self.items(prefix, limit):
      yield key

  def count_nodes(self, get_avg_branch_factor=False):
    """Return total node count, or average branching factor over internal nodes.

    Parameters
    ----------
    get_avg_branch_factor : bool, default=False
        If False, return the total node count (root included).
        If True, return `sum(len(children)) / (# internal nodes)`.

    Returns
    -------
    int | float
    """
    total_nodes = 0
    internal = 0
    total_deg = 0

    stack = [self.root]
    while stack:
      node = stack.pop()
      total_nodes += 1
      deg = len(node.children)
      if deg > 0:
        total_deg += deg
        internal += 1
        stack.extend(node.children)
    if get_avg_branch_factor:
      return (total_deg / internal) if internal else 0.0
    return total_nodes
