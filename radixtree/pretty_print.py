"""Directory-tree style rendering of a radix tree, for debugging and tests.

    .
    `-- "tea" 1
       |-- "m" 2
       `-- "r" 3
"""

from __future__ import annotations

import sys
from typing import TextIO

_ESCAPES = {
  0x22: '\\"',
  0x5c: "\\\\",
  0x09: "\\t",
  0x0a: "\\n",
  0x0d: "\\r",
}


def quote_label(label):
  """Double-quote a byte label; printable ASCII is kept, other bytes become \\xNN."""
  out = ['"']
  for b in label:
    if b in _ESCAPES:
      out.append(_ESCAPES[b])
    elif 0x20 <= b < 0x7f:
      out.append(chr(b))
    else:
      out.append(f"\\x{b:02x}")
  out.append('"')
  return "".join(out)


def _lines(tree):
  root = tree.root
  yield "." + (f" {root.value!r}" if root.has_value() else "")

  # (children, index, leading) frames, walked depth-first without recursion
  stack = [(root.children, 0, "")]
  while stack:
    children, i, leading = stack.pop()
    if i >= len(children):
      continue
    stack.append((children, i + 1, leading))
    node = children[i]
    last = i == len(children) - 1
    line = leading + ("`-- " if last else "|-- ") + quote_label(node.label)
    if node.has_value():
      line += f" {node.value!r}"
    yield line
    if node.children:
      stack.append((node.children, 0, leading + ("   " if last else "|  ")))


def render(tree) -> str:
  """Return the full diagram, one line per node, newline-terminated."""
  return "".join(line + "\n" for line in _lines(tree))


def pretty_print(tree, out: TextIO | None = None) -> None:
  """Write `render(tree)` to `out` (stdout by default)."""
  (out or sys.stdout).write(render(tree))
