"""Time radix tree operations over a workload.

Each key is timed individually with `time.perf_counter_ns`, so the resulting
frame can be summarized by percentile as well as by mean.
"""

from __future__ import annotations

import logging
import time
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from radixtree import Tree

logger = logging.getLogger(__name__)

OPERATIONS = ("set", "get", "delete")
PERCENTILES = (50, 95, 99)


def run_benchmark(keys: Sequence[bytes], operations: Iterable[str] = OPERATIONS, tree: Tree | None = None) -> pd.DataFrame:
    """Run each operation over every key, in order, against one tree.

    Returns a frame with columns `operation, key, key_length, ns`.
    `set` stores the key's position as its value, so a later `get` has
    something to find.
    """
    operations = tuple(operations)
    unknown = [op for op in operations if op not in OPERATIONS]
    if unknown:
        raise ValueError(f"unknown operations: {unknown}")
    tree = tree if tree is not None else Tree()
    clock = time.perf_counter_ns

    rows = []
    for op in operations:
        if op == "set":
            for i, key in enumerate(keys):
                start = clock()
                tree.set(key, i)
                rows.append((op, key, len(key), clock() - start))
        elif op == "get":
            for key in keys:
                start = clock()
                tree.get(key)
                rows.append((op, key, len(key), clock() - start))
        else:
            for key in keys:
                start = clock()
                tree.delete(key)
                rows.append((op, key, len(key), clock() - start))
        logger.info("timed %d %s operations", len(keys), op)
    return pd.DataFrame(rows, columns=["operation", "key", "key_length", "ns"])


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Per-operation count, mean and percentile latencies in nanoseconds."""
    records = []
    for op, group in df.groupby("operation", sort=False):
        ns = group["ns"].to_numpy(dtype=np.int64)
        record = {"operation": op, "count": int(ns.size), "mean_ns": float(ns.mean())}
        for p, v in zip(PERCENTILES, np.percentile(ns, PERCENTILES)):
            record[f"p{p}_ns"] = float(v)
        records.append(record)
    return pd.DataFrame(records)


def tree_stats(tree: Tree) -> dict:
    """Shape statistics of a tree: node count, branching factor, stored keys."""
    return {
        "nodes": tree.count_nodes(),
        "avg_branch_factor": tree.count_nodes(get_avg_branch_factor=True),
        "keys": sum(1 for _ in tree.keys()),
    }
