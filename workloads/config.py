"""Workload configuration for the benchmark."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

KINDS = ("words", "urls", "ips")


@dataclass
class WorkLoadConfig:
    """
    Configuration for WorkLoad
        kind: str, one of "words", "urls", "ips"
        num_keys: int, number of keys to generate
        seed: int, seed for random number generators
        prefix_freq: float, 0..1, how strongly words cluster on shared prefixes
        unique: bool, sample words without replacement
        ip_packed: bool, emit IPv4 keys as 4 raw bytes instead of dotted text
    """
    kind: str = "words"
    num_keys: int = 1000
    seed: Optional[int] = None
    prefix_freq: float = 0.0
    unique: bool = False
    ip_packed: bool = False

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"kind must be one of {KINDS}, got {self.kind!r}")
        if self.num_keys <= 0:
            raise ValueError("num_keys must be positive")
        if self.prefix_freq < 0 or self.prefix_freq > 1:
            raise ValueError("prefix_freq must be between 0 and 1")
