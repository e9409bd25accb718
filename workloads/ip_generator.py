import ipaddress
import logging
import random
from typing import Dict, Optional
from dataclasses import dataclass
from faker import Faker

logger = logging.getLogger(__name__)

## === Config Class === ##

@dataclass
class IPConfig:
    """
    Configuration for IPGenerator
        public_share: float, proportion of public IPs
        private_weights: dict, weights for private IPs {a: x, b: x, c: x}
        seed: int, seed for random number generator
        packed: bool, return keys as 4 raw bytes rather than dotted ASCII
    """
    public_share: float = 0.9
    private_weights: Optional[Dict[str, float]] = None
    seed: Optional[int] = None
    packed: bool = False

    def __post_init__(self):
        if self.public_share < 0 or self.public_share > 1:
            raise ValueError("public_share must be between 0 and 1")
        if self.private_weights is None:
            self.private_weights = {'a': 0.35, 'b': 0.10, 'c': 0.55}
        else:
            missing = [k for k in ('a', 'b', 'c') if k not in self.private_weights]
            if missing:
                raise ValueError(f"private_weights missing keys: {missing}")
            if any(self.private_weights[k] < 0 for k in ('a', 'b', 'c')):
                raise ValueError("private_weights must be non-negative")
            if sum(self.private_weights[k] for k in ('a', 'b', 'c')) == 0:
                raise ValueError("Sum of private_weights must be > 0")
            self.private_weights = {cls: self.private_weights[cls] for cls in sorted(self.private_weights)}


class IPGenerator:
    """IPv4 address keys. Dotted text shares prefixes per octet string,
    packed keys share prefixes per network byte."""

    def __init__(self, config: IPConfig):
        self.config = config
        self.rng = random.Random(self.config.seed)

        self.fake = Faker()
        if self.config.seed is not None:
            self.fake.seed_instance(self.config.seed)
        self.priv_classes, self.weights = zip(*self.config.private_weights.items())

    def _priv_class(self):
        return self.rng.choices(self.priv_classes, weights=self.weights, k=1)[0]

    def address(self) -> str:
        if self.rng.random() > self.config.public_share:
            return self.fake.ipv4_private(address_class=self._priv_class())
        return self.fake.ipv4_public()

    def single(self) -> bytes:
        addr = self.address()
        if self.config.packed:
            return ipaddress.IPv4Address(addr).packed
        return addr.encode("ascii")

    def batch(self, n):
        if n <= 0:
            raise ValueError("n must be positive")
        keys = [self.single() for _ in range(n)]
        logger.info("generated %d ips (public_share=%.2f, packed=%s)", n, self.config.public_share, self.config.packed)
        return keys
