"""Synthetic key workloads for benchmarking the radix tree."""

from .config import WorkLoadConfig
from .ip_generator import IPConfig, IPGenerator
from .url_generator import generate_urls
from .word_generator import gen_words_with_prefix_freq, generate_random_words


class WorkLoad:
    """Produce byte keys for a `WorkLoadConfig`."""

    def __init__(self, config=None):
        self.config = config or WorkLoadConfig()

    def words(self, num_words, p_freq=0, unique=False):
        seed = self.config.seed
        if p_freq > 0:
            return gen_words_with_prefix_freq(num_words, p_freq, seed, unique)
        return generate_random_words(num_words, seed, unique)

    def urls(self, num_urls):
        return generate_urls(num_urls, self.config.seed)

    def ips(self, num_ips):
        gen = IPGenerator(IPConfig(seed=self.config.seed, packed=self.config.ip_packed))
        return gen.batch(num_ips)

    def keys(self) -> list[bytes]:
        cfg = self.config
        if cfg.kind == "words":
            raw = self.words(cfg.num_keys, cfg.prefix_freq, cfg.unique)
        elif cfg.kind == "urls":
            raw = self.urls(cfg.num_keys)
        else:
            return self.ips(cfg.num_keys)
        return [k.encode("utf-8") for k in raw]


__all__ = [
    "WorkLoad",
    "WorkLoadConfig",
    "IPConfig",
    "IPGenerator",
    "generate_urls",
    "generate_random_words",
    "gen_words_with_prefix_freq",
]
