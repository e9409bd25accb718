import logging
import random
import string
from urllib.parse import quote

from faker import Faker

from .word_generator import WORDS

logger = logging.getLogger(__name__)


### ================= URL Generation Probability Config ================= ###

# --- File extensions and their weights for path generation --- #
file_paths = [
  "js", "css", "html",
  "jpg", "png", "gif", "webp", "svg",
  "woff2", "pdf", "json", "xml", "txt",
  "mp4", "mp3",
]

file_path_weights = [
  0.28, 0.10, 0.03,
  0.10, 0.09, 0.05, 0.03, 0.02,
  0.08, 0.03, 0.03, 0.01, 0.01,
  0.03, 0.01,
]

# --- Path segment probability config --- #
slug_separators = ["-", "_", " "]
slug_separator_weights = [0.82, 0.12, 0.06]

sub_segments = [1, 2, 3, 4, 5]
sub_segment_weights = [0.40, 0.28, 0.17, 0.10, 0.05]

param_keys = ["q", "id", "page", "ref", "utm_source", "lang", "session", "token"]
param_weights = [0.20, 0.16, 0.14, 0.12, 0.10, 0.08, 0.12, 0.08]


### ================= URL Generation Functions ================= ###

def load_domains(n=1_000, seed=None, s=1.1):
  """Build a pool of n Faker domain names with Zipf weights (rank r -> 1/r^s)."""
  if n <= 0 or n > 1_000_000:
    raise ValueError("n must be between 1 and 1,000,000")
  fake = Faker()
  if seed is not None:
    fake.seed_instance(seed)
  rng = random.Random(seed)
  # subdomains on roughly a third of the hosts
  domains = list(dict.fromkeys(fake.domain_name(levels=rng.choice([1, 1, 2])) for _ in range(n)))
  weights_zipf = [1 / ((r + 1) ** s) for r in range(len(domains))]
  return domains, weights_zipf


def sample_host(domains, weights, rng):
  """Choose a host domain from a list of domains with given weights."""
  if not domains:
    raise ValueError("domains must not be empty")
  return rng.choices(domains, weights=weights, k=1)[0]


def pick_scheme(rng):
  """Pick a scheme (http or https) with a realistic probability."""
  return rng.choices(["http", "https"], weights=[0.12, 0.88], k=1)[0]


def slug(rng, min_len=2, max_len=12, digit_p=0.15, sep_p=0.15):
  pool = string.ascii_lowercase + (string.digits if rng.random() < digit_p else "")
  s = "".join(rng.choices(pool, k=rng.randint(min_len, max_len)))
  if rng.random() < sep_p and len(s) > 3:
    indx = rng.randint(2, len(s) - 2)
    separator = rng.choices(slug_separators, slug_separator_weights, k=1)[0]
    s = s[:indx] + separator + s[indx:]
  return quote(s, safe='-_.~')


def segment(rng, slug_p):
  """Generate a single path segment from words and slugs."""
  num_segs = rng.choices(sub_segments, weights=sub_segment_weights, k=1)[0]
  parts = []
  for i in range(num_segs):
    if rng.random() < slug_p:
      parts.append(slug(rng))
    else:
      parts.append(quote(rng.choice(WORDS), safe='-_.~'))
    if i < num_segs - 1:
      parts.append(rng.choices(slug_separators[:2], weights=slug_separator_weights[:2], k=1)[0])
  return "".join(parts)


def gen_paths(rng, slug_p=0.3):
  """Generate a random path with a depth up to 5.
    slug_p: probability of a segment being a slug (vs. a common word)."""
  if slug_p < 0 or slug_p > 1:
    raise ValueError("slug_p must be between 0 and 1")

  depths, depth_weights = zip(*[
    (0, 0.20), (1, 0.30), (2, 0.25), (3, 0.13), (4, 0.10), (5, 0.02)
  ])
  depth = rng.choices(depths, weights=depth_weights, k=1)[0]
  if depth == 0:
    return "/"

  segs = []
  for _ in range(depth):
    segs.append(segment(rng, slug_p))
    slug_p += ((1 - slug_p) * 0.15)

  path = "/" + "/".join(segs)
  if rng.random() < 0.3:
    path += '.' + rng.choices(file_paths, weights=file_path_weights, k=1)[0]
  else:
    path += '/'
  return path


def param_pair(rng, seen):
  """Generate a single key=value pair for a query string."""
  new_keys, new_weights = zip(*[kw for kw in zip(param_keys, param_weights) if kw[0] not in seen])
  key = rng.choices(new_keys, weights=new_weights, k=1)[0]
  seen.add(key)

  if key == 'q':
    val = rng.choice(['+', '%20']).join(rng.choices(WORDS, k=rng.randint(1, 4)))
  elif key == 'id':
    val = str(rng.randint(1, 10**7))
  elif key in ('ref', 'token', 'session'):
    val = rng.randbytes(rng.choice([8, 12, 16])).hex()
  elif key == 'page':
    val = str(rng.randint(1, 50))
  elif key == 'lang':
    val = rng.choice(["en", "en-us", "es", "fr", "de", "pt-br", "ja"])
  else:
    val = rng.choice(WORDS)
  return key + '=' + val


def query_string(rng):
  """Generate a random query string (or none) with a random number of parameters."""
  num_params = rng.choices([0, 1, 2, 3, 4], weights=[0.45, 0.35, 0.11, 0.06, 0.03], k=1)[0]
  if num_params == 0:
    return ''
  seen = set()
  pairs = sorted(param_pair(rng, seen) for _ in range(num_params))
  return '?' + '&'.join(pairs)


### ================= Final URL Generation Logic ================= ###

def generate_urls(num_urls, seed=None, domains=None, weights=None):
  """Generate a list of random URLs.

  `domains` / `weights` default to a Faker-built Zipf pool from `load_domains`.
  """
  if num_urls <= 0:
    raise ValueError("num_urls must be positive")
  rng = random.Random(seed)
  if domains is None:
    domains, weights = load_domains(seed=seed)
  urls = []
  for _ in range(num_urls):
    scheme = pick_scheme(rng)
    host = sample_host(domains, weights, rng)
    urls.append(f"{scheme}://{host}{gen_paths(rng)}{query_string(rng)}")
  logger.info("generated %d urls over %d hosts", len(urls), len(domains))
  return urls
