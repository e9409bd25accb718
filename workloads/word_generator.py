import logging
import math
import random
from collections import defaultdict

from faker.providers.lorem.en_US import Provider as LoremProvider

logger = logging.getLogger(__name__)

# Faker's English vocabulary (~1000 common words), deduplicated and sorted
WORDS = sorted({w.lower() for w in LoremProvider.word_list if w})


## Words bucketed by their first two letters, so that drawing repeatedly
## from one bucket yields keys with shared prefixes
prefix_bucket = defaultdict(list)
for word in WORDS:
  prefix_bucket[word[:2]].append(word)
prefixes = list(prefix_bucket.keys())
prefix_weights = [len(prefix_bucket[p]) for p in prefixes]


def generate_random_words(num_words, seed=None, unique=False):
  """
  Return n random words from WORDS.
  - unique=False: sample with replacement (fast, allows duplicates)
  - unique=True: sample without replacement (requires n <= len(WORDS))
  """
  if num_words < 1 or (unique is True and num_words > len(WORDS)):
    raise ValueError(f"num_words must be between 1 and {len(WORDS)}")
  rng = random.Random(seed)
  if unique:
    return rng.sample(WORDS, num_words)
  return rng.choices(WORDS, k=num_words)


def _p_eff_log(x, max_mean=100) -> float:
  # Logarithmic mapping of prefix frequency to effective prefix frequency
  if x < 0 or x > 1:
    raise ValueError("Prefix frequency must be between 0 and 1")
  x = max(0.0, min(0.999999, x))
  k = math.log(max_mean)
  p = 1.0 - math.exp(-k * x)
  return min(p, 0.999999)


def gen_words_with_prefix_freq(num_words, prefix_freq=0.0, seed=None, unique=False):
  """Generates a list of words with a given prefix frequency.
  A higher prefix_freq means runs of consecutive words share their first two
  letters more often. The frequency is mapped logarithmically onto the chance
  of staying in the same bucket: 0 -> 0.0, 1 -> ~0.99.
  """
  p = _p_eff_log(prefix_freq)
  if num_words < 1 or (unique is True and num_words > len(WORDS)):
    raise ValueError(f"num_words must be between 1 and {len(WORDS)}")
  rng = random.Random(seed)

  out = []
  seen = set()
  exhausted = set()
  while len(out) < num_words:
    prefix = rng.choices(prefixes, weights=prefix_weights)[0]
    if unique and prefix in exhausted:
      continue
    options = prefix_bucket[prefix]
    if unique:
      options = [w for w in options if w not in seen]
      if not options:
        exhausted.add(prefix)
        continue
    word = rng.choice(options)
    out.append(word)
    seen.add(word)

    # keep drawing from the same bucket while the trigger fires
    while len(out) < num_words and rng.random() < p:
      options = prefix_bucket[prefix]
      if unique:
        options = [w for w in options if w not in seen]
        if not options:
          exhausted.add(prefix)
          break
      word = rng.choice(options)
      out.append(word)
      seen.add(word)
  logger.info("generated %d words (prefix_freq=%.2f, unique=%s)", len(out), prefix_freq, unique)
  return out
