"""Minimal quickstart script for Lexicon Oracle.

Builds a dictionary from the bundled Iliad passage, then answers a few seed
phrases with the ranked and sampled strategies. Delegated mode is skipped
because it needs a running Ollama server.
"""

import numpy as np

from lexicon_oracle import GenerationMode, PredictOptions
from lexicon_oracle.data import load_sample_corpus
from lexicon_oracle.logging import configure_logging
from lexicon_oracle.pipelines import oracle_from_text

SEEDS = ["sing goddess", "wrath of achilles", "what does fate hold"]


def main() -> None:
    configure_logging()
    oracle, dictionary = oracle_from_text(load_sample_corpus(), min_count=3)
    oracle.rng = np.random.default_rng(7)
    print(f"Dictionary holds {len(dictionary)} words")
    for seed in SEEDS:
        for mode in (GenerationMode.RANKED, GenerationMode.SAMPLED):
            result = oracle.predict(seed, PredictOptions(mode=mode, length=8))
            print(f"[{mode.value:>7}] {seed!r}: {result.text}")


if __name__ == "__main__":
    main()
