# engine/rng.py
from zlib import crc32

import numpy as np

_MASK = 0xFFFFFFFF


def _word(part: object) -> int:
    """Fold one key part into a SeedSequence entropy word."""
    if isinstance(part, (int, np.integer)):
        return int(part) & _MASK
    return crc32(str(part).encode("utf-8")) & _MASK


class RNGRegistry:
    """
    Deterministic source of numpy.random.Generator streams.
    Entropy path: [seed, scenario, name, *parts]

    A substream depends only on its name and parts, never on draw order
    elsewhere, so a provider can ask for the same edge twice and see the same
    attributes.
    """

    def __init__(self, master_seed: int, *, scenario: str | int = 0):
        self.master_seed = master_seed & _MASK
        self.scenario_tag = _word(str(scenario))

    def entropy(self, name: str, *parts: object) -> list[int]:
        return [self.master_seed, self.scenario_tag, _word(name), *(_word(p) for p in parts)]

    def substream(self, name: str, *parts: object) -> np.random.Generator:
        ss = np.random.SeedSequence(entropy=self.entropy(name, *parts))
        return np.random.Generator(np.random.PCG64(ss))

    def stream(self, name: str) -> np.random.Generator:
        return self.substream(name)
