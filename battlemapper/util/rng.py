"""Deterministic random number generation with isolated streams.

Every generation session owns one ``RNGProvider``. The provider derives an
independent ``random.Random`` per named domain from the session's master
seed, so that:

1. Generation is fully deterministic from the same master seed.
2. Changing how much randomness one phase consumes does not shift the
   sequences seen by the other phases.
3. Concurrent sessions never share generator state.

Usage:
    provider = RNGProvider(request.seed)
    building_rng = provider.get("placement.buildings")
    width = building_rng.randint(4, 12)

Domain naming convention (hierarchical):
    - "placement.buildings", "placement.roads", "placement.furnishing"
"""

from __future__ import annotations

import random
import zlib

from battlemapper.types import RandomSeed

# Upper bound for seeds drawn from system entropy.
_ENTROPY_SEED_BITS = 63


class RNGProvider:
    """Provides isolated RNG streams for the phases of one session.

    Each domain gets its own Random instance derived deterministically
    from the master seed. Domains are identified by string names.
    """

    def __init__(self, master_seed: RandomSeed) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, random.Random] = {}

    @classmethod
    def from_entropy(cls) -> RNGProvider:
        """Create a provider seeded from the operating system's entropy pool.

        The drawn seed is kept so a surprising map can still be reproduced
        by feeding ``master_seed`` back in as an explicit seed.
        """
        seed = random.SystemRandom().getrandbits(_ENTROPY_SEED_BITS)
        return cls(seed)

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> random.Random:
        """Get the RNG stream for the named domain.

        Args:
            domain: Hierarchical name like "placement.roads".

        Returns:
            The Random instance owned by this provider for ``domain``.
        """
        if domain not in self._streams:
            # crc32 instead of hash(): hash() of str is randomized per process
            # via PYTHONHASHSEED, which would break cross-process determinism.
            derived_seed = zlib.crc32(f"{self._master_seed}:{domain}".encode())
            self._streams[domain] = random.Random(derived_seed)
        return self._streams[domain]

