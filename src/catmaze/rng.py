from __future__ import annotations

import hashlib
import logging
import random
import secrets
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, None]

# Random streams drawn for every game a session starts
STREAMS = ("maze", "placement", "monsters")


@dataclass(frozen=True)
class GameSeeds:
    """A session's master seed and the random streams derived from it.

    Each game gets one ``random.Random`` per stream, keyed by the game index,
    so the same master seed replays the same sequence of games and drawing
    from one stream never shifts another.
    """

    master: bytes

    @classmethod
    def from_seed(cls, seed: Seed = None) -> "GameSeeds":
        """Build from an int or string seed, or a fresh random one for None.

        Ints and their decimal strings name the same master seed.
        """
        if seed is None:
            master = secrets.token_bytes(16)
            logger.info("No seed given; using random master seed %s", master.hex())
            return cls(master)
        if isinstance(seed, bool) or not isinstance(seed, (int, str)):
            raise TypeError(f"Unsupported seed type: {type(seed).__name__}")
        return cls(str(seed).strip().encode("utf-8"))

    @property
    def hex(self) -> str:
        return self.master.hex()

    def stream(self, name: str, game: int) -> random.Random:
        if name not in STREAMS:
            raise ValueError(f"Unknown random stream {name!r} (expected one of {STREAMS})")
        h = hashlib.blake2b(digest_size=8, person=b"catmaze")
        h.update(len(self.master).to_bytes(4, "big"))
        h.update(self.master)
        h.update(f"{name}:{game}".encode("ascii"))
        value = int.from_bytes(h.digest(), "big")
        logger.debug("Stream %s for game %d seeded with %d", name, game, value)
        return random.Random(value)


def coerce_seed(value: Optional[str]) -> Seed:
    """Interpret a seed given on the command line or in the environment.

    Decimal strings become ints, anything else is kept as a string seed.
    """
    if value is None:
        return None
    v = value.strip()
    if not v:
        return None
    if v.isdigit():
        return int(v)
    return v
