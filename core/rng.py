"""
core.rng
Deterministic RNG helpers that do NOT rely on Python's built-in hash().

Used for cosmetic streams (scan log lines) so a rerun of the UI shows the
same feed for the same state and tick.
"""

from __future__ import annotations

import hashlib
import json
import random
from typing import Any, Sequence, TypeVar

T = TypeVar("T")


def stable_int_seed(*parts: Any, salt: str = "neuropath") -> int:
    """Stable 32-bit seed from arbitrary inputs (SHA-256 over canonical JSON).

    `default=str` lets enums and other non-JSON values participate.
    """
    payload = json.dumps(parts, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    h = hashlib.sha256((salt + "|" + payload).encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big", signed=False)


def rng_from(*parts: Any, base_seed: int) -> random.Random:
    return random.Random(stable_int_seed(base_seed, *parts))


def stable_choice(options: Sequence[T], *parts: Any, base_seed: int) -> T:
    if not options:
        raise ValueError("no options to choose from")
    return rng_from(*parts, base_seed=base_seed).choice(list(options))
