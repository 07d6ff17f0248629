"""
Seed derivation.

Every trial, and every mulligan attempt within a trial, gets its own seed
derived from the session's base seed. Nothing shares a random generator, so
results do not depend on execution order or on how many workers ran them.
"""

from hashlib import sha256


def derive_seed(base: int, *components: int | str) -> int:
    """
    Derive a 64-bit seed from a base seed and labelled components.

    Distinct component tuples give uncorrelated seeds; identical inputs
    always give the same seed.

    Example:
        trial_seed = derive_seed(42, "trial", 3)
        attempt_seed = derive_seed(trial_seed, "mulligan", 1)
    """
    key = ":".join(str(part) for part in (base, *components))
    digest = sha256(key.encode()).digest()
    return int.from_bytes(digest[:8], "big")
