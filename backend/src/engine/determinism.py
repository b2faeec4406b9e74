"""Seeded determinism for stage reproducibility."""

import hashlib

import numpy as np


def derive_seed(run_seed: int, stage_id: str, frame_index: int) -> int:
    """Derive a deterministic stage seed. Same inputs = same output, always."""
    key = f"{run_seed}:{stage_id}:{frame_index}"
    return int(hashlib.sha256(key.encode()).hexdigest()[:16], 16)


def new_run_seed() -> int:
    """Draw a fresh run seed from OS entropy (free-running mode)."""
    return int(np.random.SeedSequence().entropy % (2**63))


def make_rng(seed: int) -> np.random.Generator:
    """Create a seeded RNG from a derived seed."""
    return np.random.default_rng(seed)
