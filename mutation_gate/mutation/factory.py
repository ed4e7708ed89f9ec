"""
Builds the mutation engine named in a GateConfig.
"""

from __future__ import annotations

from ..types import GateConfig, MutatorKind
from .base import Mutator
from .radamsa import RadamsaMutator
from .random_mutator import RandomMutator


def create_mutator(config: GateConfig) -> Mutator:
    """Create the configured mutator, seeded from config.seed if set."""
    if config.mutator is MutatorKind.RADAMSA:
        return RadamsaMutator(seed=config.seed, binary=config.radamsa_path)
    return RandomMutator(seed=config.seed)
