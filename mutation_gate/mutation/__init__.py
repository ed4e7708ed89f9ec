"""
Mutation engines for Mutation Gate.

Engines take str or bytes and return a mutated value of the same type.
"""

from .base import Mutator
from .radamsa import RadamsaMutator
from .random_mutator import RandomMutator
from .factory import create_mutator

__all__ = ["Mutator", "RadamsaMutator", "RandomMutator", "create_mutator"]
