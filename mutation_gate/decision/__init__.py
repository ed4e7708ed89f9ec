"""
Decision Engine for Mutation Gate.

Combines the global switch and registered rules into a mutate/pass verdict.
"""

from .engine import DecisionEngine

__all__ = ["DecisionEngine"]
