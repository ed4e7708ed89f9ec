"""
Rule registration for Mutation Gate.
"""

from .registry import RuleRegistry

__all__ = ["RuleRegistry"]
