"""
Built-in predicate strategies and the default registry.

Usage::

    from wheremap.predicates import DEFAULT_PREDICATE_REGISTRY

    builder = DEFAULT_PREDICATE_REGISTRY.apply(
        WhereOperator.IN, builder, "id", (1, 2, 3), JoinMode.AND
    )
"""

from __future__ import annotations

from ..strategy import PredicateRegistry
from .comparison import ComparisonPredicate, comparison_predicates
from .null import NotNullPredicate, NullPredicate
from .set import BetweenPredicate, InPredicate, NotBetweenPredicate, NotInPredicate


def build_default_predicate_registry() -> PredicateRegistry:
    """Create a registry covering every ``WhereOperator``."""
    registry = PredicateRegistry()
    registry.register_all(
        *comparison_predicates(),
        InPredicate(),
        NotInPredicate(),
        BetweenPredicate(),
        NotBetweenPredicate(),
        NullPredicate(),
        NotNullPredicate(),
    )
    return registry


DEFAULT_PREDICATE_REGISTRY: PredicateRegistry = build_default_predicate_registry()

__all__ = [
    "DEFAULT_PREDICATE_REGISTRY",
    "BetweenPredicate",
    "ComparisonPredicate",
    "InPredicate",
    "NotBetweenPredicate",
    "NotInPredicate",
    "NotNullPredicate",
    "NullPredicate",
    "build_default_predicate_registry",
]
