"""wheremap: condition maps compiled onto query builders.

The core (parsing, compilation, notifications) has no database
dependency; the SQLAlchemy builder and CRUD repository live in
``wheremap.sqlalchemy``.
"""

from __future__ import annotations

# ── Adapters ────────────────────────────────────────────────────
from .adapters import (
    InMemoryNotificationSink,
    LoggingNotificationSink,
    Predicate,
    RecordingBuilder,
)

# ── Compiler ─────────────────────────────────────────────────────
from .compiler import (
    ConditionCompiler,
    ConditionsLike,
    compile_where_map,
    require_conditions,
)
from .conditions import LOGIC_KEY, Condition, WhereMap

# ── Exceptions ───────────────────────────────────────────────────
from .exceptions import (
    EmptyConditionError,
    EmptyPayloadError,
    FieldNotFoundError,
    OperandShapeError,
    OperatorNotFoundError,
    PersistenceError,
    RepositoryError,
    SessionManagementError,
    SoftDeleteNotSupportedError,
    UnitOfWorkError,
    ValidationError,
    WhereMapError,
)

# ── Notifications ────────────────────────────────────────────────
from .notifications import (
    MessageCatalog,
    Notification,
    NotificationLevel,
    Notifier,
    default_catalog,
)
from .operators import JoinMode, OperandShape, WhereOperator

# ── Ports ────────────────────────────────────────────────────────
from .ports import INotificationSink, IQueryBuilder
from .predicates import DEFAULT_PREDICATE_REGISTRY, build_default_predicate_registry
from .settings import CrudSettings
from .strategy import PredicateRegistry, PredicateStrategy

__all__ = [
    # Adapters
    "InMemoryNotificationSink",
    "LoggingNotificationSink",
    "Predicate",
    "RecordingBuilder",
    # Compiler
    "DEFAULT_PREDICATE_REGISTRY",
    "LOGIC_KEY",
    "Condition",
    "ConditionCompiler",
    "ConditionsLike",
    "JoinMode",
    "OperandShape",
    "PredicateRegistry",
    "PredicateStrategy",
    "WhereMap",
    "WhereOperator",
    "build_default_predicate_registry",
    "compile_where_map",
    "require_conditions",
    # Exceptions
    "EmptyConditionError",
    "EmptyPayloadError",
    "FieldNotFoundError",
    "OperandShapeError",
    "OperatorNotFoundError",
    "PersistenceError",
    "RepositoryError",
    "SessionManagementError",
    "SoftDeleteNotSupportedError",
    "UnitOfWorkError",
    "ValidationError",
    "WhereMapError",
    # Notifications
    "MessageCatalog",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "default_catalog",
    # Ports
    "INotificationSink",
    "IQueryBuilder",
    # Settings
    "CrudSettings",
]
