"""corral: in-process declarative access control.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import corral
>>> rules = corral.Corral()
>>> _ = rules.authorize("admin", "post", corral.Action.MANAGE)
>>> rules.can("admin", "post", corral.Action.READ)
False
>>> class Post:
...     object_type = "post"
>>> rules.can("admin", Post(), corral.Action.READ)
True
"""
from __future__ import annotations

__version__: str = "0.1.0"

from corral.actions import Action
from corral.capabilities import (
    DEFAULT_OBJECT_TYPE,
    DEFAULT_SUBJECT_KEY,
    HasNumericID,
    HasObjectType,
    HasSubjectKey,
    SubjectKey,
)

# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------
from corral.resolvers import (
    IdentityResolver,
    TypeResolver,
    resolve_identity,
    resolve_type,
)

# ---------------------------------------------------------------------------
# Rules and evaluation
# ---------------------------------------------------------------------------
from corral.conditions import (
    Condition,
    all_of,
    always_allow,
    always_deny,
    any_of,
    fail_closed,
    negate,
)
from corral.registry import Permission, PermissionSet
from corral.evaluator import Decision, Evaluator

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from corral.errors import CorralConfigError
from corral.config import ConfigLoader, CorralConfig
from corral.loader import RuleLoader

# ---------------------------------------------------------------------------
# Convenience
# ---------------------------------------------------------------------------
from corral.convenience import (
    Corral,
    authorize,
    can,
    cannot,
    conditional_authorize,
    default_corral,
    explain,
    reset,
)

__all__ = [
    "__version__",
    # Actions and capabilities
    "Action",
    "DEFAULT_OBJECT_TYPE",
    "DEFAULT_SUBJECT_KEY",
    "HasNumericID",
    "HasObjectType",
    "HasSubjectKey",
    "SubjectKey",
    # Resolution
    "IdentityResolver",
    "TypeResolver",
    "resolve_identity",
    "resolve_type",
    # Conditions
    "Condition",
    "all_of",
    "always_allow",
    "always_deny",
    "any_of",
    "fail_closed",
    "negate",
    # Rules and evaluation
    "Decision",
    "Evaluator",
    "Permission",
    "PermissionSet",
    # Configuration
    "ConfigLoader",
    "CorralConfig",
    "CorralConfigError",
    "RuleLoader",
    # Convenience
    "Corral",
    "authorize",
    "can",
    "cannot",
    "conditional_authorize",
    "default_corral",
    "explain",
    "reset",
]
