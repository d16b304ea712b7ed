"""Condition predicates and combinators.

A condition is a callable ``(subject, obj) -> bool`` attached to a rule.
It receives the raw, unresolved subject and object, so it can inspect any
field (ownership, visibility flags, ...).

Example
-------
::

    def not_hidden(profile: Profile, post: Post) -> bool:
        return not post.hidden

    def owned(profile: Profile, post: Post) -> bool:
        return post.profile_id == profile.id

    can_edit = all_of(not_hidden, owned)
"""
from __future__ import annotations

import functools
import logging
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")
O = TypeVar("O")

Condition = Callable[[S, O], bool]


def always_allow(subject: object, obj: object) -> bool:
    """Default condition for unconditional rules."""
    return True


def always_deny(subject: object, obj: object) -> bool:
    """Condition that never passes."""
    return False


def fail_closed(condition: Condition[S, O]) -> Condition[S, O]:
    """Wrap ``condition`` so that any exception it raises denies access.

    The exception is logged at WARNING level with its traceback rather
    than propagated to the caller of ``can``.
    """

    @functools.wraps(condition)
    def _guarded(subject: S, obj: O) -> bool:
        try:
            return bool(condition(subject, obj))
        except Exception:
            logger.warning(
                "Condition %s raised; denying access",
                getattr(condition, "__name__", repr(condition)),
                exc_info=True,
            )
            return False

    return _guarded


def all_of(*conditions: Condition[S, O]) -> Condition[S, O]:
    """Return a condition that passes only when every condition passes.

    Evaluation short-circuits on the first failure. With no conditions
    the result always passes.
    """

    def _all(subject: S, obj: O) -> bool:
        return all(c(subject, obj) for c in conditions)

    _all.__name__ = "all_of(" + ", ".join(_name(c) for c in conditions) + ")"
    return _all


def any_of(*conditions: Condition[S, O]) -> Condition[S, O]:
    """Return a condition that passes when at least one condition passes."""

    def _any(subject: S, obj: O) -> bool:
        return any(c(subject, obj) for c in conditions)

    _any.__name__ = "any_of(" + ", ".join(_name(c) for c in conditions) + ")"
    return _any


def negate(condition: Condition[S, O]) -> Condition[S, O]:
    """Return a condition that passes exactly when ``condition`` fails."""

    def _not(subject: S, obj: O) -> bool:
        return not condition(subject, obj)

    _not.__name__ = f"negate({_name(condition)})"
    return _not


def _name(condition: Callable[..., object]) -> str:
    return getattr(condition, "__name__", type(condition).__name__)
