"""Convenience API for corral: a registry and evaluator in one handle.

Example
-------
::

    from corral import Action, Corral

    corral = Corral()
    corral.authorize("admin", "post", Action.MANAGE)
    corral.can("admin", post, Action.DELETE)  # True

The module-level functions (:func:`authorize`, :func:`can`, ...) operate
on a process-wide default :class:`Corral`. Prefer an explicit instance
wherever rules must not leak between callers, such as tests.
"""
from __future__ import annotations

from typing import TypeVar

from corral.actions import Action
from corral.conditions import Condition
from corral.config import CorralConfig
from corral.evaluator import Decision, Evaluator
from corral.registry import Permission, PermissionSet
from corral.resolvers import IdentityResolver, TypeResolver

S = TypeVar("S")
O = TypeVar("O")


class Corral:
    """A permission set plus the evaluator that checks against it.

    Parameters
    ----------
    identity_resolver:
        Resolver for subjects. Defaults to accessor-only resolution.
    type_resolver:
        Resolver for objects. Defaults to bare class names.
    log_decisions:
        Emit a DEBUG record per check.
    """

    def __init__(
        self,
        identity_resolver: IdentityResolver | None = None,
        type_resolver: TypeResolver | None = None,
        log_decisions: bool = True,
    ) -> None:
        self._permissions = PermissionSet(identity_resolver, type_resolver)
        self._evaluator = Evaluator(self._permissions, log_decisions=log_decisions)

    @classmethod
    def from_config(cls, config: CorralConfig) -> Corral:
        """Build a Corral whose resolvers follow ``config``."""
        return cls(
            identity_resolver=config.identity_resolver(),
            type_resolver=config.type_resolver(),
            log_decisions=config.log_decisions,
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Remove every registered rule."""
        self._permissions.reset()

    def authorize(
        self,
        subject: object,
        object_type: object,
        action: Action,
        *,
        rule_id: str | None = None,
    ) -> Permission:
        """Allow ``subject`` to perform ``action`` on ``object_type``."""
        return self._permissions.authorize(subject, object_type, action, rule_id=rule_id)

    def conditional_authorize(
        self,
        subject: S,
        object_type: type[O] | O | str,
        action: Action,
        condition: Condition[S, O],
        *,
        rule_id: str | None = None,
    ) -> Permission:
        """Allow ``action`` when ``condition(subject, obj)`` holds."""
        return self._permissions.conditional_authorize(
            subject, object_type, action, condition, rule_id=rule_id  # type: ignore[arg-type]
        )

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def can(self, subject: object, obj: object, action: Action) -> bool:
        """Return True if ``subject`` may perform ``action`` on ``obj``.

        Parameters
        ----------
        subject:
            The raw subject value; resolved to a subject key.
        obj:
            The raw object value; resolved to a type name.
        action:
            The requested action.

        Returns
        -------
        bool
            ``False`` when no rule grants the action.
        """
        return self._evaluator.can(subject, obj, action)

    def cannot(self, subject: object, obj: object, action: Action) -> bool:
        """Inverse of :meth:`can`."""
        return self._evaluator.cannot(subject, obj, action)

    def explain(self, subject: object, obj: object, action: Action) -> Decision:
        """Evaluate a check and return the full decision.

        Returns
        -------
        Decision
            The verdict with its reason and the deciding ``rule_id``.
        """
        return self._evaluator.explain(subject, obj, action)

    @property
    def permissions(self) -> PermissionSet:
        """The underlying PermissionSet."""
        return self._permissions

    @property
    def evaluator(self) -> Evaluator:
        return self._evaluator

    def __repr__(self) -> str:
        return f"Corral(rules={len(self._permissions)})"


_default = Corral()


def default_corral() -> Corral:
    """Return the process-wide Corral used by the module-level functions."""
    return _default


def reset() -> None:
    """Remove every rule from the default Corral."""
    _default.reset()


def authorize(
    subject: object,
    object_type: object,
    action: Action,
    *,
    rule_id: str | None = None,
) -> Permission:
    """Register an unconditional rule on the default Corral.

    See :meth:`corral.registry.PermissionSet.conditional_authorize` for
    the accepted ``subject`` and ``object_type`` forms.
    """
    return _default.authorize(subject, object_type, action, rule_id=rule_id)


def conditional_authorize(
    subject: S,
    object_type: type[O] | O | str,
    action: Action,
    condition: Condition[S, O],
    *,
    rule_id: str | None = None,
) -> Permission:
    """Register a conditional rule on the default Corral.

    Parameters
    ----------
    subject:
        A subject key or a subject value.
    object_type:
        A type-name string, or a class or sample instance.
    action:
        The action to grant.
    condition:
        Predicate ``(subject, obj) -> bool`` evaluated on match.
    rule_id:
        Optional label for decisions and listings.

    Returns
    -------
    Permission
        The appended rule.
    """
    return _default.conditional_authorize(
        subject, object_type, action, condition, rule_id=rule_id
    )


def can(subject: object, obj: object, action: Action) -> bool:
    """Check ``action`` against the default Corral."""
    return _default.can(subject, obj, action)


def cannot(subject: object, obj: object, action: Action) -> bool:
    """Inverse of :func:`can`."""
    return _default.cannot(subject, obj, action)


def explain(subject: object, obj: object, action: Action) -> Decision:
    """Return the full :class:`~corral.evaluator.Decision` from the default Corral."""
    return _default.explain(subject, obj, action)
