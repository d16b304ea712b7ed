"""Ordered, append-only permission registry.

A :class:`PermissionSet` holds :class:`Permission` rules in insertion
order. Rules are never removed individually and never deduplicated; the
evaluator scans them in order and the first match wins, so a rule added
later can be shadowed by an earlier one. Use :meth:`PermissionSet.rules_for`
to list every rule that applies to a (subject, object type) pair when
debugging an unexpected decision.

Thread-safety
-------------
The rule sequence is an immutable tuple. Writers build a new tuple and
swap it in under a ``threading.Lock``; readers take the current tuple
without locking and therefore always scan a consistent snapshot.

Example
-------
>>> rules = PermissionSet()
>>> rules.authorize("admin", "post", Action.MANAGE)
Permission(subject_key='admin', object_type='post', action=<Action.MANAGE: 4>, rule_id='rule-1')
>>> len(rules)
1
"""
from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Iterator

from corral.actions import Action
from corral.capabilities import SubjectKey
from corral.conditions import Condition, always_allow
from corral.resolvers import IdentityResolver, TypeResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Permission:
    """A single immutable permission rule.

    Attributes
    ----------
    subject_key:
        Normalized identity of the subject the rule applies to.
    object_type:
        Normalized type name of the objects the rule applies to.
    action:
        The granted action. ``Action.MANAGE`` grants every action.
    condition:
        Predicate called with the raw subject and object when the rule
        matches a non-MANAGE request.
    rule_id:
        Label used in decisions, logs and rule listings.
    """

    subject_key: SubjectKey
    object_type: str
    action: Action
    condition: Condition[object, object] = field(default=always_allow, repr=False)
    rule_id: str = "unnamed"

    def applies_to(self, subject_key: SubjectKey, object_type: str) -> bool:
        """Return True if this rule is for the given subject and object type."""
        return self.subject_key == subject_key and self.object_type == object_type

    @property
    def is_conditional(self) -> bool:
        return self.condition is not always_allow


class PermissionSet:
    """The registry of permission rules.

    Parameters
    ----------
    identity_resolver:
        Resolver used to normalize subjects at registration time. The
        evaluator must use the same resolver at check time.
    type_resolver:
        Resolver used to normalize object types at registration time.
    """

    def __init__(
        self,
        identity_resolver: IdentityResolver | None = None,
        type_resolver: TypeResolver | None = None,
    ) -> None:
        self._identity_resolver = identity_resolver or IdentityResolver()
        self._type_resolver = type_resolver or TypeResolver()
        self._rules: tuple[Permission, ...] = ()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Remove every rule."""
        with self._lock:
            dropped = len(self._rules)
            self._rules = ()
        logger.debug("Permission set reset (%d rules dropped)", dropped)

    def authorize(
        self,
        subject: object,
        object_type: object,
        action: Action,
        *,
        rule_id: str | None = None,
    ) -> Permission:
        """Allow ``subject`` to perform ``action`` on ``object_type`` unconditionally.

        Equivalent to :meth:`conditional_authorize` with
        :func:`~corral.conditions.always_allow`.
        """
        return self.conditional_authorize(
            subject, object_type, action, always_allow, rule_id=rule_id
        )

    def conditional_authorize(
        self,
        subject: object,
        object_type: object,
        action: Action,
        condition: Condition[object, object],
        *,
        rule_id: str | None = None,
    ) -> Permission:
        """Append a rule and return it.

        Parameters
        ----------
        subject:
            A subject key (``str``/``int``) or a subject value; values are
            resolved with the identity resolver.
        object_type:
            A type-name string, or a class or sample instance resolved
            with the type resolver. A class is accepted only when its
            ``object_type`` is absent, a string attribute or a classmethod.
        action:
            The action to grant. Not validated: an unknown value is stored
            and simply never matches a check.
        condition:
            Predicate ``(subject, obj) -> bool`` evaluated on match.
        rule_id:
            Optional label. Defaults to ``"rule-<n>"`` by position.

        Raises
        ------
        TypeError
            If ``object_type`` is a class with an instance-level
            ``object_type`` accessor (method or property).
        """
        subject_key = self._identity_resolver.resolve(subject)
        type_name = self._type_name(object_type)
        with self._lock:
            permission = Permission(
                subject_key=subject_key,
                object_type=type_name,
                action=action,
                condition=condition,
                rule_id=rule_id or f"rule-{len(self._rules) + 1}",
            )
            self._rules = self._rules + (permission,)
        logger.debug(
            "Registered %s: subject=%r object_type=%s action=%s conditional=%s",
            permission.rule_id,
            subject_key,
            type_name,
            getattr(action, "name", action),
            permission.is_conditional,
        )
        return permission

    def extend(self, permissions: list[Permission]) -> tuple[Permission, ...]:
        """Append already-built rules, preserving their order.

        Rules with an empty ``rule_id`` are given the positional default
        ``"rule-<n>"``, numbered under the same lock as the append.

        Returns
        -------
        tuple[Permission, ...]
            The rules as appended.
        """
        with self._lock:
            offset = len(self._rules)
            appended = tuple(
                p if p.rule_id else replace(p, rule_id=f"rule-{offset + index + 1}")
                for index, p in enumerate(permissions)
            )
            self._rules = self._rules + appended
        return appended

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def rules(self) -> tuple[Permission, ...]:
        """Return the current rules in scan order."""
        return self._rules

    def rules_for(self, subject: object, object_type: object) -> list[Permission]:
        """Return every rule for a (subject, object type) pair, in scan order."""
        subject_key = self._identity_resolver.resolve(subject)
        type_name = self._type_name(object_type)
        return [r for r in self._rules if r.applies_to(subject_key, type_name)]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _type_name(self, object_type: object) -> str:
        """Normalize a registration-side object type to a type name.

        Raises
        ------
        TypeError
            If ``object_type`` is a class whose ``object_type`` is an
            instance method or property. Such a class resolves to its
            runtime name while its instances report the accessor's value,
            so a rule keyed on the class would never match an instance.
        """
        if isinstance(object_type, str):
            return object_type
        if inspect.isclass(object_type):
            declared = inspect.getattr_static(object_type, "object_type", None)
            if inspect.isfunction(declared) or isinstance(declared, property):
                raise TypeError(
                    f"{object_type.__name__}.object_type is an instance accessor; "
                    "register with a sample instance or a type-name string instead."
                )
        return self._type_resolver.resolve(object_type)

    def summary(self) -> dict[str, object]:
        """Return a plain dict summarising the registered rules."""
        rules = self._rules
        per_action: dict[str, int] = {}
        for rule in rules:
            name = getattr(rule.action, "name", str(rule.action)).lower()
            per_action[name] = per_action.get(name, 0) + 1
        return {
            "rule_count": len(rules),
            "subjects": sorted({str(r.subject_key) for r in rules}),
            "object_types": sorted({r.object_type for r in rules}),
            "rules_per_action": per_action,
            "conditional_rules": sum(1 for r in rules if r.is_conditional),
        }

    @property
    def identity_resolver(self) -> IdentityResolver:
        return self._identity_resolver

    @property
    def type_resolver(self) -> TypeResolver:
        return self._type_resolver

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Permission]:
        return iter(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def __repr__(self) -> str:
        return f"PermissionSet(rules={len(self._rules)})"
