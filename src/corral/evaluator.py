"""Authorization evaluator.

Answers "can this subject perform this action on this object?" against a
:class:`~corral.registry.PermissionSet`.

Algorithm
---------
1. An empty rule set denies everything, before any resolution.
2. The subject and object are resolved to a subject key and a type name
   with the rule set's own resolvers.
3. Rules are scanned in insertion order. For a rule whose subject key and
   object type both match:

   - ``MANAGE`` allows immediately; no condition is evaluated.
   - the requested action returns the rule's condition, called with the
     raw subject and object.
   - any other action is skipped.

4. No match denies.

Condition exceptions propagate to the caller. Wrap a condition with
:func:`~corral.conditions.fail_closed` to turn them into denials.

Example
-------
>>> class Post:
...     object_type = "post"
>>> post = Post()
>>> rules = PermissionSet()
>>> _ = rules.authorize("admin", "post", Action.MANAGE)
>>> evaluator = Evaluator(rules)
>>> evaluator.can("admin", post, Action.DELETE)
True
>>> evaluator.explain("user", post, Action.READ).reason
"No rule grants 'read' on 'post' to 'user'."
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from corral.actions import Action
from corral.capabilities import DEFAULT_OBJECT_TYPE, DEFAULT_SUBJECT_KEY, SubjectKey
from corral.registry import Permission, PermissionSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """Immutable outcome of an authorization check.

    Attributes
    ----------
    allowed:
        Whether the action is permitted.
    reason:
        Human-readable explanation of the outcome.
    action:
        The requested action.
    subject_key:
        The resolved subject key.
    object_type:
        The resolved object type name.
    matched_rule:
        The ``rule_id`` of the rule that decided the outcome, or ``None``
        when no rule matched.
    """

    allowed: bool
    reason: str
    action: Action
    subject_key: SubjectKey
    object_type: str
    matched_rule: str | None = None

    def __bool__(self) -> bool:
        """Return True if the action is allowed."""
        return self.allowed


class Evaluator:
    """Evaluates checks against a permission set.

    Parameters
    ----------
    permissions:
        The rule set to scan. Its resolvers are used for both subjects
        and objects so registration and checks agree.
    log_decisions:
        When ``False``, per-check DEBUG records are not emitted.
    """

    def __init__(self, permissions: PermissionSet, log_decisions: bool = True) -> None:
        self._permissions = permissions
        self._log_decisions = log_decisions

    def can(self, subject: object, obj: object, action: Action) -> bool:
        """Return True if ``subject`` may perform ``action`` on ``obj``."""
        return self.explain(subject, obj, action).allowed

    def cannot(self, subject: object, obj: object, action: Action) -> bool:
        """Inverse of :meth:`can`."""
        return not self.can(subject, obj, action)

    def explain(self, subject: object, obj: object, action: Action) -> Decision:
        """Evaluate a check and return the full :class:`Decision`."""
        rules = self._permissions.rules()
        if not rules:
            # Nothing is resolved: no subject or object accessor runs.
            return self._record(
                Decision(
                    allowed=False,
                    reason="No permissions are registered.",
                    action=action,
                    subject_key=DEFAULT_SUBJECT_KEY,
                    object_type=DEFAULT_OBJECT_TYPE,
                )
            )

        subject_key = self._permissions.identity_resolver.resolve(subject)
        object_type = self._permissions.type_resolver.resolve(obj)

        for rule in rules:
            if not rule.applies_to(subject_key, object_type):
                continue
            if rule.action == Action.MANAGE:
                return self._record(
                    self._matched(rule, True, "manage rule grants every action",
                                  action, subject_key, object_type)
                )
            if rule.action == action:
                allowed = bool(rule.condition(subject, obj))
                detail = "condition passed" if allowed else "condition failed"
                return self._record(
                    self._matched(rule, allowed, detail, action, subject_key, object_type)
                )

        return self._record(
            Decision(
                allowed=False,
                reason=(
                    f"No rule grants {_action_name(action)!r} on {object_type!r} "
                    f"to {subject_key!r}."
                ),
                action=action,
                subject_key=subject_key,
                object_type=object_type,
            )
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _matched(
        rule: Permission,
        allowed: bool,
        detail: str,
        action: Action,
        subject_key: SubjectKey,
        object_type: str,
    ) -> Decision:
        return Decision(
            allowed=allowed,
            reason=f"Rule {rule.rule_id!r}: {detail}.",
            action=action,
            subject_key=subject_key,
            object_type=object_type,
            matched_rule=rule.rule_id,
        )

    def _record(self, decision: Decision) -> Decision:
        if self._log_decisions:
            logger.debug(
                "Authorization %s: subject=%r object_type=%s action=%s rule=%s",
                "ALLOW" if decision.allowed else "DENY",
                decision.subject_key,
                decision.object_type,
                _action_name(decision.action),
                decision.matched_rule,
            )
        return decision

    @property
    def permissions(self) -> PermissionSet:
        return self._permissions


def _action_name(action: object) -> str:
    name = getattr(action, "name", None)
    return name.lower() if isinstance(name, str) else str(action)
