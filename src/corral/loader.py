"""Declarative rule documents for a PermissionSet.

RuleLoader validates a rule document (an in-memory mapping or a YAML
string) and appends its rules to a :class:`~corral.registry.PermissionSet`
in document order. A document is applied entirely or not at all.

Schema
------
::

    version: "1"
    rules:
      - id: "admin-manage-posts"
        subject: "admin"
        object_type: "post"
        action: "manage"
      - subject: "user"
        object_type: "post"
        action: "read"
        condition: "not_hidden"

``subject`` is a string or integer subject key. ``condition`` names an
entry in the ``conditions`` mapping given to the loader; rules without a
condition are unconditional.

Example
-------
::

    loader = RuleLoader(conditions={"not_hidden": not_hidden})
    loader.load_from_yaml_string(document, into=permissions)
    evaluator.can("user", visible_post, Action.READ)
"""
from __future__ import annotations

import logging
from typing import Callable, Mapping

import yaml

from corral.actions import Action
from corral.conditions import Condition, always_allow
from corral.errors import CorralConfigError
from corral.registry import Permission, PermissionSet

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1", "1.0"])
_REQUIRED_RULE_KEYS: tuple[str, ...] = ("subject", "object_type", "action")


class RuleLoader:
    """Builds permission rules from rule documents.

    Parameters
    ----------
    conditions:
        Named conditions that rules may reference by ``condition:`` key.
    strict:
        When ``True``, unknown top-level or per-rule keys are an error.
        Default ``False`` (unknown keys are ignored).
    """

    _KNOWN_TOP_KEYS: frozenset[str] = frozenset(["version", "rules", "metadata", "description"])
    _KNOWN_RULE_KEYS: frozenset[str] = frozenset(
        ["id", "subject", "object_type", "action", "condition", "description"]
    )

    def __init__(
        self,
        conditions: Mapping[str, Condition[object, object]] | None = None,
        strict: bool = False,
    ) -> None:
        self._conditions: dict[str, Callable[[object, object], bool]] = dict(conditions or {})
        self._strict = strict

    def load_from_dict(
        self,
        document: dict[str, object],
        into: PermissionSet,
        source: str | None = None,
    ) -> list[Permission]:
        """Validate ``document`` and append its rules to ``into``.

        Returns
        -------
        list[Permission]
            The rules appended, in document order.

        Raises
        ------
        CorralConfigError
            If the document is structurally invalid. Nothing is appended.
        """
        self._validate_structure(document, source)

        version = str(document.get("version", "1"))
        if version not in _SUPPORTED_VERSIONS:
            raise CorralConfigError(
                f"Unsupported rule document version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                source,
            )

        # Every rule is built before any is appended, so a bad rule leaves
        # the target untouched. Subjects and object types in a document are
        # already keys and type names.
        built: list[Permission] = []
        raw_rules: list[object] = list(document["rules"])  # type: ignore[call-overload]
        for index, raw_rule in enumerate(raw_rules):
            try:
                built.append(self._build_rule(raw_rule))
            except (ValueError, KeyError, TypeError) as exc:
                raise CorralConfigError(f"Error in rule at index {index}: {exc}", source) from exc

        loaded = list(into.extend(built))
        logger.info("Loaded %d permission rules from %s", len(loaded), source or "<dict>")
        return loaded

    def load_from_yaml_string(
        self,
        yaml_string: str,
        into: PermissionSet,
        source: str | None = None,
    ) -> list[Permission]:
        """Parse a YAML rule document and append its rules to ``into``.

        Raises
        ------
        CorralConfigError
            If parsing fails or the document is invalid.
        """
        try:
            raw = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise CorralConfigError(f"Failed to parse YAML string: {exc}", source) from exc
        return self.load_from_dict(raw, into, source)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_rule(self, raw_rule: object) -> Permission:
        if not isinstance(raw_rule, dict):
            raise TypeError(f"rule must be a mapping; got {type(raw_rule).__name__}")

        missing = [key for key in _REQUIRED_RULE_KEYS if key not in raw_rule]
        if missing:
            raise KeyError(f"missing required keys {missing}")

        if self._strict:
            unknown = set(raw_rule) - self._KNOWN_RULE_KEYS
            if unknown:
                raise ValueError(f"unknown rule keys {sorted(unknown)}")

        subject = raw_rule["subject"]
        if isinstance(subject, bool) or not isinstance(subject, (str, int)):
            raise TypeError(f"subject must be a string or integer key; got {subject!r}")

        object_type = raw_rule["object_type"]
        if not isinstance(object_type, str) or not object_type:
            raise ValueError(f"object_type must be a non-empty string; got {object_type!r}")

        action = Action.parse(raw_rule["action"])  # type: ignore[arg-type]

        condition: Callable[[object, object], bool] = always_allow
        condition_name = raw_rule.get("condition")
        if condition_name is not None:
            if condition_name not in self._conditions:
                raise ValueError(
                    f"unknown condition {condition_name!r}. "
                    f"Known conditions: {sorted(self._conditions)}"
                )
            condition = self._conditions[condition_name]

        # An empty rule_id is numbered by PermissionSet.extend.
        return Permission(
            subject_key=subject,
            object_type=object_type,
            action=action,
            condition=condition,
            rule_id=str(raw_rule.get("id") or ""),
        )

    def _validate_structure(self, document: object, source: str | None) -> None:
        if not isinstance(document, dict):
            raise CorralConfigError("Rule document must be a mapping.", source)

        if "rules" not in document:
            raise CorralConfigError("Rule document must contain a 'rules' list.", source)

        if not isinstance(document["rules"], list):
            raise CorralConfigError("Rule document 'rules' must be a list.", source)

        if self._strict:
            unknown_keys = set(document.keys()) - self._KNOWN_TOP_KEYS
            if unknown_keys:
                raise CorralConfigError(
                    f"Unknown top-level keys: {sorted(unknown_keys)}. "
                    f"Known keys: {sorted(self._KNOWN_TOP_KEYS)}.",
                    source,
                )

    @property
    def conditions(self) -> dict[str, Callable[[object, object], bool]]:
        """Named conditions available to rule documents."""
        return dict(self._conditions)
