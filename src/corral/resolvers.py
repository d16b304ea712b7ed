"""Identity and type resolution for arbitrary application values.

Both resolvers are total: every input produces a key, and a value that
cannot be resolved produces a default key that no registered rule uses.

Identity resolution order
-------------------------
1. ``None`` -> ``""``; a ``str`` or ``int`` is already a key.
2. ``subject_key`` key attribute or ``subject_key()`` accessor
   (:class:`~corral.capabilities.HasSubjectKey`).
3. ``get_id()`` accessor (:class:`~corral.capabilities.HasNumericID`).
4. Structural fallback, only when enabled: an identifier attribute or
   mapping key (``id`` by default) holding an integer; ``0`` when absent.
5. ``""``.

Type resolution order
---------------------
1. ``object_type`` string attribute or bound accessor.
2. Runtime type name. A class and its instances share a name, and a
   parametrized generic alias resolves to its origin.

Example
-------
>>> class Post:
...     object_type = "post"
>>> resolve_type(Post()) == resolve_type(Post) == "post"
True
>>> resolve_identity("admin")
'admin'
"""
from __future__ import annotations

import inspect
import typing
from collections.abc import Mapping, Sequence
from typing import Any

from corral.capabilities import DEFAULT_OBJECT_TYPE, DEFAULT_SUBJECT_KEY, SubjectKey

_DEFAULT_IDENTIFIER_FIELDS: tuple[str, ...] = ("id",)


def _is_key(value: object) -> bool:
    return isinstance(value, (str, int)) and not isinstance(value, bool)


def _call_accessor(value: object, name: str) -> tuple[bool, object]:
    """Call ``value.<name>()`` when it is a bound method.

    Returns ``(found, result)``. Plain functions reached through a class
    (unbound instance methods) are not called.
    """
    accessor = getattr(value, name, None)
    if accessor is None:
        return False, None
    if inspect.ismethod(accessor) or inspect.isbuiltin(accessor):
        return True, accessor()
    return False, None


def _coerce_key(result: object) -> SubjectKey:
    if result is None:
        return DEFAULT_SUBJECT_KEY
    if _is_key(result):
        return result  # type: ignore[return-value]
    return str(result)


class IdentityResolver:
    """Derives a stable identity key from a subject value.

    Parameters
    ----------
    structural_fallback:
        When ``True``, subjects without an accessor are inspected for an
        identifier field. Default ``False``.
    identifier_fields:
        Field names tried, in order, by the structural fallback.
    """

    def __init__(
        self,
        structural_fallback: bool = False,
        identifier_fields: Sequence[str] = _DEFAULT_IDENTIFIER_FIELDS,
    ) -> None:
        self._structural_fallback = structural_fallback
        self._identifier_fields: tuple[str, ...] = tuple(identifier_fields)

    def resolve(self, subject: object) -> SubjectKey:
        """Return the identity key for ``subject``."""
        if subject is None:
            return DEFAULT_SUBJECT_KEY
        if _is_key(subject):
            return subject  # type: ignore[return-value]

        declared = getattr(subject, "subject_key", None)
        if _is_key(declared):
            return declared  # type: ignore[return-value]
        found, result = _call_accessor(subject, "subject_key")
        if found:
            return _coerce_key(result)

        found, result = _call_accessor(subject, "get_id")
        if found:
            return _coerce_key(result)

        if self._structural_fallback:
            return self._identifier_field(subject)
        return DEFAULT_SUBJECT_KEY

    def _identifier_field(self, subject: object) -> int:
        for name in self._identifier_fields:
            if isinstance(subject, Mapping):
                raw = subject.get(name)
            else:
                raw = getattr(subject, name, None)
            if isinstance(raw, int) and not isinstance(raw, bool):
                return raw
        return 0

    @property
    def structural_fallback(self) -> bool:
        """Whether the identifier-field fallback is enabled."""
        return self._structural_fallback

    @property
    def identifier_fields(self) -> tuple[str, ...]:
        return self._identifier_fields

    def __repr__(self) -> str:
        return (
            f"IdentityResolver(structural_fallback={self._structural_fallback}, "
            f"identifier_fields={list(self._identifier_fields)})"
        )


class TypeResolver:
    """Derives a stable type name from an object value.

    Parameters
    ----------
    qualified_names:
        When ``True``, runtime type names include the defining module
        (``"app.models.Post"``) instead of the bare class name.
    """

    def __init__(self, qualified_names: bool = False) -> None:
        self._qualified_names = qualified_names

    def resolve(self, obj: object) -> str:
        """Return the type name for ``obj``."""
        if obj is None:
            return DEFAULT_OBJECT_TYPE

        origin = typing.get_origin(obj)
        if origin is not None and inspect.isclass(origin):
            obj = origin

        declared = getattr(obj, "object_type", None)
        if isinstance(declared, str):
            return declared
        found, result = _call_accessor(obj, "object_type")
        if found and result is not None:
            return str(result)

        return self._runtime_name(obj if inspect.isclass(obj) else type(obj))

    def _runtime_name(self, cls: type[Any]) -> str:
        if self._qualified_names:
            return f"{cls.__module__}.{cls.__qualname__}"
        return cls.__name__

    @property
    def qualified_names(self) -> bool:
        return self._qualified_names

    def __repr__(self) -> str:
        return f"TypeResolver(qualified_names={self._qualified_names})"


_default_identity_resolver = IdentityResolver()
_default_type_resolver = TypeResolver()


def resolve_identity(subject: object) -> SubjectKey:
    """Resolve ``subject`` with the default :class:`IdentityResolver`."""
    return _default_identity_resolver.resolve(subject)


def resolve_type(obj: object) -> str:
    """Resolve ``obj`` with the default :class:`TypeResolver`."""
    return _default_type_resolver.resolve(obj)
