"""Optional capability interfaces for application types.

Subjects and objects are plain application values (roles, profiles,
posts). They can opt in to explicit identity and type reporting by
implementing one of these protocols; values that implement none fall
back to the resolvers' default behaviour.

Example
-------
::

    class Role:
        def __init__(self, name: str) -> None:
            self.name = name

        def subject_key(self) -> str:
            return self.name

    class Post:
        object_type = "post"
"""
from __future__ import annotations

from typing import Protocol, Union, runtime_checkable

SubjectKey = Union[str, int]

DEFAULT_SUBJECT_KEY: SubjectKey = ""
DEFAULT_OBJECT_TYPE: str = ""


@runtime_checkable
class HasSubjectKey(Protocol):
    """A subject that reports its own identity key.

    ``subject_key`` may be a method or a plain ``str``/``int`` attribute
    (including a dataclass field or property).
    """

    def subject_key(self) -> SubjectKey: ...


@runtime_checkable
class HasNumericID(Protocol):
    """A subject that reports a generic numeric identifier."""

    def get_id(self) -> int: ...


@runtime_checkable
class HasObjectType(Protocol):
    """An object that reports its own logical type name.

    ``object_type`` may be a plain class attribute, a classmethod, an
    instance method or a property. The last two only resolve on
    instances, so register such types with a sample instance or a
    type-name string rather than the class.
    """

    def object_type(self) -> str: ...
