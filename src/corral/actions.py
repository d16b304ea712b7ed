"""CRUD+Manage action enumeration.

Ordinals are stable and part of the public contract: callers may persist
or compare them as plain integers.

Example
-------
>>> Action.parse("read") is Action.READ
True
>>> int(Action.MANAGE)
4
"""
from __future__ import annotations

from enum import IntEnum


class Action(IntEnum):
    """An individual action a subject may perform on an object.

    ``MANAGE`` is a super-action: a rule granting it covers every other
    action on the same (subject, object type) pair.
    """

    CREATE = 0
    READ = 1
    UPDATE = 2
    DELETE = 3
    MANAGE = 4

    @classmethod
    def parse(cls, value: str | int | Action) -> Action:
        """Return the Action for a name (case-insensitive) or an ordinal.

        Raises
        ------
        ValueError
            If ``value`` names no known action.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        known = ", ".join(member.name.lower() for member in cls)
        raise ValueError(f"Unknown action {value!r}. Known actions: {known}.")
