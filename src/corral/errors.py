"""Exceptions raised at corral's configuration boundaries.

Authorization checks never raise; a denied or unresolvable check is a
``False`` result, not an error.
"""
from __future__ import annotations


class CorralConfigError(ValueError):
    """Raised when a configuration or rule document is malformed.

    Attributes
    ----------
    source:
        Label of the document that caused the error, if known.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        prefix = f"[{source}] " if source else ""
        super().__init__(f"{prefix}{message}")
