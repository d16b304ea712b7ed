"""Corral configuration with Pydantic v2 validation.

Loads and validates resolver and logging settings from a dict or a YAML
string into a typed :class:`CorralConfig`. Unknown keys are allowed so
that application-level settings can live in the same document.

Example
-------
>>> config = ConfigLoader().load_string("structural_fallback: true")
>>> config.structural_fallback
True
>>> config.identifier_fields
['id']
"""
from __future__ import annotations

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from corral.errors import CorralConfigError
from corral.resolvers import IdentityResolver, TypeResolver


class CorralConfig(BaseModel):
    """Top-level corral configuration schema.

    All keys are optional and fall back to the defaults below.
    """

    model_config = {"extra": "allow"}

    structural_fallback: bool = Field(default=False)
    identifier_fields: list[str] = Field(default_factory=lambda: ["id"])
    qualified_type_names: bool = Field(default=False)
    log_decisions: bool = Field(default=True)

    @field_validator("identifier_fields")
    @classmethod
    def validate_identifier_fields(cls, values: list[str]) -> list[str]:
        if not values:
            raise ValueError("identifier_fields must name at least one field")
        for v in values:
            if not v.isidentifier():
                raise ValueError(f"identifier field {v!r} is not a valid attribute name")
        return values

    def identity_resolver(self) -> IdentityResolver:
        """Build the :class:`IdentityResolver` this config describes."""
        return IdentityResolver(
            structural_fallback=self.structural_fallback,
            identifier_fields=self.identifier_fields,
        )

    def type_resolver(self) -> TypeResolver:
        """Build the :class:`TypeResolver` this config describes."""
        return TypeResolver(qualified_names=self.qualified_type_names)


class ConfigLoader:
    """Loads and validates corral configuration.

    Example
    -------
    >>> loader = ConfigLoader()
    >>> config = loader.load_dict({"qualified_type_names": True})
    """

    def load_dict(self, raw: dict[str, object], source: str | None = None) -> CorralConfig:
        """Validate an already-parsed configuration mapping.

        Raises
        ------
        CorralConfigError
            When the mapping fails validation.
        """
        if not isinstance(raw, dict):
            raise CorralConfigError("Corral config must be a mapping.", source)
        try:
            return CorralConfig.model_validate(raw)
        except ValidationError as exc:
            raise CorralConfigError(f"Invalid corral config: {exc}", source) from exc

    def load_string(self, yaml_content: str, source: str | None = None) -> CorralConfig:
        """Parse and validate a YAML string.

        Raises
        ------
        CorralConfigError
            When the YAML cannot be parsed or fails validation.
        """
        try:
            raw = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as exc:
            raise CorralConfigError(f"Failed to parse YAML: {exc}", source) from exc
        return self.load_dict(raw, source)

    def defaults(self) -> CorralConfig:
        """Return a configuration with all defaults applied."""
        return CorralConfig()
