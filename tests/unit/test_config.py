"""Tests for CorralConfig and ConfigLoader."""
from __future__ import annotations

import pytest

from corral.config import ConfigLoader, CorralConfig
from corral.convenience import Corral
from corral.errors import CorralConfigError
from corral.actions import Action


@pytest.fixture()
def loader() -> ConfigLoader:
    return ConfigLoader()


class TestDefaults:
    def test_defaults(self, loader: ConfigLoader) -> None:
        config = loader.defaults()
        assert config.structural_fallback is False
        assert config.identifier_fields == ["id"]
        assert config.qualified_type_names is False
        assert config.log_decisions is True

    def test_empty_yaml_gives_defaults(self, loader: ConfigLoader) -> None:
        assert loader.load_string("") == CorralConfig()


class TestLoading:
    def test_load_dict(self, loader: ConfigLoader) -> None:
        config = loader.load_dict({"structural_fallback": True, "identifier_fields": ["pk"]})
        assert config.structural_fallback is True
        assert config.identifier_fields == ["pk"]

    def test_load_string(self, loader: ConfigLoader) -> None:
        config = loader.load_string(
            "structural_fallback: true\nqualified_type_names: true\nlog_decisions: false\n"
        )
        assert config.structural_fallback is True
        assert config.qualified_type_names is True
        assert config.log_decisions is False

    def test_unknown_keys_allowed(self, loader: ConfigLoader) -> None:
        config = loader.load_dict({"app_name": "blog"})
        assert config.model_extra == {"app_name": "blog"}


class TestValidation:
    def test_empty_identifier_fields_rejected(self, loader: ConfigLoader) -> None:
        with pytest.raises(CorralConfigError, match="identifier_fields"):
            loader.load_dict({"identifier_fields": []})

    def test_invalid_identifier_name_rejected(self, loader: ConfigLoader) -> None:
        with pytest.raises(CorralConfigError):
            loader.load_dict({"identifier_fields": ["not a name"]})

    def test_wrong_type_rejected(self, loader: ConfigLoader) -> None:
        with pytest.raises(CorralConfigError):
            loader.load_dict({"structural_fallback": "sometimes"})

    def test_malformed_yaml(self, loader: ConfigLoader) -> None:
        with pytest.raises(CorralConfigError, match="Failed to parse YAML"):
            loader.load_string("structural_fallback: [unclosed", source="corral.yaml")

    def test_non_mapping_document(self, loader: ConfigLoader) -> None:
        with pytest.raises(CorralConfigError, match=r"^\[inline\] "):
            loader.load_string("- a\n- b\n", source="inline")

    def test_error_is_value_error(self) -> None:
        assert issubclass(CorralConfigError, ValueError)
        err = CorralConfigError("bad", "src.yaml")
        assert err.source == "src.yaml"
        assert str(err) == "[src.yaml] bad"


class TestResolverFactories:
    def test_identity_resolver(self) -> None:
        resolver = CorralConfig(structural_fallback=True, identifier_fields=["pk"]).identity_resolver()
        assert resolver.structural_fallback is True
        assert resolver.identifier_fields == ("pk",)

    def test_type_resolver(self) -> None:
        assert CorralConfig(qualified_type_names=True).type_resolver().qualified_names is True

    def test_corral_from_config(self) -> None:
        config = ConfigLoader().load_string("structural_fallback: true")
        corral = Corral.from_config(config)
        corral.authorize(1, "dict", Action.READ)
        assert corral.can({"id": 1}, {}, Action.READ) is True
        assert corral.can({"id": 2}, {}, Action.READ) is False
