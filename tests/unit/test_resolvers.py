"""Tests for IdentityResolver and TypeResolver."""
from __future__ import annotations

from dataclasses import dataclass

import pytest

from corral.capabilities import HasNumericID, HasObjectType, HasSubjectKey
from corral.resolvers import IdentityResolver, TypeResolver, resolve_identity, resolve_type


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


class KeyedRole:
    def __init__(self, name: str) -> None:
        self.name = name

    def subject_key(self) -> str:
        return self.name


class NumberedUser:
    def __init__(self, user_id: int) -> None:
        self.user_id = user_id

    def get_id(self) -> int:
        return self.user_id


class BothAccessors:
    id = 99

    def subject_key(self) -> str:
        return "explicit"

    def get_id(self) -> int:
        return 7


@dataclass
class Profile:
    id: int
    name: str


@dataclass
class Comment:
    body: str


class Post:
    object_type = "post"


class Article:
    def object_type(self) -> str:
        return "article"


class Page:
    @classmethod
    def object_type(cls) -> str:
        return "page"


class ClassRole:
    @classmethod
    def subject_key(cls) -> str:
        return "class-role"


@pytest.fixture()
def resolver() -> IdentityResolver:
    return IdentityResolver()


@pytest.fixture()
def structural() -> IdentityResolver:
    return IdentityResolver(structural_fallback=True)


# ---------------------------------------------------------------------------
# IdentityResolver
# ---------------------------------------------------------------------------


class TestIdentityResolverKeys:
    def test_string_is_its_own_key(self, resolver: IdentityResolver) -> None:
        assert resolver.resolve("admin") == "admin"

    def test_int_is_its_own_key(self, resolver: IdentityResolver) -> None:
        assert resolver.resolve(42) == 42

    def test_none_resolves_to_default(self, resolver: IdentityResolver) -> None:
        assert resolver.resolve(None) == ""

    def test_bool_is_not_a_key(self, resolver: IdentityResolver) -> None:
        assert resolver.resolve(True) == ""

    def test_module_level_helper(self) -> None:
        assert resolve_identity(KeyedRole("editor")) == "editor"


class TestIdentityResolverAccessors:
    def test_subject_key_accessor(self, resolver: IdentityResolver) -> None:
        assert resolver.resolve(KeyedRole("admin")) == "admin"

    def test_numeric_id_accessor(self, resolver: IdentityResolver) -> None:
        assert resolver.resolve(NumberedUser(17)) == 17

    def test_subject_key_takes_precedence(self, structural: IdentityResolver) -> None:
        assert structural.resolve(BothAccessors()) == "explicit"

    def test_classmethod_accessor_on_class(self, resolver: IdentityResolver) -> None:
        assert resolver.resolve(ClassRole) == "class-role"

    def test_instance_method_not_called_on_class(self, resolver: IdentityResolver) -> None:
        assert resolver.resolve(KeyedRole) == ""

    def test_subject_key_field(self, resolver: IdentityResolver) -> None:
        @dataclass
        class FieldRole:
            subject_key: str

        @dataclass
        class NumberedRole:
            subject_key: int

        assert resolver.resolve(FieldRole("admin")) == "admin"
        assert resolver.resolve(NumberedRole(3)) == 3

    def test_subject_key_property(self, resolver: IdentityResolver) -> None:
        class PropertyRole:
            @property
            def subject_key(self) -> str:
                return "editor"

        assert resolver.resolve(PropertyRole()) == "editor"

    def test_accessor_returning_none_gives_default(self, resolver: IdentityResolver) -> None:
        class Anonymous:
            def subject_key(self) -> None:
                return None

        assert resolver.resolve(Anonymous()) == ""

    def test_protocols_are_runtime_checkable(self) -> None:
        assert isinstance(KeyedRole("a"), HasSubjectKey)
        assert isinstance(NumberedUser(1), HasNumericID)
        assert not isinstance(Profile(id=1, name="p"), HasSubjectKey)


class TestIdentityResolverStructuralFallback:
    def test_disabled_by_default(self, resolver: IdentityResolver) -> None:
        assert resolver.structural_fallback is False
        assert resolver.resolve(Profile(id=1000, name="admin")) == ""

    def test_id_attribute(self, structural: IdentityResolver) -> None:
        assert structural.resolve(Profile(id=1000, name="admin")) == 1000

    def test_id_mapping_key(self, structural: IdentityResolver) -> None:
        assert structural.resolve({"id": 5, "name": "x"}) == 5

    def test_missing_field_gives_zero(self, structural: IdentityResolver) -> None:
        assert structural.resolve(Comment(body="hi")) == 0

    def test_non_integer_field_gives_zero(self, structural: IdentityResolver) -> None:
        assert structural.resolve({"id": "abc"}) == 0

    def test_custom_identifier_fields(self) -> None:
        resolver = IdentityResolver(structural_fallback=True, identifier_fields=["pk", "id"])
        assert resolver.resolve({"pk": 3, "id": 9}) == 3
        assert resolver.resolve({"id": 9}) == 9

    def test_repr(self, structural: IdentityResolver) -> None:
        assert "structural_fallback=True" in repr(structural)


# ---------------------------------------------------------------------------
# TypeResolver
# ---------------------------------------------------------------------------


class TestTypeResolver:
    def test_class_attribute(self) -> None:
        assert TypeResolver().resolve(Post()) == "post"

    def test_class_and_instance_agree(self) -> None:
        resolver = TypeResolver()
        assert resolver.resolve(Post) == resolver.resolve(Post()) == "post"

    def test_instance_method(self) -> None:
        assert TypeResolver().resolve(Article()) == "article"

    def test_classmethod_on_class_and_instance(self) -> None:
        resolver = TypeResolver()
        assert resolver.resolve(Page) == "page"
        assert resolver.resolve(Page()) == "page"

    def test_runtime_name_fallback(self) -> None:
        resolver = TypeResolver()
        assert resolver.resolve(Comment(body="x")) == "Comment"
        assert resolver.resolve(Comment) == "Comment"

    def test_builtin_values(self) -> None:
        resolver = TypeResolver()
        assert resolver.resolve("post") == "str"
        assert resolver.resolve(3) == "int"

    def test_generic_alias_resolves_to_origin(self) -> None:
        resolver = TypeResolver()
        assert resolver.resolve(list[int]) == resolver.resolve([1, 2]) == "list"

    def test_none_resolves_to_default(self) -> None:
        assert TypeResolver().resolve(None) == ""

    def test_qualified_names(self) -> None:
        resolver = TypeResolver(qualified_names=True)
        assert resolver.resolve(Comment(body="x")) == f"{__name__}.Comment"
        # Declared names are never qualified.
        assert resolver.resolve(Post()) == "post"

    def test_module_level_helper(self) -> None:
        assert resolve_type(Post()) == "post"

    def test_protocol_is_runtime_checkable(self) -> None:
        assert isinstance(Article(), HasObjectType)
