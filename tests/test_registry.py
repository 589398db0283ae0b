"""Tests for wren.routing.registry — namespace discovery and controller lookup."""

import pytest

from wren.controller import Controller
from wren.envelope import ApiResponse
from wren.errors import ConfigurationError, NamespaceConflictError
from wren.modules import ApiModule
from wren.routing.registry import NamespaceRegistry, controller_key


class Foo(Controller):
    def get_index(self) -> ApiResponse:
        return ApiResponse(data="foo")


class Bar(Controller):
    def get_index(self) -> ApiResponse:
        return ApiResponse(data="bar")


class UserGroups(Controller):
    def any_list(self) -> ApiResponse:
        return ApiResponse(data=[])


class Renamed(Controller):
    NAME = "people"


class TestControllerKey:
    def test_ignores_case_and_separators(self) -> None:
        assert controller_key("user-groups") == "usergroups"
        assert controller_key("user_groups") == "usergroups"
        assert controller_key("UserGroups") == "usergroups"


class TestDiscover:
    def test_registers_namespaces(self) -> None:
        registry = NamespaceRegistry.discover(
            [
                ApiModule(slug="acme/shop", namespace="shop", controllers=(Foo,)),
                ApiModule(slug="acme/users", namespace="users", controllers=(UserGroups,)),
            ]
        )
        assert len(registry) == 2
        assert "shop" in registry
        assert {entry.namespace for entry in registry} == {"shop", "users"}
        assert registry.get("shop").owner == "acme/shop"

    def test_namespace_conflict(self) -> None:
        with pytest.raises(NamespaceConflictError) as exc_info:
            NamespaceRegistry.discover(
                [
                    ApiModule(slug="acme/shop", namespace="shop", controllers=(Foo,)),
                    ApiModule(slug="other/shop", namespace="shop", controllers=(Bar,)),
                ]
            )
        assert str(exc_info.value) == (
            'Conflicting API namespace "shop" in use by "other/shop" and "acme/shop"'
        )

    def test_controllers_without_namespace(self) -> None:
        with pytest.raises(ConfigurationError, match='"acme/broken"'):
            NamespaceRegistry.discover([ApiModule(slug="acme/broken", controllers=(Foo,))])

    def test_module_without_api_is_skipped(self) -> None:
        registry = NamespaceRegistry.discover([ApiModule(slug="acme/theme")])
        assert len(registry) == 0

    def test_non_controller_class(self) -> None:
        with pytest.raises(ConfigurationError, match="not a Controller subclass"):
            NamespaceRegistry.discover(
                [ApiModule(slug="acme/shop", namespace="shop", controllers=(dict,))]  # type: ignore[arg-type]
            )

    def test_duplicate_controller_name(self) -> None:
        class Other(Controller):
            NAME = "Foo"

        with pytest.raises(ConfigurationError, match="two controllers"):
            NamespaceRegistry.discover(
                [ApiModule(slug="acme/shop", namespace="shop", controllers=(Foo, Other))]
            )

    def test_same_controller_listed_twice_is_fine(self) -> None:
        registry = NamespaceRegistry.discover(
            [ApiModule(slug="acme/shop", namespace="shop", controllers=(Foo, Foo))]
        )
        assert registry.resolve("shop", "foo") is Foo


class TestResolve:
    def _registry(self, **kwargs) -> NamespaceRegistry:
        module = ApiModule(
            slug="acme/shop",
            namespace="shop",
            controllers=(Foo, Bar, UserGroups, Renamed),
            **kwargs,
        )
        return NamespaceRegistry.discover([module])

    def test_by_name(self) -> None:
        assert self._registry().resolve("shop", "foo") is Foo

    def test_name_variants(self) -> None:
        registry = self._registry()
        for requested in ("UserGroups", "userGroups", "user-groups", "user_groups"):
            assert registry.resolve("shop", requested) is UserGroups

    def test_explicit_name(self) -> None:
        registry = self._registry()
        assert registry.resolve("shop", "people") is Renamed
        assert registry.resolve("shop", "renamed") is None

    def test_unknown_namespace_or_controller(self) -> None:
        registry = self._registry()
        assert registry.resolve("ghost", "foo") is None
        assert registry.resolve("shop", "ghost") is None

    def test_remap_alias_resolves_to_target(self) -> None:
        registry = self._registry(controller_map={"Foo": "Bar"})
        assert registry.resolve("shop", "foo") is Bar
        assert registry.resolve("shop", "FOO") is Bar

    def test_remap_target_is_unreachable_by_name(self) -> None:
        registry = self._registry(controller_map={"Foo": "Bar"})
        assert registry.resolve("shop", "bar") is None

    def test_handler_tables_built_at_discovery(self) -> None:
        registry = self._registry()
        assert registry.handlers_for(UserGroups).names == frozenset({"any_list"})
