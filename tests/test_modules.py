"""Tests for wren.modules — package scanning and installed modules."""

from dataclasses import dataclass
from typing import Any

import pytest

import wren.modules
from fixture_shop.basket import Basket, ShopController
from fixture_shop.orders.history import OrderHistory
from wren.controller import Controller
from wren.errors import ConfigurationError
from wren.modules import ApiModule, installed_modules, scan_controllers


@dataclass
class FakeEntryPoint:
    name: str
    obj: Any

    def load(self) -> Any:
        return self.obj


def _patch_entry_points(monkeypatch: pytest.MonkeyPatch, *eps: FakeEntryPoint) -> None:
    def fake_entry_points(*, group: str) -> list[FakeEntryPoint]:
        assert group == "wren.modules"
        return list(eps)

    monkeypatch.setattr(wren.modules, "entry_points", fake_entry_points)


class Standalone(Controller):
    pass


class TestScanControllers:
    def test_finds_concrete_controllers_in_submodules(self) -> None:
        found = scan_controllers("fixture_shop")
        assert set(found) == {Basket, OrderHistory}

    def test_skips_abstract_bases(self) -> None:
        assert ShopController not in scan_controllers("fixture_shop")

    def test_single_module(self) -> None:
        assert scan_controllers("fixture_shop.orders.history") == (OrderHistory,)

    def test_missing_package(self) -> None:
        with pytest.raises(ConfigurationError, match="no_such_package"):
            scan_controllers("no_such_package")


class TestApiModule:
    def test_declares_controllers(self) -> None:
        assert not ApiModule(slug="a").declares_controllers
        assert ApiModule(slug="a", package="fixture_shop").declares_controllers
        assert ApiModule(slug="a", controllers=(Standalone,)).declares_controllers

    def test_collect_merges_explicit_and_scanned(self) -> None:
        module = ApiModule(slug="a", namespace="a", controllers=(Standalone, Basket), package="fixture_shop")
        collected = module.collect_controllers()
        assert collected[:2] == (Standalone, Basket)
        assert set(collected) == {Standalone, Basket, OrderHistory}
        assert len(collected) == 3


class TestInstalledModules:
    def test_loads_modules_in_name_order(self, monkeypatch: pytest.MonkeyPatch) -> None:
        shop = ApiModule(slug="acme/shop", namespace="shop")
        blog = ApiModule(slug="acme/blog", namespace="blog")
        _patch_entry_points(monkeypatch, FakeEntryPoint("shop", shop), FakeEntryPoint("blog", blog))
        assert installed_modules() == [blog, shop]

    def test_calls_factories(self, monkeypatch: pytest.MonkeyPatch) -> None:
        shop = ApiModule(slug="acme/shop", namespace="shop")
        _patch_entry_points(monkeypatch, FakeEntryPoint("shop", lambda: shop))
        assert installed_modules() == [shop]

    def test_rejects_other_objects(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_entry_points(monkeypatch, FakeEntryPoint("bad", {"namespace": "bad"}))
        with pytest.raises(ConfigurationError, match="not an ApiModule"):
            installed_modules()

    def test_nothing_installed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_entry_points(monkeypatch)
        assert installed_modules() == []
