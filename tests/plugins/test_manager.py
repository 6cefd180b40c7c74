"""Tests for PluginManager — discovery, registration, and hook relay."""

from __future__ import annotations

import pluggy
import pytest

from modlink.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("modlink")


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    def __init__(self) -> None:
        self.swept: list[list[str]] = []

    @hookimpl
    def post_sweep(self, removed: list[str]) -> None:
        self.swept.append(removed)


class _FakeEntryPointPlugin:
    @hookimpl
    def post_init(self, root: str, repository: str, client: str) -> None:
        pass


class TestPluginManager:
    @pytest.mark.parametrize("hook_name", ["post_init", "post_project", "post_update", "post_sweep"])
    def test_all_hookspecs_registered(self, hook_name: str) -> None:
        assert hasattr(PluginManager().hook, hook_name)

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert "dummy" not in pm.list_plugin_names()

    def test_dispatch_passes_keywords(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin)
        pm.dispatch("post_sweep", {"removed": ["a", "b"]})
        assert plugin.swept == [["a", "b"]]

    def test_dispatch_propagates_plugin_errors(self) -> None:
        class Broken:
            @hookimpl
            def post_sweep(self, removed: list[str]) -> None:
                raise RuntimeError("bug")

        pm = PluginManager()
        pm.register_plugin(Broken())
        with pytest.raises(RuntimeError):
            pm.dispatch("post_sweep", {"removed": []})

    def test_discover_instantiates_classes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        pm = PluginManager()

        def fake_load(self: pluggy.PluginManager, group: str, name: str | None = None) -> int:
            assert group == "modlink.plugins"
            self.register(_FakeEntryPointPlugin, name="fake")
            return 1

        monkeypatch.setattr(pluggy.PluginManager, "load_setuptools_entrypoints", fake_load)
        assert pm.discover_and_load() == ["fake"]
        plugin = pm._pm.get_plugin("fake")
        assert isinstance(plugin, _FakeEntryPointPlugin)
