"""Tests for configuration loading and the store factory."""

import pytest

from prefspace import ConfigurationError, PrefspaceConfig, StoreConfigSchema
from prefspace.factory import StoreFactory, create_selector, sqlite_store_factory
from prefspace.stores import MemoryStore, SQLiteStore


class TestPrefspaceConfig:
    """Tests for PrefspaceConfig."""

    def test_defaults(self):
        config = PrefspaceConfig()
        assert config.host_namespace_id is None
        assert config.store.type == "memory"
        assert config.debug is False

    def test_from_env(self, tmp_path):
        config = PrefspaceConfig.from_env(
            {
                "PREFSPACE_HOST_ID": "com.acme.app",
                "PREFSPACE_STORE": "SQLite",
                "PREFSPACE_STORE_PATH": str(tmp_path),
                "PREFSPACE_DEBUG": "true",
            }
        )
        assert config.host_namespace_id == "com.acme.app"
        assert config.store == StoreConfigSchema(type="sqlite", path=str(tmp_path))
        assert config.debug is True

    def test_from_empty_env(self):
        assert PrefspaceConfig.from_env({}) == PrefspaceConfig()

    def test_invalid_env_raises(self):
        with pytest.raises(ConfigurationError, match="environment"):
            PrefspaceConfig.from_env({"PREFSPACE_DEBUG": "maybe"})

    def test_from_os_environ(self, monkeypatch):
        monkeypatch.setenv("PREFSPACE_HOST_ID", "org.example")
        assert PrefspaceConfig.from_env().host_namespace_id == "org.example"


class TestStoreFactory:
    """Tests for StoreFactory."""

    def test_registered_types(self):
        assert {"memory", "sqlite"} <= set(StoreFactory.registered_types())

    def test_memory(self):
        selector = create_selector(StoreConfigSchema())
        assert isinstance(selector.default, MemoryStore)
        assert isinstance(selector.named("x"), MemoryStore)

    def test_sqlite(self, tmp_path):
        selector = create_selector(StoreConfigSchema(type="sqlite", path=str(tmp_path / "prefs")))
        assert isinstance(selector.default, SQLiteStore)
        assert (tmp_path / "prefs" / "default.sqlite3").exists()
        selector.close()

    def test_sqlite_requires_path(self):
        with pytest.raises(ConfigurationError, match="path"):
            create_selector(StoreConfigSchema(type="sqlite"))

    def test_sqlite_unwritable_path(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(ConfigurationError, match="cannot open"):
            create_selector(StoreConfigSchema(type="sqlite", path=str(blocker / "sub")))

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError, match="unknown store type"):
            create_selector(StoreConfigSchema(type="redis"))

    def test_register_custom_type(self, monkeypatch):
        monkeypatch.setattr(StoreFactory, "_registry", dict(StoreFactory._registry))
        custom = MemoryStore()
        StoreFactory.register("custom", lambda config: (custom, MemoryStore))
        assert create_selector(StoreConfigSchema(type="custom")).default is custom


class TestSqliteStoreFactory:
    """Tests for sqlite_store_factory()."""

    def test_creates_one_file_per_name(self, tmp_path):
        factory = sqlite_store_factory(tmp_path)
        store = factory("suite")
        assert store.name == "suite"
        assert (tmp_path / "suite.sqlite3").exists()
        store.close()

    @pytest.mark.parametrize("name", ["", "../escape", ".hidden", "a/b", "default"])
    def test_rejects_bad_names(self, tmp_path, name):
        with pytest.raises(ValueError):
            sqlite_store_factory(tmp_path)(name)
