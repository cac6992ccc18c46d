"""Tests for YamlConfigStore and settings loading."""

import pytest
from adblock_sync import ConfigFileError
from adblock_sync import YamlConfigStore
from adblock_sync import load_settings


class TestYamlConfigStore:
    """Test YamlConfigStore class."""

    @pytest.fixture
    def store(self, workdir):
        """Create YamlConfigStore in a nested temporary directory."""
        return YamlConfigStore(workdir / "state" / "store.yaml")

    def test_get_missing_file_returns_none(self, store):
        """Test get returns None when nothing was stored."""
        assert store.get("ext.adblock.config") is None

    def test_set_and_get(self, store):
        """Test values round-trip and parent directories are created."""
        store.set("ext.adblock.config", {"ads": "on", "trackers": "off"})
        assert store.path.exists()
        assert store.get("ext.adblock.config") == {"ads": "on", "trackers": "off"}

    def test_keys_are_independent(self, store):
        """Test writing one key keeps the others."""
        store.set("a", 1)
        store.set("b", [1, 2])
        assert store.get("a") == 1
        assert store.get("b") == [1, 2]

    def test_delete(self, store):
        """Test deleting present and absent keys."""
        store.set("a", 1)
        assert store.delete("a") is True
        assert store.delete("a") is False
        assert store.get("a") is None

    def test_corrupt_file_reads_as_empty(self, store):
        """Test an unparseable file is logged and ignored."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("key: [unclosed\n")
        assert store.get("key") is None

    def test_write_failure_raises(self, store):
        """Test failing writes surface as ConfigFileError."""
        store.path.mkdir(parents=True)
        with pytest.raises(ConfigFileError):
            store.set("a", 1)

    def test_yaml_format(self, store):
        """Test the file is plain block-style YAML."""
        store.set("ext.adblock.config", {"ads": "on"})
        content = store.path.read_text()
        assert "ext.adblock.config:" in content
        assert "ads: 'on'" in content


class TestLoadSettings:
    """Test load_settings function."""

    def test_defaults(self):
        """Test defaults when no file is given."""
        settings = load_settings()
        assert settings.feature == "adblock"
        assert settings.reload_interval == 24 * 3600
        assert settings.store_key == "ext.adblock.config"
        assert settings.catalog_list_key == "ads.list"

    def test_file_overrides_defaults(self, workdir):
        """Test YAML values are deep-merged over defaults."""
        path = workdir / "settings.yaml"
        path.write_text(f"feature: family\npaths:\n  config_dir: {workdir / 'dnsmasq'}\n")

        settings = load_settings(path)

        assert settings.feature == "family"
        assert settings.config_dir == workdir / "dnsmasq"
        assert str(settings.network_root) == "/var/lib/adblock-sync/dnsmasq/networks"
        assert settings.store_key == "ext.family.config"
        assert settings.list_artifact("ads") == workdir / "dnsmasq" / "ads_family.conf"

    def test_overrides_win_over_file(self, workdir):
        """Test explicit overrides beat the settings file."""
        path = workdir / "settings.yaml"
        path.write_text("refresh:\n  interval_seconds: 60\n")
        settings = load_settings(path, overrides={"refresh": {"interval_seconds": 5}})
        assert settings.reload_interval == 5

    def test_missing_file_uses_defaults(self, workdir):
        """Test a missing settings file falls back to defaults."""
        assert load_settings(workdir / "missing.yaml").feature == "adblock"

    def test_non_mapping_file_rejected(self, workdir):
        """Test a settings file holding a list is rejected."""
        path = workdir / "settings.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigFileError):
            load_settings(path)

    def test_empty_section_rejected(self, workdir):
        """Test a section left empty in YAML is reported, not crashed on."""
        path = workdir / "settings.yaml"
        path.write_text("paths:\n")
        with pytest.raises(ConfigFileError, match="paths"):
            load_settings(path)

    def test_non_numeric_interval_rejected(self, workdir):
        """Test an interval that is not a number is reported."""
        path = workdir / "settings.yaml"
        path.write_text("refresh:\n  interval_seconds: daily\n")
        with pytest.raises(ConfigFileError):
            load_settings(path)

    def test_null_path_rejected(self, workdir):
        """Test a path value set to null is reported."""
        path = workdir / "settings.yaml"
        path.write_text("paths:\n  config_dir: null\n")
        with pytest.raises(ConfigFileError):
            load_settings(path)
