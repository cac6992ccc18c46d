"""Tests for FeatureConfig and BlocklistRefresher."""

import pytest
from adblock_sync.blocklist import BlocklistRefresher
from adblock_sync.blocklist import FeatureConfig
from adblock_sync.blocklist import parse_entries
from adblock_sync.exceptions import CatalogParseError
from conftest import DictStore
from conftest import FakeFetcher


class TestParseEntries:
    """Test catalog payload decoding."""

    def test_json_array(self):
        """Test a JSON array of strings is decoded."""
        assert parse_entries('["a.com", "b.com"]') == ["a.com", "b.com"]

    def test_invalid_json(self):
        """Test malformed JSON is a parse error."""
        with pytest.raises(CatalogParseError):
            parse_entries("{not json")

    def test_not_an_array_of_strings(self):
        """Test objects and non-string items are rejected."""
        with pytest.raises(CatalogParseError):
            parse_entries('{"a": 1}')
        with pytest.raises(CatalogParseError):
            parse_entries("[1, 2]")


class TestFeatureConfig:
    """Test loading and seeding the per-list config."""

    @pytest.fixture
    def fetcher(self):
        """Create a catalog serving blocklists."""
        return FakeFetcher({"ads.list": ["ads", "trackers", "malware"]})

    @pytest.fixture
    def store(self):
        """Create an in-memory config store."""
        return DictStore()

    @pytest.fixture
    def feature_config(self, settings, store, fetcher):
        """Create FeatureConfig over the fake store and catalog."""
        return FeatureConfig(settings, store, fetcher)

    @pytest.mark.asyncio
    async def test_seeded_from_catalog(self, feature_config, store):
        """Test only the default list is on when seeding from the catalog."""
        config = await feature_config.load()
        assert config == {"ads": "on", "trackers": "off", "malware": "off"}
        assert store.data["ext.adblock.config"] == config

    @pytest.mark.asyncio
    async def test_stored_config_wins(self, feature_config, store, fetcher):
        """Test a stored config is used without contacting the catalog."""
        store.set("ext.adblock.config", {"trackers": "on"})
        assert await feature_config.load() == {"trackers": "on"}
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_stored_json_text_is_decoded(self, feature_config, store):
        """Test stores holding raw JSON text are supported."""
        store.set("ext.adblock.config", '{"ads": "off"}')
        assert await feature_config.load() == {"ads": "off"}

    @pytest.mark.asyncio
    async def test_catalog_failure_returns_empty(self, feature_config, fetcher, store):
        """Test load errors yield an empty config and store nothing."""
        fetcher.failing.add("ads.list")
        assert await feature_config.load() == {}
        assert store.data == {}

    def test_save(self, feature_config, store):
        """Test saving replaces the stored config."""
        feature_config.save({"ads": "off"})
        assert store.data["ext.adblock.config"] == {"ads": "off"}


class TestBlocklistRefresher:
    """Test per-list-key artifact refresh."""

    @pytest.fixture
    def fetcher(self):
        return FakeFetcher(
            {
                "ads": ["doubleclick.net", "ads/example.com"],
                "trackers": ["tracker.io"],
            }
        )

    @pytest.fixture
    def store(self):
        return DictStore({"ext.adblock.config": {"ads": "on", "trackers": "on", "malware": "off"}})

    @pytest.fixture
    def refresher(self, settings, store, fetcher):
        """Create BlocklistRefresher over the fake store and catalog."""
        return BlocklistRefresher(settings, FeatureConfig(settings, store, fetcher), fetcher)

    @pytest.mark.asyncio
    async def test_refresh_writes_enabled_lists(self, refresher, settings):
        """Test each enabled list is rendered into its own artifact."""
        report = await refresher.refresh()

        assert report.ok
        ads = settings.list_artifact("ads").read_text()
        assert ads == "hash-address=/doubleclick.net/$adblock\nhash-address=/ads.example.com/$adblock\n"
        assert settings.list_artifact("trackers").exists()

    @pytest.mark.asyncio
    async def test_refresh_deletes_disabled_lists(self, refresher, settings):
        """Test lists switched off lose their artifact."""
        settings.config_dir.mkdir(parents=True)
        settings.list_artifact("malware").write_text("stale\n")

        await refresher.refresh()

        assert not settings.list_artifact("malware").exists()

    @pytest.mark.asyncio
    async def test_failed_key_keeps_previous_artifact(self, refresher, settings, fetcher):
        """Test a fetch failure skips the key and leaves its file alone."""
        settings.config_dir.mkdir(parents=True)
        settings.list_artifact("ads").write_text("hash-address=/old.net/$adblock\n")
        fetcher.failing.add("ads")

        report = await refresher.refresh()

        assert [f.unit for f in report.failures] == ["ads"]
        assert settings.list_artifact("ads").read_text() == "hash-address=/old.net/$adblock\n"
        assert settings.list_artifact("trackers").exists()

    @pytest.mark.asyncio
    async def test_unparseable_key_is_skipped(self, refresher, settings, fetcher):
        """Test a bad payload skips only that key."""
        fetcher.lists["trackers"] = "<html>oops</html>"

        report = await refresher.refresh()

        assert [f.unit for f in report.failures] == ["trackers"]
        assert settings.list_artifact("ads").exists()
        assert not settings.list_artifact("trackers").exists()

    @pytest.mark.asyncio
    async def test_clean_up_removes_every_list(self, refresher, settings):
        """Test clean-up deletes all configured list artifacts."""
        await refresher.refresh()

        report = await refresher.clean_up()

        assert report.ok
        assert report.units() == ["ads", "trackers", "malware"]
        assert not settings.list_artifact("ads").exists()
        assert not settings.list_artifact("trackers").exists()
