"""
Tests for the configuration store, override source and settings.
"""
import threading

import pytest

from underfs.config import Configuration, PropertyKey, Settings, SystemProperties
from underfs.errors import ConfigurationError


class TestConfiguration:
    """Test the persistent property store."""

    def test_contains_key_distinguishes_null(self):
        configuration = Configuration({PropertyKey.SWIFT_USER_KEY: None})

        assert configuration.contains_key(PropertyKey.SWIFT_USER_KEY)
        assert not configuration.is_set(PropertyKey.SWIFT_USER_KEY)
        assert not configuration.contains_key(PropertyKey.SWIFT_TENANT_KEY)

    def test_accepts_property_names(self):
        configuration = Configuration({"fs.swift.user": "alice"})

        assert configuration.get(PropertyKey.SWIFT_USER_KEY) == "alice"

    def test_unknown_property_name(self):
        with pytest.raises(ValueError):
            Configuration({"fs.s3.key": "x"})

    def test_set_if_absent(self, configuration):
        assert configuration.set_if_absent(PropertyKey.SWIFT_USER_KEY, "alice")
        assert not configuration.set_if_absent(PropertyKey.SWIFT_USER_KEY, "bob")
        assert configuration.get(PropertyKey.SWIFT_USER_KEY) == "alice"

    def test_set_if_absent_ignores_null_value(self, configuration):
        assert not configuration.set_if_absent(PropertyKey.SWIFT_USER_KEY, None)
        assert not configuration.contains_key(PropertyKey.SWIFT_USER_KEY)

    def test_set_if_absent_replaces_null(self):
        configuration = Configuration({PropertyKey.SWIFT_USER_KEY: None})

        assert configuration.set_if_absent(PropertyKey.SWIFT_USER_KEY, "alice")
        assert configuration.get(PropertyKey.SWIFT_USER_KEY) == "alice"

    @pytest.mark.parametrize(
        "value,expected",
        [(True, True), (False, False), ("true", True), ("TRUE", True), (" false ", False), (None, False)],
    )
    def test_get_boolean(self, value, expected):
        configuration = Configuration({PropertyKey.SWIFT_SIMULATION: value})

        assert configuration.get_boolean(PropertyKey.SWIFT_SIMULATION) is expected

    def test_get_boolean_missing_key(self, configuration):
        assert configuration.get_boolean(PropertyKey.SWIFT_SIMULATION) is False

    @pytest.mark.parametrize("value", ["yes", "1", 1])
    def test_get_boolean_rejects_other_values(self, value):
        configuration = Configuration({PropertyKey.SWIFT_SIMULATION: value})

        with pytest.raises(ConfigurationError):
            configuration.get_boolean(PropertyKey.SWIFT_SIMULATION)

    def test_merge_skips_null_overrides(self, configuration):
        configuration.merge({"fs.swift.user": None}, [PropertyKey.SWIFT_USER_KEY])

        assert not configuration.contains_key(PropertyKey.SWIFT_USER_KEY)

    def test_merge_only_touches_given_keys(self, configuration):
        configuration.merge(
            {"fs.swift.user": "alice", "fs.swift.tenant": "t"},
            [PropertyKey.SWIFT_USER_KEY],
        )

        assert configuration.as_dict() == {"fs.swift.user": "alice"}

    def test_concurrent_merges_converge(self, configuration):
        overrides = {"fs.swift.user": "alice", "fs.swift.password": "p"}
        keys = [PropertyKey.SWIFT_USER_KEY, PropertyKey.SWIFT_PASSWORD_KEY]

        threads = [
            threading.Thread(target=configuration.merge, args=(overrides, keys))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert configuration.as_dict() == overrides

    def test_from_yaml(self, tmp_path):
        site = tmp_path / "underfs-site.yml"
        site.write_text(
            "fs.swift.user: alice\n"
            "fs.swift.simulation: true\n"
            "fs.swift.password: null\n"
        )

        configuration = Configuration.from_yaml(site)

        assert configuration.get(PropertyKey.SWIFT_USER_KEY) == "alice"
        assert configuration.get_boolean(PropertyKey.SWIFT_SIMULATION) is True
        assert configuration.contains_key(PropertyKey.SWIFT_PASSWORD_KEY)
        assert not configuration.is_set(PropertyKey.SWIFT_PASSWORD_KEY)

    def test_from_empty_yaml(self, tmp_path):
        site = tmp_path / "empty.yml"
        site.write_text("")

        assert Configuration.from_yaml(site).as_dict() == {}

    def test_from_yaml_rejects_unknown_property(self, tmp_path):
        site = tmp_path / "bad.yml"
        site.write_text("fs.unknown: 1\n")

        with pytest.raises(ConfigurationError):
            Configuration.from_yaml(site)

    def test_from_yaml_rejects_non_mapping(self, tmp_path):
        site = tmp_path / "list.yml"
        site.write_text("- fs.swift.user\n")

        with pytest.raises(ConfigurationError):
            Configuration.from_yaml(site)


class TestSystemProperties:
    """Test the override source."""

    def test_env_name(self):
        assert PropertyKey.SWIFT_AUTH_URL_KEY.env_name == "FS_SWIFT_AUTH_URL"

    def test_reads_environment(self):
        overrides = SystemProperties(environ={"FS_SWIFT_APIKEY": "k"})

        assert overrides.get("fs.swift.apikey") == "k"
        assert overrides.get("fs.swift.user") is None
        assert list(overrides) == ["fs.swift.apikey"]
        assert len(overrides) == 1

    def test_explicit_values_win(self):
        overrides = SystemProperties(
            {"fs.swift.apikey": "explicit"},
            environ={"FS_SWIFT_APIKEY": "env", "FS_SWIFT_USER": "alice"},
        )

        assert overrides["fs.swift.apikey"] == "explicit"
        assert overrides["fs.swift.user"] == "alice"
        assert sorted(overrides) == ["fs.swift.apikey", "fs.swift.user"]

    def test_missing_name_raises_key_error(self):
        with pytest.raises(KeyError):
            SystemProperties(environ={})["fs.swift.user"]

    def test_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("FS_SWIFT_TENANT", "tenant")

        assert SystemProperties().get("fs.swift.tenant") == "tenant"


class TestSettings:
    """Test application settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("UNDERFS_CONFIG", raising=False)
        settings = Settings(_env_file=None)

        assert settings.LOG_LEVEL == "info"
        assert settings.SWIFT_RETRIES == 5
        assert settings.load_configuration().as_dict() == {}

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("SWIFT_TIMEOUT", "2.5")

        settings = Settings(_env_file=None)

        assert settings.LOG_LEVEL == "debug"
        assert settings.SWIFT_TIMEOUT == 2.5

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "loud")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_load_configuration_from_site_file(self, tmp_path):
        site = tmp_path / "site.yml"
        site.write_text("fs.swift.tenant: tenant\n")

        settings = Settings(_env_file=None, UNDERFS_CONFIG=str(site))

        assert settings.load_configuration().get(PropertyKey.SWIFT_TENANT_KEY) == "tenant"
