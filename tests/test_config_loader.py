"""Tests for config loader module."""

from pathlib import Path

import pytest

from duplicacy_wrapper.config.loader import (
    ConfigError,
    find_config_file,
    generate_example_config,
    load_config,
)


def write(tmp_config_dir, name, body):
    path = tmp_config_dir / name
    path.write_text(body)
    return path


class TestFindConfigFile:
    """Tests for find_config_file function."""

    def test_explicit_path_exists(self, config_file):
        """Test finding explicitly specified config file."""
        result = find_config_file(str(config_file))
        assert result == config_file

    def test_explicit_path_not_exists(self, tmp_path):
        """Test error when explicit path doesn't exist."""
        with pytest.raises(ConfigError, match="not found"):
            find_config_file(str(tmp_path / "nonexistent.toml"))

    def test_search_paths(self, tmp_path, monkeypatch, sample_config_toml):
        """Test finding config in the search locations."""
        from duplicacy_wrapper.config import loader

        config_path = tmp_path / "config.toml"
        config_path.write_text(sample_config_toml)
        monkeypatch.setattr(loader, "CONFIG_PATHS", [tmp_path / "missing.toml", config_path])

        assert find_config_file(None) == config_path

    def test_no_config_found(self, tmp_path, monkeypatch):
        """Test returning None when no search location exists."""
        from duplicacy_wrapper.config import loader

        monkeypatch.setattr(loader, "CONFIG_PATHS", [tmp_path / "missing.toml"])
        assert find_config_file(None) is None


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_valid_config(self, config_file):
        """Test loading a valid configuration file."""
        config, warnings = load_config(config_file)

        assert warnings == []
        assert config.name == "nightly"
        assert config.path == config_file
        assert [b.name for b in config.backup_info] == ["b2", "azure"]

        b2 = config.backup_info[0]
        assert b2.threads == "10"
        assert b2.vss is True
        assert b2.vss_timeout == "400"

        azure = config.backup_info[1]
        assert azure.threads == "1"
        assert azure.vss is False
        assert azure.quote == "-limit-rate 5000"

    def test_load_copy_prune_check(self, config_file):
        """Test the copy, prune and check sections and their defaults."""
        config, _ = load_config(config_file)

        copy = config.copy_info[0]
        assert (copy.from_storage, copy.to_storage, copy.threads) == ("b2", "azure", "5")

        assert config.prune_info[0].keep == "0:365 30:180 7:30"
        assert config.prune_info[0].threads == "1"
        assert config.prune_info[0].all is True
        assert config.prune_info[1].all is False
        assert config.prune_info[1].threads == "4"

        assert config.check_info[0].all is True
        assert config.check_info[1].all is False

    def test_load_global_settings(self, config_file, tmp_path):
        """Test that global settings are loaded correctly."""
        config, _ = load_config(config_file)

        assert config.global_config.duplicacy_path == "/usr/local/bin/duplicacy"
        assert config.global_config.log_keep == 7
        assert config.log_dir == tmp_path / "logs"
        assert config.repository == tmp_path / "repository"

    def test_load_email_settings(self, config_file):
        """Test the notify.email table."""
        config, _ = load_config(config_file)

        assert config.email.enabled is True
        assert config.email.smtp_port == 587
        assert config.email.starttls is True
        assert config.email.to_addresses == ["ops@example.com", "me@example.com"]
        assert config.email.send_on_start is False

    def test_load_minimal_config(self, minimal_config_file):
        """Test loading a minimal configuration file."""
        config, warnings = load_config(minimal_config_file)

        assert warnings == []
        assert config.global_config.duplicacy_path == "duplicacy"
        assert config.copy_info == []
        assert config.email.enabled is False

    def test_target_entries_are_frozen(self, minimal_config_file):
        """Test that loaded targets cannot be modified."""
        config, _ = load_config(minimal_config_file)

        with pytest.raises(AttributeError):
            config.backup_info[0].threads = "8"

    def test_load_nonexistent_file(self, tmp_path):
        """Test error when loading nonexistent file."""
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(tmp_path / "nonexistent.toml")

    def test_load_invalid_toml(self, tmp_config_dir):
        """Test error when loading invalid TOML."""
        bad_config = write(tmp_config_dir, "bad.toml", "this is not valid [ toml")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(bad_config)

    def test_missing_repository(self, tmp_config_dir):
        """Test error when the repository location is missing."""
        bad_config = write(tmp_config_dir, "no_repo.toml", """
[[storage]]
name = "b2"
""")

        with pytest.raises(ConfigError, match="repository"):
            load_config(bad_config)

    @pytest.mark.parametrize(
        "body, match",
        [
            ("", "No storage locations"),
            ('[[storage]]\nthreads = "2"\n', r"storage\[0\]\.name"),
            (
                '[[storage]]\nname = "b2"\n[[copy]]\nname = "b2"\n',
                r"copy\[0\]\.to",
            ),
            ('[[storage]]\nname = "b2"\n', "No prune locations"),
            (
                '[[storage]]\nname = "b2"\n[[prune]]\nstorage = "b2"\n',
                r"prune\[0\]\.keep",
            ),
            (
                '[[storage]]\nname = "b2"\n[[prune]]\nstorage = "b2"\nkeep = "0:7"\n',
                "No check locations",
            ),
            (
                '[[storage]]\nname = "b2"\n[[prune]]\nstorage = "b2"\nkeep = "0:7"\n'
                "[[check]]\nall = true\n",
                r"check\[0\]\.storage",
            ),
        ],
    )
    def test_missing_mandatory_fields(self, tmp_config_dir, tmp_path, body, match):
        """Test each mandatory field and section."""
        path = write(
            tmp_config_dir, "bad.toml", f'[global]\nrepository = "{tmp_path}"\n{body}'
        )

        with pytest.raises(ConfigError, match=match):
            load_config(path)

    def test_storage_must_be_array_of_tables(self, tmp_config_dir, tmp_path):
        """Test error when [storage] is a plain table."""
        path = write(tmp_config_dir, "bad.toml", f"""
[global]
repository = "{tmp_path}"

[storage]
name = "b2"
""")

        with pytest.raises(ConfigError, match="array of tables"):
            load_config(path)

    def test_invalid_log_keep(self, tmp_config_dir, minimal_config_toml):
        """Test error on a non-integer log_keep."""
        path = write(
            tmp_config_dir,
            "bad.toml",
            minimal_config_toml.replace("[global]", '[global]\nlog_keep = "many"'),
        )

        with pytest.raises(ConfigError, match="log_keep"):
            load_config(path)

    def test_email_requires_addresses(self, tmp_config_dir, minimal_config_toml):
        """Test that enabled mail needs sender and recipients."""
        path = write(
            tmp_config_dir,
            "bad.toml",
            minimal_config_toml + "\n[notify.email]\nenabled = true\n",
        )

        with pytest.raises(ConfigError, match="from_address"):
            load_config(path)

    def test_unbalanced_quote_rejected(self, tmp_config_dir, minimal_config_toml):
        """Test passthrough flags that cannot be split are a config error."""
        path = write(
            tmp_config_dir,
            "bad.toml",
            minimal_config_toml + "quote = \"-id don't\"\n",
        )

        with pytest.raises(ConfigError, match=r"Invalid quote for check\[0\]"):
            load_config(path)

    def test_quoted_flags_accepted(self, tmp_config_dir, minimal_config_toml):
        """Test balanced quoting is kept verbatim."""
        path = write(
            tmp_config_dir,
            "good.toml",
            minimal_config_toml + "quote = \"-id 'don t'\"\n",
        )

        config, _ = load_config(path)
        assert config.check_info[0].quote == "-id 'don t'"

    @pytest.mark.parametrize(
        "old,new,match",
        [
            ('keep = "0:30"', 'keep = "0:30"\nall = "false"', r"prune\[0\]\.all"),
            ('name = "primary"', 'name = "primary"\nvss = "no"', r"storage\[0\]\.vss"),
            ('storage = "primary"\n', 'storage = "primary"\nall = 1\n', r"check\[0\]\.all"),
        ],
    )
    def test_flags_must_be_booleans(self, tmp_config_dir, minimal_config_toml, old, new, match):
        """Test a flag written as a string or number is rejected, not treated as true."""
        body = minimal_config_toml.replace(old, new, 1)
        if old.startswith("storage"):
            # the check entry is the last occurrence
            head, _, tail = minimal_config_toml.rpartition(old)
            body = head + new + tail
        path = write(tmp_config_dir, "bad.toml", body)

        with pytest.raises(ConfigError, match=match):
            load_config(path)

    def test_email_flag_must_be_boolean(self, tmp_config_dir, minimal_config_toml):
        """Test mail switches are checked as well."""
        path = write(
            tmp_config_dir,
            "bad.toml",
            minimal_config_toml + '\n[notify.email]\nenabled = "yes"\n',
        )

        with pytest.raises(ConfigError, match="notify.email.enabled"):
            load_config(path)


class TestConfigWarnings:
    """Tests for non-fatal configuration warnings."""

    def test_missing_repository_directory(self, tmp_config_dir, tmp_path):
        """Test warning when the repository does not exist."""
        path = write(tmp_config_dir, "warn.toml", f"""
[global]
repository = "{tmp_path / 'gone'}"

[[storage]]
name = "b2"

[[prune]]
storage = "b2"
keep = "0:7"

[[check]]
storage = "b2"
""")

        _, warnings = load_config(path)
        assert any("Repository directory does not exist" in w for w in warnings)

    def test_unknown_storage_references(self, tmp_config_dir, tmp_path):
        """Test warnings for storages not listed under [[storage]]."""
        path = write(tmp_config_dir, "warn.toml", f"""
[global]
repository = "{tmp_path}"

[[storage]]
name = "b2"

[[storage]]
name = "b2"

[[copy]]
name = "wasabi"
to = "b2"

[[prune]]
storage = "s3"
keep = "0:7"

[[check]]
storage = "gcs"
""")

        _, warnings = load_config(path)
        assert "Duplicate storage names detected" in warnings
        assert any("'wasabi'" in w for w in warnings)
        assert any("'s3'" in w for w in warnings)
        assert any("'gcs'" in w for w in warnings)


class TestGenerateExampleConfig:
    """Tests for the example configuration."""

    def test_example_config_loads(self, tmp_path):
        """Test that the example parses once the repository exists."""
        repository = tmp_path / "home"
        repository.mkdir()
        content = generate_example_config().replace('"/home/user"', f'"{repository}"')
        path = tmp_path / "example.toml"
        path.write_text(content)

        config, warnings = load_config(path)

        assert warnings == []
        assert config.backup_info[0].name == "b2"
        assert config.prune_info[0].keep == "0:365 30:180 7:30 1:7"
        assert isinstance(config.log_dir, Path)
