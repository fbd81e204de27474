"""Tests for config.py - defaults, validation and source merging."""

import os

import pytest

from adr_miner.config import MiningConfig, ThresholdConfig, load_config
from adr_miner.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """No global/project config files and no ADR_MINER_* variables leak in."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("ADR_MINER_"):
            monkeypatch.delenv(key)


class TestDefaults:
    def test_mining_defaults(self):
        config = MiningConfig()
        assert config.max_commits == 1000
        assert config.min_cluster_size == 2
        assert config.min_confidence == 0.5
        assert config.include_merge_commits is False
        assert config.decisions_dir == ".adr-miner"

    def test_threshold_defaults(self):
        t = ThresholdConfig()
        assert t.temporal_window_days == 14
        assert t.similarity_threshold == 0.3
        assert (t.file_overlap_weight, t.pattern_overlap_weight) == (0.4, 0.3)
        assert (t.keyword_overlap_weight, t.author_weight) == (0.2, 0.1)
        assert (t.high_confidence, t.medium_confidence) == (0.7, 0.4)

    def test_worker_count(self):
        assert MiningConfig(workers=3).worker_count == 3
        assert 1 <= MiningConfig().worker_count <= 8


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_commits": -1},
            {"min_cluster_size": 0},
            {"min_confidence": 1.5},
            {"workers": 0},
            {"verbosity": "loud"},
            {"decisions_dir": ""},
            {"git_timeout_seconds": 0},
        ],
    )
    def test_invalid_mining_config(self, kwargs):
        with pytest.raises(InvalidConfigError):
            MiningConfig(**kwargs)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"temporal_window_days": -1},
            {"similarity_threshold": 1.2},
            {"file_overlap_weight": 0.5},  # weights no longer sum to 1
            {"medium_confidence": 0.8},
            {"file_overlap_weight": 0.0, "author_weight": 0.0, "pattern_overlap_weight": 0.5, "keyword_overlap_weight": 0.5},
        ],
    )
    def test_invalid_thresholds(self, kwargs):
        with pytest.raises(InvalidConfigError):
            ThresholdConfig(**kwargs)


class TestLoadConfig:
    def test_defaults_without_sources(self):
        assert load_config() == MiningConfig()

    def test_project_file(self, tmp_path):
        (tmp_path / "adr-miner.toml").write_text(
            'min_confidence = 0.6\nexclude_paths = ["docs/*"]\n\n[thresholds]\ntemporal_window_days = 7\n'
        )
        config = load_config()
        assert config.min_confidence == 0.6
        assert config.exclude_paths == ["docs/*"]
        assert config.thresholds.temporal_window_days == 7
        assert config.thresholds.similarity_threshold == 0.3

    def test_explicit_file_overrides_project_file(self, tmp_path):
        (tmp_path / "adr-miner.toml").write_text("max_commits = 50\nmin_cluster_size = 3\n")
        explicit = tmp_path / "custom.toml"
        explicit.write_text("max_commits = 200\n")
        config = load_config(config_file=explicit)
        assert config.max_commits == 200
        assert config.min_cluster_size == 3

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("min_confidence = = 1")
        with pytest.raises(ConfigurationError):
            load_config(config_file=bad)

    def test_unknown_key(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("colour = 'blue'\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=bad)

    def test_unknown_threshold_key(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("[thresholds]\nwindow = 3\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=bad)

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("ADR_MINER_MIN_CONFIDENCE", "0.7")
        monkeypatch.setenv("ADR_MINER_INCLUDE_MERGE_COMMITS", "yes")
        monkeypatch.setenv("ADR_MINER_WORKERS", "2")
        config = load_config()
        assert config.min_confidence == 0.7
        assert config.include_merge_commits is True
        assert config.workers == 2

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("ADR_MINER_INCLUDE_MERGE_COMMITS", "maybe")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_overrides_win_and_none_is_ignored(self, tmp_path, monkeypatch):
        (tmp_path / "adr-miner.toml").write_text("min_confidence = 0.6\nmax_commits = 50\n")
        monkeypatch.setenv("ADR_MINER_MIN_CONFIDENCE", "0.7")
        config = load_config(min_confidence=0.8, max_commits=None)
        assert config.min_confidence == 0.8
        assert config.max_commits == 50

    def test_thresholds_merge_across_files(self, tmp_path):
        home = tmp_path / "home"
        home.mkdir()
        (home / ".adr-miner.toml").write_text("[thresholds]\ntemporal_window_days = 7\n")
        (tmp_path / "adr-miner.toml").write_text("[thresholds]\nsimilarity_threshold = 0.4\n")
        config = load_config()
        assert config.thresholds.temporal_window_days == 7
        assert config.thresholds.similarity_threshold == 0.4

    def test_explicit_file_keeps_other_threshold_keys(self, tmp_path):
        (tmp_path / "adr-miner.toml").write_text("[thresholds]\ntemporal_window_days = 5\n")
        explicit = tmp_path / "custom.toml"
        explicit.write_text("[thresholds]\ntemporal_window_days = 9\nhigh_confidence = 0.8\n")
        config = load_config(config_file=explicit)
        assert config.thresholds.temporal_window_days == 9
        assert config.thresholds.high_confidence == 0.8
        assert config.thresholds.similarity_threshold == 0.3

    def test_verbosity_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False, quiet=False).verbosity == "normal"
