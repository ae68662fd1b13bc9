"""Tests for mode resolution and configuration models."""

from pathlib import Path

import pytest

from twenty_twenty.models.config import (
    ARTIFACTS_DIR_ENV_VAR,
    ENV_VAR,
    AssertConfig,
    Mode,
    resolve_mode,
)


class TestResolveMode:
    """Tests for resolve_mode."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("overwrite", Mode.OVERWRITE),
            ("store-artifact", Mode.STORE_ARTIFACT),
            ("store-artifact-on-mismatch", Mode.STORE_ARTIFACT_ON_MISMATCH),
        ],
    )
    def test_known_values(self, raw, expected):
        """Test each recognized value maps to its mode."""
        assert resolve_mode(raw) is expected

    @pytest.mark.parametrize("raw", [None, "", "default", "bogus", " overwrite", "store_artifact"])
    def test_other_values_fall_back_to_default(self, raw):
        """Test unrecognized or absent values resolve to DEFAULT."""
        assert resolve_mode(raw) is Mode.DEFAULT

    def test_matching_is_case_sensitive(self):
        """Test that capitalized values are not recognized."""
        assert resolve_mode("Overwrite") is Mode.DEFAULT
        assert resolve_mode("STORE-ARTIFACT") is Mode.DEFAULT


class TestAssertConfig:
    """Tests for AssertConfig model."""

    def test_default_values(self):
        """Test AssertConfig has correct default values."""
        config = AssertConfig()
        assert config.mode is Mode.DEFAULT
        assert config.artifacts_dir == Path("artifacts")
        assert config.env_var == "TWENTY_TWENTY"

    def test_mode_string_is_resolved(self):
        """Test a mode string is coerced into Mode."""
        assert AssertConfig(mode="store-artifact").mode is Mode.STORE_ARTIFACT

    def test_unknown_mode_string_becomes_default(self):
        """Test an unknown mode string becomes DEFAULT."""
        assert AssertConfig(mode="bogus").mode is Mode.DEFAULT

    def test_from_env_mapping(self):
        """Test from_env reads the mode and artifacts root from a mapping."""
        config = AssertConfig.from_env({ENV_VAR: "overwrite", ARTIFACTS_DIR_ENV_VAR: "out/artifacts"})
        assert config.mode is Mode.OVERWRITE
        assert config.artifacts_dir == Path("out/artifacts")

    def test_from_env_empty_mapping(self):
        """Test from_env falls back to defaults for an empty mapping."""
        config = AssertConfig.from_env({})
        assert config.mode is Mode.DEFAULT
        assert config.artifacts_dir == Path("artifacts")

    def test_from_env_reads_process_environment_each_call(self, monkeypatch):
        """Test that the environment is read fresh, so per-test overrides apply."""
        monkeypatch.setenv(ENV_VAR, "store-artifact-on-mismatch")
        assert AssertConfig.from_env().mode is Mode.STORE_ARTIFACT_ON_MISMATCH

        monkeypatch.setenv(ENV_VAR, "")
        assert AssertConfig.from_env().mode is Mode.DEFAULT

        monkeypatch.delenv(ENV_VAR)
        assert AssertConfig.from_env().mode is Mode.DEFAULT
