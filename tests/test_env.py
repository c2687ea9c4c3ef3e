"""Tests for environment access and variable naming."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from system_deps.env import (
    Environment,
    MockEnvironment,
    feature_var,
    normalize_key,
    override_var,
    scoped_env_var,
)


class TestNaming:
    def test_normalize_key(self):
        assert normalize_key("testlib") == "TESTLIB"
        assert normalize_key("gtk-3") == "GTK_3"
        assert normalize_key("test_lib") == "TEST_LIB"

    def test_override_var(self):
        assert override_var("SYSTEM_DEPS", "testlib", "LIB") == "SYSTEM_DEPS_TESTLIB_LIB"
        assert override_var("METADEPS", "gtk-3", "NO_PKG_CONFIG") == "METADEPS_GTK_3_NO_PKG_CONFIG"

    def test_feature_var(self):
        assert feature_var("SYSTEM_DEPS_FEATURE_", "test-feature") == "SYSTEM_DEPS_FEATURE_TEST_FEATURE"
        assert feature_var("CARGO_FEATURE_", "v1_14") == "CARGO_FEATURE_V1_14"


class TestMockEnvironment:
    def test_get(self):
        env = MockEnvironment({"A": "1", "EMPTY": ""})
        assert env.get("A") == "1"
        assert env.get("B") is None

    def test_empty_value_is_present(self):
        env = MockEnvironment({"EMPTY": ""})
        assert env.contains("EMPTY")
        assert not env.contains("OTHER")

    def test_copies_values(self):
        values = {"A": "1"}
        env = MockEnvironment(values)
        values["A"] = "2"
        assert env.get("A") == "1"


class TestEnvironment:
    def test_reads_process_environment(self):
        with patch.dict(os.environ, {"SYSTEM_DEPS_TEST_VALUE": "x"}):
            assert Environment().get("SYSTEM_DEPS_TEST_VALUE") == "x"
            assert Environment().contains("SYSTEM_DEPS_TEST_VALUE")


class TestScopedEnvVar:
    def test_restores_previous(self):
        with patch.dict(os.environ, {"SYSTEM_DEPS_SCOPED": "old"}):
            with scoped_env_var("SYSTEM_DEPS_SCOPED", "new"):
                assert os.environ["SYSTEM_DEPS_SCOPED"] == "new"
            assert os.environ["SYSTEM_DEPS_SCOPED"] == "old"

    def test_removes_when_previously_unset(self):
        with patch.dict(os.environ, {}):
            os.environ.pop("SYSTEM_DEPS_SCOPED", None)
            with scoped_env_var("SYSTEM_DEPS_SCOPED", "new"):
                assert os.environ["SYSTEM_DEPS_SCOPED"] == "new"
            assert "SYSTEM_DEPS_SCOPED" not in os.environ

    def test_restores_on_error(self):
        with patch.dict(os.environ, {"SYSTEM_DEPS_SCOPED": "old"}):
            with pytest.raises(RuntimeError):
                with scoped_env_var("SYSTEM_DEPS_SCOPED", "new"):
                    raise RuntimeError("boom")
            assert os.environ["SYSTEM_DEPS_SCOPED"] == "old"
