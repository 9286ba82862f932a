"""Tests for environment variable helpers."""

import pytest

from mcp_jira_branch.utils.env import (
    get_env_float,
    getenv_stripped,
    is_env_ssl_verify,
)


@pytest.mark.parametrize(
    "value, expected",
    [("false", False), ("0", False), ("No", False), ("true", True), ("anything", True)],
)
def test_is_env_ssl_verify(monkeypatch, value, expected):
    monkeypatch.setenv("TEST_SSL", value)
    assert is_env_ssl_verify("TEST_SSL") is expected


def test_getenv_stripped_treats_blank_as_unset(monkeypatch):
    monkeypatch.setenv("FIRST", "   ")
    monkeypatch.setenv("SECOND", "  value  ")
    assert getenv_stripped("FIRST", "SECOND") == "value"


def test_getenv_stripped_quotes(monkeypatch):
    monkeypatch.setenv("QUOTED", ' "abc-123" ')
    assert getenv_stripped("QUOTED") == '"abc-123"'
    assert getenv_stripped("QUOTED", strip_quotes=True) == "abc-123"


def test_getenv_stripped_missing(monkeypatch):
    monkeypatch.delenv("MISSING_ONE", raising=False)
    assert getenv_stripped("MISSING_ONE") is None


@pytest.mark.parametrize(
    "value, expected", [("12.5", 12.5), ("abc", 30.0), ("-1", 30.0), ("0", 30.0)]
)
def test_get_env_float(monkeypatch, value, expected):
    monkeypatch.setenv("TEST_TIMEOUT", value)
    assert get_env_float("TEST_TIMEOUT", 30.0) == expected
