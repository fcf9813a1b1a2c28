"""Tests for utils/sanitize.py."""

from __future__ import annotations

import pytest

from agent_studio.utils.sanitize import sanitize_error


class TestSanitizeError:
    @pytest.mark.parametrize(
        "message,secret",
        [
            ("bad key AIzaSyA1234567890abcdefghijklmnop", "AIzaSyA1234567890abcdefghijklmnop"),
            ("invalid sk-ant-api03-abcdef", "sk-ant-api03-abcdef"),
            ("invalid sk-proj-abcdefghijklmnopqrstuvwx", "sk-proj-abcdefghijklmnopqrstuvwx"),
            ("Authorization: Bearer abc.def.ghi", "abc.def.ghi"),
            ("x-goog-api-key: secretvalue", "secretvalue"),
            ("GET /v1beta/models?key=secretvalue&alt=json", "secretvalue"),
        ],
    )
    def test_credentials_removed(self, message, secret):
        assert secret not in sanitize_error(message)

    def test_query_key_keeps_other_params(self):
        assert sanitize_error("?key=abc&alt=json") == "?key=[REDACTED]&alt=json"

    def test_home_directory_replaced(self, monkeypatch):
        monkeypatch.delenv("USERPROFILE", raising=False)
        monkeypatch.setenv("HOME", "/home/alice")
        assert sanitize_error("cannot read /home/alice/.agent-studio") == (
            "cannot read [USER_HOME]/.agent-studio"
        )

    def test_plain_message_unchanged(self):
        assert sanitize_error("503 | model overloaded") == "503 | model overloaded"

    def test_empty_message(self):
        assert sanitize_error("") == ""
