"""Tests for Settings and duration parsing."""

import pytest

from config import DO_REGIONS, Settings, parse_duration


class TestParseDuration:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2m", 120.0),
            ("90s", 90.0),
            ("1h30m", 5400.0),
            ("500ms", 0.5),
            ("45", 45.0),
            ("1.5m", 90.0),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["", "abc", "2x", "m2", "0s", "-5", "1h 30m"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.access_token == ""
        assert s.timeout == 120.0
        assert s.group_by_region and s.group_by_tag and s.group_by_project
        assert s.private_ips is False
        assert s.regions == DO_REGIONS
        assert s.regions is not DO_REGIONS

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("DIGITALOCEAN_ACCESS_TOKEN", "from-env")
        monkeypatch.setenv("DO_INVENTORY_TIMEOUT", "30s")
        monkeypatch.setenv("DO_INVENTORY_API_URL", "http://localhost:8080/v2")

        s = Settings()
        assert s.access_token == "from-env"
        assert s.timeout == 30.0
        assert s.api_url == "http://localhost:8080/v2"

    def test_ignore_lists_are_not_shared(self):
        a, b = Settings(), Settings()
        a.ignore.append("web1")
        assert b.ignore == []
