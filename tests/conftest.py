"""
tests/conftest.py - shared pytest fixtures.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from config import Settings  # noqa: E402
from models import Machine  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real tokens and overrides from leaking into tests."""
    for var in ("DIGITALOCEAN_ACCESS_TOKEN", "DO_INVENTORY_API_URL", "DO_INVENTORY_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings():
    return Settings(access_token="test-token")


@pytest.fixture
def make_machine():
    def _make(id=1, name="web1", region="nyc1", tags=(), public_ip="1.2.3.4", private_ip=None):
        return Machine(
            id=id,
            name=name,
            region=region,
            tags=tuple(tags),
            public_ip=public_ip,
            private_ip=private_ip,
        )

    return _make


@pytest.fixture
def droplet_json():
    def _make(id=1, name="web1", region="nyc1", tags=(), public_ip="1.2.3.4", private_ip="10.0.0.1"):
        v4 = []
        if public_ip:
            v4.append({"ip_address": public_ip, "type": "public"})
        if private_ip:
            v4.append({"ip_address": private_ip, "type": "private"})
        return {
            "id": id,
            "name": name,
            "region": {"slug": region, "name": region.upper()},
            "tags": list(tags),
            "networks": {"v4": v4, "v6": []},
        }

    return _make

