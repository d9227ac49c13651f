# models.py
"""Typed views of the DigitalOcean API objects the inventory needs."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any, Dict, Optional, Tuple

DROPLET_URN_PREFIX = "do:droplet:"
_DIGITS = re.compile(r"[0-9]+")


def _ipv4(networks: Any, kind: str) -> Optional[str]:
    if not isinstance(networks, dict):
        raise TypeError(f"networks must be an object, got {type(networks).__name__}")
    for n in networks.get("v4") or []:
        if not isinstance(n, dict):
            raise TypeError(f"networks.v4 entry must be an object, got {n!r}")
        if n.get("type") == kind and n.get("ip_address"):
            return n["ip_address"]
    return None


@dataclass(frozen=True)
class Machine:
    id: int
    name: str
    region: str
    tags: Tuple[str, ...] = ()
    public_ip: Optional[str] = None
    private_ip: Optional[str] = None

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "Machine":
        region = d.get("region") or {}
        return cls(
            id=int(d["id"]),
            name=d["name"],
            region=region.get("slug", "") if isinstance(region, dict) else str(region),
            tags=tuple(d.get("tags") or ()),
            public_ip=_ipv4(d.get("networks") or {}, "public"),
            private_ip=_ipv4(d.get("networks") or {}, "private"),
        )


@dataclass(frozen=True)
class Project:
    id: str
    name: str

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "Project":
        return cls(id=d["id"], name=d["name"])


@dataclass(frozen=True)
class ProjectResource:
    urn: str

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "ProjectResource":
        return cls(urn=d.get("urn", ""))

    def is_droplet(self) -> bool:
        return self.urn.startswith(DROPLET_URN_PREFIX)

    def droplet_id(self) -> int:
        """Numeric Droplet ID from a do:droplet:<id> URN; ValueError if unparsable."""
        raw = self.urn[len(DROPLET_URN_PREFIX):]
        if not _DIGITS.fullmatch(raw):
            raise ValueError(f"invalid Droplet ID {raw!r}")
        return int(raw)
