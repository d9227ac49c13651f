# inventory.py
"""
Inventory aggregation.

Turns the flat list of Droplets into:
- one connection record per host (name, address, ssh overrides)
- groups by region (canonical order, empty regions kept)
- groups by tag
- groups by project (resolved through project resource URNs)

Group members always keep the order the Droplets were fetched in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from config import Settings
from models import Machine, Project, ProjectResource

logger = logging.getLogger(__name__)

Grouping = Dict[str, List[str]]
ProjectResources = Sequence[Tuple[Project, List[ProjectResource]]]

_INVALID_GROUP_CHARS = str.maketrans({" ": "_", "-": "_", ":": "_"})
_LEADING_DIGIT = re.compile(r"[0-9]")


@dataclass
class HostEntry:
    name: str
    address: Optional[str] = None
    ssh_user: str = ""
    ssh_port: int = 0


@dataclass
class Inventory:
    hosts: List[HostEntry] = field(default_factory=list)
    regions: Optional[Grouping] = None
    tags: Optional[Grouping] = None
    projects: Optional[Grouping] = None


def sanitize_group_name(name: str) -> str:
    """Ansible group names may not contain spaces, dashes or colons, nor start with a digit."""
    s = name.translate(_INVALID_GROUP_CHARS)
    if _LEADING_DIGIT.match(s):
        s = "_" + s
    return s


def filter_ignored(machines: List[Machine], ignore_names: Iterable[str]) -> List[Machine]:
    ignored = set(ignore_names)
    if not ignored:
        return machines

    kept: List[Machine] = []
    for m in machines:
        if m.name in ignored:
            logger.info("ignoring droplet=%s", m.name)
            continue
        kept.append(m)
    return kept


def resolve_address(machine: Machine, prefer_private: bool) -> Optional[str]:
    """Private IP when requested and present, else the public IP, else None."""
    if prefer_private and machine.private_ip:
        return machine.private_ip
    return machine.public_ip or None


class _GroupBuilder:
    """Ordered groups with at most one entry per member name."""

    def __init__(self, keys: Sequence[str] = ()) -> None:
        self.groups: Grouping = {k: [] for k in keys}
        self._seen: Dict[str, Set[str]] = {k: set() for k in keys}

    def __contains__(self, key: str) -> bool:
        return key in self.groups

    def add(self, key: str, name: str) -> None:
        seen = self._seen.setdefault(key, set())
        if name in seen:
            return
        seen.add(name)
        self.groups.setdefault(key, []).append(name)


def group_by_region(machines: Sequence[Machine], regions: Sequence[str]) -> Grouping:
    builder = _GroupBuilder(regions)
    for m in machines:
        if not m.region:
            logger.warning("droplet=%s has no region, leaving it out of the region groups", m.name)
            continue
        if m.region not in builder:
            logger.warning("droplet=%s is in unknown region=%s, adding a group for it", m.name, m.region)
        builder.add(m.region, m.name)
    return builder.groups


def group_by_tag(machines: Sequence[Machine]) -> Grouping:
    builder = _GroupBuilder()
    for m in machines:
        for tag in m.tags:
            key = sanitize_group_name(tag)
            if not key:
                logger.warning("droplet=%s has an empty tag, skipping it", m.name)
                continue
            builder.add(key, m.name)
    return builder.groups


def group_by_project(machines: Sequence[Machine], project_resources: ProjectResources) -> Grouping:
    known = {m.id for m in machines}
    members_by_project: Dict[str, Set[int]] = {}

    for project, resources in project_resources:
        key = sanitize_group_name(project.name)
        if not key:
            logger.warning("project id=%s has no name, leaving it out of the project groups", project.id)
            continue

        for r in resources:
            if not r.is_droplet():
                continue
            try:
                droplet_id = r.droplet_id()
            except ValueError:
                logger.warning("parsing droplet ID, skipping project=%s urn=%s", project.name, r.urn)
                continue

            # ignored, or outside the tag filter
            if droplet_id not in known:
                continue

            members_by_project.setdefault(key, set()).add(droplet_id)

    groups: Grouping = {}
    for key, ids in members_by_project.items():
        groups[key] = [m.name for m in machines if m.id in ids]
    return groups


def build_hosts(machines: Sequence[Machine], settings: Settings) -> List[HostEntry]:
    hosts: List[HostEntry] = []
    for m in machines:
        logger.info("processing droplet=%s", m.name)
        address = resolve_address(m, settings.private_ips)
        if address is None:
            kind = "private or public" if settings.private_ips else "public"
            logger.warning("could not get the %s IP address of droplet=%s, using hostname", kind, m.name)
        elif settings.private_ips and address != m.private_ip:
            logger.warning("no private IP for droplet=%s, falling back to public IP %s", m.name, address)
        hosts.append(
            HostEntry(
                name=m.name,
                address=address,
                ssh_user=settings.ssh_user,
                ssh_port=settings.ssh_port,
            )
        )
    return hosts


def build_inventory(
    machines: Sequence[Machine],
    settings: Settings,
    project_resources: Optional[ProjectResources] = None,
) -> Inventory:
    inv = Inventory(hosts=build_hosts(machines, settings))

    if settings.group_by_region:
        inv.regions = group_by_region(machines, settings.regions)
    if settings.group_by_tag:
        inv.tags = group_by_tag(machines)
    if settings.group_by_project:
        inv.projects = group_by_project(machines, project_resources or [])

    return inv
