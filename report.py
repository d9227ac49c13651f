# report.py
"""
Ansible INI rendering.

Layout:
- one line per host: "<name>\t[ansible_user=.. ][ansible_port=.. ][ansible_host=..]"
- a blank line
- "[group]" headers, each followed by its members and a blank line,
  regions first (canonical order), then tags, then projects
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional, TextIO

from errors import FileWriteError
from inventory import Grouping, HostEntry, Inventory

logger = logging.getLogger(__name__)


def render_host(host: HostEntry) -> str:
    line = host.name + "\t"
    if host.ssh_user:
        line += f"ansible_user={host.ssh_user} "
    if host.ssh_port:
        line += f"ansible_port={host.ssh_port} "
    if host.address:
        line += f"ansible_host={host.address}"
    return line + "\n"


def _render_groups(parts: List[str], groups: Grouping, kind: str) -> None:
    for name, members in groups.items():
        logger.debug("building %s group=%s members=%s", kind, name, len(members))
        parts.append(f"[{name}]\n")
        parts.extend(f"{m}\n" for m in members)
        parts.append("\n")


def render_inventory(inventory: Inventory) -> str:
    parts: List[str] = [render_host(h) for h in inventory.hosts]
    parts.append("\n")

    if inventory.regions is not None:
        _render_groups(parts, inventory.regions, "region")
    if inventory.tags is not None:
        _render_groups(parts, inventory.tags, "tag")
    if inventory.projects is not None:
        _render_groups(parts, inventory.projects, "project")

    return "".join(parts)


def write_inventory(text: str, out: Optional[str] = None, stdout: Optional[TextIO] = None) -> None:
    """Write the inventory to the file at `out`, or to stdout when no path is given."""
    if not out:
        stream = stdout or sys.stdout
        stream.write(text)
        stream.flush()
        return

    logger.info("writing inventory to file out=%s", out)
    try:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise FileWriteError(out, e) from e
