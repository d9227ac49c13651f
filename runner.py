"""
Execution orchestrator for do-ansible-inventory.

Flow:
1) Resolve the access token (flag / env / doctl config)
2) List Droplets (paged, optionally filtered by tag)
3) Drop ignored Droplets
4) Optional: list projects and their resources (paged)
5) Build host lines and region / tag / project groups
6) Render the INI inventory and write it to a file or stdout

Any error aborts the run; nothing is written unless every step succeeded.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from config import Settings
from credentials import resolve_token
from do_client import DigitalOceanClient
from inventory import build_inventory, filter_ignored
from models import Project, ProjectResource
from report import render_inventory, write_inventory

logger = logging.getLogger(__name__)


def list_project_resources(client: DigitalOceanClient) -> List[Tuple[Project, List[ProjectResource]]]:
    logger.info("listing projects")
    out: List[Tuple[Project, List[ProjectResource]]] = []
    for project in client.list_projects():
        logger.info("listing project resources project=%s", project.name)
        out.append((project, client.list_project_resources(project.id)))
    return out


def build_client(settings: Settings) -> DigitalOceanClient:
    token = resolve_token(settings)
    return DigitalOceanClient(token, settings.timeout, base_url=settings.api_url)


def run_all(settings: Settings, client: Optional[DigitalOceanClient] = None) -> str:
    client = client or build_client(settings)

    # 1) Droplets
    if settings.tag:
        logger.info("only selecting tagged Droplets tag=%s", settings.tag)
    logger.info("listing Droplets")
    machines = client.list_droplets(settings.tag or None)
    logger.info("found %s Droplets", len(machines))

    # 2) Ignore list
    machines = filter_ignored(machines, settings.ignore)

    # 3) Projects (optional)
    project_resources = list_project_resources(client) if settings.group_by_project else None

    # 4) Aggregate + render
    inv = build_inventory(machines, settings, project_resources)
    text = render_inventory(inv)

    # 5) Output
    write_inventory(text, settings.out)
    return text
