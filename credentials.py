# credentials.py
"""
Access token lookup.

An explicit token (flag or DIGITALOCEAN_ACCESS_TOKEN) always wins.
Without one, the token of doctl's current context is read from
<user config dir>/doctl/config.yaml.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Tuple

import yaml

from config import Settings
from errors import ConfigError, ConfigNotFoundError, ConfigParseError

logger = logging.getLogger(__name__)

DOCTL_CONFIG = os.path.join("doctl", "config.yaml")


def user_config_dir() -> str:
    """Per-user configuration directory, following the platform's convention."""
    if sys.platform == "win32":
        d = os.getenv("APPDATA", "")
        if not d:
            raise ConfigNotFoundError("couldn't look up user config dir: %APPDATA% is not set")
        return d

    home = os.path.expanduser("~")
    if sys.platform == "darwin":
        if home == "~":
            raise ConfigNotFoundError("couldn't look up user config dir: $HOME is not set")
        return os.path.join(home, "Library", "Application Support")

    d = os.getenv("XDG_CONFIG_HOME", "")
    if d:
        if not os.path.isabs(d):
            raise ConfigNotFoundError(
                f"couldn't look up user config dir: $XDG_CONFIG_HOME is a relative path: {d}"
            )
        return d
    if home == "~":
        raise ConfigNotFoundError("couldn't look up user config dir: neither $XDG_CONFIG_HOME nor $HOME are set")
    return os.path.join(home, ".config")


def doctl_token(config_dir: Optional[str] = None) -> Tuple[str, str]:
    """
    Read the access token of doctl's current context.

    :param config_dir: User config dir, looked up when omitted
    :return: (token, context name)
    """
    path = os.path.join(config_dir or user_config_dir(), DOCTL_CONFIG)

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
    except OSError as e:
        raise ConfigNotFoundError(f"couldn't read doctl's config.yaml path={path}: {e}") from e

    try:
        cfg = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"couldn't unmarshal doctl's config.yaml path={path}: {e}") from e

    if cfg is None:
        cfg = {}
    if not isinstance(cfg, dict):
        raise ConfigParseError(f"doctl's config.yaml is not a mapping path={path}")

    context = cfg.get("context") or ""
    access_token = cfg.get("access-token") or ""
    auth_contexts = cfg.get("auth-contexts") or {}

    if not isinstance(context, str):
        raise ConfigParseError(f"field 'context' must be a string, got {context!r}")
    if not isinstance(access_token, str):
        raise ConfigParseError("field 'access-token' must be a string")
    if not isinstance(auth_contexts, dict):
        raise ConfigParseError("field 'auth-contexts' must be a mapping")

    if context == "default":
        return access_token, context

    token = auth_contexts.get(context) or ""
    if not isinstance(token, str):
        raise ConfigParseError(f"field 'auth-contexts.{context}' must be a string")
    return token, context


def resolve_token(settings: Settings, config_dir: Optional[str] = None) -> str:
    if settings.access_token:
        return settings.access_token

    logger.info("no access token provided, attempting to look up doctl's access token")
    token, context = doctl_token(config_dir)
    if not token:
        raise ConfigError(f"doctl's config.yaml has no access token for context={context!r}")

    logger.info("using doctl access token context=%s", context)
    return token
