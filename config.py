# Importations ------------------------------------------------------------
from dataclasses import dataclass, field
import os
import re
from typing import List, Optional

# Canonical DigitalOcean regions -------------------------------------------
# Region groups are always emitted in this order, even when empty. This is
# configuration data, not derived from the API: add or remove slugs here
# when DigitalOcean opens or retires a datacenter.
DO_REGIONS: List[str] = [
    "ams1", "ams2", "ams3",
    "blr1",
    "fra1",
    "lon1",
    "nyc1", "nyc2", "nyc3",
    "sfo1", "sfo2", "sfo3",
    "sgp1",
    "tor1",
]

DEFAULT_API_URL = "https://api.digitalocean.com/v2"
DEFAULT_TIMEOUT = "2m"

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


# Helper to parse timeout values --------------------------------------------
def parse_duration(value: str) -> float:
    """
    Parses a duration string into seconds.

    Accepts Go-style durations ("90s", "2m", "1h30m", "500ms") and bare
    numbers, which are read as seconds.

    :param value: Duration string (e.g. "2m")
    :return: Number of seconds, always > 0
    """
    text = (value or "").strip()
    if not text:
        raise ValueError("empty duration")

    try:
        seconds = float(text)
    except ValueError:
        pos = 0
        seconds = 0.0
        for m in _DURATION_PART.finditer(text):
            if m.start() != pos:
                break
            seconds += float(m.group(1)) * _UNIT_SECONDS[m.group(2)]
            pos = m.end()
        if pos != len(text) or pos == 0:
            raise ValueError(f"invalid duration {value!r}")

    if seconds <= 0:
        raise ValueError(f"duration must be positive, got {value!r}")
    return seconds


# Centralized application configuration -------------------------------------
@dataclass
class Settings:
    """
    Central configuration object for do-ansible-inventory.

    Defaults come from environment variables; main.py overrides them with
    command-line flags. The instance is built once and handed to every
    component of the run.
    """

    # DigitalOcean API -------------------------------------------------
    access_token: str = field(default_factory=lambda: os.getenv("DIGITALOCEAN_ACCESS_TOKEN", ""))
    api_url: str = field(default_factory=lambda: os.getenv("DO_INVENTORY_API_URL", DEFAULT_API_URL))
    timeout: float = field(default_factory=lambda: parse_duration(os.getenv("DO_INVENTORY_TIMEOUT", DEFAULT_TIMEOUT)))

    # Droplet selection ------------------------------------------------
    tag: str = ""                                                 # server-side tag filter
    ignore: List[str] = field(default_factory=list)               # Droplet names to leave out

    # Host variables ---------------------------------------------------
    ssh_user: str = ""
    ssh_port: int = 0
    private_ips: bool = False

    # Groups -----------------------------------------------------------
    group_by_region: bool = True
    group_by_tag: bool = True
    group_by_project: bool = True
    regions: List[str] = field(default_factory=lambda: list(DO_REGIONS))

    # Output -----------------------------------------------------------
    out: Optional[str] = None                                     # None or "" means stdout
