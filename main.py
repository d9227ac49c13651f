# Importations ------------------------------------------------------------
import argparse
import logging
import sys
from typing import List, Optional

from config import DEFAULT_TIMEOUT, Settings, parse_duration
from errors import InventoryError
from runner import run_all

logger = logging.getLogger(__name__)


# Argument types --------------------------------------------------------------
def _duration(value: str) -> float:
    try:
        return parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


# Argument parser configuration -----------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="do-ansible-inventory",
        description="Generate an Ansible inventory from your DigitalOcean Droplets.",
    )

    parser.add_argument(
        "-t", "--access-token",
        help="DigitalOcean API token - if unset, attempts to use doctl's stored token "
             "of its current context. env var: DIGITALOCEAN_ACCESS_TOKEN",
    )
    parser.add_argument("--ssh-user", default="", help="default ssh user")
    parser.add_argument("--ssh-port", type=int, default=0, help="default ssh port")
    parser.add_argument("--tag", default="", help="filter Droplets by tag")
    parser.add_argument(
        "--ignore", action="append", default=[], metavar="NAME",
        help="ignore a Droplet by name, can be specified multiple times",
    )

    # Groups ----------------------------------------------------------
    parser.add_argument(
        "--group-by-region", action=argparse.BooleanOptionalAction, default=True,
        help="group hosts by region, defaults to true",
    )
    parser.add_argument(
        "--group-by-tag", action=argparse.BooleanOptionalAction, default=True,
        help="group hosts by their Droplet tags, defaults to true",
    )
    parser.add_argument(
        "--group-by-project", action=argparse.BooleanOptionalAction, default=True,
        help="group hosts by their Projects, defaults to true",
    )

    parser.add_argument("--private-ips", action="store_true", help="use private Droplet IPs instead of public IPs")
    parser.add_argument("--out", default="", help="write the ansible inventory to this file - if unset, print to stdout")
    parser.add_argument(
        "--timeout", type=_duration, default=None,
        help=f"timeout for total runtime of the command, defaults to {DEFAULT_TIMEOUT}",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


# Settings from CLI arguments -------------------------------------------------
def settings_from_args(args: argparse.Namespace) -> Settings:
    s = Settings()

    # Flags override environment defaults --------------------------------
    if args.access_token:
        s.access_token = args.access_token
    if args.timeout is not None:
        s.timeout = args.timeout

    s.ssh_user = args.ssh_user
    s.ssh_port = args.ssh_port
    s.tag = args.tag
    s.ignore = list(args.ignore)
    s.group_by_region = args.group_by_region
    s.group_by_tag = args.group_by_tag
    s.group_by_project = args.group_by_project
    s.private_ips = args.private_ips
    s.out = args.out or None
    return s


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# CLI entry point -------------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the do-ansible-inventory CLI.

    Parses flags, builds the Settings, runs the pipeline and maps fatal
    errors to a non-zero exit status.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = settings_from_args(args)
    except ValueError as e:
        logger.error("invalid configuration: %s", e)
        return 1

    try:
        run_all(settings)
    except InventoryError as e:
        logger.error("%s", e)
        return 1

    logger.info("done!")
    return 0


# Script execution guard ------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main())
