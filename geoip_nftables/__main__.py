"""Main module for GeoIP nftables set generation."""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.traceback import install as rich_traceback_install

from geoip_nftables.config import PipelineConfig
from geoip_nftables.log import log_error
from geoip_nftables.pipeline import PipelineError, run_pipeline


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    """Parse command line flags."""
    parser = argparse.ArgumentParser(description="Generate nftables country sets from the latest GeoLite2 database.")
    parser.add_argument("--country", help="2-letter ISO country code to extract (case-sensitive)")
    parser.add_argument("--db-path", type=Path, help="Path of the live MMDB file")
    parser.add_argument("--download-path", type=Path, help="Temporary download path for the new MMDB file")
    parser.add_argument("--ipv4-output", type=Path, help="Path of the generated IPv4 set file")
    parser.add_argument("--ipv6-output", type=Path, help="Path of the generated IPv6 set file")
    parser.add_argument("--release-url", help="GitHub releases API URL to fetch metadata from")
    parser.add_argument("--no-reload", action="store_true", help="Do not restart the firewall service")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar while scanning the database")
    return parser.parse_args(argv)


def build_config(argv: list[str] | None = None) -> PipelineConfig:
    """Environment defaults, overridden by command line flags."""
    args = _parse_args(argv)
    config = PipelineConfig.from_env()

    if args.country:
        config.country_code = args.country
    if args.db_path:
        config.database_path = args.db_path
    if args.download_path:
        config.download_path = args.download_path
    if args.ipv4_output:
        config.ipv4_output = args.ipv4_output
    if args.ipv6_output:
        config.ipv6_output = args.ipv6_output
    if args.release_url:
        config.release_url = args.release_url
    if args.no_reload:
        config.reload = False
    if args.progress:
        config.progress = True

    return config


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the script."""
    rich_traceback_install()
    load_dotenv()

    try:
        config = build_config(argv)
    except ValueError as e:
        log_error(e)
        return 1

    try:
        run_pipeline(config)
    except PipelineError as e:
        log_error(e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
