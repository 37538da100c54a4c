"""Update pipeline: fetch the database, extract a country, write sets, reload."""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from geoip_nftables.config import PipelineConfig
from geoip_nftables.log import log_info
from geoip_nftables.maxmind import extract_from_file
from geoip_nftables.nftables import IPV4_ADDR, IPV6_ADDR, RuleSet
from geoip_nftables.release import Asset, download_asset, fetch_release, resolve_asset
from geoip_nftables.service import reload_firewall


class Stage(Enum):
    FETCH_METADATA = "fetch metadata"
    RESOLVE_ASSET = "resolve asset"
    DOWNLOAD = "download"
    REPLACE = "replace database"
    EXTRACT = "extract"
    SERIALIZE_V4 = "serialize IPv4 set"
    SERIALIZE_V6 = "serialize IPv6 set"
    RELOAD = "reload firewall"
    DONE = "done"


class PipelineError(Exception):
    """A stage failed; the run stops at the first one."""

    def __init__(self, stage: Stage, cause: Exception):
        super().__init__(f"{stage.value} failed: {cause}")
        self.stage = stage
        self.cause = cause


@dataclass
class PipelineResult:
    """Summary of a completed run."""

    tag_name: str
    asset: Asset
    ipv4_count: int
    ipv6_count: int
    stage: Stage = Stage.DONE


@contextmanager
def _stage(stage: Stage) -> Iterator[None]:
    """Wrap any failure inside the block as a PipelineError for stage."""
    try:
        yield
    except PipelineError:
        raise
    except Exception as e:
        raise PipelineError(stage, e) from e


def run_pipeline(config: PipelineConfig) -> PipelineResult:
    """Run every stage in order, raising PipelineError on the first failure."""
    log_info("Fetching latest GitHub release metadata...")
    with _stage(Stage.FETCH_METADATA):
        release = fetch_release(config.release_url, timeout=config.requests_timeout)
    log_info(f"Latest tag: {release.tag_name}")

    with _stage(Stage.RESOLVE_ASSET):
        asset = resolve_asset(release, config.asset_extension)
    log_info(f"MMDB download URL: {asset.browser_download_url}")

    log_info("Downloading MMDB...")
    with _stage(Stage.DOWNLOAD):
        download_asset(asset.browser_download_url, config.download_path, timeout=config.requests_timeout)
    log_info("Download complete.")

    log_info("Replacing old MMDB...")
    with _stage(Stage.REPLACE):
        config.database_path.parent.mkdir(parents=True, exist_ok=True)
        os.replace(config.download_path, config.database_path)

    log_info("Parsing MMDB and generating nftables sets...")
    with _stage(Stage.EXTRACT):
        networks = extract_from_file(config.database_path, config.country_code, progress=config.progress)

    with _stage(Stage.SERIALIZE_V4):
        RuleSet(config.ipv4_set_name, IPV4_ADDR, tuple(networks.ipv4)).write(config.ipv4_output)
    with _stage(Stage.SERIALIZE_V6):
        RuleSet(config.ipv6_set_name, IPV6_ADDR, tuple(networks.ipv6)).write(config.ipv6_output)

    log_info("Generated:")
    log_info(f"- {config.ipv4_output} ({len(networks.ipv4)} IPv4 ranges)")
    log_info(f"- {config.ipv6_output} ({len(networks.ipv6)} IPv6 ranges)")

    if config.reload:
        log_info("Reloading nftables...")
        with _stage(Stage.RELOAD):
            reload_firewall(config.reload_command)
    else:
        log_info("Skipping firewall reload.")

    log_info("Done.")
    return PipelineResult(
        tag_name=release.tag_name,
        asset=asset,
        ipv4_count=len(networks.ipv4),
        ipv6_count=len(networks.ipv6),
    )
