"""Runtime configuration."""

import os
import shlex
from dataclasses import dataclass
from pathlib import Path

from geoip_nftables.release import REQUESTS_TIMEOUT
from geoip_nftables.service import DEFAULT_RELOAD_COMMAND

ENV_PREFIX = "GEOIP_NFT_"

RELEASE_URL = "https://api.github.com/repos/P3TERX/GeoLite.mmdb/releases/latest"
DB_PATH = Path("/usr/share/GeoIP/GeoLite2-Country.mmdb")
DOWNLOAD_PATH = Path("/tmp/GeoLite2-Country.mmdb")
IPV4_OUTPUT_PATH = Path("/etc/nftables.d/cn4.nft")
IPV6_OUTPUT_PATH = Path("/etc/nftables.d/cn6.nft")


@dataclass
class PipelineConfig:
    """Everything one update run needs to know."""

    release_url: str = RELEASE_URL
    asset_extension: str = ".mmdb"
    database_path: Path = DB_PATH
    download_path: Path = DOWNLOAD_PATH
    country_code: str = "CN"
    ipv4_output: Path = IPV4_OUTPUT_PATH
    ipv6_output: Path = IPV6_OUTPUT_PATH
    ipv4_set_name: str = "cn4"
    ipv6_set_name: str = "cn6"
    reload_command: tuple[str, ...] = DEFAULT_RELOAD_COMMAND
    requests_timeout: float = REQUESTS_TIMEOUT
    reload: bool = True
    progress: bool = False

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Build a config from GEOIP_NFT_* environment variables, falling back to defaults."""
        config = cls()

        def env(name: str) -> str | None:
            return os.getenv(ENV_PREFIX + name) or None

        if value := env("RELEASE_URL"):
            config.release_url = value
        if value := env("ASSET_EXTENSION"):
            config.asset_extension = value
        if value := env("DB_PATH"):
            config.database_path = Path(value)
        if value := env("DOWNLOAD_PATH"):
            config.download_path = Path(value)
        if value := env("COUNTRY"):
            config.country_code = value
        if value := env("IPV4_OUTPUT"):
            config.ipv4_output = Path(value)
        if value := env("IPV6_OUTPUT"):
            config.ipv6_output = Path(value)
        if value := env("IPV4_SET_NAME"):
            config.ipv4_set_name = value
        if value := env("IPV6_SET_NAME"):
            config.ipv6_set_name = value
        if value := env("RELOAD_COMMAND"):
            config.reload_command = tuple(shlex.split(value))
        if value := env("REQUESTS_TIMEOUT"):
            try:
                config.requests_timeout = float(value)
            except ValueError as e:
                msg = f"Invalid {ENV_PREFIX}REQUESTS_TIMEOUT: {value!r}"
                raise ValueError(msg) from e

        return config
