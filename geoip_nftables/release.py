"""GitHub release lookup and database download."""

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

import requests

REQUESTS_TIMEOUT = 10
DOWNLOAD_CHUNK_SIZE = 1 << 16


class ReleaseError(Exception):
    """Release metadata or the database asset could not be retrieved."""


@dataclass(frozen=True)
class Asset:
    """A downloadable file attached to a release."""

    name: str
    browser_download_url: str


@dataclass(frozen=True)
class Release:
    """Latest release metadata."""

    tag_name: str
    assets: tuple[Asset, ...]

    @classmethod
    def from_json(cls, data: object) -> "Release":
        """Build a release from the decoded GitHub API response."""
        if not isinstance(data, dict):
            msg = "Release metadata is not a JSON object"
            raise ReleaseError(msg)

        try:
            assets = tuple(
                Asset(name=asset["name"], browser_download_url=asset["browser_download_url"])
                for asset in data.get("assets") or []
            )
        except (KeyError, TypeError) as e:
            msg = f"Malformed asset in release metadata: {e}"
            raise ReleaseError(msg) from e

        return cls(tag_name=str(data.get("tag_name") or ""), assets=assets)


def fetch_release(url: str, timeout: float = REQUESTS_TIMEOUT) -> Release:
    """Fetch and decode release metadata from the GitHub releases API."""
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        msg = f"Failed to fetch release metadata from {url}: {e}"
        raise ReleaseError(msg) from e

    return Release.from_json(data)


def file_extension(name: str) -> str:
    """Return the extension of the last path element, from its final dot on ("" if it has none)."""
    base = PurePosixPath(name).name
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def resolve_asset(release: Release, extension: str = ".mmdb") -> Asset:
    """Return the first asset whose file extension is the given one."""
    for asset in release.assets:
        if file_extension(asset.name) == extension:
            return asset

    msg = f"No {extension} file found in release {release.tag_name or '(untagged)'}"
    raise ReleaseError(msg)


def download_asset(url: str, destination: Path, timeout: float = REQUESTS_TIMEOUT) -> None:
    """Stream the file at url to destination, overwriting it."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            if response.status_code != requests.codes.ok:
                msg = f"Download failed: {response.status_code}"
                raise ReleaseError(msg)

            with destination.open("wb") as f:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    f.write(chunk)
    except requests.RequestException as e:
        msg = f"Failed to download {url}: {e}"
        raise ReleaseError(msg) from e
