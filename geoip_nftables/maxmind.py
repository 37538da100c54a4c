"""MaxMind country database extraction utilities."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import maxminddb
from tqdm import tqdm

from geoip_nftables.log import log_info
from geoip_nftables.network import IPV4, ClassifiedNetwork, IPNetwork, classify_network

Entry = tuple[IPNetwork | str, object]


class DatabaseError(Exception):
    """The country database could not be opened."""


@dataclass
class CountryNetworks:
    """Networks of one country, split by address family in database order."""

    ipv4: list[str] = field(default_factory=list)
    ipv6: list[str] = field(default_factory=list)


def _matching_networks(entries: Iterable[Entry], target_code: str) -> Iterator[ClassifiedNetwork]:
    """Yield the classified networks of the target country, dropping everything else."""
    for network, record in entries:
        classified = classify_network(network, record, target_code)
        if classified is not None:
            yield classified


def extract_country_networks(
    entries: Iterable[Entry],
    target_code: str,
    progress: bool = False,
) -> CountryNetworks:
    """Collect the networks of a country from database entries.

    Args:
        entries: (network, record) pairs, e.g. an open maxminddb reader
        target_code: 2-letter ISO country code, matched exactly
        progress: Show a progress bar while iterating

    Returns:
        IPv4 and IPv6 CIDRs in the order the entries produced them
    """
    networks = CountryNetworks()

    with tqdm(entries, desc=f"Scanning networks for {target_code}", unit=" networks", disable=not progress) as pbar:
        for classified in _matching_networks(pbar, target_code):
            if classified.family == IPV4:
                networks.ipv4.append(classified.cidr)
            else:
                networks.ipv6.append(classified.cidr)

    return networks


def open_country_database(db_path: Path) -> maxminddb.Reader:
    """Open a country database, raising DatabaseError if that is not possible."""
    try:
        return maxminddb.open_database(str(db_path))
    except (OSError, ValueError, maxminddb.InvalidDatabaseError) as e:
        msg = f"Failed to open database {db_path}: {e}"
        raise DatabaseError(msg) from e


def extract_from_file(db_path: Path, target_code: str, progress: bool = False) -> CountryNetworks:
    """Open the database at db_path and extract the networks of target_code."""
    with open_country_database(db_path) as reader:
        networks = extract_country_networks(reader, target_code, progress=progress)

    log_info(f"Extracted {len(networks.ipv4)} IPv4 and {len(networks.ipv6)} IPv6 ranges for {target_code}")
    return networks
