"""Country matching and CIDR normalisation for single database entries."""

import ipaddress
from dataclasses import dataclass

IPV4 = "ipv4"
IPV6 = "ipv6"

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


@dataclass(frozen=True)
class ClassifiedNetwork:
    """A network belonging to the target country, in canonical CIDR form."""

    family: str
    cidr: str


def country_code(record: object) -> str:
    """Return the ISO country code of a database record, or "" if it has none."""
    if not isinstance(record, dict):
        return ""

    country = record.get("country")
    if not isinstance(country, dict):
        return ""

    iso_code = country.get("iso_code")
    if not isinstance(iso_code, str):
        return ""

    return iso_code


def classify_network(
    network: IPNetwork | str,
    record: object,
    target_code: str,
) -> ClassifiedNetwork | None:
    """Classify one database entry against the target country.

    Args:
        network: The entry's network, as an ipaddress network or CIDR text
        record: The decoded database record for the network
        target_code: ISO country code to match, compared case-sensitively

    Returns:
        The address family and canonical CIDR when the record belongs to the
        target country, otherwise None. Networks that cannot be parsed are
        treated as not matching.
    """
    if country_code(record) != target_code:
        return None

    try:
        parsed = ipaddress.ip_network(str(network), strict=False)
    except ValueError:
        return None

    # IPv4-mapped IPv6 ranges have a 4-byte form and belong in the IPv4 set
    if isinstance(parsed, ipaddress.IPv6Network) and parsed.network_address.ipv4_mapped is not None and parsed.prefixlen >= 96:
        parsed = ipaddress.IPv4Network((parsed.network_address.ipv4_mapped, parsed.prefixlen - 96))

    family = IPV4 if parsed.version == 4 else IPV6
    return ClassifiedNetwork(family=family, cidr=f"{parsed.network_address}/{parsed.prefixlen}")
