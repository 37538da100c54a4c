"""Shared fixtures: a small on-disk country database with IPv4 alias subtrees."""

import ipaddress

import pytest

METADATA_MARKER = b"\xab\xcd\xefMaxMind.com"
DATA_SECTION_SEPARATOR = b"\x00" * 16
RECORD_BYTES = 3

COUNTRY_NETWORKS = [
    ("1.0.1.0/24", "CN"),
    ("8.8.8.0/24", "US"),
    ("36.0.0.0/10", "CN"),
    ("2400:cb00::/32", "US"),
    ("240e::/20", "CN"),
]

# Networks that re-point at the IPv4 subtree of an IPv6 database
IPV4_ALIASES = ["::ffff:0:0/96", "2002::/16"]


def _control(type_number, size):
    if type_number <= 7:
        return bytes([(type_number << 5) | size])
    return bytes([size, type_number - 7])


def _uint(type_number, value):
    payload = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return _control(type_number, len(payload)) + payload


def _encode(value):
    """Encode a value in the MaxMind DB data section format."""
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        raw = value.encode()
        return _control(2, len(raw)) + raw
    if isinstance(value, dict):
        return _control(7, len(value)) + b"".join(_encode(k) + _encode(v) for k, v in value.items())
    if isinstance(value, list):
        return _control(11, len(value)) + b"".join(_encode(item) for item in value)
    raise TypeError(value)


def build_country_database(networks, aliases):
    """Build an IPv6 MaxMind DB with 24-bit records.

    IPv4 networks are stored under ::/96 and every alias network points at
    that subtree, the way GeoIP2/GeoLite2 country databases are laid out.
    """
    nodes = [[None, None]]

    def walk(value, prefixlen):
        """Return the node holding the record for the last bit of the prefix, creating nodes on the way."""
        node = 0
        for depth in range(prefixlen - 1):
            bit = (value >> (127 - depth)) & 1
            if nodes[node][bit] is None:
                nodes.append([None, None])
                nodes[node][bit] = ("node", len(nodes) - 1)
            node = nodes[node][bit][1]
        return node, (value >> (128 - prefixlen)) & 1

    data = b""
    for cidr, code in networks:
        network = ipaddress.ip_network(cidr)
        prefixlen = network.prefixlen + (96 if network.version == 4 else 0)
        node, bit = walk(int(network.network_address), prefixlen)
        nodes[node][bit] = ("data", len(data))
        data += _encode({"country": {"iso_code": code}})

    ipv4_start, _ = walk(0, 97)
    for cidr in aliases:
        network = ipaddress.ip_network(cidr)
        node, bit = walk(int(network.network_address), network.prefixlen)
        nodes[node][bit] = ("node", ipv4_start)

    node_count = len(nodes)

    def record_value(record):
        if record is None:
            return node_count
        kind, value = record
        if kind == "node":
            return value
        return node_count + len(DATA_SECTION_SEPARATOR) + value

    tree = b"".join(
        record_value(left).to_bytes(RECORD_BYTES, "big") + record_value(right).to_bytes(RECORD_BYTES, "big")
        for left, right in nodes
    )
    metadata = {
        "node_count": _uint(6, node_count),
        "record_size": _uint(5, RECORD_BYTES * 8),
        "ip_version": _uint(5, 6),
        "database_type": "GeoLite2-Country",
        "languages": ["en"],
        "binary_format_major_version": _uint(5, 2),
        "binary_format_minor_version": _uint(5, 0),
        "build_epoch": _uint(9, 1760745600),
        "description": {"en": "Country test database"},
    }
    return tree + DATA_SECTION_SEPARATOR + data + METADATA_MARKER + _encode(metadata)


@pytest.fixture
def country_db(tmp_path):
    """Path of a country database with IPv4 alias subtrees."""
    db_path = tmp_path / "GeoLite2-Country.mmdb"
    db_path.write_bytes(build_country_database(COUNTRY_NETWORKS, IPV4_ALIASES))
    return db_path
