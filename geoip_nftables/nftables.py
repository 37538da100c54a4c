"""nftables set file generation."""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

IPV4_ADDR = "ipv4_addr"
IPV6_ADDR = "ipv6_addr"
ADDR_TYPES = (IPV4_ADDR, IPV6_ADDR)


@dataclass(frozen=True)
class RuleSet:
    """A named nftables interval set."""

    name: str
    addr_type: str
    elements: tuple[str, ...] = ()

    def render(self) -> str:
        """Render the set as nftables text."""
        return render_set(self.name, self.addr_type, self.elements)

    def write(self, output_path: Path) -> None:
        """Write the set to output_path, replacing the file."""
        write_set_file(output_path, self.name, self.addr_type, self.elements)


def render_set(set_name: str, addr_type: str, elements: Iterable[str]) -> str:
    """Render an nftables set block, one element per line in the given order."""
    if addr_type not in ADDR_TYPES:
        msg = f"Unsupported set type: {addr_type}"
        raise ValueError(msg)

    lines = [
        f"set {set_name} {{",
        f"    type {addr_type}",
        "    flags interval",
        "    elements = {",
    ]
    lines.extend(f"        {element}," for element in elements)
    lines.append("    }")
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_set_file(output_path: Path, set_name: str, addr_type: str, elements: Iterable[str]) -> None:
    """Write a set file, replacing whatever was there before."""
    text = render_set(set_name, addr_type, elements)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(text)
