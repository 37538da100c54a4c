"""Firewall service control."""

import subprocess
from collections.abc import Sequence

DEFAULT_RELOAD_COMMAND = ("systemctl", "restart", "nftables")


class ReloadError(Exception):
    """The firewall reload command failed."""


def reload_firewall(command: Sequence[str] = DEFAULT_RELOAD_COMMAND) -> str:
    """Run the reload command and return its combined output."""
    try:
        result = subprocess.run(
            list(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except OSError as e:
        msg = f"Failed to run {' '.join(command)}: {e}"
        raise ReloadError(msg) from e

    if result.returncode != 0:
        msg = f"{' '.join(command)} exited with status {result.returncode}, output: {result.stdout.strip()}"
        raise ReloadError(msg)

    return result.stdout
