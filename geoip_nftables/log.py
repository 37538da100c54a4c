"""Timestamped log lines on stdout."""

from datetime import datetime

from rich.console import Console

console = Console(markup=False, highlight=False, soft_wrap=True)


def _timestamp() -> str:
    """Current local time in RFC 3339 form."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


def log_info(message: str) -> None:
    """Print an INFO line."""
    console.print(f"[{_timestamp()}] INFO: {message}")


def log_error(error: object) -> None:
    """Print an ERROR line."""
    console.print(f"[{_timestamp()}] ERROR: {error}")
