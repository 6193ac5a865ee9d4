"""Reading and writing grid records as JSON, from disk or a URL."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any

from hexgrid.grid.errors import GridRecordError

logger = logging.getLogger(__name__)


def write_record(path: str | Path, record: dict[str, Any]) -> None:
    """Write a grid record to ``path`` as UTF-8 JSON."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(record, f, indent=2)
    logger.info("Wrote %d cells to %s", len(record.get("cells", ())), path)


def read_record(path: str | Path) -> dict[str, Any]:
    """Read a grid record from a UTF-8 JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        GridRecordError: If the file is not valid UTF-8 JSON.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            msg = f"{path} is not a valid grid file: {exc}"
            raise GridRecordError(msg) from exc


def fetch_record(url: str, timeout: float = 30.0) -> dict[str, Any]:
    """Download a grid record from ``url``.

    Args:
        url: Location of a JSON grid record.
        timeout: Socket timeout in seconds.

    Raises:
        GridRecordError: If the request fails or the body is not UTF-8
            JSON.
    """
    logger.info("Fetching grid from %s", url)
    req = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read()
    except (urllib.error.URLError, OSError) as exc:
        msg = f"could not fetch grid from {url}: {exc}"
        raise GridRecordError(msg) from exc
    try:
        return json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"{url} did not return a valid grid record: {exc}"
        raise GridRecordError(msg) from exc
