"""Best-effort check for a newer simplebill release on GitHub."""

from __future__ import annotations

import logging
import os
import sys
import time
from pathlib import Path
from typing import Any, TextIO

import requests
from packaging.version import InvalidVersion, Version

from .config import load_config, store_dir
from .errors import ConfigFileError, NotInitializedError

logger = logging.getLogger(__name__)

RELEASE_URL = "https://api.github.com/repos/mycobee/simplebill/releases/latest"
RELEASES_PAGE = "https://github.com/mycobee/simplebill/releases"
CHECK_FILE = ".last-version-check"
CHECK_INTERVAL = 24 * 60 * 60
TIMEOUT = 3.0
DISABLE_ENV = "SIMPLEBILL_NO_UPDATE_CHECK"


def is_newer(latest: str, current: str) -> bool:
    """Whether release tag ``latest`` is newer than ``current`` (``v`` prefix ignored)."""

    try:
        return Version(latest.lstrip("v")) > Version(current.lstrip("v"))
    except InvalidVersion:
        return latest.lstrip("v") != current.lstrip("v")


def _cached_tag(check_file: Path, now: float) -> str | None:
    try:
        if now - check_file.stat().st_mtime >= CHECK_INTERVAL:
            return None
        return check_file.read_text(encoding="utf-8").strip()
    except OSError:
        return None


def fetch_latest_tag(session: Any = requests) -> str | None:
    response = session.get(
        RELEASE_URL,
        timeout=TIMEOUT,
        headers={"Accept": "application/vnd.github+json"},
    )
    if response.status_code != 200:
        logger.debug("Release check returned HTTP %s", response.status_code)
        return None
    payload = response.json()
    if not isinstance(payload, dict):
        logger.debug("Release check returned unexpected payload %r", payload)
        return None
    tag = payload.get("tag_name")
    return str(tag) if tag else None


def _warn(current: str, latest: str, stream: TextIO) -> None:
    print(f"simplebill {latest} available (you have {current}) - {RELEASES_PAGE}", file=stream)
    print("(suppress with skip_update_check: true in config.yml)\n", file=stream)


def check_for_update(
    current_version: str,
    *,
    session: Any = requests,
    stream: TextIO | None = None,
    now: float | None = None,
) -> str | None:
    """Print a warning when a newer release exists; return the newer tag, if any.

    Looks at the network at most once per 24 hours and never raises.
    """

    if os.getenv(DISABLE_ENV, "").strip():
        return None

    try:
        if load_config().skip_update_check:
            return None
    except (NotInitializedError, ConfigFileError):
        pass

    stream = sys.stderr if stream is None else stream
    now = time.time() if now is None else now
    directory = store_dir()
    check_file = directory / CHECK_FILE

    latest = _cached_tag(check_file, now)
    if latest is None:
        try:
            latest = fetch_latest_tag(session)
        except (requests.RequestException, ValueError) as exc:
            logger.debug("Release check failed: %s", exc)
            return None
        if latest is None:
            return None
        if directory.is_dir():
            try:
                check_file.write_text(latest, encoding="utf-8")
            except OSError as exc:
                logger.debug("Could not cache release tag: %s", exc)

    if latest and is_newer(latest, current_version):
        _warn(current_version, latest, stream)
        return latest
    return None


__all__ = ["RELEASE_URL", "CHECK_FILE", "is_newer", "fetch_latest_tag", "check_for_update"]
