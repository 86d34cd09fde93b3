"""Loading of newline-delimited wallet and proxy lists."""

from __future__ import annotations

from pathlib import Path

import structlog

from sealbot.core.errors import NoWalletsLoaded

logger = structlog.get_logger(__name__)


def read_list_file(path: Path | str) -> list[str]:
    """
    Read a newline-delimited list, skipping blank lines and ``#`` comments.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    entries = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(line)
    return entries


def load_wallets(path: Path | str) -> list[str]:
    """
    Load wallet credentials.

    Raises:
        NoWalletsLoaded: If the file is missing, unreadable or empty
    """
    path = Path(path)
    try:
        wallets = read_list_file(path)
    except FileNotFoundError as e:
        raise NoWalletsLoaded(str(path), "file not found") from e
    except OSError as e:
        raise NoWalletsLoaded(str(path), str(e)) from e

    if not wallets:
        raise NoWalletsLoaded(str(path), "no wallet keys or phrases in file")

    logger.info("Wallets loaded", path=str(path), count=len(wallets))
    return wallets


def load_proxies(path: Path | str | None) -> list[str]:
    """Load proxy entries. A missing file means running without proxies."""
    if path is None:
        return []
    path = Path(path)
    if not path.exists():
        logger.info("Proxy file not found, proceeding without proxies", path=str(path))
        return []
    proxies = read_list_file(path)
    logger.info("Proxies loaded", path=str(path), count=len(proxies))
    return proxies
