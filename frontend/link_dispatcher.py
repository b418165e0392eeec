"""
Link Dispatcher - Activation behavior for result links

- magnet:        navigate to the URL in place (OS hands it to the torrent client)
- torrent file:  fetch the bytes, save them under a filename, drop the temp copy
- anything else: open in a new browser tab

activate() never raises. A broken link is logged and otherwise ignored.
"""

import asyncio
import os
import shutil
import tempfile
import webbrowser
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import unquote, urlsplit

import httpx
import logfire
from dotenv import load_dotenv

from frontend.models import Link, LinkKind

load_dotenv()

DEFAULT_TORRENT_FILENAME = "file.torrent"
FETCH_TIMEOUT_SECONDS = 30.0
DOWNLOAD_DIR = Path(os.getenv("DOWNLOAD_DIR", str(Path.home() / "Downloads")))


class LinkActivationError(Exception):
    """A link could not be activated."""


class LinkActions(Protocol):
    """Side effects the dispatcher needs from its host environment."""

    def navigate(self, url: str) -> None:
        ...

    def open_new_tab(self, url: str) -> None:
        ...

    def save(self, source: Path, filename: str) -> None:
        ...


class DesktopLinkActions:
    """LinkActions backed by the system browser and a downloads folder."""

    def __init__(self, download_dir: Path = DOWNLOAD_DIR):
        self.download_dir = download_dir

    def navigate(self, url: str) -> None:
        webbrowser.open(url, new=0)

    def open_new_tab(self, url: str) -> None:
        webbrowser.open_new_tab(url)

    def save(self, source: Path, filename: str) -> None:
        self.download_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, self.download_dir / filename)


def torrent_filename(url: str) -> str:
    """Filename for a downloaded .torrent, taken from the URL when possible."""
    try:
        name = unquote(urlsplit(url).path.rsplit("/", 1)[-1])
    except ValueError:
        return DEFAULT_TORRENT_FILENAME
    if name.lower().endswith(".torrent") and len(name) > len(".torrent"):
        return name
    return DEFAULT_TORRENT_FILENAME


class LinkDispatcher:
    """Performs the activation behavior matching a link's kind."""

    def __init__(
        self,
        actions: Optional[LinkActions] = None,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.actions = actions if actions is not None else DesktopLinkActions()
        self.timeout = timeout
        self._transport = transport

    async def activate(self, link: Link) -> None:
        """Activate a link; failures are logged, never raised."""
        try:
            if link.kind == LinkKind.MAGNET:
                self.actions.navigate(link.url)
            elif link.kind == LinkKind.TORRENT_FILE:
                await self._download_torrent(link.url)
            else:
                self.actions.open_new_tab(link.url)
        except LinkActivationError as e:
            logfire.warn("Could not activate {url}: {error}", url=link.url, error=str(e))
        except Exception:
            logfire.exception("Error handling link {url}", url=link.url)

    async def _download_torrent(self, url: str) -> None:
        data = await self._fetch(url)
        await asyncio.to_thread(self._save_torrent, data, torrent_filename(url))

    def _save_torrent(self, data: bytes, filename: str) -> None:
        handle = tempfile.NamedTemporaryFile(suffix=".torrent", delete=False)
        temp_path = Path(handle.name)
        try:
            with handle:
                handle.write(data)
            self.actions.save(temp_path, filename)
        finally:
            temp_path.unlink(missing_ok=True)

    async def _fetch(self, url: str) -> bytes:
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport, follow_redirects=True
        ) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise LinkActivationError(f"torrent download returned {e.response.status_code}") from e
            except httpx.HTTPError as e:
                raise LinkActivationError(f"torrent download failed: {e}") from e
            return response.content
