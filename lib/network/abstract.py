"""
Abstract network client, dood!

``Network`` is the capability contract shared by the live executor and the
mock dispatchers: get, post, ping and local fixture loading.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import unquote, urlsplit

import aiofiles

from .constants import DEFAULT_FIXTURE_ROOT, FIXTURE_EXTENSION
from .endpoint import CustomHost
from .exceptions import TransportError


class Network(ABC):
    """Abstract base class for all network clients, dood!

    Implementations raise only ``NetworkAPIError`` subclasses and never
    retry on their own.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        customHost: Optional[CustomHost] = None,
        fixtureRoot: str = DEFAULT_FIXTURE_ROOT,
    ):
        """Initialize client, dood!

        Args:
            logger: Logger for request/response debugging (module logger if None)
            customHost: Host configuration the client was built for
            fixtureRoot: Default directory for local JSON fixtures
        """
        self.logger = logger or logging.getLogger(type(self).__module__)
        self.customHost = customHost
        self.fixtureRoot = fixtureRoot

    @abstractmethod
    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes:
        """Perform GET request.

        Args:
            url: Absolute URL, usually ``Endpoint.url``
            headers: Optional HTTP headers

        Returns:
            Response body

        Raises:
            NetworkAPIError: On any failure
        """
        raise NotImplementedError

    @abstractmethod
    async def post(self, url: str, headers: Optional[Dict[str, str]] = None, body: bytes = b"") -> bytes:
        """Perform POST request with given body, same contract as ``get``."""
        raise NotImplementedError

    @abstractmethod
    async def ping(self, url: str) -> None:
        """Check that host is reachable.

        Raises:
            NoNetworkError: If the host is not reachable
        """
        raise NotImplementedError

    async def loadLocalFixture(self, name: str, root: Optional[str] = None) -> bytes:
        """Load ``<root>/<name>.json`` as raw bytes.

        Args:
            name: Fixture name without extension
            root: Directory to load from (client's fixtureRoot if None)

        Returns:
            File content, unmodified

        Raises:
            TransportError: If the file cannot be read
        """
        path = Path(root or self.fixtureRoot) / f"{name}{FIXTURE_EXTENSION}"
        try:
            async with aiofiles.open(str(path), "rb") as file:
                return await file.read()
        except OSError as e:
            self.logger.warning(f"Failed to load fixture {path}: {type(e).__name__}#{e}")
            raise TransportError(f"Fixture {path} could not be loaded") from e

    async def getFile(self, fileUrl: str, root: Optional[str] = None) -> bytes:
        """Load fixture named by the last component of a file URL.

        ``file:///mocks/users`` and ``file:///mocks/users.json`` both load
        ``users.json`` from ``root``.
        """
        name = unquote(urlsplit(fileUrl).path).rstrip("/").rsplit("/", 1)[-1]
        if name.endswith(FIXTURE_EXTENSION):
            name = name[: -len(FIXTURE_EXTENSION)]
        if not name:
            raise TransportError(f"No file name in {fileUrl}")
        return await self.loadLocalFixture(name, root)
