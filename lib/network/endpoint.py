"""
Endpoint and Host Configuration

This module provides ``CustomHost`` (where requests go) and ``Endpoint``
(one resolvable request target), plus ``buildUrl`` which assembles the
absolute URL from them.

Example:
    >>> host = CustomHost(host="api.example.com", path="/v1")
    >>> Endpoint(host, "/users", [("page", "1")]).url
    'https://api.example.com/v1/users?page=1'
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

logger = logging.getLogger(__name__)

QueryItem = Tuple[str, Optional[str]]

# Characters kept as-is in the URL path (RFC 3986 pchar plus "/" and "%")
_PATH_SAFE = "/:@!$&'()*+,;=-._~%"


def _withLeadingSlash(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    if not value.startswith("/"):
        return f"/{value}"
    return value


@dataclass(frozen=True)
class CustomHost:
    """Host configuration for one environment (dev, staging, prod), dood!

    Attributes:
        secure: Use https if True, http otherwise
        host: Host name or IP address
        port: Optional non-standard port
        path: Optional base path prepended to every API path (e.g. "/v1")
        api: Optional pinned API path, replaces the path given to an Endpoint
        queryItems: Optional pinned query items, replace the ones given to an Endpoint
    """

    host: str
    secure: bool = True
    port: Optional[int] = None
    path: Optional[str] = None
    api: Optional[str] = None
    queryItems: Optional[Tuple[QueryItem, ...]] = None

    @classmethod
    def fromDict(cls, config: Optional[Dict[str, Any]]) -> "CustomHost":
        """Build host from a configuration mapping.

        Keys: secure, host, port, path, api, query (table or list of pairs).
        Missing host falls back to ``DEFAULT_HOST``.
        """
        if not config:
            return DEFAULT_HOST
        if not config.get("host"):
            logger.warning(
                f"Host configuration with keys {sorted(config)} has no host, using {DEFAULT_HOST.host} instead"
            )
            return DEFAULT_HOST

        query = config.get("query")
        queryItems: Optional[Tuple[QueryItem, ...]] = None
        if isinstance(query, dict):
            queryItems = tuple((str(k), None if v is None else str(v)) for k, v in query.items())
        elif isinstance(query, list):
            queryItems = tuple((str(item[0]), None if len(item) < 2 else str(item[1])) for item in query)

        port = config.get("port")
        return cls(
            host=str(config["host"]),
            secure=bool(config.get("secure", True)),
            port=int(port) if port is not None else None,
            path=config.get("path"),
            api=config.get("api"),
            queryItems=queryItems,
        )


DEFAULT_HOST = CustomHost(host="localhost")


def encodeQuery(queryItems: Sequence[QueryItem]) -> str:
    """Encode query items keeping order and duplicates.

    Items with None value are rendered as bare name.
    """
    parts: List[str] = []
    for name, value in queryItems:
        encodedName = quote(str(name), safe="")
        if value is None:
            parts.append(encodedName)
        else:
            parts.append(f"{encodedName}={quote(str(value), safe='')}")
    return "&".join(parts)


def buildUrl(
    host: Optional[CustomHost],
    api: Optional[str] = None,
    queryItems: Optional[Sequence[QueryItem]] = None,
) -> str:
    """Build absolute URL from host configuration, API path and query items.

    Never raises: bad input gives best-effort URL, errors surface on execution.

    Args:
        host: Host configuration, DEFAULT_HOST if None
        api: API path (e.g. "/users"), empty path gives host base path
        queryItems: Ordered (name, value) pairs, may contain duplicates

    Returns:
        URL like scheme://host[:port][path][api][?query]
    """
    host = host or DEFAULT_HOST
    scheme = "https" if host.secure else "http"
    netloc = host.host or ""
    if host.port is not None:
        netloc = f"{netloc}:{host.port}"

    fullPath = (_withLeadingSlash(host.path) or "") + (_withLeadingSlash(api) or "")
    url = f"{scheme}://{netloc}{quote(fullPath, safe=_PATH_SAFE)}"

    if queryItems:
        url = f"{url}?{encodeQuery(queryItems)}"
    return url


class Endpoint:
    """One resolvable request target, dood!

    Host pins win: if the host carries ``api`` or ``queryItems``, they replace
    the values passed here.
    """

    def __init__(
        self,
        customHost: Optional[CustomHost] = None,
        api: str = "",
        queryItems: Optional[Sequence[QueryItem]] = None,
    ):
        host = customHost or DEFAULT_HOST
        self.customHost: CustomHost = host
        self.isSecure: bool = host.secure
        self.host: str = host.host
        self.port: Optional[int] = host.port
        self.path: Optional[str] = _withLeadingSlash(host.path)
        self.api: str = _withLeadingSlash(host.api if host.api is not None else api) or ""
        pinnedQuery = host.queryItems if host.queryItems is not None else queryItems
        self.queryItems: Optional[Tuple[QueryItem, ...]] = tuple(pinnedQuery) if pinnedQuery is not None else None

    @property
    def url(self) -> str:
        """Absolute URL for this endpoint."""
        return buildUrl(
            CustomHost(host=self.host, secure=self.isSecure, port=self.port, path=self.path),
            self.api,
            self.queryItems,
        )

    @property
    def restApi(self) -> str:
        """Base path plus API path, used to match mock entries."""
        return f"{self.path or ''}{self.api}"

    def __repr__(self) -> str:
        return f"Endpoint({self.url!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Endpoint):
            return NotImplemented
        return self.url == other.url

    def __hash__(self) -> int:
        return hash(self.url)
