"""
Network Factory

Chooses the network client implementation once, at construction time.
Mock clients are only reachable in debug runs: the whole mock branch sits
under ``if __debug__``, which CPython drops when running with ``-O``.
"""

import base64
import binascii
import logging
import os
import sys
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import httpx
from pydantic import ValidationError

from .abstract import Network
from .client import DefaultNetwork
from .constants import DEFAULT_FIXTURE_ROOT, DEFAULT_TIMEOUT, MAPPER_ENV_KEY, MOCK_ARGUMENT
from .endpoint import CustomHost
from .mock import NetworkAPI, NetworkMock
from .models import NetworkMockData, NetworkMockDataList

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkFactoryConfig:
    """Process state the factory decides on, captured once at startup.

    Attributes:
        arguments: Command line arguments, the literal "mock" enables mock mode
        environment: Environment variables (mapper channel and path overrides)
        debug: Allow mock clients at all
    """

    arguments: Tuple[str, ...] = ()
    environment: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    debug: bool = __debug__

    @classmethod
    def fromProcess(
        cls,
        arguments: Optional[Sequence[str]] = None,
        environment: Optional[Mapping[str, str]] = None,
    ) -> "NetworkFactoryConfig":
        """Capture sys.argv and os.environ (or given replacements)."""
        return cls(
            arguments=tuple(sys.argv if arguments is None else arguments),
            environment=MappingProxyType(dict(os.environ if environment is None else environment)),
            debug=__debug__,
        )

    @property
    def isMockRequested(self) -> bool:
        return MOCK_ARGUMENT in self.arguments


def encodeMapper(entries: Iterable[NetworkMockData]) -> str:
    """Encode mock entries for the ``mapper`` environment variable.

    Returns:
        Base64 of the JSON array of entries
    """
    raw = NetworkMockDataList.dump_json(list(entries), exclude_none=True)
    return base64.b64encode(raw).decode("ascii")


def decodeMapper(value: Optional[str]) -> Optional[List[NetworkMockData]]:
    """Decode ``mapper`` environment variable.

    Returns:
        List of mock entries or None if value is missing or cannot be decoded
    """
    if not value:
        return None
    try:
        raw = base64.b64decode(value, validate=True)
        return NetworkMockDataList.validate_json(raw)
    except (binascii.Error, ValueError, ValidationError) as e:
        logger.warning(f"Ignoring undecodable {MAPPER_ENV_KEY} value: {type(e).__name__}#{e}")
        return None


class NetworkFactory:
    """Builds the network client for current configuration, dood!

    Example:
        >>> network = NetworkFactory.make(
        ...     host=CustomHost(host="api.example.com", path="/v1"),
        ...     config=NetworkFactoryConfig.fromProcess(),
        ... )
    """

    @staticmethod
    def make(
        logger: Optional[logging.Logger] = None,
        host: Optional[CustomHost] = None,
        mapper: Optional[Sequence[NetworkMockData]] = None,
        config: Optional[NetworkFactoryConfig] = None,
        timeout: float = DEFAULT_TIMEOUT,
        trustAllCertificates: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        fixtureRoot: str = DEFAULT_FIXTURE_ROOT,
        fallbackToLive: bool = False,
    ) -> Network:
        """Create network client.

        In debug runs returns NetworkMock if:
            - arguments contain "mock" and environment "mapper" decodes to mock entries, or
            - mapper is given explicitly
        Otherwise returns DefaultNetwork. With fallbackToLive the mock client is
        NetworkAPI, which sends requests without a mock to the real host.

        Args:
            logger: Logger passed to the client
            host: Host configuration for this environment
            mapper: Explicit mock entries (debug runs only)
            config: Captured process state (empty config if None)
            timeout: Request timeout for DefaultNetwork
            trustAllCertificates: Skip TLS validation in DefaultNetwork
            transport: Custom httpx transport for DefaultNetwork
            fixtureRoot: Default fixture directory
            fallbackToLive: Fall back to real requests when no mock matches

        Returns:
            Network client
        """
        config = config or NetworkFactoryConfig()

        if __debug__:
            if config.debug:
                envMapper = decodeMapper(config.environment.get(MAPPER_ENV_KEY)) if config.isMockRequested else None
                selected = envMapper if envMapper is not None else mapper
                if selected is not None:
                    source = "environment" if envMapper is not None else "caller"
                    factoryLogger = logger or logging.getLogger(__name__)
                    factoryLogger.info(f"Using mock network with {len(selected)} entries from {source}")
                    if fallbackToLive:
                        return NetworkAPI(
                            logger=logger,
                            customHost=host,
                            mapper=selected,
                            overrides=config.environment,
                            fixtureRoot=fixtureRoot,
                            timeout=timeout,
                            trustAllCertificates=trustAllCertificates,
                            transport=transport,
                        )
                    return NetworkMock(
                        logger=logger,
                        customHost=host,
                        mapper=selected,
                        overrides=config.environment,
                        fixtureRoot=fixtureRoot,
                    )

        return DefaultNetwork(
            logger=logger,
            customHost=host,
            timeout=timeout,
            trustAllCertificates=trustAllCertificates,
            transport=transport,
            fixtureRoot=fixtureRoot,
        )

