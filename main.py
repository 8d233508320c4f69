"""
Network client CLI: issue GET/POST/HEAD requests against the configured host,
live or from local fixtures.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Dict, List, Optional, Sequence, Tuple

from internal.config.manager import ConfigManager
from lib.logging_utils import initLogging
from lib.network import (
    Endpoint,
    Network,
    NetworkAPIError,
    NetworkFactory,
    NetworkFactoryConfig,
    QueryItem,
    encodeMapper,
)
from lib.network.constants import MOCK_ARGUMENT, VERSION
from lib.utils import jsonDumps

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO)
# set higher logging level for httpx to avoid all GET and POST requests being logged
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def parseQueryItem(value: str) -> QueryItem:
    """Parse "name=value" (or bare "name") into query item."""
    name, sep, itemValue = value.partition("=")
    if not name:
        raise argparse.ArgumentTypeError(f"Invalid query item: {value!r}")
    return (name, itemValue if sep else None)


def parseHeader(value: str) -> Tuple[str, str]:
    """Parse "Name: value" into header pair."""
    name, sep, headerValue = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid header: {value!r}, expected 'Name: value'")
    return (name.strip(), headerValue.strip())


class NetworkCli:
    """Wires configuration, logging and the network client together."""

    def __init__(
        self,
        configPath: str = "config.toml",
        configDirs: Optional[List[str]] = None,
        mockRequested: bool = False,
        fallbackToLive: bool = False,
    ):
        self.configManager = ConfigManager(configPath, configDirs)
        initLogging(self.configManager.getLoggingConfig())

        self.customHost = self.configManager.getCustomHost()
        self.mockEntries = self.configManager.getMockEntries()

        arguments = list(sys.argv)
        if mockRequested and MOCK_ARGUMENT not in arguments:
            arguments.append(MOCK_ARGUMENT)
        factoryConfig = NetworkFactoryConfig.fromProcess(arguments=arguments)

        self.network: Network = NetworkFactory.make(
            host=self.customHost,
            mapper=self.mockEntries if mockRequested else None,
            config=factoryConfig,
            timeout=self.configManager.getTimeout(),
            trustAllCertificates=self.configManager.getTrustAllCertificates(),
            fixtureRoot=self.configManager.getFixtureRoot(),
            fallbackToLive=fallbackToLive,
        )
        logger.debug(f"Using {type(self.network).__name__} for {self.customHost}")

    async def get(self, api: str, queryItems: Sequence[QueryItem], headers: Dict[str, str]) -> bytes:
        endpoint = Endpoint(self.customHost, api, queryItems or None)
        return await self.network.get(endpoint.url, headers=headers or None)

    async def post(self, api: str, queryItems: Sequence[QueryItem], headers: Dict[str, str], body: bytes) -> bytes:
        endpoint = Endpoint(self.customHost, api, queryItems or None)
        return await self.network.post(endpoint.url, headers=headers or None, body=body)

    async def ping(self, api: str) -> None:
        await self.network.ping(Endpoint(self.customHost, api).url)


def parse_arguments(argv: Optional[Sequence[str]] = None) -> Tuple[argparse.Namespace, bool]:
    """Parse command line arguments.

    The literal "mock" argument (as passed by test launchers) is stripped
    before parsing and reported as the second tuple element.
    """
    rawArgs = list(sys.argv[1:] if argv is None else argv)
    mockRequested = MOCK_ARGUMENT in rawArgs
    rawArgs = [arg for arg in rawArgs if arg != MOCK_ARGUMENT]

    parser = argparse.ArgumentParser(description="Async network client CLI, dood!")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times), dood!",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Serve requests from [[network.mock]] fixtures or the 'mapper' environment variable",
    )
    parser.add_argument(
        "--fallback-live",
        action="store_true",
        help="In mock mode, send requests without a matching mock to the real host",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit, dood!",
    )

    commands = parser.add_subparsers(dest="command")

    getParser = commands.add_parser("get", help="Perform GET request")
    postParser = commands.add_parser("post", help="Perform POST request")
    for subParser in (getParser, postParser):
        subParser.add_argument("api", help="API path, e.g. /users")
        subParser.add_argument(
            "-q", "--query", action="append", type=parseQueryItem, default=[], help="Query item name=value"
        )
        subParser.add_argument(
            "-H", "--header", action="append", type=parseHeader, default=[], help="Header 'Name: value'"
        )

    bodyGroup = postParser.add_mutually_exclusive_group()
    bodyGroup.add_argument("--body", default="", help="Request body text")
    bodyGroup.add_argument("--body-file", help="Read request body from file")

    pingParser = commands.add_parser("ping", help="Check host reachability with HEAD request")
    pingParser.add_argument("api", nargs="?", default="", help="API path to ping (default: base path)")

    commands.add_parser("encode-mapper", help="Print base64 'mapper' value for configured mock entries")

    args = parser.parse_args(rawArgs)
    args.config = os.path.abspath(args.config)
    if args.config_dir:
        args.config_dir = [os.path.abspath(dir_path) for dir_path in args.config_dir]

    return args, mockRequested or args.mock


async def runCommand(cli: NetworkCli, args: argparse.Namespace) -> int:
    """Run selected sub-command, return process exit code."""
    try:
        match args.command:
            case "get":
                data = await cli.get(args.api, args.query, dict(args.header))
            case "post":
                if args.body_file:
                    try:
                        with open(args.body_file, "rb") as f:
                            body = f.read()
                    except OSError as e:
                        logger.error(f"Cannot read body file {args.body_file}: {type(e).__name__}#{e}")
                        return 1
                else:
                    body = args.body.encode("utf-8")
                data = await cli.post(args.api, args.query, dict(args.header), body)
            case "ping":
                await cli.ping(args.api)
                print("Host is reachable")
                return 0
            case _:
                raise ValueError(f"Unknown command: {args.command}")
    except NetworkAPIError as e:
        logger.error(f"{args.command} failed: {type(e).__name__}: {e}")
        return 1

    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()
    return 0


def main() -> None:
    """Main entry point."""
    args, mockRequested = parse_arguments()

    cli = NetworkCli(args.config, args.config_dir, mockRequested=mockRequested, fallbackToLive=args.fallback_live)

    if args.print_config:
        print(jsonDumps(cli.configManager.config, indent=2))
        sys.exit(0)

    if args.command == "encode-mapper":
        print(encodeMapper(cli.mockEntries or []))
        sys.exit(0)

    if args.command is None:
        logger.error("No command given, use --help to see available commands")
        sys.exit(2)

    sys.exit(asyncio.run(runCommand(cli, args)))


if __name__ == "__main__":
    main()
