"""
Configuration management for the network client.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli
from pydantic import ValidationError

import lib.utils as utils
from lib.network import CustomHost, NetworkMockData
from lib.network.constants import DEFAULT_FIXTURE_ROOT, DEFAULT_TIMEOUT
from lib.network.models import NetworkMockDataList

logger = logging.getLogger(__name__)


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholder with actual value.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in configuration values.

    Strings get placeholders replaced, dictionaries and lists are processed
    recursively, other values are returned unchanged.
    """
    if isinstance(value, str):
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}", replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Manages configuration loading and validation for the network client."""

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: str = ".env"
    ):
        """Initialize ConfigManager with config file path and optional config directories."""
        self.config_path = configPath
        self.config_dirs = configDirs or []
        utils.load_dotenv(path=dotEnvFile)
        self.config = substituteEnvVars(self._loadConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory, dood!"""
        toml_files: List[Path] = []
        dir_path = Path(directory)

        if not dir_path.exists():
            logger.warning(f"Config directory {directory} does not exist, skipping, dood!")
            return toml_files

        if not dir_path.is_dir():
            logger.warning(f"Config path {directory} is not a directory, skipping, dood!")
            return toml_files

        for toml_file in dir_path.rglob("*.toml"):
            if toml_file.is_file():
                toml_files.append(toml_file)
                logger.debug(f"Found config file: {toml_file}")

        return sorted(toml_files)  # Sort for consistent ordering

    def _mergeConfigs(self, base_config: Dict[str, Any], new_config: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries, dood!"""
        merged = base_config.copy()

        for key, value in new_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """Load configuration from TOML file and optional config directories.

        Files from config directories are merged over the main file in sorted
        order. Exits if nothing can be loaded or the result is invalid.
        """
        config_file = Path(self.config_path)
        hasConfigFile = config_file.exists()
        if not hasConfigFile and not self.config_dirs:
            logger.error(f"Configuration file {self.config_path} not found!")
            sys.exit(1)

        config: Dict[str, Any] = {}
        try:
            if hasConfigFile:
                with open(config_file, "rb") as f:
                    config = tomli.load(f)
                logger.info(f"Loaded main config from {self.config_path}")
        except (OSError, tomli.TOMLDecodeError) as e:
            logger.error(f"Failed to load configuration: {e}")
            sys.exit(1)

        if self.config_dirs:
            logger.info(f"Scanning {len(self.config_dirs)} config directories for .toml files, dood!")

            for config_dir in self.config_dirs:
                toml_files = self._findTomlFilesRecursive(config_dir)
                logger.info(f"Found {len(toml_files)} .toml files in {config_dir}")

                for toml_file in toml_files:
                    try:
                        with open(toml_file, "rb") as f:
                            dir_config = tomli.load(f)
                    except (OSError, tomli.TOMLDecodeError) as e:
                        logger.error(f"Failed to load config file {toml_file}: {e}")
                        # Continue with other files instead of exiting
                        continue

                    config = self._mergeConfigs(config, dir_config)
                    logger.info(f"Merged config from {toml_file}")

        network = config.get("network", {})
        if not isinstance(network, dict):
            logger.error("[network] must be a table!")
            sys.exit(1)
        if not isinstance(network.get("host", {}), dict):
            logger.error("[network.host] must be a table!")
            sys.exit(1)

        logger.info("Configuration loaded and merged successfully, dood!")
        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getNetworkConfig(self) -> Dict[str, Any]:
        """Get network-specific configuration."""
        return self.get("network", {})

    def getHostConfig(self) -> Dict[str, Any]:
        """Get host configuration (``[network.host]``)."""
        return self.getNetworkConfig().get("host", {})

    def getMockConfig(self) -> List[Dict[str, Any]]:
        """Get raw mock entries (``[[network.mock]]``)."""
        return self.getNetworkConfig().get("mock", [])

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getCustomHost(self) -> CustomHost:
        """Get host configuration as CustomHost, DEFAULT_HOST if not configured."""
        return CustomHost.fromDict(self.getHostConfig())

    def getMockEntries(self) -> Optional[List[NetworkMockData]]:
        """
        Get configured mock entries.

        Returns:
            List of mock entries, None if no ``[[network.mock]]`` entries configured.
            Exits if entries are malformed.
        """
        mockConfig = self.getMockConfig()
        if not mockConfig:
            return None
        try:
            return NetworkMockDataList.validate_python(mockConfig)
        except ValidationError as e:
            logger.error(f"Invalid [[network.mock]] configuration: {e}")
            sys.exit(1)

    def getTimeout(self) -> float:
        """Get request timeout in seconds."""
        return float(self.getNetworkConfig().get("timeout", DEFAULT_TIMEOUT))

    def getTrustAllCertificates(self) -> bool:
        """Get whether TLS certificate validation is disabled."""
        return bool(self.getNetworkConfig().get("trust-all-certificates", False))

    def getFixtureRoot(self) -> str:
        """Get default directory for JSON fixtures."""
        return str(self.getNetworkConfig().get("fixture-root", DEFAULT_FIXTURE_ROOT))
