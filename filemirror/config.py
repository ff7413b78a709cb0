"""Module for configuration variables with defaults that are overridable by a file."""

from __future__ import annotations

from configparser import ConfigParser, SectionProxy
from dataclasses import dataclass, field

from filemirror.constants import DEFAULT_CHUNK_SIZE
from filemirror.logger import log


@dataclass
class TransferConfig:
    """Configuration variables related to moving file contents."""

    chunk_size: int = DEFAULT_CHUNK_SIZE

    @staticmethod
    def load(section: SectionProxy) -> TransferConfig:
        """Load overridden variables from a section within a config file."""
        config = TransferConfig()

        config.chunk_size = section.getint("chunk_size", fallback=config.chunk_size)

        if config.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {config.chunk_size}")

        return config


@dataclass
class NetworkConfig:
    """Configuration variables related to the TCP connection."""

    # Empty address means all interfaces.
    bind_address: str = ""
    backlog: int = 1

    # Seconds, only applied while connecting.
    connect_timeout: float = 10.0

    @staticmethod
    def load(section: SectionProxy) -> NetworkConfig:
        """Load overridden variables from a section within a config file."""
        config = NetworkConfig()

        config.bind_address = section.get("bind_address", fallback=config.bind_address)
        config.backlog = section.getint("backlog", fallback=config.backlog)
        config.connect_timeout = section.getfloat(
            "connect_timeout", fallback=config.connect_timeout
        )

        return config


@dataclass
class Config:
    """Configuration variables."""

    transfer: TransferConfig = field(default_factory=TransferConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)

    @staticmethod
    def load(filename: str) -> Config:
        """Load overridden configuration variables from a config file."""
        parser = ConfigParser()

        config = Config()

        try:
            with open(filename, "r") as f:
                parser.read_string(f.read(), filename)

            if "transfer" in parser:
                config.transfer = TransferConfig.load(parser["transfer"])
            if "network" in parser:
                config.network = NetworkConfig.load(parser["network"])
        except FileNotFoundError:
            log.info(f"no config file at {filename}")
        except Exception as e:
            # An unreadable config file is not considered a fatal error since we can
            # fall back to defaults.
            log.error(f"failed to read config file {filename}: {e}")
        else:
            log.info(f"loaded config: {config}")

        return config
