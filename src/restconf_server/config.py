"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Every tunable of the RESTCONF server in one dataclass, validated once at
startup (fail fast: a bad setting stops the process before it listens).

=============================================================================
WHERE SETTINGS COME FROM
=============================================================================

    ┌──────────────────────────┬───────────────────────────────────────────┐
    │ Source                   │ Example                                   │
    ├──────────────────────────┼───────────────────────────────────────────┤
    │ defaults                 │ ServerConfig()           → 0.0.0.0:408    │
    │ listen address           │ ServerConfig.from_address("127.0.0.1:8408")│
    │ environment              │ RESTCONF_PORT=8408 restconf               │
    │ command line             │ restconf --addr :8408 --log-level DEBUG   │
    └──────────────────────────┴───────────────────────────────────────────┘

The command line wins over the environment, which wins over defaults.

=============================================================================
"""

from dataclasses import dataclass, replace
from typing import Optional
import os

from .errors import ConfigurationError


DEFAULT_ADDRESS = ":408"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the RESTCONF server.

        ServerConfig(
            host="127.0.0.1",
            port=8408,
            log_level="DEBUG",
            models_paths=("./models", "/usr/share/yang"),
        )
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Address to bind; "0.0.0.0" is every interface."""

    port: int = 408
    """TCP port. 408 is below 1024, so binding it needs privileges on Unix."""

    backlog: int = 128
    """Kernel accept queue length."""

    buffer_size: int = 8192
    """Bytes per recv() call."""

    timeout: Optional[float] = 30.0
    """Seconds to wait for the first request on a connection."""

    # ─────────────────────────────────────────────────────────────────────
    # HTTP
    # ─────────────────────────────────────────────────────────────────────

    keep_alive: bool = True
    keep_alive_timeout: float = 5.0
    """Idle seconds before a keep-alive connection is closed."""

    max_request_size: int = 1024 * 1024
    """Largest request accepted, headers included. RESTCONF requests here carry no body."""

    # ─────────────────────────────────────────────────────────────────────
    # WORKERS
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    max_workers: int = 16

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    log_format: str = "text"
    """Access log format: "text" or "json"."""

    log_skip_paths: tuple[str, ...] = ()
    """Request paths left out of the access log (exact match)."""

    # ─────────────────────────────────────────────────────────────────────
    # RESTCONF
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "RESTCONF"
    """Value of the Server header on every response."""

    restconf_root: str = "/restconf"
    """API root advertised by /.well-known/host-meta."""

    yang_library_version: str = "2016-06-21"

    # ─────────────────────────────────────────────────────────────────────
    # YANG
    # ─────────────────────────────────────────────────────────────────────

    models_paths: tuple[str, ...] = ("./models",)
    """Directories searched (recursively) for YANG modules."""

    modules: tuple[str, ...] = ("base",)
    """Modules loaded at startup."""

    @property
    def listen_address(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def from_address(cls, address: str, **overrides) -> "ServerConfig":
        """
        Build a config from a "host:port" listen address.

            ":408"            → 0.0.0.0:408
            "127.0.0.1:8408"  → 127.0.0.1:8408
            "[::1]:408"       → ::1:408

        Raises:
            ConfigurationError: The address has no port or the port is
                not a number.
        """
        host, sep, port = address.rpartition(":")
        if not sep:
            raise ConfigurationError(f"Invalid listen address {address!r}: missing port")

        try:
            port_number = int(port)
        except ValueError:
            raise ConfigurationError(
                f"Invalid listen address {address!r}: port {port!r} is not a number"
            ) from None

        host = host.strip("[]") or "0.0.0.0"
        return cls(host=host, port=port_number, **overrides)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

            RESTCONF_HOST        bind address        (default 0.0.0.0)
            RESTCONF_PORT        port                (default 408)
            RESTCONF_TIMEOUT     first-request timeout in seconds
            RESTCONF_WORKERS     max worker threads
            RESTCONF_LOG_LEVEL   DEBUG, INFO, ...
            RESTCONF_MODELS      YANG search path, os.pathsep separated

        Raises:
            ConfigurationError: A numeric variable does not parse.
        """
        defaults = cls()

        try:
            config = cls(
                host=os.getenv("RESTCONF_HOST", defaults.host),
                port=int(os.getenv("RESTCONF_PORT", str(defaults.port))),
                timeout=float(os.getenv("RESTCONF_TIMEOUT", str(defaults.timeout))),
                max_workers=int(os.getenv("RESTCONF_WORKERS", str(defaults.max_workers))),
                log_level=os.getenv("RESTCONF_LOG_LEVEL", defaults.log_level).upper(),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment setting: {e}") from e

        if 0 < config.max_workers < config.min_workers:
            config = replace(config, min_workers=config.max_workers)

        models = os.getenv("RESTCONF_MODELS")
        if models:
            config = replace(
                config,
                models_paths=tuple(p for p in models.split(os.pathsep) if p),
            )

        return config

    def with_address(self, address: str) -> "ServerConfig":
        """Copy of this config listening on a "host:port" address."""
        parsed = ServerConfig.from_address(address)
        return replace(self, host=parsed.host, port=parsed.port)

    def validate(self) -> None:
        """
        Check every setting.

        Raises:
            ConfigurationError: On the first invalid value.
        """
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.min_workers < 1:
            raise ConfigurationError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ConfigurationError("max_workers must be >= min_workers")

        if self.buffer_size < 1024:
            raise ConfigurationError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be > 0")

        if self.keep_alive_timeout <= 0:
            raise ConfigurationError("keep_alive_timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(f"Unknown log format: {self.log_format}")

        if not self.restconf_root.startswith("/"):
            raise ConfigurationError(
                f"restconf_root must start with '/': {self.restconf_root!r}"
            )
