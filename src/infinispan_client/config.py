"""
Configuration for infinispan_client.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Union
from urllib.parse import urlparse

logger = logging.getLogger("infinispan_client.config")

DEFAULT_BASE_URL = "http://localhost:11222"
DEFAULT_CONTEXT_PATH = "/rest"


def _mask_sensitive(value: Optional[str], visible_chars: int = 0) -> str:
    """Mask sensitive value for safe logging."""
    if value is None:
        return "<None>"
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _is_ssl_verify_disabled_by_env() -> bool:
    """
    Check if SSL verification is disabled via environment variables.

    Returns True if any of these are set:
    - NODE_TLS_REJECT_UNAUTHORIZED=0
    - SSL_CERT_VERIFY=0
    """
    node_tls = os.environ.get("NODE_TLS_REJECT_UNAUTHORIZED", "")
    ssl_cert_verify = os.environ.get("SSL_CERT_VERIFY", "")
    return node_tls == "0" or ssl_cert_verify == "0"


@dataclass
class TimeoutConfig:
    """Timeout configuration in seconds."""

    connect: float = 5.0
    read: float = 30.0
    write: float = 10.0


@dataclass
class ClientConfig:
    """Client configuration.

    ``username`` and ``password`` answer the server's digest challenge and are
    never handed to request descriptors. ``context_path`` is the REST endpoint
    prefix the server is mounted under (``/rest`` on a stock server).
    """

    base_url: str
    username: str
    password: str
    timeout: Union[TimeoutConfig, float, None] = None
    context_path: str = DEFAULT_CONTEXT_PATH
    verify_ssl: bool = True
    headers: Dict[str, str] = field(default_factory=dict)
    verbose: bool = False

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """Build a config from ``INFINISPAN_*`` environment variables.

        Keyword arguments that are not None take precedence over the environment.
        """
        timeout_env = os.getenv("INFINISPAN_TIMEOUT")
        values = {
            "base_url": os.getenv("INFINISPAN_URL", DEFAULT_BASE_URL),
            "username": os.getenv("INFINISPAN_USERNAME", ""),
            "password": os.getenv("INFINISPAN_PASSWORD", ""),
            "timeout": float(timeout_env) if timeout_env else None,
            "context_path": os.getenv("INFINISPAN_CONTEXT_PATH", DEFAULT_CONTEXT_PATH),
            "verify_ssl": not _is_ssl_verify_disabled_by_env(),
            "verbose": _env_flag("INFINISPAN_VERBOSE"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def __repr__(self) -> str:
        """Safe repr that masks the password."""
        return (
            f"ClientConfig(base_url={self.base_url!r}, "
            f"username={self.username!r}, "
            f"password={_mask_sensitive(self.password)!r}, "
            f"timeout={self.timeout!r}, "
            f"context_path={self.context_path!r}, "
            f"verify_ssl={self.verify_ssl!r}, "
            f"verbose={self.verbose!r})"
        )


# Default values
DEFAULT_TIMEOUT = TimeoutConfig()


def normalize_timeout(timeout: Union[TimeoutConfig, float, None]) -> TimeoutConfig:
    """Normalize timeout config."""
    if timeout is None:
        return DEFAULT_TIMEOUT
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=timeout, read=timeout, write=timeout)
    return timeout


def validate_config(config: ClientConfig) -> None:
    """Validate client configuration."""
    if not config.base_url:
        raise ValueError("base_url is required")

    parsed = urlparse(config.base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Invalid base_url: {config.base_url}")

    if not config.username:
        raise ValueError("username is required")

    if config.password is None:
        raise ValueError("password is required")

    if config.context_path and not config.context_path.startswith("/"):
        raise ValueError(f"context_path must start with '/': {config.context_path}")


@dataclass(repr=False)
class ResolvedConfig:
    """Resolved client configuration with defaults applied."""

    base_url: str
    username: str
    password: str
    timeout: TimeoutConfig
    context_path: str
    verify_ssl: bool
    headers: Dict[str, str]
    verbose: bool

    def __repr__(self) -> str:
        return (
            f"ResolvedConfig(base_url={self.base_url!r}, username={self.username!r}, "
            f"password={_mask_sensitive(self.password)!r}, context_path={self.context_path!r})"
        )


def resolve_config(config: ClientConfig) -> ResolvedConfig:
    """Resolve client configuration with defaults."""
    validate_config(config)

    resolved = ResolvedConfig(
        base_url=config.base_url.rstrip("/"),
        username=config.username,
        password=config.password,
        timeout=normalize_timeout(config.timeout),
        context_path=(config.context_path or "").rstrip("/"),
        verify_ssl=config.verify_ssl and not _is_ssl_verify_disabled_by_env(),
        headers=dict(config.headers),
        verbose=config.verbose,
    )
    logger.debug(f"resolve_config: {resolved!r}")
    return resolved
