"""Configuration parsing and validation for the RERC SLA toolkit."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .errors import AuthenticationError, ConfigurationError


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used to reach the RERC backend API."""

    base_url: str
    user_id: str
    user_roles: Tuple[str, ...] = field(default_factory=tuple)
    timeout_seconds: int = 30


def _parse_roles(raw: str) -> Tuple[str, ...]:
    roles = []
    for role in raw.split(","):
        normalized = role.strip().upper()
        if normalized and normalized not in roles:
            roles.append(normalized)
    return tuple(roles)


def load_config(base_url: Optional[str] = None, timeout_seconds: int = 30) -> Config:
    """Build and validate application configuration.

    Args:
        base_url: Root URL of the RERC backend API. Falls back to the
            ``RERC_API_BASE_URL`` environment variable when omitted.
        timeout_seconds: Positive per-request timeout in seconds.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If no base URL is available, the URL is not
            http(s), or ``timeout_seconds`` is not greater than ``0``.
        AuthenticationError: If ``RERC_USER_ID`` is not configured.
    """
    if timeout_seconds <= 0:
        raise ConfigurationError(
            "Invalid value for 'timeout_seconds': expected an integer greater than 0."
        )

    resolved_url = (base_url or os.getenv("RERC_API_BASE_URL", "")).strip().rstrip("/")
    if not resolved_url:
        raise ConfigurationError(
            "Missing RERC API base URL. Pass --base-url or set 'RERC_API_BASE_URL'."
        )
    if not resolved_url.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"Invalid RERC API base URL '{resolved_url}': expected an http(s) URL."
        )

    user_id: str = os.getenv("RERC_USER_ID", "").strip()
    if not user_id:
        raise AuthenticationError(
            "Missing required RERC user identity. "
            "Set the 'RERC_USER_ID' environment variable before calling the API."
        )

    return Config(
        base_url=resolved_url,
        user_id=user_id,
        user_roles=_parse_roles(os.getenv("RERC_USER_ROLES", "")),
        timeout_seconds=timeout_seconds,
    )
