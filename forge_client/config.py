# =============================================================================
# forge_client/config.py  —  Environment-driven Settings
# =============================================================================
#
# All settings come from environment variables (a .env file is loaded by the
# entry points via python-dotenv before this runs):
#
#   FORGE_API_TOKEN   required  Personal API token from forge.laravel.com
#   FORGE_BASE_URL    optional  Defaults to the public v1 API
#   FORGE_TIMEOUT     optional  Seconds per HTTP request (default 30)
#
# The token is never logged.
# =============================================================================

import os
from dataclasses import dataclass, field
from typing import Mapping

from forge_client.errors import ConfigurationError

DEFAULT_BASE_URL = "https://forge.laravel.com/api/v1"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ForgeSettings:
    """Connection settings for the Forge API."""

    api_token: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


def load_settings(environ: Mapping[str, str] = os.environ) -> ForgeSettings:
    """Build ForgeSettings from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ; tests pass a dict).

    Returns:
        A ForgeSettings instance.

    Raises:
        ConfigurationError: If FORGE_API_TOKEN is missing/blank or
            FORGE_TIMEOUT is not a positive number.
    """
    token = environ.get("FORGE_API_TOKEN", "").strip()
    if not token:
        raise ConfigurationError(
            "Forge API token not configured. Set FORGE_API_TOKEN in your environment or .env file."
        )

    base_url = environ.get("FORGE_BASE_URL", "").strip() or DEFAULT_BASE_URL

    raw_timeout = environ.get("FORGE_TIMEOUT", "").strip()
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError(f"FORGE_TIMEOUT must be a number, got {raw_timeout!r}") from None
        if timeout <= 0:
            raise ConfigurationError(f"FORGE_TIMEOUT must be positive, got {raw_timeout!r}")
    else:
        timeout = DEFAULT_TIMEOUT

    return ForgeSettings(api_token=token, base_url=base_url.rstrip("/"), timeout=timeout)
