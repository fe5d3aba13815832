import os
from typing import Optional

from .errors import ConfigurationError
from .types import ProcessConfig


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError.from_messages(name, raw, "expected an integer") from exc


def load_config(
    browser_path: Optional[str] = None,
    navigation_timeout_ms: Optional[int] = None,
    api_version: Optional[str] = None,
    allow_empty: bool = False,
) -> ProcessConfig:
    cfg = ProcessConfig(
        browser_path=browser_path or os.getenv("CRMPDF_BROWSER_PATH") or None,
        navigation_timeout_ms=int(navigation_timeout_ms or _int_env("CRMPDF_NAVIGATION_TIMEOUT_MS", "30000")),
        api_version=(api_version or os.getenv("SF_API_VERSION", "59.0")).lstrip("v"),
        instance_url=os.getenv("SF_INSTANCE_URL") or None,
        access_token=os.getenv("SF_ACCESS_TOKEN") or None,
        sf_cli_bin=os.getenv("SF_CLI_BIN", "sf"),
        allow_empty=allow_empty or os.getenv("CRMPDF_ALLOW_EMPTY", "0") == "1",
    )
    return cfg
