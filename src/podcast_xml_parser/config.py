from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import config_constants

# Re-exported for callers that configure logging themselves
DEFAULT_LOG_LEVEL = config_constants.DEFAULT_LOG_LEVEL
VALID_LOG_LEVELS = config_constants.VALID_LOG_LEVELS


class FetchConfig(BaseModel):
    """Options for fetching a feed over HTTP.

    Field aliases follow the camelCase names used by JavaScript podcast
    tooling, so both ``requestSize`` and ``request_size`` are accepted, in code
    and in config files.

    Attributes:
        request_headers: Extra HTTP headers sent with the request.
        request_size: When set, only the first ``request_size`` bytes are
            requested (``Range: bytes=0-N``) and the truncated body is repaired
            so that every fully received episode can still be parsed.
        timeout: Request timeout in seconds. ``None`` (the default) waits
            indefinitely; callers wanting a deadline must set it.

    Example:
        >>> cfg = FetchConfig(requestSize=50_000, requestHeaders={"User-Agent": "me"})
        >>> cfg.request_size
        50000
    """

    request_headers: Dict[str, str] = Field(default_factory=dict, alias="requestHeaders")
    request_size: Optional[int] = Field(default=None, alias="requestSize")
    timeout: Optional[float] = Field(default=None, alias="timeout")

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    @field_validator("request_headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Any) -> Dict[str, str]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("request_headers must be a mapping of header name to value")
        headers: Dict[str, str] = {}
        for name, header_value in value.items():
            name_str = str(name).strip()
            if not name_str:
                raise ValueError("Header names cannot be empty")
            headers[name_str] = "" if header_value is None else str(header_value)
        return headers

    @field_validator("request_size", mode="after")
    @classmethod
    def _validate_request_size(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("request_size must be a positive number of bytes")
        return value

    @field_validator("timeout", mode="after")
    @classmethod
    def _validate_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("timeout must be greater than zero")
        return value


def load_config_file(path: str) -> Dict[str, Any]:
    """Load fetch configuration from a JSON or YAML file.

    The format is picked from the file extension (``.json``, ``.yaml`` or
    ``.yml``). The returned dictionary can be unpacked into ``FetchConfig``.

    Args:
        path: Path to the configuration file. Supports ``~`` expansion.

    Returns:
        Dict[str, Any]: Configuration values keyed by ``FetchConfig`` field name
            or alias.

    Raises:
        ValueError: If the path is empty or missing, the extension is not
            supported, the content does not parse, or the top level is not a
            mapping.

    Example:
        >>> cfg = FetchConfig(**load_config_file("fetch.yaml"))

    Supported Formats:
        **JSON** (`.json`):

            {"requestSize": 65536, "requestHeaders": {"User-Agent": "my-app"}}

        **YAML** (`.yaml`, `.yml`):

            requestSize: 65536
            requestHeaders:
              User-Agent: my-app
    """
    if not path:
        raise ValueError("Config path cannot be empty")

    cfg_path = Path(path).expanduser()
    try:
        resolved = cfg_path.resolve()
    except (OSError, RuntimeError) as exc:
        raise ValueError(f"Invalid config path: {path} ({exc})") from exc

    if not resolved.exists():
        raise ValueError(f"Config file not found: {resolved}")

    suffix = resolved.suffix.lower()
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Failed to read config file {resolved}: {exc}") from exc

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON config file {resolved}: {exc}") from exc
    elif suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:  # type: ignore[attr-defined]
            raise ValueError(f"Invalid YAML config file {resolved}: {exc}") from exc
    else:
        raise ValueError(f"Unsupported config file type: {resolved.suffix}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping/object at the top level")

    return data
