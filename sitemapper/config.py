# === FILE: sitemapper/config.py ===
"""
Loading and validation of SiteMapper configuration.
Pydantic describes the schema; YAML and JSON files are both accepted.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

#: Per-request timeout in milliseconds used when nothing else is configured.
DEFAULT_TIMEOUT_MS = 15000


class SiteMapperConfig(BaseModel):
    """Immutable settings for one SiteMapper handle."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    url: Optional[str] = Field(None, description="Root sitemap URL used when fetch() gets none.")
    timeout: int = Field(DEFAULT_TIMEOUT_MS, gt=0, description="Per-request timeout (milliseconds).")
    concurrency: Optional[int] = Field(
        None, ge=1, description="Max concurrent sitemap requests; None means unbounded."
    )
    user_agent: str = Field("SiteMapperBot/1.0", min_length=1, description="User-Agent header.")

    @field_validator("url", mode="before")
    def _blank_url_is_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def with_overrides(self, **overrides: Any) -> SiteMapperConfig:
        """Return a validated copy with the non-None *overrides* applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return SiteMapperConfig(**{**self.model_dump(), **changes})


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> SiteMapperConfig:
    """
    Read a YAML or JSON file and return a validated SiteMapperConfig.
    Raises FileNotFoundError when the file (or the default file) is missing.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return SiteMapperConfig(**data)


__all__ = ["SiteMapperConfig", "load_config", "DEFAULT_TIMEOUT_MS"]
