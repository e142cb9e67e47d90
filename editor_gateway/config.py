"""Process configuration for the editor gateway."""

from __future__ import annotations

from dataclasses import dataclass, fields
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_CONFIG_PATH = "config/gateway.yaml"

_ENV_OVERRIDES = {
    "github_token": "GITHUB_TOKEN",
    "repo": "EDITOR_GATEWAY_REPO",
    "default_branch": "EDITOR_GATEWAY_BRANCH",
    "public_base_url": "EDITOR_GATEWAY_PUBLIC_URL",
    "static_dir": "EDITOR_GATEWAY_STATIC_DIR",
    "port": "PORT",
}


@dataclass(frozen=True)
class Settings:
    github_token: str | None = None
    repo: str = "compusophy/world-world"
    default_branch: str = "main"
    asset_dir: str = "images"
    default_file_path: str = "index.html"
    default_image_name: str = "og-image.png"
    branch_prefix: str = "web-editor"
    public_base_url: str = "https://world-world.vercel.app"
    api_base_url: str = "https://api.github.com"
    static_dir: str | None = None
    max_body_bytes: int = 50 * 1024 * 1024
    request_timeout_s: float | None = None
    port: int = 3000

    def __post_init__(self) -> None:
        if "/" not in self.repo:
            raise ValueError(f"Repository must be in owner/name form: {self.repo}")
        # An empty GITHUB_TOKEN means no process-wide credential.
        if self.github_token is not None and not self.github_token.strip():
            object.__setattr__(self, "github_token", None)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    section = data.get("gateway", data)
    if not isinstance(section, dict):
        raise ValueError(f"'gateway' section must be a mapping: {path}")
    return section


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in {"max_body_bytes", "port"}:
        return int(value)
    if name == "request_timeout_s":
        return float(value)
    return str(value)


def load_settings(
    config_path: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build settings from an optional YAML file overlaid with environment variables.

    Called once at process start; the returned object is immutable and is
    handed to every component that needs it.
    """
    env = os.environ if environ is None else environ
    path = Path(config_path or env.get("EDITOR_GATEWAY_CONFIG") or DEFAULT_CONFIG_PATH)
    known = {field.name for field in fields(Settings)}
    values: dict[str, Any] = {}
    for key, value in _load_yaml(path).items():
        if key not in known:
            raise ValueError(f"Unknown gateway setting: {key}")
        values[key] = _coerce(key, value)
    for name, variable in _ENV_OVERRIDES.items():
        raw = env.get(variable)
        if raw is not None and raw != "":
            values[name] = _coerce(name, raw)
    return Settings(**values)
