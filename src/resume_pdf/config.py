"""Application configuration loaded from config.yaml."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-features=TranslateUI",
    "--disable-ipc-flooding-protection",
    "--disable-renderer-backgrounding",
    "--disable-backgrounding-occluded-windows",
    "--disable-background-timer-throttling",
    "--no-first-run",
    "--no-default-browser-check",
    "--js-flags=--max-old-space-size=128",
)


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class RendererConfig:
    idle_timeout: float = 10.0
    content_timeout_ms: int = 10000
    viewport_width: int = 794
    viewport_height: int = 1123
    headless: bool = True
    launch_args: tuple[str, ...] = DEFAULT_LAUNCH_ARGS

    def __post_init__(self) -> None:
        _check_range("idle_timeout", self.idle_timeout, 0.1, 3600)
        _check_range("content_timeout_ms", self.content_timeout_ms, 100, 120000)
        # yaml gives lists
        object.__setattr__(self, "launch_args", tuple(self.launch_args))


@dataclass(frozen=True)
class TemplateConfig:
    cache_max_size: int = 10
    cache_ttl_seconds: float = 300.0
    offline_check: bool = True

    def __post_init__(self) -> None:
        _check_range("cache_max_size", self.cache_max_size, 1, 1000)
        _check_range("cache_ttl_seconds", self.cache_ttl_seconds, 0, 86400)


@dataclass(frozen=True)
class OutputConfig:
    directory: str = "output"
    formats: tuple[str, ...] = ("pdf",)

    def __post_init__(self) -> None:
        object.__setattr__(self, "formats", tuple(self.formats))
        unknown = set(self.formats) - {"pdf", "html", "txt"}
        if unknown:
            raise ValueError(f"formats contains unsupported entries: {sorted(unknown)}")

    @property
    def resolved_directory(self) -> Path:
        return Path(self.directory).expanduser()


@dataclass(frozen=True)
class AppConfig:
    renderer: RendererConfig = field(default_factory=RendererConfig)
    templates: TemplateConfig = field(default_factory=TemplateConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [Path.cwd() / "config.yaml"]
        env_path = os.environ.get("RESUME_PDF_CONFIG")
        if env_path:
            candidates.insert(0, Path(env_path))
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        renderer=RendererConfig(**raw.get("renderer", {})),
        templates=TemplateConfig(**raw.get("templates", {})),
        output=OutputConfig(**raw.get("output", {})),
    )
