"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

PROVIDERS = ("anthropic", "ollama")


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    provider: str = "anthropic"
    model: str = "claude-haiku-4-5-20251001"
    max_tokens: int = 1024
    base_temperature: float = 0.7
    max_retries: int = 3
    timeout: int = 120

    def __post_init__(self):
        if self.provider not in PROVIDERS:
            raise ValueError(f"provider must be one of {PROVIDERS}, got {self.provider!r}")
        _check_range("max_tokens", self.max_tokens, 1, 64000)
        _check_range("base_temperature", self.base_temperature, 0.0, 1.0)
        _check_range("max_retries", self.max_retries, 1, 10)
        _check_range("timeout", self.timeout, 1, 600)


@dataclass(frozen=True)
class OllamaConfig:
    base_url: str = "http://localhost:11434"
    model: str = "gpt-oss:20b"
    timeout: int = 300

    def __post_init__(self):
        _check_range("timeout", self.timeout, 1, 3600)


@dataclass(frozen=True)
class GenerationConfig:
    default_language: str = "English"
    variations: int = 1
    stream: bool = True

    def __post_init__(self):
        _check_range("variations", self.variations, 1, 26)


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
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
        llm=LLMConfig(**raw.get("llm", {})),
        ollama=OllamaConfig(**raw.get("ollama", {})),
        generation=GenerationConfig(**raw.get("generation", {})),
    )
