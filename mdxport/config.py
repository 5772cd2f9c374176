"""Configuration loading for mdxport (.mdxport.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

import yaml

CONFIG_FILENAME = ".mdxport.yml"

_Number = TypeVar("_Number", int, float)


class ConfigError(RuntimeError):
    """Raised when .mdxport.yml exists but is not usable."""


@dataclass
class LLMConfig:
    """Generative service settings; unset keys fall back to the environment."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None

    @classmethod
    def from_mapping(cls, section: Mapping[str, Any]) -> Optional["LLMConfig"]:
        settings = cls(
            model=_text(section.get("model")),
            base_url=_text(section.get("base_url")),
            api_key=_text(section.get("api_key")),
            temperature=_number(section.get("temperature"), float),
            max_tokens=_number(section.get("max_tokens"), int, minimum=1),
            request_timeout=_number(section.get("request_timeout"), float),
        )
        if all(getattr(settings, item.name) is None for item in fields(settings)):
            return None
        return settings


@dataclass
class ResolutionConfig:
    """Fan-out, retry, and skip settings for unknown-component resolution."""

    batch_size: int = 5
    retries: int = 1
    retry_delay: float = 0.5
    skip_components: List[str] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, section: Mapping[str, Any]) -> "ResolutionConfig":
        defaults = cls()
        return cls(
            batch_size=_or_default(_number(section.get("batch_size"), int, minimum=1), defaults.batch_size),
            retries=_or_default(_number(section.get("retries"), int, minimum=0), defaults.retries),
            retry_delay=_or_default(_number(section.get("retry_delay"), float, minimum=0), defaults.retry_delay),
            skip_components=_names(section.get("skip_components")),
        )


@dataclass
class ScannerConfig:
    """Scanner tuning: context window, extra exclusions, parent ordering."""

    context_chars: int = 200
    exclude_components: List[str] = field(default_factory=list)
    parent_children: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, section: Mapping[str, Any]) -> "ScannerConfig":
        nesting = section.get("parent_children")
        return cls(
            context_chars=_or_default(_number(section.get("context_chars"), int, minimum=0), cls().context_chars),
            exclude_components=_names(section.get("exclude_components")),
            parent_children={
                str(parent): _names(children) for parent, children in _section(nesting).items()
            },
        )


@dataclass
class MdxPortConfig:
    """Everything .mdxport.yml can set, rooted at the directory holding it."""

    root: Path
    llm: Optional[LLMConfig] = None
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)
    scanner: ScannerConfig = field(default_factory=ScannerConfig)


def load_config(config_path: Path) -> MdxPortConfig:
    """Load .mdxport.yml for a directory, a document, or the file itself.

    A missing file yields defaults. Values of the wrong type or out of range
    are ignored; malformed YAML or a non-mapping root raises ``ConfigError``.
    """
    location = locate_config(config_path)
    root = location.parent.resolve()
    if not location.exists():
        return MdxPortConfig(root=root)

    data = _load_yaml(location)
    return MdxPortConfig(
        root=root,
        llm=LLMConfig.from_mapping(_section(data.get("llm"))),
        resolution=ResolutionConfig.from_mapping(_section(data.get("resolution"))),
        scanner=ScannerConfig.from_mapping(_section(data.get("scanner"))),
    )


def locate_config(path: Path) -> Path:
    """Return where .mdxport.yml lives for ``path`` whether or not it exists."""
    path = path.expanduser()
    if path.is_dir():
        path = path / CONFIG_FILENAME
    elif path.name != CONFIG_FILENAME:
        path = path.parent / CONFIG_FILENAME
    return path.resolve()


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path.name} is not valid YAML: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
    return loaded


def _section(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> Optional[str]:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _number(value: Any, kind: Callable[[Any], _Number], minimum: Optional[float] = None) -> Optional[_Number]:
    # YAML booleans are ints in Python; they are never a meaningful number here.
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    if kind is int and isinstance(value, float):
        return None
    try:
        number = kind(value)
    except ValueError:
        return None
    if minimum is not None and number < minimum:
        return None
    return number


def _or_default(value: Optional[_Number], default: _Number) -> _Number:
    return default if value is None else value


def _names(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if isinstance(item, (str, int))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "LLMConfig",
    "MdxPortConfig",
    "ResolutionConfig",
    "ScannerConfig",
    "load_config",
    "locate_config",
]
