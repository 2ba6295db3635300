"""ContextVar-based render configuration for scmark.

Holds the hard capacities of the reader and renderer. Exceeding either is a
structured error, never silent truncation or unchecked growth.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # In Converter
    converter = Converter(max_tag_depth=64)
    html = converter("\\section{Hello}")  # Sets config internally via ContextVar

    # Direct usage (advanced)
    from scmark.config import set_render_config, reset_render_config, RenderConfig

    set_render_config(RenderConfig(max_arguments=8))
    try:
        html = render(source)
    finally:
        reset_render_config()

    # Or use the context manager
    with render_config_context(RenderConfig(max_arguments=8)):
        html = render(source)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

# Capacities of the reference site generator
DEFAULT_MAX_ARGUMENTS = 32
DEFAULT_MAX_TAG_DEPTH = 128


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Attributes:
        max_arguments: Maximum number of arguments in one function call
        max_tag_depth: Maximum number of tag stack entries, the root sentinel
            included

    """

    max_arguments: int = DEFAULT_MAX_ARGUMENTS
    max_tag_depth: int = DEFAULT_MAX_TAG_DEPTH

    def __post_init__(self) -> None:
        if self.max_arguments < 0:
            raise ValueError(f"max_arguments must be >= 0, got {self.max_arguments}")
        # Root sentinel plus the article
        if self.max_tag_depth < 2:
            raise ValueError(f"max_tag_depth must be >= 2, got {self.max_tag_depth}")

    @classmethod
    def from_dict(cls, config_dict: dict) -> "RenderConfig":
        """Create RenderConfig from dictionary.

        Only includes keys that are valid RenderConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = RenderConfig.from_dict({"max_arguments": 4, "other": 1})
            >>> config.max_arguments
            4

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: RenderConfig = RenderConfig()

_render_config: ContextVar[RenderConfig] = ContextVar(
    "render_config",
    default=_DEFAULT_CONFIG,
)


def get_render_config() -> RenderConfig:
    """Get current render configuration (thread-local)."""
    return _render_config.get()


def set_render_config(config: RenderConfig) -> None:
    """Set render configuration for current context.

    Args:
        config: RenderConfig instance to use for this context.

    """
    _render_config.set(config)


def reset_render_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.
    """
    _render_config.set(_DEFAULT_CONFIG)


@contextmanager
def render_config_context(config: RenderConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with render_config_context(RenderConfig(max_tag_depth=16)):
        ...     html = render(source)
        >>> # Automatically reset to previous config

    """
    previous = _render_config.get()
    _render_config.set(config)
    try:
        yield
    finally:
        _render_config.set(previous)


__all__ = [
    "DEFAULT_MAX_ARGUMENTS",
    "DEFAULT_MAX_TAG_DEPTH",
    "RenderConfig",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
]
