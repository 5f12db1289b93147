"""
Engine configuration and logging setup.

Settings are read once from ``PLANEGEOM_*`` environment variables into an
immutable :class:`EngineConfig`. Operations that accept a ``config`` keyword
fall back to :data:`DEFAULT_CONFIG`.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Union

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLANEGEOM_"
LOG_LEVEL_ENV = "PLANEGEOM_LOG_LEVEL"
LOG_FORMAT_ENV = "PLANEGEOM_LOG_FORMAT"
_DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class EngineConfig:
    """
    Tunables of the relate and overlay engines.

    Attributes
    ----------
    check_validity : bool
        Check areal inputs for self-intersections before relate and overlay
        work, and fail with a TopologyException naming the defect location.
    merge_lines : bool
        Merge line work of union results at nodes where exactly two lines
        meet, so touching lines come back as one line.
    """
    check_validity: bool = True
    merge_lines: bool = True

    def __post_init__(self):
        for name in ("check_validity", "merge_lines"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be a bool, got {value!r}")


def _parse_flag(name: str, raw: str, default: bool) -> bool:
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    logger.warning("Ignoring %s=%r: expected a boolean, using %s", name, raw, default)
    return default


def load_config(environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """
    Build an EngineConfig from environment variables.

    Parameters
    ----------
    environ : mapping, optional
        Variables to read. Defaults to ``os.environ``.

    Returns
    -------
    EngineConfig
        Configuration with ``PLANEGEOM_CHECK_VALIDITY`` and
        ``PLANEGEOM_MERGE_LINES`` applied over the defaults.
    """
    if environ is None:
        environ = os.environ

    defaults = EngineConfig()
    values = {}
    for name in ("check_validity", "merge_lines"):
        key = ENV_PREFIX + name.upper()
        if key in environ:
            values[name] = _parse_flag(key, environ[key], getattr(defaults, name))
    return EngineConfig(**values)


def _resolve_log_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(level: Union[str, int, None] = None, fmt: Optional[str] = None) -> None:
    """
    Configure the root logger for applications embedding the engine.

    The library itself never calls this.

    Parameters
    ----------
    level : str or int, optional
        Logging level. Defaults to ``PLANEGEOM_LOG_LEVEL`` or ``INFO``.
    fmt : str, optional
        Record format. Defaults to ``PLANEGEOM_LOG_FORMAT`` or a timestamped
        format.
    """
    level_value = _resolve_log_level(level or os.getenv(LOG_LEVEL_ENV, "INFO"))
    fmt_value = fmt or os.getenv(LOG_FORMAT_ENV, _DEFAULT_LOG_FORMAT)

    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level_value)
        for handler in root_logger.handlers:
            handler.setLevel(level_value)
            handler.setFormatter(logging.Formatter(fmt_value))
        return

    logging.basicConfig(level=level_value, format=fmt_value)


DEFAULT_CONFIG = load_config()
