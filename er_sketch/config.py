# -*- coding: utf-8 -*-
"""
Configuration module - loads rendering settings from the environment
"""
import os
import logging
from typing import Dict, Any, Mapping, Optional, Tuple

from dotenv import load_dotenv

from .exceptions import ConfigError

# Load a .env file if one exists
load_dotenv()

DEFAULT_TITLE = "Entity-Relationship Diagram"


def _get_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _get_figsize(environ: Mapping[str, str], name: str,
                 default: Tuple[float, float]) -> Tuple[float, float]:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    parts = [p.strip() for p in raw.split(",")]
    try:
        width, height = (float(p) for p in parts)
    except ValueError:
        raise ConfigError(f"{name} must look like 'WIDTH,HEIGHT', got {raw!r}") from None
    return width, height


class Config:
    """Rendering and output settings"""

    def __init__(self, output_dir: str = "output", seed: int = 42,
                 title: str = DEFAULT_TITLE, node_color: str = "lightblue",
                 node_size: int = 6000, figsize: Tuple[float, float] = (10.0, 8.0),
                 dpi: int = 150, log_level: str = "INFO"):
        self.output_dir = output_dir
        self.seed = seed
        self.title = title
        self.node_color = node_color
        self.node_size = node_size
        self.figsize = figsize
        self.dpi = dpi
        self.log_level = log_level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a Config from ER_SKETCH_* environment variables"""
        env = os.environ if environ is None else environ
        log_level = env.get("ER_SKETCH_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"ER_SKETCH_LOG_LEVEL is not a logging level: {log_level!r}")

        return cls(
            output_dir=env.get("ER_SKETCH_OUTPUT_DIR", "output"),
            seed=_get_int(env, "ER_SKETCH_SEED", 42),
            title=env.get("ER_SKETCH_TITLE", DEFAULT_TITLE),
            node_color=env.get("ER_SKETCH_NODE_COLOR", "lightblue"),
            node_size=_get_int(env, "ER_SKETCH_NODE_SIZE", 6000),
            figsize=_get_figsize(env, "ER_SKETCH_FIGSIZE", (10.0, 8.0)),
            dpi=_get_int(env, "ER_SKETCH_DPI", 150),
            log_level=log_level,
        )

    def get_render_config(self) -> Dict[str, Any]:
        """Keyword arguments understood by ERDiagramRenderer"""
        return {
            'title': self.title,
            'node_color': self.node_color,
            'node_size': self.node_size,
            'figsize': self.figsize,
            'dpi': self.dpi,
        }

    def default_output(self, filename: str = "er_diagram.png") -> str:
        return os.path.join(self.output_dir, filename)

    def __repr__(self):
        return (f"Config(output_dir={self.output_dir!r}, seed={self.seed}, "
                f"title={self.title!r}, dpi={self.dpi})")


def get_config() -> Config:
    """Current configuration, read fresh from the environment"""
    return Config.from_env()
