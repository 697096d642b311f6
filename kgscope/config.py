"""
Explorer Configuration Module

Reads runtime settings from ``KGSCOPE_*`` environment variables, optionally
seeded from a local ``.env`` file. The triple store and constraint table are
loaded once from here and stay read-only for the lifetime of the process.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple, Union

from .graph.builders import validate_node_limit
from .graph.kg_core import SEMANTIC_LEVELS
from .pipeline import CanvasSize, DEFAULT_NODE_LIMIT
from .sample_data import sample_constraints, sample_store
from .schema import ConstraintTable
from .store import TripleStore, load_dataset_from_json

logger = logging.getLogger(__name__)

ENV_PREFIX = "KGSCOPE_"


def load_env_file(path: Union[str, Path] = ".env", *, override: bool = False) -> int:
    """Export ``KEY=VALUE`` lines of a .env file into ``os.environ``.

    Blank lines, ``#`` comments and lines without ``=`` are skipped; matching
    surrounding quotes are removed. Existing variables win unless ``override``.

    Returns:
        Number of variables set (0 if the file does not exist)
    """
    p = Path(path)
    if not p.is_file():
        return 0

    loaded = 0
    for line in p.read_text(encoding="utf-8", errors="ignore").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        value = value.strip()
        if not key:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        if key in os.environ and not override:
            continue
        os.environ[key] = value
        loaded += 1
    return loaded


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class ExplorerConfig:
    """Runtime configuration.

    Attributes:
        dataset: Optional JSON dataset path; the built-in sample is used when None
        node_limit: Default entity display limit
        level: Default semantic level
        canvas_width: Layout canvas width
        canvas_height: Layout canvas height
        log_level: Root logging level name
        host: HTTP bind host
        port: HTTP bind port
    """
    dataset: Optional[str] = None
    node_limit: int = DEFAULT_NODE_LIMIT
    level: int = 1
    canvas_width: float = 1000.0
    canvas_height: float = 800.0
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self):
        validate_node_limit(self.node_limit)
        if self.level not in SEMANTIC_LEVELS:
            raise ValueError(f"{ENV_PREFIX}LEVEL must be 1 or 2, got {self.level!r}")
        CanvasSize(self.canvas_width, self.canvas_height)
        if not 0 < self.port < 65536:
            raise ValueError(f"{ENV_PREFIX}PORT out of range: {self.port}")
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ValueError(f"Unknown log level: {self.log_level!r}")

    @property
    def canvas(self) -> CanvasSize:
        return CanvasSize(self.canvas_width, self.canvas_height)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ExplorerConfig":
        env = os.environ if env is None else env
        return cls(
            dataset=env.get(ENV_PREFIX + "DATASET") or None,
            node_limit=_env_int(env, "NODE_LIMIT", DEFAULT_NODE_LIMIT),
            level=_env_int(env, "LEVEL", 1),
            canvas_width=_env_float(env, "CANVAS_WIDTH", 1000.0),
            canvas_height=_env_float(env, "CANVAS_HEIGHT", 800.0),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", "INFO"),
            host=env.get(ENV_PREFIX + "HOST", "127.0.0.1"),
            port=_env_int(env, "PORT", 8000),
        )


def load_data(config: ExplorerConfig) -> Tuple[TripleStore, ConstraintTable]:
    """Load the store and constraint table named by ``config``.

    A dataset file without a ``constraints`` section falls back to the built-in table.
    """
    if not config.dataset:
        logger.info("Using built-in sample dataset")
        return sample_store(), sample_constraints()
    store, constraints = load_dataset_from_json(config.dataset)
    return store, constraints if constraints is not None else sample_constraints()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
