"""
Persisted heatmap options (platformdirs + JSON).

File layout (schema v1):

    {"schema_version": 1, "options": {<HeatmapOptions.to_dict()>}}

Loading never fails: a missing, unparsable or out-of-date file gives the
default options, and stored options that do not pass
``HeatmapOptions.validate`` are replaced by the defaults as a whole.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from tpsheatmap.options import HeatmapOptions
from tpsheatmap.utils.logging import get_logger

logger = get_logger(__name__)

# Bump when the on-disk layout changes; older files are then ignored.
SCHEMA_VERSION: int = 1

APP_NAME = "tpsheatmap"
CONFIG_FILENAME = "heatmap_config.json"


@dataclass
class HeatmapConfigData:
    """On-disk payload: schema version plus the options dict."""
    schema_version: int = SCHEMA_VERSION
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def defaults(cls) -> "HeatmapConfigData":
        return cls(options=HeatmapOptions().to_dict())

    def to_json_dict(self) -> Dict[str, Any]:
        return {"schema_version": self.schema_version, "options": self.options}

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "HeatmapConfigData":
        extra = sorted(set(d) - {"schema_version", "options"})
        if extra:
            logger.warning(f"Ignoring unknown top-level keys in heatmap config: {extra}")
        raw = d.get("options", {})
        if not isinstance(raw, dict):
            logger.warning(f"Heatmap config 'options' is a {type(raw).__name__}, not an object")
            raw = {}
        try:
            version = int(d.get("schema_version", -1))
        except (TypeError, ValueError):
            version = -1
        return cls(schema_version=version, options=dict(raw))


def _read_payload(path: Path) -> Optional[Dict[str, Any]]:
    """Parsed JSON object at ``path``, or None if there is nothing usable."""
    try:
        parsed = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug(f"No heatmap config at {path}")
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Cannot read heatmap config {path}: {e}")
        return None
    if not isinstance(parsed, dict):
        logger.warning(f"Heatmap config {path} is not a JSON object")
        return None
    return parsed


class HeatmapConfig:
    """Heatmap options bound to a JSON file."""

    def __init__(self, *, path: Path, data: Optional[HeatmapConfigData] = None):
        self.path = path
        self.data = data if data is not None else HeatmapConfigData.defaults()

    @staticmethod
    def default_config_path() -> Path:
        """Per-user location, e.g. ~/.config/tpsheatmap/heatmap_config.json on Linux."""
        return Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

    @classmethod
    def load(cls, *, config_path: Optional[Path] = None) -> "HeatmapConfig":
        """Read the config at ``config_path`` (default: per-user path)."""
        path = Path(config_path) if config_path is not None else cls.default_config_path()
        payload = _read_payload(path)
        if payload is None:
            return cls(path=path)

        data = HeatmapConfigData.from_json_dict(payload)
        if data.schema_version != SCHEMA_VERSION:
            logger.warning(
                f"Heatmap config {path} has schema {data.schema_version}, "
                f"expected {SCHEMA_VERSION}; using default options"
            )
            return cls(path=path)
        return cls(path=path, data=data)

    def save(self) -> None:
        """Write the config, replacing the file in one step."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(self.data.to_json_dict(), indent=2), encoding="utf-8")
        os.replace(tmp, self.path)
        logger.info(f"Saved heatmap options to {self.path}")

    def get_options(self) -> HeatmapOptions:
        """Stored options, validated; invalid ones give the defaults."""
        try:
            return HeatmapOptions.from_dict(self.data.options).validate()
        except (TypeError, ValueError) as e:
            logger.warning(f"Stored heatmap options in {self.path} are invalid ({e}); using defaults")
            return HeatmapOptions()

    def set_options(self, options: HeatmapOptions) -> None:
        """Replace the stored options.

        Raises:
            InvalidConfigurationError: If ``options`` do not validate.
            ValueError: If ``options.reduction`` is a callable.
        """
        self.data.options = options.validate().to_dict()
