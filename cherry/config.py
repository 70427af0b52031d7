"""
Compiler configuration.

By default the compiler accepts the four Cherry extensions, grows its thread
pool with the number of files and waits on the scan phase without a timeout.
A JSON file can override any field.
"""

import json
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .errors import ConfigError

DEFAULT_EXTENSIONS = ("cherry", "ry", "ch", "h")


@dataclass(frozen=True)
class CompilerConfig:
    """Settings for one compiler run"""
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    max_workers: Optional[int] = None       # None: one worker per file
    scan_timeout: Optional[float] = None    # seconds; None waits forever
    diagnostics_dir: str = "diagnostics"
    encoding: str = "utf-8"

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.scan_timeout is not None and self.scan_timeout <= 0:
            raise ConfigError(f"scan_timeout must be positive, got {self.scan_timeout}")
        if not self.extensions:
            raise ConfigError("at least one source file extension is required")
        # Accept ".ch" as well as "ch"
        object.__setattr__(self, "extensions", tuple(ext.lstrip(".") for ext in self.extensions))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompilerConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        values = dict(data)
        if "extensions" in values:
            values["extensions"] = tuple(values["extensions"])
        return cls(**values)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "CompilerConfig":
        """Load configuration from a JSON object; missing keys keep their defaults."""
        try:
            with open(path, 'r', encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{path}: invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path}: configuration must be a JSON object")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["extensions"] = list(self.extensions)
        return data
