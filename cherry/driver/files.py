"""
Input file registry.

Checks every path named on the command line before anything is scanned:
there must be at least one, each must carry a Cherry source extension and
each must exist.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..config import CompilerConfig
from ..errors import CherryError

logger = logging.getLogger(__name__)


class NoInputFilesError(CherryError):
    """No source files were given."""

    def __init__(self):
        super().__init__("No input files were supplied")


class InvalidExtensionError(CherryError):
    """A source file does not carry one of the accepted extensions."""

    def __init__(self, path: Path, allowed):
        allowed_list = ", ".join(f".{ext}" for ext in allowed)
        super().__init__(f"'{path}' is not a Cherry source file (expected one of {allowed_list})")
        self.path = path


class FileRegistry:
    """Validated, ordered list of source files for one compiler run."""

    def __init__(self, config: Optional[CompilerConfig] = None):
        self.config = config if config is not None else CompilerConfig()
        self.files: List[Path] = []

    def register(self, paths: Iterable[Union[str, Path]]) -> List[Path]:
        """
        Validate and record `paths`, keeping their order.

        Raises:
            NoInputFilesError: `paths` is empty
            InvalidExtensionError: a path has the wrong extension
            FileNotFoundError: a path does not name an existing file
        """
        paths = [Path(p) for p in paths]
        if not paths:
            raise NoInputFilesError()

        for path in paths:
            if path.suffix.lstrip(".") not in self.config.extensions:
                raise InvalidExtensionError(path, self.config.extensions)
            if not path.is_file():
                raise FileNotFoundError(f"Source file not found: {path}")

        self.files.extend(paths)
        logger.debug("Registered %d source files", len(paths))
        return paths

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self):
        return iter(self.files)
