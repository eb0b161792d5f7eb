"""
Extern reference resolution.

A field whose value is the sentinel string ``extern`` lives in its own file.
For a field ``display`` in a file under ``<dir>`` the candidates are, in order:

    <dir>/display/config.yml
    <dir>/display/config.yaml
    <dir>/display.yml
    <dir>/display.yaml

The first candidate that exists and parses wins. When none does, the field is
treated as absent and falls back to its default.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .document import parse_document
from .domain import MISSING, LoaderOptions

logger = logging.getLogger(__name__)


@dataclass
class ExternResult:
    node: Any
    current_dir: Path
    path: Optional[Path] = None
    is_extern: bool = False

    @property
    def found(self) -> bool:
        return self.path is not None


class ExternLocator(ABC):
    """File access used by extern resolution."""

    def __init__(self, options: Optional[LoaderOptions] = None):
        self.options = options or LoaderOptions()

    @abstractmethod
    def exists(self, path: Path) -> bool:
        pass

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """Read a file; raises OSError when it cannot be read."""
        pass

    def candidate_paths(self, field_name: str, current_dir: Path) -> List[Path]:
        extensions = self.options.extensions
        nested = [current_dir / field_name / f"config.{ext}" for ext in extensions]
        sibling = [current_dir / f"{field_name}.{ext}" for ext in extensions]
        return nested + sibling

    def locate(self, field_name: str, current_dir: Path) -> List[Path]:
        """Existing candidate files, in search order."""
        return [path for path in self.candidate_paths(field_name, current_dir) if self.exists(path)]


class FileSystemLocator(ExternLocator):
    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding=self.options.encoding)


class InMemoryLocator(ExternLocator):
    """Locator over a ``{path: text}`` mapping."""

    def __init__(self, files: Dict[Union[str, Path], str], options: Optional[LoaderOptions] = None):
        super().__init__(options)
        self.files = {Path(path): text for path, text in files.items()}

    def exists(self, path: Path) -> bool:
        return path in self.files

    def read_text(self, path: Path) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(str(path))


class ExternResolver:
    def __init__(
        self,
        locator: Optional[ExternLocator] = None,
        options: Optional[LoaderOptions] = None
    ):
        self.options = options or (locator.options if locator else LoaderOptions())
        self.locator = locator or FileSystemLocator(self.options)

    def is_sentinel(self, node: Any, field_name: str) -> bool:
        sentinel = self.options.sentinel
        if isinstance(node, str):
            return node == sentinel
        if isinstance(node, dict) and len(node) == 1:
            return node.get(field_name) == sentinel
        return False

    def maybe_dereference(self, node: Any, field_name: str, current_dir: Path) -> ExternResult:
        """Replace an extern sentinel with the root node of its file.

        Non-sentinel nodes are returned untouched. An unresolvable sentinel
        comes back as ``MISSING`` with ``is_extern`` set.
        """
        if node is MISSING or not self.is_sentinel(node, field_name):
            return ExternResult(node=node, current_dir=current_dir)

        for path in self.locator.locate(field_name, current_dir):
            try:
                text = self.locator.read_text(path)
                root = parse_document(text)
            except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
                logger.debug(f"Skipping extern candidate {path} for '{field_name}': {e}")
                continue
            logger.debug(f"Resolved extern field '{field_name}' from {path}")
            return ExternResult(node=root, current_dir=path.parent, path=path, is_extern=True)

        logger.warning(
            f"Extern field '{field_name}' not found under {current_dir}; using default. "
            f"Checked: {[str(p) for p in self.locator.candidate_paths(field_name, current_dir)]}"
        )
        return ExternResult(node=MISSING, current_dir=current_dir, is_extern=True)
