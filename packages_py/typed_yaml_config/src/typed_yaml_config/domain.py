"""Data models for typed_yaml_config."""

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

# Loader signature: (node, context) -> value, raising CoercionError on mismatch
Loader = Callable[[Any, Optional["ResolutionContext"]], Any]

ENV_ENCODING = "TYPED_YAML_CONFIG_ENCODING"
ENV_EXTENSIONS = "TYPED_YAML_CONFIG_EXTENSIONS"


class _Missing:
    """Marker for a key absent from its mapping (distinct from a null node)."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

DEFAULT_SENTINEL = "extern"
DEFAULT_EXTENSIONS: Tuple[str, ...] = ("yml", "yaml")
DEFAULT_ENCODING = "utf-8"


@dataclass(frozen=True)
class FieldDescriptor:
    """One field of a schema: name, declared type, default and loader."""
    name: str
    type: Any
    default_factory: Callable[[], Any]
    loader: Loader
    documentation: Optional[str] = None

    def default(self) -> Any:
        return self.default_factory()


@dataclass
class ConfigMeta:
    """Provenance of a loaded config value.

    ``path`` is the file the value was read from; ``externs`` maps field names
    to the extern file each of those fields was read from.
    """
    path: Optional[Path] = None
    externs: Dict[str, Path] = field(default_factory=dict)

    def is_extern(self, name: str) -> bool:
        return name in self.externs


@dataclass
class SoftFailure:
    """A field that was replaced by its default."""
    path: str
    reason: str


@dataclass
class LoadResult:
    """Result of loading configuration files."""
    files_loaded: List[str] = field(default_factory=list)
    externs_resolved: Dict[str, str] = field(default_factory=dict)
    soft_failures: List[SoftFailure] = field(default_factory=list)

    @property
    def defaulted_fields(self) -> List[str]:
        return [failure.path for failure in self.soft_failures]


@dataclass
class LoaderOptions:
    sentinel: str = DEFAULT_SENTINEL
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    encoding: str = DEFAULT_ENCODING

    @classmethod
    def from_env(
        cls,
        encoding: Optional[str] = None,
        extensions: Optional[Tuple[str, ...]] = None,
    ) -> "LoaderOptions":
        """Build options from arguments, then environment, then defaults."""
        resolved_encoding = encoding or os.getenv(ENV_ENCODING) or DEFAULT_ENCODING

        if extensions is None:
            raw = os.getenv(ENV_EXTENSIONS)
            if raw:
                extensions = tuple(ext.strip().lstrip(".") for ext in raw.split(",") if ext.strip())
        resolved_extensions = extensions or DEFAULT_EXTENSIONS

        return cls(encoding=resolved_encoding, extensions=tuple(resolved_extensions))


@dataclass
class ResolutionContext:
    """Per-load state threaded through the resolver.

    ``current_dir`` is the directory of the file being parsed, ``path`` the
    dotted field path of the node being resolved.
    """
    current_dir: Path
    extern_resolver: Any
    options: LoaderOptions = field(default_factory=LoaderOptions)
    result: LoadResult = field(default_factory=LoadResult)
    source: Optional[Path] = None
    path: str = ""

    def child(self, name: str) -> "ResolutionContext":
        return ResolutionContext(
            current_dir=self.current_dir,
            extern_resolver=self.extern_resolver,
            options=self.options,
            result=self.result,
            source=self.source,
            path=f"{self.path}.{name}" if self.path else name,
        )

    def enter_file(self, source: Path) -> "ResolutionContext":
        """Context for nodes read from ``source`` (an extern file)."""
        return ResolutionContext(
            current_dir=source.parent,
            extern_resolver=self.extern_resolver,
            options=self.options,
            result=self.result,
            source=source,
            path=self.path,
        )

    def record_failure(self, reason: str) -> None:
        self.result.soft_failures.append(SoftFailure(path=self.path or "<root>", reason=reason))


def deepcopy_factory(value: Any) -> Callable[[], Any]:
    """Default factory returning an independent copy of ``value``."""
    return lambda: copy.deepcopy(value)
