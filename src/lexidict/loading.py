"""Module source resolution.

A `mod name;` declaration is resolved against the directory of the file
that declares it. Two conventional locations are tried:

    <base>/<name>/__init__.lexi   (package style)
    <base>/<name>.lexi            (flat file)

Exactly one of them must exist.

Components:
    ModuleResolver - Protocol for module source lookup (structural typing)
    ResolvedModule - Immutable result of one successful lookup
    PathModuleResolver - Filesystem resolver rooted at an explicit directory
    MappingModuleResolver - In-memory resolver for tests and embedding

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Protocol

from lexidict.constants import MODULE_SUFFIX, PACKAGE_MODULE_STEM
from lexidict.diagnostics import ErrorTemplate, ModuleResolutionError

if TYPE_CHECKING:
    from lexidict.syntax.tokens import Span

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "ModuleResolver",
    # Result type
    "ResolvedModule",
    # Concrete resolvers
    "PathModuleResolver",
    "MappingModuleResolver",
    # Helpers
    "module_candidates",
]

logger = logging.getLogger(__name__)


def module_candidates(name: str, base_dir: PurePosixPath) -> tuple[PurePosixPath, PurePosixPath]:
    """Relative locations a `mod name;` declaration may resolve to.

    Returns:
        (package-style path, flat-file path)

    Example:
        >>> module_candidates("errors", PurePosixPath("app"))
        (PurePosixPath('app/errors/__init__.lexi'), PurePosixPath('app/errors.lexi'))
    """
    return (
        base_dir / name / f"{PACKAGE_MODULE_STEM}{MODULE_SUFFIX}",
        base_dir / f"{name}{MODULE_SUFFIX}",
    )


@dataclass(frozen=True, slots=True)
class ResolvedModule:
    """Source of one module, ready to be lexed.

    Attributes:
        name: Module name as declared
        key: Identity used to detect cyclic module trees
        location: Relative location of the module source
        text: Module source text
        source_name: Display name for diagnostics
        path: Filesystem path, when read from disk
    """

    name: str
    key: str
    location: PurePosixPath
    text: str
    source_name: str
    path: Path | None = None

    @property
    def base_dir(self) -> PurePosixPath:
        """Directory that nested `mod` declarations resolve against."""
        return self.location.parent


class ModuleResolver(Protocol):
    """Protocol for resolving `mod name;` declarations to source text.

    Implementations raise ModuleResolutionError with MODULE_NOT_FOUND when
    no candidate exists, AMBIGUOUS_MODULE when both do, and MODULE_IO_ERROR
    when the source cannot be read.

    Example:
        >>> class DatabaseResolver:
        ...     def resolve(self, name, base_dir, *, span=None):
        ...         location = module_candidates(name, base_dir)[1]
        ...         text = db.fetch(str(location))
        ...         return ResolvedModule(name, str(location), location, text, str(location))
    """

    def resolve(
        self, name: str, base_dir: PurePosixPath, *, span: Span | None = None
    ) -> ResolvedModule:
        """Resolve module `name` declared in a file located in `base_dir`.

        Args:
            name: Declared module name
            base_dir: Directory of the declaring file, relative to the root
            span: Location of the declaration, attached to errors

        Returns:
            Resolved module source

        Raises:
            ModuleResolutionError: If the module cannot be resolved or read
        """
        ...


def _pick_candidate(
    name: str,
    candidates: tuple[PurePosixPath, PurePosixPath],
    exists: tuple[bool, bool],
    display: tuple[str, str],
    span: Span | None,
) -> PurePosixPath:
    """Apply the exactly-one-exists rule to the two candidate locations."""
    match exists:
        case (False, False):
            raise ModuleResolutionError(ErrorTemplate.module_not_found(name, display, span))
        case (True, True):
            raise ModuleResolutionError(ErrorTemplate.ambiguous_module(name, display, span))
        case (True, False):
            return candidates[0]
        case _:
            return candidates[1]


@dataclass(frozen=True, slots=True)
class PathModuleResolver:
    """Filesystem module resolver rooted at an explicit directory.

    The root is always passed in; nothing is discovered from the working
    directory or the environment.

    Attributes:
        root_dir: Directory containing the root dictionary file
        encoding: Text encoding of module files (default: utf-8)

    Example:
        >>> resolver = PathModuleResolver(Path("i18n"))
        >>> resolver.resolve("errors", PurePosixPath("."))
        # Reads i18n/errors/__init__.lexi or i18n/errors.lexi
    """

    root_dir: Path
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Normalize root_dir to a Path."""
        object.__setattr__(self, "root_dir", Path(self.root_dir))

    def resolve(
        self, name: str, base_dir: PurePosixPath, *, span: Span | None = None
    ) -> ResolvedModule:
        """Read the module source from disk."""
        candidates = module_candidates(name, base_dir)
        paths = (self.root_dir / candidates[0], self.root_dir / candidates[1])
        location = _pick_candidate(
            name,
            candidates,
            (paths[0].is_file(), paths[1].is_file()),
            (str(paths[0]), str(paths[1])),
            span,
        )
        path = self.root_dir / location
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise ModuleResolutionError(
                ErrorTemplate.module_io_error(name, str(path), str(exc), span)
            ) from exc

        logger.debug("Resolved module '%s' to %s", name, path)
        return ResolvedModule(
            name=name,
            key=str(path.resolve()),
            location=location,
            text=text,
            source_name=str(path),
            path=path,
        )


@dataclass(frozen=True, slots=True)
class MappingModuleResolver:
    """In-memory module resolver.

    Keys are POSIX-style paths relative to the dictionary root, exactly as
    returned by module_candidates().

    Example:
        >>> resolver = MappingModuleResolver({
        ...     "errors.lexi": "unit not_found { _ => 'Not found' }",
        ...     "app/__init__.lexi": "mod errors;",
        ... })
    """

    sources: Mapping[str, str]

    def resolve(
        self, name: str, base_dir: PurePosixPath, *, span: Span | None = None
    ) -> ResolvedModule:
        """Look the module source up in the mapping."""
        candidates = module_candidates(name, base_dir)
        keys = (candidates[0].as_posix(), candidates[1].as_posix())
        location = _pick_candidate(
            name,
            candidates,
            (keys[0] in self.sources, keys[1] in self.sources),
            keys,
            span,
        )
        key = location.as_posix()
        logger.debug("Resolved module '%s' to in-memory source %s", name, key)
        return ResolvedModule(
            name=name,
            key=key,
            location=location,
            text=self.sources[key],
            source_name=key,
        )
