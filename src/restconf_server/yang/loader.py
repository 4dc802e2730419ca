"""
=============================================================================
YANG MODULE LOADER
=============================================================================

Loads the YANG modules that describe the server's data at startup, using
pyang for parsing and validation.

=============================================================================
STARTUP SEQUENCE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   add_paths("./models")      search path = ./models + subdirs       │
    │        │                                                             │
    │        ▼                                                             │
    │   load("base", ...)          each name looked up in the repository  │
    │        │                     not found / unparsable?                 │
    │        │                       → logged, skipped, NOT fatal          │
    │        ▼                                                             │
    │   process()                  pyang validation of loaded modules      │
    │        │                                                             │
    │        ├── error-level diagnostics? → returned; CLI exits 1          │
    │        │                                                             │
    │        ▼                                                             │
    │   modules / to_entry()       what got loaded, for the startup log   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Warnings from pyang are logged at DEBUG and otherwise ignored.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging
import os

from pyang import error, plugin
from pyang.context import Context
from pyang.repository import FileRepository


logger = logging.getLogger(__name__)

DATA_KEYWORDS = frozenset({
    "container", "leaf", "leaf-list", "list", "choice", "anydata", "anyxml",
})

_plugins_loaded = False


@dataclass(frozen=True)
class YangError:
    """One pyang diagnostic, flattened to strings."""

    position: str
    tag: str
    message: str

    def __str__(self) -> str:
        return f"{self.position}: {self.message}"


@dataclass(frozen=True)
class SchemaEntry:
    """
    Summary of a loaded module.

        SchemaEntry(name="base", namespace="urn:example:base",
                    prefix="b", revision="2024-01-01",
                    children=("interfaces", "system"))
    """

    name: str
    namespace: str = ""
    prefix: str = ""
    revision: str = ""
    children: Tuple[str, ...] = field(default_factory=tuple)


def _arg(stmt, keyword: str) -> str:
    sub = stmt.search_one(keyword)
    return sub.arg if sub is not None else ""


def _to_yang_error(diagnostic) -> YangError:
    pos, tag, args = diagnostic
    return YangError(
        position=str(pos),
        tag=tag,
        message=error.err_to_str(tag, args),
    )


class YangModules:
    """
    The set of YANG modules known to the server.

    Usage:
        yang = YangModules()
        yang.add_paths("./models")
        yang.load("base")
        errors = yang.process()
        if errors:
            ...  # fatal at startup

        for module in yang.modules:
            logger.info(f"models: {module.arg}")
    """

    def __init__(self):
        self._paths: List[str] = []
        self._ctx: Optional[Context] = None
        self._modules: list = []

    @property
    def paths(self) -> List[str]:
        return list(self._paths)

    @property
    def modules(self) -> list:
        """Loaded pyang module statements, in load order."""
        return list(self._modules)

    def add_paths(self, *paths: str) -> None:
        """
        Add directories (and all their sub-directories) to the search path.

        A path that does not exist is logged and skipped.
        """
        for path in paths:
            if not os.path.isdir(path):
                logger.warning(f"YANG path {path} is not a directory, skipping")
                continue

            for dirpath, _, _ in os.walk(path):
                if dirpath not in self._paths:
                    self._paths.append(dirpath)

        # Search path changed: start over with a fresh repository
        self._ctx = None

    def _context(self) -> Context:
        global _plugins_loaded
        if not _plugins_loaded:
            # pyang registers its validation phases through plugin.init
            plugin.init([])
            _plugins_loaded = True

        if self._ctx is None:
            repository = FileRepository(
                os.pathsep.join(self._paths),
                use_env=False,
                no_path_recurse=True,
            )
            self._ctx = Context(repository)
        return self._ctx

    def load(self, *names: str) -> int:
        """
        Load modules by name; returns how many were loaded.

        A module that cannot be found or parsed is logged and skipped.
        Its diagnostics are removed from the context so they do not count
        against process().
        """
        ctx = self._context()
        loaded = 0

        for name in names:
            before = len(ctx.errors)
            module = ctx.search_module(error.Position(name), name)

            if module is None:
                for diagnostic in ctx.errors[before:]:
                    logger.error(f"YANG load {name}: {_to_yang_error(diagnostic)}")
                del ctx.errors[before:]
                continue

            if module not in self._modules:
                self._modules.append(module)
            loaded += 1

        return loaded

    def process(self) -> List[YangError]:
        """
        Validate every loaded module.

        Returns the error-level diagnostics; an empty list means the
        modules are usable.
        """
        if self._ctx is None:
            return []

        self._ctx.validate()

        errors = []
        for diagnostic in self._ctx.errors:
            _, tag, _ = diagnostic
            if error.is_error(error.err_level(tag)):
                errors.append(_to_yang_error(diagnostic))
            else:
                logger.debug(f"YANG warning: {_to_yang_error(diagnostic)}")

        return errors

    def to_entry(self, module) -> SchemaEntry:
        """Summarize a loaded module (call after process())."""
        revision = getattr(module, "i_latest_revision", None) or _arg(module, "revision")
        children = tuple(
            child.arg
            for child in getattr(module, "i_children", [])
            if child.keyword in DATA_KEYWORDS
        )

        return SchemaEntry(
            name=module.arg,
            namespace=_arg(module, "namespace"),
            prefix=_arg(module, "prefix"),
            revision=revision,
            children=children,
        )

    def entries(self) -> List[SchemaEntry]:
        return [self.to_entry(m) for m in self._modules]
