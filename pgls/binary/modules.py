"""Module resolution against JavaScript package installs.

Both the npm lookup and the Yarn Plug'n'Play lookup reduce to one question:
"starting from this directory, where does this package request resolve to?".
ModuleResolver is that question. NodeModuleResolver answers it by walking
``node_modules`` directories the way Node.js does; NodePnpResolver asks the
Plug'n'Play runtime in a ``.pnp.cjs``/``.pnp.js`` manifest through ``node``.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from pgls.core.result import Err, Result
from pgls.platform.paths import home
from pgls.platform.process import ProcessError, run

__all__ = [
    "ModuleResolver",
    "NodeModuleResolver",
    "NodePnpResolver",
    "MockModuleResolver",
    "PnpLoader",
    "PNP_MANIFEST_NAMES",
]

PNP_MANIFEST_NAMES = (".pnp.cjs", ".pnp.js")


class ModuleResolver(Protocol):
    """Resolve a package request relative to an anchor.

    ``request`` is a package-relative specifier such as
    ``@postgres-language-server/cli/package.json``. ``anchor`` is the
    directory (or a file inside it) the request is issued from.
    """

    def resolve(self, request: str, anchor: Path) -> Path | None:
        """Return the resolved file, or None if the request cannot be resolved."""
        ...


type PnpLoader = Callable[[Path], ModuleResolver]


def _start_dir(anchor: Path) -> Path:
    return anchor if anchor.is_dir() else anchor.parent


class NodeModuleResolver:
    """Node.js ``node_modules`` lookup.

    Searches ``{dir}/node_modules/{request}`` for the anchor directory and
    every parent, then the global folders (``$NODE_PATH`` entries,
    ``~/.node_modules``, ``~/.node_libraries``).

    Like Node, the walk starts from the anchor's real path, so a package
    linked in from a pnpm store resolves its siblings inside the store.
    """

    def __init__(self, env: Mapping[str, str] | None = None, *, home_dir: Path | None = None) -> None:
        self._env = env if env is not None else os.environ
        self._home = home_dir

    def _global_dirs(self) -> list[Path]:
        dirs = [Path(p) for p in self._env.get("NODE_PATH", "").split(os.pathsep) if p]
        user_home = self._home or home()
        dirs += [user_home / ".node_modules", user_home / ".node_libraries"]
        return dirs

    def _search_dirs(self, anchor: Path) -> list[Path]:
        start = _start_dir(anchor.resolve())
        dirs: list[Path] = []
        for parent in (start, *start.parents):
            if parent.name == "node_modules":
                continue
            dirs.append(parent / "node_modules")
        return dirs + self._global_dirs()

    def resolve(self, request: str, anchor: Path) -> Path | None:
        for base in self._search_dirs(anchor):
            candidate = base / request
            if candidate.is_file():
                return candidate
        return None


# Loads the manifest's runtime and prints the resolution of argv[2] issued
# from argv[3]. Exit status 1 with an empty stdout means "not resolvable".
_PNP_SCRIPT = """
const [manifest, request, issuer] = process.argv.slice(1);
try {
  const resolved = require(manifest).resolveRequest(request, issuer);
  if (resolved) process.stdout.write(resolved);
} catch (err) {
  process.stderr.write(String(err && err.message || err));
  process.exit(1);
}
"""

type NodeRunner = Callable[[list[str]], Result[str, ProcessError]]


class NodePnpResolver:
    """Resolver backed by a Yarn Plug'n'Play manifest.

    Each request spawns ``node`` with the manifest's resolution API loaded.
    An unresolvable request (Yarn throws for packages not declared as
    dependencies) yields None.
    """

    def __init__(
        self,
        manifest: Path,
        *,
        node: str | None = None,
        runner: NodeRunner | None = None,
    ) -> None:
        self._manifest = manifest
        self._node = node if node is not None else shutil.which("node")
        self._runner = runner or (lambda cmd: run(cmd, timeout=30.0))

    @property
    def manifest(self) -> Path:
        return self._manifest

    def resolve(self, request: str, anchor: Path) -> Path | None:
        if self._node is None:
            return None
        issuer = str(anchor)
        if anchor.is_dir():
            issuer = issuer.rstrip(os.sep) + os.sep

        result = self._runner([self._node, "-e", _PNP_SCRIPT, str(self._manifest), request, issuer])
        if isinstance(result, Err):
            return None
        resolved = result.value.strip()
        return Path(resolved) if resolved else None


def _no_entries() -> dict[tuple[str, Path], Path]:
    return {}


def _no_requests() -> dict[str, Path]:
    return {}


def _no_calls() -> list[tuple[str, Path]]:
    return []


@dataclass
class MockModuleResolver:
    """Resolver with a fixed request table, for tests.

    Keys are ``(request, anchor)``; an anchor of ``None`` in ``add()`` matches
    any anchor.
    """

    entries: dict[tuple[str, Path], Path] = field(default_factory=_no_entries)
    anywhere: dict[str, Path] = field(default_factory=_no_requests)
    calls: list[tuple[str, Path]] = field(default_factory=_no_calls)

    def add(self, request: str, resolved: Path, anchor: Path | None = None) -> None:
        if anchor is None:
            self.anywhere[request] = resolved
        else:
            self.entries[(request, anchor)] = resolved

    def resolve(self, request: str, anchor: Path) -> Path | None:
        self.calls.append((request, anchor))
        found = self.entries.get((request, anchor))
        if found is not None:
            return found
        return self.anywhere.get(request)
