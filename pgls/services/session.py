from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pgls.binary.renaming import has_new_name, renaming_message
from pgls.binary.semver import is_older
from pgls.binary.state import last_notified_of_update, mark_notified
from pgls.binary.strategies import OperatingMode, ResolutionContext, StrategyKind
from pgls.core.errors import InvariantError
from pgls.core.result import Err, Ok, Result
from pgls.platform.files import is_executable

if TYPE_CHECKING:
    from pgls.binary.constants import ServerConstants
    from pgls.binary.finder import BinaryFinder
    from pgls.binary.http import HttpClient
    from pgls.binary.provision import BinaryProvisioner
    from pgls.binary.releases import ReleaseCatalog
    from pgls.binary.version import VersionProbe
    from pgls.core.config import Settings, SettingsStore
    from pgls.output.console import ConsoleProtocol

UPDATE_NOTICE_INTERVAL = timedelta(days=3)
MULTI_ROOT_MIN_VERSION = "0.8.0"
SERVER_ARGS = ("lsp-proxy",)

NOT_FOUND_MESSAGE = "Unable to find a Postgres Language Server binary"


@dataclass(frozen=True, slots=True)
class SessionError:
    kind: Literal["unsupported", "disabled", "invalid_settings", "not_found", "not_executable"]
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ServerCommand:
    """How to launch the server: argv and working directory."""

    args: tuple[str, ...]
    cwd: Path | None = None


@dataclass(frozen=True, slots=True)
class Session:
    """A resolved, provisioned binary ready to be launched.

    Attributes:
        bin: Binary found by the strategy chain
        temp_bin: Provisioned per-version copy, or None if provisioning failed
        strategy_label: Label of the strategy that found ``bin``
        strategy_kind: Identity of that strategy
        version: Version reported by ``bin``
        command: Launch command, starting from the provisioned copy when any
    """

    bin: Path
    temp_bin: Path | None
    strategy_label: str
    strategy_kind: StrategyKind
    version: str
    command: ServerCommand

    @property
    def executable(self) -> Path:
        return self.temp_bin if self.temp_bin is not None else self.bin


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionService:
    def __init__(
        self,
        *,
        constants: ServerConstants,
        settings: SettingsStore,
        finder: BinaryFinder,
        probe: VersionProbe,
        catalog: ReleaseCatalog,
        provisioner: BinaryProvisioner,
        http: HttpClient,
        storage_dir: Path,
        console: ConsoleProtocol,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._constants = constants
        self._settings = settings
        self._finder = finder
        self._probe = probe
        self._catalog = catalog
        self._provisioner = provisioner
        self._http = http
        self._storage_dir = storage_dir
        self._console = console
        self._clock = clock

    def create_session(self, roots: Sequence[Path]) -> Result[Session, SessionError]:
        """Find, check and provision the binary for a set of project roots.

        One root uses the local strategy ordering; several roots use the
        global one. Update and compatibility notices are shown on the way.
        """
        mode = OperatingMode.for_root_count(len(roots))
        if mode is OperatingMode.SINGLE_FILE:
            return Err(
                SessionError(
                    kind="unsupported",
                    message="Single file mode is not supported",
                    hint="Pass at least one project root with --root",
                )
            )

        # Multi-root sessions read user-level settings only.
        settings = self._load_settings(roots[0] if mode is OperatingMode.SINGLE_ROOT else None)
        if isinstance(settings, Err):
            return settings

        if not settings.value.enabled:
            return Err(
                SessionError(kind="disabled", message="Postgres Language Server is disabled in settings")
            )

        context = (
            ResolutionContext.local(roots[0])
            if mode is OperatingMode.SINGLE_ROOT
            else ResolutionContext.unrooted(mode)
        )
        found = self._finder.find(context)
        if found is None:
            return Err(
                SessionError(
                    kind="not_found",
                    message=NOT_FOUND_MESSAGE,
                    hint="Install it with npm, put it on PATH, set 'bin' in settings or run 'pgls download'",
                )
            )

        if not is_executable(found.binary):
            return Err(
                SessionError(
                    kind="not_executable",
                    message=f"Binary at {found.binary} is not executable",
                    hint=f"chmod +x {found.binary}",
                )
            )

        version = self._probe.version(found.binary)
        if version is None:
            raise InvariantError(f"Binary at {found.binary} exists but reports no version")

        self._console.debug(f"Found binary {found.binary} via {found.label} (version {version})")
        self._notify_update(version, found.kind)

        if mode is OperatingMode.MULTI_ROOT and is_older(version, MULTI_ROOT_MIN_VERSION):
            self._console.info(
                f"Multi-root workspaces are only supported from version {MULTI_ROOT_MIN_VERSION}; "
                f"version {version} will not handle them correctly. Consider updating."
            )

        temp_bin = self._provisioner.provision(found.binary)
        if temp_bin is None:
            self._console.warning(f"Launching the original binary at {found.binary}")

        command = self.server_command(
            temp_bin if temp_bin is not None else found.binary,
            roots,
            settings.value,
        )
        return Ok(
            Session(
                bin=found.binary,
                temp_bin=temp_bin,
                strategy_label=found.label,
                strategy_kind=found.kind,
                version=version,
                command=command,
            )
        )

    def server_command(
        self, executable: Path, roots: Sequence[Path], settings: Settings
    ) -> ServerCommand:
        """``{exe} lsp-proxy [--config-path=...]``, run from the first root."""
        args = [str(executable), *SERVER_ARGS]
        if settings.config_path is not None:
            args.append(f"--config-path={settings.config_path}")
        cwd = roots[0] if len(roots) == 1 else None
        return ServerCommand(args=tuple(args), cwd=cwd)

    def _load_settings(self, root: Path | None) -> Result[Settings, SessionError]:
        result = self._settings.load(root)
        if isinstance(result, Err):
            return Err(SessionError(kind="invalid_settings", message=str(result.error)))
        return result

    def _notify_update(self, version: str, kind: StrategyKind) -> None:
        now = self._clock()
        if now - last_notified_of_update(self._storage_dir) <= UPDATE_NOTICE_INTERVAL:
            self._console.debug("Update notice shown recently, skipping version check")
            return

        if self._catalog.version_outdated(version):
            if has_new_name(self._http, self._constants):
                self._console.info(renaming_message(kind))
            else:
                self._console.info(
                    f"Your version {version} is outdated, consider updating to latest version "
                    f"{self._catalog.latest_version()}"
                )

        try:
            mark_notified(self._storage_dir, now)
        except OSError as e:
            self._console.debug(f"Could not record update notice time: {e}")
