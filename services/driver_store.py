"""Driver store operations backed by pnputil."""
from __future__ import annotations

import subprocess
import sys
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterable, Protocol, Sequence

from pnputil_manager.constants import IMMUTABLE_CONFIG, PnpUtilSetting
from pnputil_manager.paths import default_pnputil_path
from pnputil_manager.user_settings import UserSettings
from services.catalog import COLUMN_GETTERS, SortState, apply_filter, sort_records
from services.driver_parser import DriverRecord, parse_enum_drivers
from services.errors import DriverStoreError, EmptyCatalogError, EnumerationError

LogCallback = Callable[[str], None]

SPAWN_FAILURE_EXIT_CODE = -1


@dataclass
class CommandExecutionResult:
    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class DeleteOutcome:
    published_name: str
    success: bool
    stdout: str
    stderr: str
    exit_code: int

    @classmethod
    def from_result(cls, published_name: str, result: CommandExecutionResult) -> "DeleteOutcome":
        return cls(published_name, result.succeeded, result.stdout, result.stderr, result.returncode)


@dataclass
class BatchReport:
    outcomes: list[DeleteOutcome] = field(default_factory=list)
    refresh_error: str | None = None

    @property
    def succeeded(self) -> list[DeleteOutcome]:
        return [outcome for outcome in self.outcomes if outcome.success]

    @property
    def failed(self) -> list[DeleteOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]

    def summary(self) -> str:
        sections: list[str] = []
        if self.succeeded:
            entries = [f"{o.published_name} - Success\nOutput:\n{o.stdout.strip()}\n" for o in self.succeeded]
            sections.append("Successfully uninstalled drivers:\n" + "\n".join(entries))
        if self.failed:
            entries = [
                f"{o.published_name} - Failed\nError:\n{o.stderr.strip()}\nOutput:\n{o.stdout.strip()}\n"
                for o in self.failed
            ]
            sections.append("Failed to uninstall drivers:\n" + "\n".join(entries))
        if self.refresh_error:
            sections.append(f"Driver list could not be refreshed:\n{self.refresh_error}\n")
        return "\n".join(sections)


class CommandRunner(Protocol):
    def run(self, command: Sequence[str]) -> subprocess.CompletedProcess[str]:  # pragma: no cover - protocol
        ...


class SubprocessRunner:
    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    def run(self, command: Sequence[str]) -> subprocess.CompletedProcess[str]:
        creationflags = getattr(subprocess, "CREATE_NO_WINDOW", 0)
        return subprocess.run(
            list(command),
            capture_output=True,
            text=True,
            encoding="oem" if sys.platform == "win32" else None,
            errors="replace",
            check=False,
            timeout=self._timeout,
            creationflags=creationflags,
        )


class PnpUtilClient:
    """Thin wrapper around the pnputil CLI."""

    def __init__(
        self,
        executable: str | None = None,
        *,
        command_runner: CommandRunner | None = None,
        force_delete: bool = False,
        setting: PnpUtilSetting = IMMUTABLE_CONFIG.pnputil,
    ) -> None:
        self._setting = setting
        self._executable = executable or default_pnputil_path(setting.executable_name)
        self._runner = command_runner or SubprocessRunner()
        self._force_delete = force_delete

    @classmethod
    def from_settings(cls, settings: UserSettings, command_runner: CommandRunner | None = None) -> "PnpUtilClient":
        runner = command_runner or SubprocessRunner(timeout=settings.command_timeout_seconds)
        return cls(settings.pnputil_path or None, command_runner=runner, force_delete=settings.force_delete)

    @property
    def executable(self) -> str:
        return self._executable

    def enumerate(self) -> CommandExecutionResult:
        return self._run([self._executable, self._setting.enum_drivers_verb])

    def delete_driver(self, published_name: str) -> CommandExecutionResult:
        cmd = [self._executable, self._setting.delete_driver_verb, published_name, self._setting.uninstall_flag]
        if self._force_delete:
            cmd.append(self._setting.force_flag)
        return self._run(cmd)

    def _run(self, cmd: list[str]) -> CommandExecutionResult:
        try:
            completed = self._runner.run(cmd)
        except subprocess.TimeoutExpired as exc:
            return CommandExecutionResult(cmd, SPAWN_FAILURE_EXIT_CODE, "", f"Timed out after {exc.timeout} seconds")
        except (OSError, ValueError) as exc:
            # ValueError covers output that cannot be decoded.
            return CommandExecutionResult(cmd, SPAWN_FAILURE_EXIT_CODE, "", str(exc))
        return CommandExecutionResult(cmd, completed.returncode, completed.stdout or "", completed.stderr or "")


class DriverStoreService:
    """Owns the driver catalog and the sort state of the driver view.

    The catalog is only ever replaced as a whole by :meth:`refresh`. Replacement
    and uninstall batches are serialized by one lock so a worker thread never
    exposes a half-built catalog.
    """

    def __init__(
        self,
        *,
        client: PnpUtilClient | None = None,
        command_runner: CommandRunner | None = None,
        settings: UserSettings | None = None,
        log_callback: LogCallback | None = None,
    ) -> None:
        self._client = client or PnpUtilClient.from_settings(settings or UserSettings(), command_runner)
        self._log = log_callback or (lambda _message: None)
        self._lock = threading.RLock()
        self._catalog: tuple[DriverRecord, ...] = ()
        self._sort_state = SortState()

    @property
    def catalog(self) -> tuple[DriverRecord, ...]:
        return self._catalog

    @property
    def sort_state(self) -> SortState:
        return self._sort_state

    def refresh(self) -> list[DriverRecord]:
        with self._lock:
            result = self._client.enumerate()
            if not result.succeeded:
                detail = (result.stderr or result.stdout or "").strip() or f"exit code {result.returncode}"
                if not result.stdout.strip():
                    raise EnumerationError(f"pnputil enumeration failed: {detail}")
                self._log(f"[WARN] pnputil exited with code {result.returncode}; parsing output anyway.")
            records = parse_enum_drivers(result.stdout)
            self._catalog = tuple(records)
            self._sort_state = SortState.after_enumerate()
        self._log(f"Enumerated {len(records)} driver package(s).")
        return records

    def view(self, query: str | None = None) -> list[DriverRecord]:
        catalog = self._catalog
        if not catalog:
            raise EmptyCatalogError()
        return sort_records(apply_filter(catalog, query), self._sort_state)

    def click_column(self, column: int) -> SortState:
        if not 0 <= column < len(COLUMN_GETTERS):
            raise ValueError(f"Unknown sort column: {column}")
        self._sort_state = self._sort_state.toggled(column)
        return self._sort_state

    def set_sort_state(self, state: SortState) -> None:
        self._sort_state = state

    def uninstall(
        self,
        published_names: Iterable[str],
        *,
        progress_callback: Callable[[int, int, str], None] | None = None,
    ) -> BatchReport:
        names = list(published_names)
        total = len(names)
        report = BatchReport()
        with self._lock:
            for index, name in enumerate(names, start=1):
                result = self._client.delete_driver(name)
                outcome = DeleteOutcome.from_result(name, result)
                report.outcomes.append(outcome)
                status = "OK" if outcome.success else "FAIL"
                self._log(f"[{status}] delete :: {name} -> exit {outcome.exit_code}")
                if progress_callback:
                    progress_callback(index, total, f"{'Removed' if outcome.success else 'Failed'}: {name}")
            try:
                self.refresh()
            except DriverStoreError as exc:
                report.refresh_error = str(exc)
                self._log(f"[ERROR] Refresh after uninstall failed: {exc}")
        return report
