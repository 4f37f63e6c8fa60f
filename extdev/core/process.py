"""Editor process control.

Uses the system process tools (``pgrep``/``pkill`` on Unix,
``tasklist``/``taskkill`` on Windows) rather than a process library.
Nothing in this module raises for a missing or already-exited process;
those conditions are reported and the caller carries on.
"""

import csv
import logging
import subprocess
from dataclasses import dataclass, field

from extdev.utils import console
from extdev.utils.platform import is_windows

logger = logging.getLogger(__name__)

QUERY_TIMEOUT = 10


@dataclass
class ProcessHandle:
    """A running process located by name."""

    name: str
    pids: list[int] = field(default_factory=list)


class ProcessController:
    """Finds, stops and launches the editor process."""

    def __init__(self, windows: bool | None = None):
        self.windows = is_windows() if windows is None else windows

    def find_process(self, name: str) -> ProcessHandle | None:
        """Look up running processes by exact name.

        Args:
            name: Process name (e.g., "code" or "Code.exe")

        Returns:
            A handle with matching PIDs, or None if nothing is running
        """
        if self.windows:
            cmd = ["tasklist", "/FI", f"IMAGENAME eq {name}", "/FO", "CSV", "/NH"]
        else:
            cmd = ["pgrep", "-x", name]

        logger.debug("Running process query: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=QUERY_TIMEOUT,
            )
        except FileNotFoundError:
            console.warning(f"Process query tool not available: {cmd[0]}")
            return None
        except subprocess.TimeoutExpired:
            console.warning(f"Process query timed out: {cmd[0]}")
            return None

        pids = self._parse_tasklist(result.stdout) if self.windows else self._parse_pgrep(result)
        if not pids:
            return None
        return ProcessHandle(name=name, pids=pids)

    @staticmethod
    def _parse_pgrep(result: subprocess.CompletedProcess[str]) -> list[int]:
        # pgrep exits 1 when nothing matched
        if result.returncode != 0:
            return []
        return [int(line) for line in result.stdout.split() if line.strip().isdigit()]

    @staticmethod
    def _parse_tasklist(output: str) -> list[int]:
        pids = []
        for row in csv.reader(output.splitlines()):
            # "INFO: No tasks are running..." has a single column
            if len(row) >= 2 and row[1].isdigit():
                pids.append(int(row[1]))
        return pids

    def stop(self, handle: ProcessHandle) -> bool:
        """Forcibly terminate every process matching the handle's name.

        Returns:
            True if the termination command succeeded
        """
        if self.windows:
            cmd = ["taskkill", "/F", "/IM", handle.name]
        else:
            cmd = ["pkill", "-9", "-x", handle.name]

        logger.debug("Running termination command: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=QUERY_TIMEOUT,
            )
        except FileNotFoundError:
            console.warning(f"Process termination tool not available: {cmd[0]}")
            return False
        except subprocess.TimeoutExpired:
            console.warning(f"Process termination timed out: {cmd[0]}")
            return False

        if result.returncode != 0:
            console.warning(f"Could not stop {handle.name}; it may have already exited")
            logger.debug("Termination output: %s", (result.stderr or result.stdout).strip())
            return False
        return True

    def start(self, command: str, args: list[str] | None = None) -> int | None:
        """Launch a process without waiting for it.

        Args:
            command: Executable to launch
            args: Arguments for the executable

        Returns:
            PID of the launched process, or None if it could not be started
        """
        cmd = [command, *(args or [])]
        logger.debug("Launching: %s", " ".join(cmd))

        kwargs: dict[str, object] = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
        }
        if self.windows:
            kwargs["creationflags"] = getattr(subprocess, "DETACHED_PROCESS", 0)
        else:
            kwargs["start_new_session"] = True

        try:
            process = subprocess.Popen(cmd, **kwargs)  # type: ignore[call-overload]
        except OSError as e:
            console.error(f"Failed to start {command}: {e}")
            return None
        return process.pid
