"""The rebuild-and-reinstall loop.

DevWorkflow strings the installer steps together with editor process
control. It has no platform-specific logic of its own.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from extdev.config.schemas import WorkflowConfig
from extdev.core.installer import ExtensionInstaller, ToolResult, VerifyReport
from extdev.core.process import ProcessController
from extdev.utils import console

logger = logging.getLogger("extdev.workflow")


@dataclass
class RunSummary:
    """What happened during one run of the workflow."""

    editor_stopped: bool = False
    tool_results: list[ToolResult] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)
    installed_dir: Path | None = None
    report: VerifyReport | None = None
    editor_pid: int | None = None

    @property
    def tool_failures(self) -> list[ToolResult]:
        return [r for r in self.tool_results if not r.success]


class DevWorkflow:
    """Stops the editor, rebuilds and reinstalls the extension, restarts the editor."""

    def __init__(
        self,
        config: WorkflowConfig,
        project_root: Path,
        controller: ProcessController | None = None,
        installer: ExtensionInstaller | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.project_root = project_root
        self.controller = controller or ProcessController()
        self.installer = installer or ExtensionInstaller(config, project_root)
        self._sleep = sleep

    def run(self) -> RunSummary:
        """Run every step in order.

        Raises:
            InstallError: If the artifact is missing or cannot be installed,
                or a build tool fails while fail_on_tool_error is set
        """
        logger.info("Starting workflow for %s", self.config.extension.directory_name)
        summary = RunSummary()

        summary.editor_stopped = self.stop_editor()

        summary.tool_results.append(self.installer.package_manager_install())
        summary.tool_results.append(self.installer.build_package())

        # Check before uninstalling so a failed build leaves the old install alone
        artifact = self.installer.check_artifact()

        summary.removed = self.installer.remove_existing()
        summary.installed_dir = self.installer.install_artifact(artifact)
        summary.report = self.installer.verify(summary.installed_dir)

        summary.editor_pid = self.start_editor()
        self.print_hints()

        logger.info(
            "Workflow complete: %d tool failure(s), %d missing file(s)",
            len(summary.tool_failures),
            len(summary.report.missing),
        )
        return summary

    def stop_editor(self) -> bool:
        """Terminate the editor if it is running, then give the OS time to clean up."""
        name = self.config.editor.process_name
        console.status(f"Stopping {name}")

        handle = self.controller.find_process(name)
        if handle is None:
            console.warning(f"{name} is not running")
            return False

        logger.debug("Found %s with PID(s) %s", name, handle.pids)
        stopped = self.controller.stop(handle)
        if stopped:
            console.success(f"Stopped {name}")
        self._sleep(self.config.restart_delay)
        return stopped

    def start_editor(self) -> int | None:
        """Relaunch the editor without waiting for it."""
        editor = self.config.editor
        console.status(f"Starting {editor.command}")
        pid = self.controller.start(editor.command, editor.args)
        if pid is not None:
            console.success(f"Started {editor.command} (PID {pid})")
        return pid

    def print_hints(self) -> None:
        """Print diagnostic hints for checking the new build."""
        if self.config.hints:
            console.bullets("If the extension does not behave as expected:", self.config.hints)
