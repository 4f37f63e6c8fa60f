"""Extension build and installation steps.

Each step of the rebuild loop is a method on ExtensionInstaller. Steps are
simple pass/fail gates: recoverable problems are reported through the
console and the caller moves on, while fatal problems raise InstallError.
"""

import logging
import subprocess
import zipfile
from dataclasses import dataclass, field
from pathlib import Path

from extdev.config.schemas import WorkflowConfig
from extdev.utils import console
from extdev.utils.filesystem import (
    copy_directory,
    copy_file,
    ensure_directory,
    extract_zip,
    find_directories,
    make_scratch_directory,
    remove_directory,
)

logger = logging.getLogger("extdev.installer")

# Lines of tool output repeated in the warning when a command fails
OUTPUT_TAIL_LINES = 10


class InstallError(Exception):
    """Error during extension installation."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


class ArtifactNotFoundError(InstallError):
    """The packaged artifact was not produced."""

    def __init__(self, path: Path):
        super().__init__(f"Artifact not found: {path}", path)


class ToolError(InstallError):
    """An external tool exited with a non-zero status."""

    def __init__(self, command: list[str], returncode: int):
        self.command = command
        self.returncode = returncode
        super().__init__(f"Command failed with exit code {returncode}: {' '.join(command)}")


@dataclass
class ToolResult:
    """Result of running an external tool."""

    command: list[str]
    returncode: int
    output: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


@dataclass
class VerifyReport:
    """Outcome of checking the installed directory for expected files."""

    present: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing


class ExtensionInstaller:
    """Runs the build, uninstall, install and verify steps."""

    def __init__(self, config: WorkflowConfig, project_root: Path):
        """Initialize the installer.

        Args:
            config: Workflow configuration
            project_root: Directory the build tools run in
        """
        self.config = config
        self.project_root = project_root.resolve()

    @property
    def artifact_path(self) -> Path:
        return self.config.artifact_path(self.project_root)

    @property
    def target_dir(self) -> Path:
        return self.config.target_dir()

    def package_manager_install(self) -> ToolResult:
        """Install the extension's dependencies."""
        console.status("Updating dependencies")
        return self._run_tool(self.config.install_command)

    def build_package(self) -> ToolResult:
        """Package the extension into its archive artifact."""
        console.status("Building extension package")
        return self._run_tool(self.config.package_command)

    def _run_tool(self, command: list[str]) -> ToolResult:
        logger.debug("Running command: %s (cwd=%s)", " ".join(command), self.project_root)
        try:
            completed = subprocess.run(
                command,
                cwd=self.project_root,
                capture_output=True,
                text=True,
                errors="replace",
            )
            result = ToolResult(
                command=command,
                returncode=completed.returncode,
                output=(completed.stdout or "") + (completed.stderr or ""),
            )
        except FileNotFoundError:
            result = ToolResult(
                command=command,
                returncode=127,
                output=f"{command[0]}: command not found",
            )

        for line in result.output.splitlines():
            console.debug(line)

        if result.success:
            console.success(f"{' '.join(command)} completed")
            return result

        console.warning(f"{' '.join(command)} exited with code {result.returncode}")
        for line in result.output.splitlines()[-OUTPUT_TAIL_LINES:]:
            console.warning(f"  {line}")

        if self.config.fail_on_tool_error:
            raise ToolError(command, result.returncode)
        return result

    def remove_existing(self, pattern: str | None = None) -> list[Path]:
        """Remove previously installed builds of the extension.

        Args:
            pattern: Glob matched against directory names in the extensions
                directory (defaults to the configured uninstall pattern)

        Returns:
            Directories that were removed
        """
        pattern = pattern or self.config.resolved_uninstall_pattern()
        extensions_dir = self.config.extensions_path()
        console.status(f"Removing installed extension matching {pattern}")

        matches = find_directories(extensions_dir, pattern)
        if not matches:
            console.warning(f"No installed extension matching {pattern} in {extensions_dir}")
            return []

        removed = []
        for path in matches:
            remove_directory(path)
            logger.debug("Removed %s", path)
            removed.append(path)
        console.success(f"Removed {len(removed)} installed version(s)")
        return removed

    def check_artifact(self, artifact_path: Path | None = None) -> Path:
        """Ensure the packaged artifact exists.

        Raises:
            ArtifactNotFoundError: If the artifact file is missing
        """
        artifact_path = artifact_path or self.artifact_path
        if not artifact_path.is_file():
            raise ArtifactNotFoundError(artifact_path)
        return artifact_path

    def install_artifact(
        self,
        artifact_path: Path | None = None,
        target_dir: Path | None = None,
    ) -> Path:
        """Extract the artifact's payload into the target directory.

        Args:
            artifact_path: Packaged archive (defaults to the configured artifact)
            target_dir: Install location (defaults to the configured target)

        Returns:
            The target directory

        Raises:
            ArtifactNotFoundError: If the artifact file is missing
            InstallError: If the archive is unreadable, unsafe, or has no payload
        """
        artifact_path = self.check_artifact(artifact_path)
        target_dir = target_dir or self.target_dir
        console.status(f"Installing {artifact_path.name} to {target_dir}")

        # Nothing under target_dir changes until the payload has been extracted and found
        scratch_dir = make_scratch_directory()
        logger.debug("Using scratch directory: %s", scratch_dir)
        try:
            archive = copy_file(artifact_path, scratch_dir / f"{artifact_path.stem}.zip")
            extracted = scratch_dir / "extracted"
            try:
                extract_zip(archive, extracted)
            except zipfile.BadZipFile as e:
                raise InstallError(f"Not a valid archive: {artifact_path}", artifact_path) from e
            except ValueError as e:
                raise InstallError(str(e), artifact_path) from e

            payload = extracted / self.config.payload_dir
            if not payload.is_dir():
                raise InstallError(
                    f"Archive has no '{self.config.payload_dir}' directory: {artifact_path}",
                    artifact_path,
                )
            ensure_directory(target_dir.parent)
            copy_directory(payload, target_dir)
        finally:
            remove_directory(scratch_dir)
            logger.debug("Removed scratch directory: %s", scratch_dir)

        console.success(f"Installed to {target_dir}")
        return target_dir

    def verify(
        self,
        target_dir: Path | None = None,
        expected_files: list[str] | None = None,
    ) -> VerifyReport:
        """Check the installed directory for the files the editor needs.

        Missing files are reported but never abort the run.
        """
        target_dir = target_dir or self.target_dir
        if expected_files is None:
            expected_files = self.config.expected_files
        console.status("Verifying installation")

        report = VerifyReport()
        for rel_path in expected_files:
            if (target_dir / rel_path).is_file():
                console.success(f"Found {rel_path}")
                report.present.append(rel_path)
            else:
                console.error(f"Missing {rel_path} in {target_dir}")
                report.missing.append(rel_path)
        return report
