"""Pydantic schemas for extdev configuration.

This module defines the data model for extdev.yaml, the optional file that
describes which extension is rebuilt and how the editor is controlled.
"""

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from extdev.utils.platform import is_windows

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_HINTS = [
    "Open the Extensions view and confirm the extension is listed and enabled",
    "Run 'Developer: Reload Window' if the extension does not activate",
    "Check 'Output > Extension Host' for activation errors",
    "Open 'Help > Toggle Developer Tools' to inspect console errors",
]


def _node_tool(name: str) -> str:
    """Name of a Node.js command-line tool; npm installs them as .cmd shims on Windows."""
    return f"{name}.cmd" if is_windows() else name


# =============================================================================
# Extension Identity
# =============================================================================


class ExtensionConfig(BaseModel):
    """Identity of the extension being rebuilt.

    The install directory name is derived as ``{publisher}.{name}-{version}``
    and the default artifact name as ``{name}-{version}.vsix``.
    """

    publisher: str = "local"
    name: str = "extension"
    version: str = "0.0.1"

    @field_validator("name", "publisher")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Validate publisher and name format."""
        if not re.match(r"^[a-z0-9][a-z0-9_.-]*$", v):
            raise ValueError(
                "Must start with alphanumeric and contain only lowercase letters, "
                "numbers, dots, hyphens, and underscores"
            )
        return v

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate semver format."""
        pattern = r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.-]+)?(\+[a-zA-Z0-9.-]+)?$"
        if not re.match(pattern, v):
            raise ValueError(f"Invalid semver version: {v}")
        return v

    @property
    def identifier(self) -> str:
        return f"{self.publisher}.{self.name}"

    @property
    def directory_name(self) -> str:
        return f"{self.identifier}-{self.version}"

    @property
    def artifact_name(self) -> str:
        return f"{self.name}-{self.version}.vsix"


# =============================================================================
# Editor Process
# =============================================================================


class EditorConfig(BaseModel):
    """How to find, stop and relaunch the editor.

    On Windows the process is listed as ``Code.exe`` and the launcher on PATH
    is ``code.cmd``.
    """

    process_name: str = Field(default_factory=lambda: "Code.exe" if is_windows() else "code")
    command: str = Field(default_factory=lambda: "code.cmd" if is_windows() else "code")
    args: list[str] = Field(default_factory=list)


# =============================================================================
# Workflow Configuration (extdev.yaml)
# =============================================================================


class WorkflowConfig(BaseModel):
    """Workflow configuration (extdev.yaml) schema."""

    extension: ExtensionConfig = Field(default_factory=ExtensionConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)

    artifact: str | None = None  # Defaults to extension.artifact_name
    payload_dir: str = "extension"  # Subtree of the archive that gets installed
    extensions_dir: str = "~/.vscode/extensions"
    uninstall_pattern: str | None = None  # Defaults to "{publisher}.{name}-[0-9]*"

    restart_delay: float = Field(default=2.0, ge=0)
    install_command: list[str] = Field(default_factory=lambda: [_node_tool("npm"), "install"])
    package_command: list[str] = Field(default_factory=lambda: [_node_tool("vsce"), "package"])
    expected_files: list[str] = Field(default_factory=lambda: ["extension.js", "package.json"])
    fail_on_tool_error: bool = False

    hints: list[str] = Field(default_factory=lambda: list(DEFAULT_HINTS))

    @field_validator("install_command", "package_command")
    @classmethod
    def validate_command(cls, v: list[str]) -> list[str]:
        """Commands must name an executable."""
        if not v or not v[0]:
            raise ValueError("Command must not be empty")
        return v

    @field_validator("payload_dir")
    @classmethod
    def validate_payload_dir(cls, v: str) -> str:
        """Payload directory must stay inside the archive."""
        parts = Path(v).parts
        if Path(v).is_absolute() or ".." in parts:
            raise ValueError(f"payload_dir must be a relative path inside the archive: {v}")
        return v

    def artifact_path(self, project_root: Path) -> Path:
        """Resolve the built artifact path relative to the project root."""
        artifact = Path(self.artifact or self.extension.artifact_name).expanduser()
        if artifact.is_absolute():
            return artifact
        return project_root / artifact

    def extensions_path(self) -> Path:
        """Resolve the editor's extensions directory."""
        return Path(self.extensions_dir).expanduser()

    def target_dir(self) -> Path:
        """Directory the new build is installed into."""
        return self.extensions_path() / self.extension.directory_name

    def resolved_uninstall_pattern(self) -> str:
        """Glob matching previously installed builds of this extension."""
        # Versions start with a digit, so "acme.sample-tools-1.0.0" is not matched
        return self.uninstall_pattern or f"{self.extension.identifier}-[0-9]*"
