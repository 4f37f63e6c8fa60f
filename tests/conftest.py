"""Shared fixtures for extdev tests."""

import shutil
import tempfile
import zipfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from extdev.config.schemas import ExtensionConfig, WorkflowConfig
from extdev.core.process import ProcessHandle

PAYLOAD = {
    "extension/package.json": '{"name": "sample", "version": "1.0.0"}',
    "extension/extension.js": "exports.activate = () => {};\n",
    "extension/media/icon.svg": "<svg/>",
    "[Content_Types].xml": "<Types/>",
    "extension.vsixmanifest": "<PackageManifest/>",
}


def write_vsix(path: Path, files: dict[str, str] | None = None) -> Path:
    """Write a zip archive laid out like a packaged extension."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in (PAYLOAD if files is None else files).items():
            archive.writestr(name, content)
    return path


class FakeController:
    """Records process control calls instead of touching real processes."""

    def __init__(self, running: bool = True, stop_ok: bool = True, pid: int | None = 4242):
        self.running = running
        self.stop_ok = stop_ok
        self.pid = pid
        self.events: list[tuple[str, str]] = []

    def find_process(self, name: str) -> ProcessHandle | None:
        self.events.append(("find", name))
        return ProcessHandle(name=name, pids=[100]) if self.running else None

    def stop(self, handle: ProcessHandle) -> bool:
        self.events.append(("stop", handle.name))
        return self.stop_ok

    def start(self, command: str, args: list[str] | None = None) -> int | None:
        self.events.append(("start", command))
        return self.pid


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp(prefix="extdev_test_"))
    yield path
    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    """Create an extension project directory."""
    path = temp_dir / "sample-extension"
    path.mkdir()
    return path


@pytest.fixture
def extensions_dir(temp_dir: Path) -> Path:
    """Create a stand-in for the editor's extensions directory."""
    path = temp_dir / "extensions"
    path.mkdir()
    return path


@pytest.fixture
def config(extensions_dir: Path) -> WorkflowConfig:
    """Workflow configuration pointing at the temporary extensions directory."""
    return WorkflowConfig(
        extension=ExtensionConfig(publisher="acme", name="sample", version="1.0.0"),
        extensions_dir=str(extensions_dir),
        restart_delay=0,
    )


@pytest.fixture
def vsix_factory() -> Callable[..., Path]:
    """Build extension archives on demand."""
    return write_vsix


@pytest.fixture
def artifact(project_dir: Path) -> Path:
    """A packaged artifact in the project directory."""
    return write_vsix(project_dir / "sample-1.0.0.vsix")


@pytest.fixture
def controller() -> FakeController:
    """Process controller that records calls."""
    return FakeController()


@pytest.fixture
def controller_factory() -> type[FakeController]:
    """Build process controllers with a chosen state."""
    return FakeController
