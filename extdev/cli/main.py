"""Main CLI application for extdev."""

from pathlib import Path
from typing import Annotated

import typer

from extdev import __version__
from extdev.config.parser import (
    CONFIG_FILENAME,
    ConfigError,
    config_from_package_json,
    find_project_root,
    load_workflow_config,
    save_workflow_config,
)
from extdev.config.schemas import WorkflowConfig
from extdev.core.installer import ExtensionInstaller, InstallError
from extdev.core.workflow import DevWorkflow
from extdev.utils import console
from extdev.utils.console import setup_logging

# Create the main Typer app
app = typer.Typer(
    name="extdev",
    help="Rebuild and reinstall a local editor extension",
    add_completion=False,
)

PathOption = Annotated[
    Path | None,
    typer.Option(
        "--path",
        "-p",
        help="Extension project directory (defaults to the directory holding extdev.yaml)",
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Configuration file (defaults to extdev.yaml in the project directory)",
    ),
]


def load_settings(
    path: Path | None = None, config_path: Path | None = None
) -> tuple[Path, WorkflowConfig]:
    """Resolve the project root and its configuration, exiting on errors."""
    if path is not None:
        project_root = path.resolve()
        if not project_root.is_dir():
            console.error(f"Directory does not exist: {project_root}")
            raise typer.Exit(1)
    else:
        project_root = find_project_root() or Path.cwd()

    if config_path is None:
        config_path = project_root / CONFIG_FILENAME
        if not config_path.exists():
            console.debug(f"No {CONFIG_FILENAME} in {project_root}, using defaults")
            return project_root, WorkflowConfig()

    try:
        return project_root, load_workflow_config(config_path)
    except ConfigError as e:
        console.error(str(e))
        raise typer.Exit(1) from e


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v info, -vv debug, -vvv debug with source paths)",
        ),
    ] = 0,
    path: PathOption = None,
    config: ConfigOption = None,
) -> None:
    """extdev - stop the editor, rebuild and reinstall the extension, restart the editor."""
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        run(path, config)
    elif path is not None or config is not None:
        console.error("--path and --config go after the command name")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show the extdev version."""
    console.console.print(f"extdev {__version__}")


@app.command()
def init(
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Extension project directory (defaults to current directory)",
        ),
    ] = None,
) -> None:
    """Create extdev.yaml for an extension project.

    The extension publisher, name and version are taken from package.json.
    """
    project_root = Path.cwd() if path is None else path.resolve()
    config_path = project_root / CONFIG_FILENAME

    if config_path.exists():
        console.error(f"Already initialized: {config_path}")
        raise typer.Exit(1)

    try:
        settings = config_from_package_json(project_root)
    except ConfigError as e:
        console.error(str(e))
        raise typer.Exit(1) from e

    save_workflow_config(config_path, settings)
    console.success(f"Initialized extdev for {settings.extension.identifier}")
    console.console.print(f"  Created: {config_path}")


@app.command()
def run(path: PathOption = None, config: ConfigOption = None) -> None:
    """Run the full rebuild and reinstall loop.

    Stops the editor, updates dependencies, packages the extension, removes
    the previously installed build, installs the new one, verifies it and
    restarts the editor.
    """
    project_root, settings = load_settings(path, config)

    try:
        DevWorkflow(settings, project_root).run()
    except InstallError as e:
        console.error(str(e))
        raise typer.Exit(1) from e


@app.command()
def verify(path: PathOption = None, config: ConfigOption = None) -> None:
    """Check the installed extension for its expected files."""
    project_root, settings = load_settings(path, config)

    installer = ExtensionInstaller(settings, project_root)
    report = installer.verify()
    if report.ok:
        console.success(f"Installation looks complete: {installer.target_dir}")


if __name__ == "__main__":
    app()
