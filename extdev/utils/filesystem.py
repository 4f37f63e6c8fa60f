"""Filesystem utilities for extdev."""

import shutil
import tempfile
import zipfile
from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def copy_file(src: Path, dest: Path) -> Path:
    """Copy a file to a destination.

    Args:
        src: Source file path
        dest: Destination path (file or directory)

    Returns:
        Path to the copied file
    """
    if dest.is_dir():
        dest = dest / src.name
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dest)
    return dest


def copy_directory(src: Path, dest: Path) -> Path:
    """Copy a directory recursively, replacing anything already at dest.

    Args:
        src: Source directory path
        dest: Destination directory path

    Returns:
        Path to the copied directory
    """
    if dest.exists():
        shutil.rmtree(dest)
    shutil.copytree(src, dest)
    return dest


def remove_directory(path: Path) -> bool:
    """Remove a directory and its contents.

    Args:
        path: Directory path to remove

    Returns:
        True if the directory was removed, False if it didn't exist
    """
    if not path.exists():
        return False
    shutil.rmtree(path)
    return True


def find_directories(base_dir: Path, pattern: str) -> list[Path]:
    """Find directories directly under base_dir whose name matches a glob.

    Args:
        base_dir: Directory to search
        pattern: Glob pattern (e.g., "publisher.name-*")

    Returns:
        Sorted list of matching directories, empty if base_dir doesn't exist
    """
    if not base_dir.is_dir():
        return []
    return sorted(p for p in base_dir.glob(pattern) if p.is_dir())


def make_scratch_directory(prefix: str = "extdev_") -> Path:
    """Create a fresh directory under the system temp location."""
    return Path(tempfile.mkdtemp(prefix=prefix))


def extract_zip(archive_path: Path, dest_dir: Path) -> Path:
    """Extract a zip-compatible archive to a destination directory.

    Args:
        archive_path: Path to the archive
        dest_dir: Destination directory

    Returns:
        The destination directory

    Raises:
        ValueError: If the archive contains unsafe paths
        zipfile.BadZipFile: If the file is not a zip archive
    """
    dest_dir.mkdir(parents=True, exist_ok=True)

    with zipfile.ZipFile(archive_path) as archive:
        # Security: prevent path traversal
        for name in archive.namelist():
            member_path = Path(name)
            if member_path.is_absolute() or name.startswith(("/", "\\")) or ".." in member_path.parts:
                raise ValueError(f"Unsafe path in archive: {name}")
        archive.extractall(dest_dir)

    return dest_dir
