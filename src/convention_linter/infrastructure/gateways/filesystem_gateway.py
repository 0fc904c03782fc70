"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path

from convention_linter.domain.protocols import FileSystemProtocol

_SKIPPED_DIRS = frozenset({".git", ".hg", ".tox", ".nox", ".venv", "venv", "__pycache__", "build", "dist", "node_modules"})


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python files in path (recursive if directory), skipping VCS and virtualenv folders."""
        path_obj = Path(path)
        if path_obj.is_dir():
            return sorted(
                str(p)
                for p in path_obj.glob("**/*.py")
                if not _SKIPPED_DIRS.intersection(p.relative_to(path_obj).parts[:-1])
            )
        return [str(path_obj)] if path_obj.suffix in (".py", ".pyi") else []
