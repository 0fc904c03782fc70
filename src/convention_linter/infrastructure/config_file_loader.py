"""Load [tool.convention-linter] from pyproject.toml. Infrastructure I/O only."""

import logging
import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib

logger = logging.getLogger(__name__)

TOOL_SECTION = "convention-linter"


class ConfigFileLoader:
    """Finds the nearest pyproject.toml and returns its linter table."""

    @staticmethod
    def find_pyproject(start: Optional[Path] = None) -> Optional[Path]:
        current_path = (start or Path.cwd()).resolve()
        if current_path.is_file():
            current_path = current_path.parent
        for directory in (current_path, *current_path.parents):
            candidate = directory / "pyproject.toml"
            if candidate.is_file():
                return candidate
        return None

    @staticmethod
    def load_config_from_fs(start: Optional[Path] = None) -> dict[str, object]:
        """Return the ``[tool.convention-linter]`` table, or an empty dict when there is none."""
        config_file = ConfigFileLoader.find_pyproject(start)
        if config_file is None:
            return {}
        try:
            with config_file.open("rb") as f:
                data = toml_lib.load(f)
        except (OSError, toml_lib.TOMLDecodeError) as exc:
            logger.warning("Could not read %s: %s", config_file, exc)
            return {}
        logger.debug("Loaded configuration from %s", config_file)
        tool_section = data.get("tool", {}) or {}
        return dict(tool_section.get(TOOL_SECTION, {}) or {})
