"""Unit tests for file discovery and pyproject loading."""

from pathlib import Path

from convention_linter.infrastructure.config_file_loader import ConfigFileLoader
from convention_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway


class TestFileSystemGateway:
    def test_directories_are_walked_sorted(self, tmp_path: Path) -> None:
        (tmp_path / "pkg").mkdir()
        (tmp_path / "pkg" / "b.py").write_text("")
        (tmp_path / "a.py").write_text("")
        (tmp_path / "notes.txt").write_text("")
        files = FileSystemGateway().glob_python_files(str(tmp_path))
        assert files == sorted([str(tmp_path / "a.py"), str(tmp_path / "pkg" / "b.py")])

    def test_virtualenvs_and_caches_are_skipped(self, tmp_path: Path) -> None:
        for skipped in (".venv", "__pycache__", ".git"):
            (tmp_path / skipped).mkdir()
            (tmp_path / skipped / "x.py").write_text("")
        assert FileSystemGateway().glob_python_files(str(tmp_path)) == []

    def test_single_files(self, tmp_path: Path) -> None:
        module = tmp_path / "mod.py"
        module.write_text("")
        gateway = FileSystemGateway()
        assert gateway.glob_python_files(str(module)) == [str(module)]
        assert gateway.glob_python_files(str(tmp_path / "README.md")) == []


class TestConfigFileLoader:
    def test_reads_tool_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.convention-linter]\ndisable = ["restrict-imports"]\n'
            "[tool.convention-linter.checks.params-naming-convention]\nallowed_parameters = 3\n"
        )
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)
        config = ConfigFileLoader.load_config_from_fs(nested)
        assert config == {
            "disable": ["restrict-imports"],
            "checks": {"params-naming-convention": {"allowed_parameters": 3}},
        }

    def test_missing_table_is_empty(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n')
        assert ConfigFileLoader.load_config_from_fs(tmp_path) == {}

    def test_broken_toml_is_logged_and_ignored(self, tmp_path: Path, caplog) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.convention-linter\n")
        assert ConfigFileLoader.load_config_from_fs(tmp_path) == {}
        assert "Could not read" in caplog.text

    def test_find_from_a_file(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("")
        module = tmp_path / "mod.py"
        module.write_text("")
        assert ConfigFileLoader.find_pyproject(module) == (tmp_path / "pyproject.toml").resolve()
