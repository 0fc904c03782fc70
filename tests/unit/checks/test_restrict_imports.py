"""Unit tests for restrict-imports."""

CHECK = "restrict-imports"


class TestRestrictImports:
    """Rules narrow by module (``from``) and by location (``folders``/``files``)."""

    def test_no_rules_no_findings(self, check) -> None:
        assert check(CHECK, "import os\n").findings == ()

    def test_disable_everywhere(self, check) -> None:
        report = check(CHECK, "import os\nimport sys\n", rules=[{"disable_imports": ["os"]}])
        (finding,) = report.findings
        assert finding.data == {"name": "os", "filename": "src/app/example.py"}

    def test_disable_in_folder(self, check) -> None:
        rules = [{"disable_imports": ["requests"], "folders": ["**/domain/**"]}]
        assert len(check(CHECK, "import requests\n", path="src/app/domain/model.py", rules=rules).findings) == 1
        assert check(CHECK, "import requests\n", path="src/app/infra/http.py", rules=rules).findings == ()

    def test_allow_only_in_folder(self, check) -> None:
        rules = [{"allow_imports": ["sqlalchemy"], "folders": ["**/infrastructure/**"]}]
        domain = check(CHECK, "import sqlalchemy\nimport os\n", path="src/app/domain/model.py", rules=rules)
        infra = check(CHECK, "import sqlalchemy\n", path="src/app/infrastructure/db.py", rules=rules)
        assert [f.data["name"] for f in domain.findings] == ["sqlalchemy"]
        assert infra.findings == ()

    def test_from_filter(self, check) -> None:
        rules = [{"from": ["django.*"], "disable_imports": ["models"]}]
        assert len(check(CHECK, "from django.db import models\n", rules=rules).findings) == 1
        assert check(CHECK, "from myapp import models\n", rules=rules).findings == ()

    def test_aliases_check_the_imported_name(self, check) -> None:
        report = check(CHECK, "from os import path as p\n", rules=[{"disable_imports": ["path"]}])
        assert [f.data["name"] for f in report.findings] == ["path"]

    def test_dotted_import(self, check) -> None:
        report = check(CHECK, "import xml.etree as et\n", rules=[{"disable_imports": ["xml.etree"]}])
        assert len(report.findings) == 1

    def test_file_globs(self, check) -> None:
        rules = [{"disable_imports": ["pytest"], "files": ["*_service.py"]}]
        assert len(check(CHECK, "import pytest\n", path="src/user_service.py", rules=rules).findings) == 1
        assert check(CHECK, "import pytest\n", path="tests/test_user.py", rules=rules).findings == ()

    def test_invalid_rules_disable_the_check(self, analyze) -> None:
        config = {"enable": [CHECK], "checks": {CHECK: {"rules": [{"deny": ["os"]}]}}}
        report = analyze("import os\n", config)
        assert report.findings == ()
