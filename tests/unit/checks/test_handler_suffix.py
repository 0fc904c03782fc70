"""Unit tests for no-handler-suffix."""

import pytest

from convention_linter.domain.checks.handler_suffix import handler_to_handle

CHECK = "no-handler-suffix"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("click_handler", "handle_click"),
        ("clickHandler", "handleClick"),
        ("_submit_handler", "_handle_submit"),
        ("clickhandler", "handle_click"),
        ("ClickHandler", "handleClick"),
    ],
)
def test_handler_to_handle(name, expected):
    assert handler_to_handle(name) == expected


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("isClickHandler", "isHandleClick"),
        ("is_click_handler", "is_handle_click"),
        ("issue_handler", "handle_issue"),
        ("canvasHandler", "handleCanvas"),
    ],
)
def test_boolean_prefix_stays_in_front(name, expected):
    assert handler_to_handle(name, ["is", "can"]) == expected


class TestHandlerSuffix:
    def test_function_is_reported_with_fix(self, check) -> None:
        (finding,) = check(CHECK, "def click_handler(event):\n    pass\n").findings
        assert finding.data == {"name": "click_handler", "suggestion": "handle_click"}
        assert finding.fixable

    def test_plain_handler_passes(self, check) -> None:
        assert check(CHECK, "def handler(event):\n    pass\n").findings == ()

    def test_lambda_assignment(self, check) -> None:
        (finding,) = check(CHECK, "submit_handler = lambda event: None\n").findings
        assert finding.data["suggestion"] == "handle_submit"

    def test_methods_keep_their_names(self, check) -> None:
        source = """
        class View:
            def error_handler(self):
                pass
        """
        assert check(CHECK, source).findings == ()

    def test_decorated_function_is_renamed(self, fix) -> None:
        source = """
        @register
        def click_handler(event):
            pass

        click_handler(None)
        """
        report = fix(source, {"enable": [CHECK]})
        assert "def handle_click(event):" in report.fixed_source
        assert "handle_click(None)" in report.fixed_source
        assert report.findings == ()
