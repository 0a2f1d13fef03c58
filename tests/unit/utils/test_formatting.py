"""Unit tests for Rich formatting helpers."""

import pytest
from boxy.core.theme import get_theme
from boxy.utils import formatting
from rich.console import Console


@pytest.fixture
def recorded(monkeypatch: pytest.MonkeyPatch) -> tuple[Console, Console]:
    """Swap the shared consoles for recording ones."""
    out = Console(theme=get_theme(), record=True, width=80, color_system=None)
    err = Console(theme=get_theme(), record=True, width=80, color_system=None)
    monkeypatch.setattr(formatting, "console", out)
    monkeypatch.setattr(formatting, "err_console", err)
    return out, err


class TestBookmarkTable:
    """Tests for create_bookmark_table."""

    def test_columns(self) -> None:
        """Table has an index column and a package column."""
        table = formatting.create_bookmark_table()
        assert [column.header for column in table.columns] == ["#", "Package"]
        assert table.title == "Bookmarked Packages"

    def test_custom_title(self) -> None:
        table = formatting.create_bookmark_table(title="Saved")
        assert table.title == "Saved"

    def test_renders_rows(self) -> None:
        """Rows render through a themed console."""
        table = formatting.create_bookmark_table()
        table.add_row("1", "curl")
        console = Console(theme=get_theme(), record=True, width=80, color_system=None)
        console.print(table)
        assert "curl" in console.export_text()


class TestPrintHelpers:
    """Tests for the print_* helpers."""

    def test_info_and_success_go_to_stdout(self, recorded: tuple[Console, Console]) -> None:
        out, err = recorded
        formatting.print_info("loading")
        formatting.print_success("done")
        text = out.export_text()
        assert "loading" in text
        assert "done" in text
        assert err.export_text() == ""

    def test_error_is_prefixed(self, recorded: tuple[Console, Console]) -> None:
        out, err = recorded
        formatting.print_error("boom")
        assert "Error: boom" in err.export_text()
        assert out.export_text() == ""

    def test_warning_is_prefixed(self, recorded: tuple[Console, Console]) -> None:
        _, err = recorded
        formatting.print_warning("careful")
        assert "Warning: careful" in err.export_text()
