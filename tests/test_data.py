"""Tests for global data loading and the date filter."""

from datetime import date, datetime
from pathlib import Path

import pytest
from kiln.data import format_date, load_global_data
from kiln.errors import DataLoadError


class TestLoadGlobalData:
    """Tests for load_global_data()."""

    def test__no_dir__returns_empty(self, tmp_path: Path) -> None:
        """Missing or unset data directory yields no data."""
        assert load_global_data(None) == {}
        assert load_global_data(tmp_path / "missing") == {}

    def test__json_and_yaml__keyed_by_stem(self, tmp_path: Path) -> None:
        """Supported files are parsed and named after the file."""
        (tmp_path / "site.json").write_text('{"name": "Acme"}')
        (tmp_path / "authors.yaml").write_text("- Ada\n- Grace\n")
        (tmp_path / "menu.yml").write_text("home: /\n")
        (tmp_path / "notes.txt").write_text("ignored")
        (tmp_path / "nested").mkdir()
        (tmp_path / "nested" / "deep.json").write_text("{}")

        data = load_global_data(tmp_path)

        assert data == {
            "authors": ["Ada", "Grace"],
            "menu": {"home": "/"},
            "site": {"name": "Acme"},
        }

    def test__invalid_yaml__raises(self, tmp_path: Path) -> None:
        """Parse errors name the file."""
        (tmp_path / "bad.yaml").write_text("key: [unclosed\n")

        with pytest.raises(DataLoadError, match="bad.yaml"):
            load_global_data(tmp_path)


class TestFormatDate:
    """Tests for format_date()."""

    def test__date__default_format(self) -> None:
        """Dates default to ISO day format."""
        assert format_date(date(2024, 2, 3)) == "2024-02-03"

    def test__datetime__custom_format(self) -> None:
        """strftime patterns are applied."""
        assert format_date(datetime(2024, 2, 3, 14, 5), "%H:%M %d.%m.%Y") == "14:05 03.02.2024"

    def test__iso_string__parsed(self) -> None:
        """ISO 8601 strings are accepted."""
        assert format_date("2024-02-03", "%B %d") == "February 03"

    def test__timestamp__parsed(self) -> None:
        """Unix timestamps are read in local time."""
        expected = datetime.fromtimestamp(0).strftime("%Y-%m-%d")

        assert format_date(0) == expected

    def test__invalid_string__raises(self) -> None:
        """Strings that aren't dates are rejected."""
        with pytest.raises(ValueError):
            format_date("yesterday")

    def test__unsupported_type__raises(self) -> None:
        """Values that can't be dates are rejected."""
        with pytest.raises(TypeError, match="as a date"):
            format_date(["2024"])  # type: ignore[arg-type]
