"""Global template data.

Every ``.json``, ``.yaml`` and ``.yml`` file directly inside the data
directory becomes a template variable named after the file, so
``data/authors.yaml`` is available as ``authors`` on every page.
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from kiln.errors import DataLoadError

logger = logging.getLogger(__name__)

DATA_EXTENSIONS = (".json", ".yaml", ".yml")


def load_global_data(data_dir: Path | None) -> dict[str, Any]:
    """Load all data files of a directory.

    Args:
        data_dir: Directory holding data files; None or a missing
            directory yields no data

    Returns:
        Parsed file contents keyed by file name without extension

    Raises:
        DataLoadError: If a file can't be read or parsed
    """
    if data_dir is None or not data_dir.is_dir():
        return {}

    data: dict[str, Any] = {}
    for path in sorted(data_dir.iterdir()):
        if not path.is_file() or path.suffix.lower() not in DATA_EXTENSIONS:
            continue
        if path.stem in data:
            logger.warning("Data file %s replaces an earlier '%s' entry", path, path.stem)
        data[path.stem] = load_data_file(path)
        logger.debug("Loaded data file %s", path)
    return data


def load_data_file(path: Path) -> Any:
    """Parse a single JSON or YAML data file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataLoadError(f"Cannot read data file {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DataLoadError(f"Invalid data file {path}: {e}") from e


def format_date(value: date | datetime | str | float | None, fmt: str = "%Y-%m-%d") -> str:
    """Format a date for templates.

    Accepts ``date``/``datetime`` objects (YAML front matter dates arrive as
    these), ISO 8601 strings and Unix timestamps. None formats the current time.

    Args:
        value: Date to format
        fmt: ``strftime`` format

    Returns:
        Formatted date

    Raises:
        ValueError: If a string is not an ISO 8601 date
        TypeError: If the value can't be interpreted as a date
    """
    if value is None:
        value = datetime.now()
    elif isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    elif isinstance(value, int | float) and not isinstance(value, bool):
        value = datetime.fromtimestamp(value)

    if not isinstance(value, date):
        raise TypeError(f"Cannot format {value!r} as a date")
    return value.strftime(fmt)


FILTERS = {"date": format_date}
