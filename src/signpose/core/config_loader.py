"""JSON loading for avatar configs and sign files."""

import json
from pathlib import Path
from typing import Any, Union

from signpose.constants import CONFIG_DIR, SKELETON_CONFIG_DIR

PathLike = Union[str, Path]


def load_json(path: PathLike) -> Any:
    """Load and return parsed JSON from a file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_config_section(name: str, section: str) -> dict:
    """Return one top-level section of a config in assets/config/.

    A config without the section yields an empty dict. A config or section
    that is not a JSON object raises ``ValueError``.
    """
    data = load_json(CONFIG_DIR / name)
    if not isinstance(data, dict):
        raise ValueError(f"{name}: expected a JSON object at top level")
    value = data.get(section, {})
    if not isinstance(value, dict):
        raise ValueError(f"{name}: section {section!r} is not an object")
    return value


def load_skeleton_config(name: str) -> Any:
    """Load a skeleton config from assets/config/skeleton/."""
    return load_json(SKELETON_CONFIG_DIR / name)


def load_sign_records(path: PathLike) -> list[dict]:
    """Load sign records from a file holding one record or a list of them."""
    data = load_json(path)
    records = data if isinstance(data, list) else [data]
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"{path}: sign record {i} is not an object")
    return records
