"""YAML loading shared by the content catalogs.

Content files live under ``assets/data`` at the project root and are parsed
with ``yaml.safe_load``.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml


class CatalogError(Exception):
    """Raised when a content file is missing or structurally invalid."""

    def __init__(self, path: str, detail: str):
        super().__init__(f"Invalid content in {path}: {detail}")
        self.path = path
        self.detail = detail


def project_root() -> Path:
    """Directory holding the ``assets`` folder (three levels above this package)."""
    return Path(__file__).resolve().parent.parent.parent.parent


def resolve_asset_path(path: str) -> Path:
    if os.path.isabs(path):
        return Path(path)
    return project_root() / path


def load_yaml_data(path: str, root_key: Optional[str] = None) -> Any:
    """Load a YAML content file.

    Args:
        path: Absolute path, or path relative to the project root
        root_key: Optional key that must be present at the top level

    Returns:
        The parsed document, or the value under ``root_key``

    Raises:
        CatalogError: If the file is missing, malformed, or lacks ``root_key``
    """
    yaml_path = resolve_asset_path(path)

    try:
        with open(yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogError(str(yaml_path), "file not found")
    except yaml.YAMLError as e:
        raise CatalogError(str(yaml_path), f"malformed YAML ({e})")

    if root_key is None:
        return data
    if not isinstance(data, dict) or root_key not in data:
        raise CatalogError(str(yaml_path), f"missing top-level '{root_key}' section")
    return data[root_key]
