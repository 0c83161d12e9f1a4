"""Shared YAML read/write helpers for planner files and configs."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

__all__ = ["load_config", "load_document", "dump_config"]


def _require_yaml():
    try:
        import yaml  # type: ignore

        return yaml
    except ImportError as exc:  # pragma: no cover - runtime guard
        raise RuntimeError("PyYAML not installed. Run: pip install pyyaml") from exc


def load_document(path: Optional[str]) -> Any:
    """Load a YAML (or JSON) document; returns None if missing/empty.

    JSON is a subset of YAML, so exported event lists load unchanged.
    Raises ValueError when the text is not valid YAML.
    """
    if not path:
        return None
    p = Path(path)
    if not p.exists():
        return None
    text = p.read_text(encoding="utf-8")
    if not text.strip():
        return None
    yaml = _require_yaml()
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Cannot parse {path}: {exc}") from exc


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML mapping into a dict; returns {} if missing/empty."""
    data = load_document(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Top-level YAML in {path} must be a mapping (dict)")
    return data


def dump_config(path: str, data: Any) -> None:
    """Write data to YAML with stable ordering for humans."""
    yaml = _require_yaml()
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8"
    )
