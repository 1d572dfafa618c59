"""Serialise a :class:`BookDocumentModel` for external renderers."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import enum
import json
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from .models import BookDocumentModel


def model_to_dict(model: BookDocumentModel) -> dict[str, typ.Any]:
    """Return a JSON-compatible mapping of ``model``.

    Enums become their values, datetimes ISO 8601 strings, paths POSIX
    strings and tuples lists. ``None`` slots (blank imposition pages, absent
    sections) are kept as ``null``.
    """
    payload = _plain(dc.asdict(model))
    payload["page_count"] = model.page_count
    return payload


def write_plan(model: BookDocumentModel, path: Path) -> Path:
    """Write ``model`` as indented JSON to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(model_to_dict(model), indent=2) + "\n", encoding="utf-8")
    return path


def _plain(value: typ.Any) -> typ.Any:  # noqa: ANN401 - recursive JSON conversion
    match value:
        case enum.Enum():
            return value.value
        case dt.datetime():
            return value.isoformat()
        case Path():
            return value.as_posix()
        case dict():
            return {str(key): _plain(item) for key, item in value.items()}
        case list() | tuple():
            return [_plain(item) for item in value]
        case _:
            return value


__all__ = ["model_to_dict", "write_plan"]
