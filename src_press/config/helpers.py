"""Utility helpers shared by the configuration loader and writer."""

from __future__ import annotations

import collections.abc as cabc
import enum
import posixpath
import typing as typ

from ..models import NumberingScheme, NumberStyle
from .models import ConfigurationError

EnumT = typ.TypeVar("EnumT", bound=enum.Enum)


def _normalise_token(value: str) -> str:
    """Lower-case ``value`` and drop ``-``/``_`` so spellings compare equal."""
    return value.strip().lower().replace("-", "").replace("_", "")


def _parse_choice(value: object, choices: type[EnumT], field: str) -> EnumT:
    """Resolve ``value`` to a member of ``choices`` by normalised value or name."""
    if isinstance(value, choices):
        return value
    if isinstance(value, str):
        wanted = _normalise_token(value)
        for member in choices:
            if wanted in {_normalise_token(member.value), _normalise_token(member.name)}:
                return member
    allowed = ", ".join(member.value for member in choices)
    msg = f"unrecognised value {value!r}; expected one of: {allowed}"
    raise ConfigurationError(msg, field=field)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _str_list(value: object | None, field: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, list):
        msg = "expected a list of strings"
        raise ConfigurationError(msg, field=field)
    return [str(item) for item in value if str(item).strip()]


def _bool(value: object | None, field: str, *, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        msg = f"expected true or false, got {value!r}"
        raise ConfigurationError(msg, field=field)
    return value


def _positive_number(value: object | None, field: str, *, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
        msg = f"expected a positive number, got {value!r}"
        raise ConfigurationError(msg, field=field)
    return float(value)


def _non_negative_number(value: object | None, field: str, *, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int | float) or value < 0:
        msg = f"expected a non-negative number, got {value!r}"
        raise ConfigurationError(msg, field=field)
    return float(value)


def _optional_positive_int(value: object | None, field: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        msg = f"expected a positive integer, got {value!r}"
        raise ConfigurationError(msg, field=field)
    return value


def _validate_signature_size(value: object, field: str = "booklet.signature_size") -> int:
    """Return ``value`` when it is a positive multiple of four."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0 or value % 4:
        msg = f"must be a positive multiple of 4, got {value!r}"
        raise ConfigurationError(msg, field=field)
    return value


def _relative_path(value: object, field: str) -> str:
    """Return ``value`` as a normalised repository-relative file path.

    Examples
    --------
    >>> _relative_path("./src//main.rs", "source.entrypoint")
    'src/main.rs'
    >>> _relative_path("docs\\\\guide.md", "source.frontmatter_files")
    'docs/guide.md'
    """
    if not isinstance(value, str) or not value.strip():
        msg = "expected a non-empty repository-relative path"
        raise ConfigurationError(msg, field=field)
    text = value.strip().replace("\\", "/")
    if text.startswith("/") or text.endswith("/"):
        msg = f"{value!r} must be a file path relative to the repository root"
        raise ConfigurationError(msg, field=field)
    if ".." in text.split("/"):
        msg = f"{value!r} must not leave the repository"
        raise ConfigurationError(msg, field=field)
    return posixpath.normpath(text)


def _validate_entrypoint(value: object | None) -> str | None:
    """Return a normalised repository-relative entrypoint path.

    Examples
    --------
    >>> _validate_entrypoint("./src/main.rs")
    'src/main.rs'
    >>> _validate_entrypoint(None) is None
    True
    """
    if value is None:
        return None
    return _relative_path(value, "source.entrypoint")


def _path_list(value: object | None, field: str) -> list[str]:
    """Normalise each listed path, dropping repeats after normalisation.

    >>> _path_list(["./src/main.rs", "src/main.rs", "README.md"], "source_files")
    ['src/main.rs', 'README.md']
    """
    paths = [_relative_path(item, field) for item in _str_list(value, field)]
    return list(dict.fromkeys(paths))


def _build_scheme(
    payload: typ.Mapping[str, typ.Any] | None,
    field: str,
    default: NumberingScheme,
) -> NumberingScheme:
    """Build a NumberingScheme from a ``{style, start}`` table."""
    if not payload:
        return default
    if not isinstance(payload, cabc.Mapping):
        msg = "expected a table with 'style' and 'start'"
        raise ConfigurationError(msg, field=field)
    style = default.style
    if "style" in payload:
        style = _parse_choice(payload["style"], NumberStyle, f"{field}.style")
    start = payload.get("start", default.start)
    if isinstance(start, bool) or not isinstance(start, int) or start < 0:
        msg = f"expected an integer >= 0, got {start!r}"
        raise ConfigurationError(msg, field=f"{field}.start")
    return NumberingScheme(style=style, start=start)


def _table(
    raw: typ.Mapping[str, typ.Any], key: str, *, field: str | None = None
) -> typ.Mapping[str, typ.Any] | None:
    """Return the sub-table ``key`` or ``None``; reject non-table values."""
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, cabc.Mapping):
        msg = "expected a table"
        raise ConfigurationError(msg, field=field or key)
    return value
