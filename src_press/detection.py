"""Heuristics that pre-fill a new book configuration from a repository."""

from __future__ import annotations

import json
import logging
import re
import typing as typ

import tomlkit
from tomlkit.exceptions import ParseError

from ._constants import ENTRYPOINT_CANDIDATES
from .frontmatter import frontmatter_rank, is_licence_name

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_EXPRESSION_SPLIT = re.compile(r"\s+(?:OR|AND)\s+|/")

# Checked in order; narrower licences precede the ones whose text they contain.
_LICENCE_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("LGPL-3.0", ("GNU LESSER GENERAL PUBLIC LICENSE", "Version 3")),
    ("LGPL-2.1", ("GNU LESSER GENERAL PUBLIC LICENSE",)),
    ("GPL-3.0", ("GNU GENERAL PUBLIC LICENSE", "Version 3")),
    ("GPL-2.0", ("GNU GENERAL PUBLIC LICENSE", "Version 2")),
    ("Apache-2.0", ("Apache License", "Version 2.0")),
    ("MPL-2.0", ("Mozilla Public License", "2.0")),
    ("BSL-1.0", ("Boost Software License",)),
    ("CC0-1.0", ("CC0 1.0 Universal",)),
    ("Unlicense", ("This is free and unencumbered software",)),
    ("WTFPL", ("DO WHAT THE FUCK YOU WANT",)),
    ("Zlib", ("This software is provided 'as-is'",)),
    ("ISC", ("Permission to use, copy, modify, and/or distribute",)),
    ("MIT", ("Permission is hereby granted, free of charge",)),
    ("BSD-3-Clause", ("Redistribution and use in source and binary forms", "Neither the name")),
    ("BSD-2-Clause", ("Redistribution and use in source and binary forms",)),
)


def detect_title(root: Path) -> str:
    """Derive a book title from the repository folder name.

    Examples
    --------
    >>> from pathlib import Path
    >>> detect_title(Path("/work/src-press_tools"))
    'Src Press Tools'
    """
    name = root.resolve().name
    words = name.replace("-", " ").replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words) or name


def detect_entrypoint(paths: typ.Collection[str]) -> str | None:
    """Return the first conventional entrypoint present in ``paths``."""
    available = set(paths)
    for candidate in ENTRYPOINT_CANDIDATES:
        if candidate in available:
            return candidate
    return None


def detect_frontmatter(paths: typ.Iterable[str]) -> list[str]:
    """Return recognised root-level files, ordered by frontmatter priority.

    Each name set proposes one file: ``README.md`` wins over ``README.rst``,
    ``pyproject.toml`` over ``setup.py``. Licences with different ``-<id>``
    parts (``LICENSE-MIT``, ``LICENSE-APACHE``) are separate sets.

    Examples
    --------
    >>> detect_frontmatter(["README.rst", "README.md", "history.py", "LICENSE"])
    ['README.md', 'LICENSE']
    """
    chosen: dict[tuple[int, int, str], tuple[tuple[int, ...], str]] = {}
    for path in paths:
        rank = frontmatter_rank(path)
        if rank is None:
            continue
        key = (rank.priority, rank.position, rank.group)
        candidate = (rank.preference, path)
        if key not in chosen or candidate < chosen[key]:
            chosen[key] = candidate
    return [path for _, (_, path) in sorted(chosen.items())]


def detect_licences(root: Path) -> list[str]:
    """Return licence identifiers declared by manifests or licence files.

    Manifest declarations win: ``Cargo.toml``, then ``package.json``, then
    ``pyproject.toml``. Without one, the first root licence file whose text
    matches a known licence is used.
    """
    for reader in (_cargo_licence, _package_json_licence, _pyproject_licence):
        declared = reader(root)
        if declared:
            return _split_expression(declared)
    for path in sorted(root.iterdir()) if root.is_dir() else ():
        if not path.is_file() or not is_licence_name(path.name):
            continue
        identifier = match_licence_text(path.read_text(encoding="utf-8", errors="replace"))
        if identifier:
            return [identifier]
    return []


def match_licence_text(text: str) -> str | None:
    """Identify a licence by distinctive phrases in its text."""
    normalised = " ".join(text.split())
    for identifier, phrases in _LICENCE_PATTERNS:
        if all(phrase in normalised for phrase in phrases):
            return identifier
    if "MIT License" in normalised:
        return "MIT"
    return None


def _split_expression(expression: str) -> list[str]:
    parts = (part.strip(" ()") for part in _EXPRESSION_SPLIT.split(expression))
    return [part for part in parts if part]


def _read_toml(path: Path) -> dict[str, typ.Any]:
    if not path.is_file():
        return {}
    try:
        return tomlkit.parse(path.read_text(encoding="utf-8")).unwrap()
    except ParseError as exc:
        logger.debug("ignoring unparsable %s: %s", path, exc)
        return {}


def _cargo_licence(root: Path) -> str | None:
    package = _read_toml(root / "Cargo.toml").get("package") or {}
    value = package.get("license") if isinstance(package, dict) else None
    return value if isinstance(value, str) else None


def _package_json_licence(root: Path) -> str | None:
    path = root / "package.json"
    if not path.is_file():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.debug("ignoring unparsable %s: %s", path, exc)
        return None
    value = payload.get("license") if isinstance(payload, dict) else None
    return value if isinstance(value, str) else None


def _pyproject_licence(root: Path) -> str | None:
    project = _read_toml(root / "pyproject.toml").get("project") or {}
    value = project.get("license") if isinstance(project, dict) else None
    if isinstance(value, dict):
        value = value.get("text")
    if isinstance(value, str) and "\n" not in value.strip():
        return value.strip() or None
    return None


__all__ = [
    "detect_entrypoint",
    "detect_frontmatter",
    "detect_licences",
    "detect_title",
    "match_licence_text",
]
