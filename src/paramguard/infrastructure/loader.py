"""Rule and payload file loading.

Rule documents may be YAML, JSON, or TOML. Either a top-level list of
rules, or a mapping with a ``rules`` key holding a list or a
name-to-rule mapping::

    rules:
      name: {type: string, required: true, blank: false}
      user:
        type: object
        children:
          age: {type: integer, min: 18}

In the mapping form the key supplies ``field`` when the rule omits it,
and ``children`` may use the same mapping form.
"""

from __future__ import annotations

import json
import sys
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from paramguard.domain.rules import RuleNode, coerce_rules

STDIN = "-"

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class RuleFileError(Exception):
    """A rule or payload file could not be read or decoded."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


def _decode(text: str, suffix: str, source: Path | str) -> Any:
    try:
        if suffix == ".json":
            return json.loads(text)
        if suffix == ".toml":
            return tomllib.loads(text)
        # YAML also covers JSON documents on stdin or without a suffix.
        return YAML(typ="safe").load(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, YAMLError) as exc:
        raise RuleFileError(source, f"cannot decode: {exc}") from exc


def _read(source: Path | str) -> tuple[str, str]:
    """Return ``(text, suffix)`` for a path or ``-`` (stdin)."""
    if str(source) == STDIN:
        return sys.stdin.read(), ""
    path = Path(source)
    try:
        return path.read_text(encoding="utf-8"), path.suffix.lower()
    except (OSError, UnicodeError) as exc:
        raise RuleFileError(path, f"cannot read: {exc}") from exc


def _expand_named(raw: Any) -> Any:
    """Turn name-to-rule mappings into rule lists, recursively."""
    if isinstance(raw, Mapping):
        entries: list[Any] = []
        for name, raw_rule in raw.items():
            if isinstance(raw_rule, Mapping):
                raw_rule = dict(raw_rule)
                raw_rule.setdefault("field", str(name))
            entries.append(_expand_entry(raw_rule))
        return entries
    if isinstance(raw, list):
        return [_expand_entry(entry) for entry in raw]
    return raw


def _expand_entry(entry: Any) -> Any:
    if not isinstance(entry, Mapping):
        return entry
    expanded = dict(entry)
    for key in ("children", "items"):
        if key in expanded:
            expanded[key] = _expand_named(expanded[key])
    return expanded


def parse_rules(document: Any) -> tuple[RuleNode, ...]:
    """Build rule nodes from a decoded rule document."""
    if isinstance(document, Mapping) and "rules" in document:
        document = document["rules"]
    if document is None:
        return ()
    return coerce_rules(_expand_named(document))


def load_rules(source: Path | str) -> tuple[RuleNode, ...]:
    """Read and parse a rule file.

    Raises:
        RuleFileError: If the file cannot be read, decoded, or holds
            neither a list nor a mapping.
    """
    text, suffix = _read(source)
    document = _decode(text, suffix, source)
    if document is not None and not isinstance(document, (list, Mapping)):
        raise RuleFileError(source, "expected a list or mapping of rules")
    return parse_rules(document)


def load_payload(source: Path | str) -> Any:
    """Read a JSON or YAML payload document (``-`` reads stdin)."""
    text, suffix = _read(source)
    return _decode(text, suffix, source)


def find_rules_file(name: str, root: Path, search_paths: list[str]) -> Path:
    """Resolve *name* against *root* and the configured search paths.

    Absolute or existing paths win; otherwise each search path (relative
    to *root*) is tried in order. Returns the first candidate that
    exists, or *name* itself so the read error names what was asked for.
    """
    candidate = Path(name)
    if candidate.is_absolute() or candidate.is_file():
        return candidate
    for base in ("", *search_paths):
        path = root / base / name
        if path.is_file():
            return path
    return candidate
