"""
src/attributes/extractor.py
============================
Attribute Extractor - VoiceBase Connect Gateway

Responsibility:
    - Present read-only views over dot-namespaced subsets of a contact
      record's attribute map (e.g. every key under ``voicebase.transcript.``)
    - Provide typed, defaulted accessors: string, boolean, string-set
    - Build fully namespaced attribute names for normalized write-backs
    - Produce a rewritten copy of an attribute map (copy-on-write)

Default-value policy:
    - Strings:     missing key → None
    - Booleans:    missing or unparsable → caller's default (False if omitted)
    - String sets: missing key → None; present but blank → empty set

This module does NOT:
    - Decide what any attribute means (see src/request/builder.py)
    - Mutate the attribute map it was given
"""

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from src.attributes.keys import DEFAULT_BOOLEAN, NAMESPACE_SEPARATOR, VB_ATTR

logger = logging.getLogger("vbgateway.attributes.extractor")


# ---------------------------------------------------------------------------
# Boolean-like tokens
# ---------------------------------------------------------------------------

_TRUE_TOKENS: frozenset[str] = frozenset({"true", "yes", "on", "y", "t", "1"})
_FALSE_TOKENS: frozenset[str] = frozenset({"false", "no", "off", "n", "f", "0"})

_LIST_SEPARATOR = ","


# ---------------------------------------------------------------------------
# Subset view
# ---------------------------------------------------------------------------


class AttributeSubset(Mapping):
    """
    Read-only view over the keys of an attribute map that share a prefix.

    Keys are exposed relative to the prefix: with prefix ``voicebase``,
    the raw key ``voicebase.priority`` is visible as ``priority`` and
    ``voicebase.transcript.swearFilter`` as ``transcript.swearFilter``.
    An empty prefix exposes the whole map.
    """

    __slots__ = ("_attributes", "_prefix")

    def __init__(self, attributes: Mapping[str, Any], prefix: str = "") -> None:
        self._attributes = attributes
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def subset(self, prefix: str) -> "AttributeSubset":
        """Return a narrower view, e.g. ``vb_attrs.subset("transcript")``."""
        return AttributeSubset(self._attributes, self._full_key(prefix))

    def _full_key(self, key: str) -> str:
        if not self._prefix:
            return key
        return f"{self._prefix}{NAMESPACE_SEPARATOR}{key}"

    def __getitem__(self, key: str) -> Any:
        return self._attributes[self._full_key(key)]

    def __iter__(self) -> Iterator[str]:
        if not self._prefix:
            yield from self._attributes
            return
        lead = f"{self._prefix}{NAMESPACE_SEPARATOR}"
        for raw_key in self._attributes:
            if isinstance(raw_key, str) and raw_key.startswith(lead):
                yield raw_key[len(lead):]

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"AttributeSubset(prefix={self._prefix!r}, keys={sorted(self)!r})"


def voicebase_attributes(attributes: Mapping[str, Any]) -> AttributeSubset:
    """Return the ``voicebase.*`` view of a raw attribute map."""
    return AttributeSubset(attributes, VB_ATTR)


# ---------------------------------------------------------------------------
# Typed accessors
# ---------------------------------------------------------------------------


def get_string_parameter(subset: Mapping[str, Any], key: str) -> str | None:
    """
    Return the raw string value of ``key``, or None if it is absent.

    Scalars that are not strings (numbers, booleans) are rendered with
    ``str``. Nested maps and lists are not string-valued and yield None.
    """
    value = subset.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return None


def get_boolean_parameter(
    subset: Mapping[str, Any],
    key: str,
    default: bool | None = DEFAULT_BOOLEAN,
) -> bool | None:
    """
    Parse a boolean-like attribute.

    Accepts true/yes/on/y/t/1 and false/no/off/n/f/0 (case-insensitive).
    Returns ``default`` when the key is absent or the value is unparsable.
    Passing ``default=None`` lets callers tell "not specified" apart from
    an explicit false.
    """
    value = subset.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_TOKENS:
            return True
        if token in _FALSE_TOKENS:
            return False

    logger.warning(
        "Unparsable boolean attribute %r=%r, using default %s",
        _describe_key(subset, key), value, default,
    )
    return default


def get_string_parameter_set(subset: Mapping[str, Any], key: str) -> set[str] | None:
    """
    Split a comma-separated attribute into a set of trimmed, non-empty strings.

    A list value (the form written back by a rewrite) is accepted too, so
    parsing an already normalized attribute yields the same set again.

    Returns:
        None if the key is absent, otherwise a (possibly empty) set.
    """
    value = subset.get(key)
    if value is None:
        return None

    if isinstance(value, str):
        items = value.split(_LIST_SEPARATOR)
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = [item for item in value if isinstance(item, str)]
    else:
        logger.warning(
            "Attribute %r is not a list value (%s), ignoring it",
            _describe_key(subset, key), type(value).__name__,
        )
        return set()

    return {item.strip() for item in items if item.strip()}


def get_voicebase_attribute_name(subset_name: str, key: str) -> str:
    """Return the fully namespaced raw key, e.g. ``voicebase.keywords.groups``."""
    return NAMESPACE_SEPARATOR.join((VB_ATTR, subset_name, key))


# ---------------------------------------------------------------------------
# Copy-on-write rewrite
# ---------------------------------------------------------------------------


def rewrite_attributes(
    attributes: Mapping[str, Any],
    rewrites: Mapping[str, Any],
) -> dict[str, Any]:
    """
    Return a copy of ``attributes`` with ``rewrites`` applied.

    Keys are only added or replaced, never removed. The input map is left
    untouched.
    """
    rewritten = dict(attributes)
    rewritten.update(rewrites)
    return rewritten


def _describe_key(subset: Mapping[str, Any], key: str) -> str:
    if isinstance(subset, AttributeSubset) and subset.prefix:
        return f"{subset.prefix}{NAMESPACE_SEPARATOR}{key}"
    return key
