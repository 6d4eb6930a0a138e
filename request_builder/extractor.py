"""Extractor - Harvests tagged values from records and maps.

Records are dataclass instances or pydantic models. A field takes part in
extraction for a tag key when its tag mapping (dataclass ``metadata`` or
pydantic ``json_schema_extra``) holds a tag string under that key:

    @dataclass
    class Paging:
        limit: int = field(default=0, metadata={"parameter": "limit,omitempty"})

Nested records are scanned recursively with the same tag key. Values seen
for a key accumulate in field-declaration order, depth first, so a name
reused at several nesting levels yields the outer value before the inner one
whenever the outer field is declared first.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sized
from datetime import datetime
from enum import Enum
from numbers import Number
from typing import Any, Iterator

from pydantic import BaseModel

from request_builder.errors import InvalidSourceKind
from request_builder.models import TimeFilter, format_timestamp
from request_builder.tag import Tag

logger = logging.getLogger(__name__)

# Tag name -> values, in insertion order.
ExtractionResult = dict[str, list[str]]


def is_record(value: Any) -> bool:
    """Whether value is a record instance that extraction scans field by field.

    TimeFilter is a pydantic model but renders as a single value.
    """
    if isinstance(value, type) or isinstance(value, TimeFilter):
        return False
    return isinstance(value, BaseModel) or dataclasses.is_dataclass(value)


def render_value(value: Any) -> list[str]:
    """Render a field value to its string form(s).

    Lists, tuples and sets produce one string per element; everything else
    produces exactly one string.
    """
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_render_scalar(item) for item in value]
    return [_render_scalar(value)]


def _render_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, TimeFilter):
        return str(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _is_empty(value: Any) -> bool:
    """Zero-value test used by the omitempty modifier. Records are never empty."""
    if value is None:
        return True
    if isinstance(value, (Number, Sized)):
        return not value
    return False


def extract(tag_key: str, source: Any) -> ExtractionResult:
    """Extract tag name -> values from a record or a string-keyed map.

    Args:
        tag_key: Tag key to read from record fields (e.g. "header").
        source: A dataclass instance, a pydantic model, or a Mapping with
                str keys whose values are scalars or lists of scalars.

    Returns:
        Ordered mapping of tag names to rendered values.

    Raises:
        InvalidSourceKind: If source is neither a record nor a string-keyed map.
        ValueError: If tag_key is empty.
    """
    if not tag_key:
        raise ValueError("a valid tag key must be provided")
    if is_record(source):
        return _scan(tag_key, source)
    if isinstance(source, Mapping):
        return _from_map(source)
    raise InvalidSourceKind(
        f"only records and string-keyed maps can be used as sources, "
        f"got {type(source).__name__}"
    )


def _from_map(source: Mapping[Any, Any]) -> ExtractionResult:
    """Maps are already extracted: keys are names, no tag modifiers apply.

    A key whose value is an empty list contributes nothing.

    Objects exposing multi_items() (httpx.Headers, httpx.QueryParams) are read
    through it so repeated keys keep every value.
    """
    multi_items = getattr(source, "multi_items", None)
    items = multi_items() if callable(multi_items) else source.items()

    result: ExtractionResult = {}
    for key, value in items:
        if not isinstance(key, str):
            raise InvalidSourceKind(
                f"map sources must have string keys, got {type(key).__name__}"
            )
        rendered = render_value(value)
        if rendered:
            result.setdefault(key, []).extend(rendered)
    return result


def _record_fields(record: Any) -> Iterator[tuple[str, Any, Mapping[str, Any]]]:
    """Yield (field name, value, tag mapping) in declaration order."""
    if isinstance(record, BaseModel):
        for name, info in type(record).model_fields.items():
            extra = info.json_schema_extra
            yield name, getattr(record, name), extra if isinstance(extra, Mapping) else {}
    else:
        for record_field in dataclasses.fields(record):
            yield record_field.name, getattr(record, record_field.name), record_field.metadata


def _scan(tag_key: str, record: Any) -> ExtractionResult:
    """Depth-first, pre-order scan of a record's fields."""
    result: ExtractionResult = {}
    for name, value, tags in _record_fields(record):
        if is_record(value):
            for key, values in _scan(tag_key, value).items():
                result.setdefault(key, []).extend(values)
            continue

        raw = tags.get(tag_key)
        if raw is None:
            continue
        tag = Tag.parse(raw)
        if tag.excluded:
            logger.debug("Skipping %s.%s: excluded for tag %r", type(record).__name__, name, tag_key)
            continue
        if tag.omit_empty and _is_empty(value):
            logger.debug("Skipping %s.%s: empty value with omitempty", type(record).__name__, name)
            continue

        rendered = render_value(value)
        if rendered:
            result.setdefault(tag.name, []).extend(rendered)
    return result
