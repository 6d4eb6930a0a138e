"""Entity marshaling for structured request bodies.

Records are dumped through pydantic's TypeAdapter, which handles both
pydantic models and stdlib dataclasses, then encoded as JSON or XML.
"""

from __future__ import annotations

import io
from typing import IO, Any

from pydantic import TypeAdapter

from request_builder.errors import InvalidSourceKind
from request_builder.extractor import is_record
from request_builder.xml_body import dict_to_xml

JSON_CONTENT_TYPE = "application/json"
XML_CONTENT_TYPE = "text/xml"


def _require_record(source: Any, kind: str) -> None:
    if not is_record(source):
        raise InvalidSourceKind(
            f"only records can be passed as source for {kind} entities, "
            f"got {type(source).__name__}"
        )


def marshal_json(source: Any) -> bytes:
    """Compact JSON for a record, using field aliases where defined.

    Raises:
        InvalidSourceKind: If source is not a record.
    """
    _require_record(source, "JSON")
    return TypeAdapter(type(source)).dump_json(source, by_alias=True)


def marshal_xml(source: Any) -> bytes:
    """XML for a record; the root element is named after the record's class.

    Raises:
        InvalidSourceKind: If source is not a record.
    """
    _require_record(source, "XML")
    data = TypeAdapter(type(source)).dump_python(source, mode="json", by_alias=True)
    return dict_to_xml({type(source).__name__: data})


def as_stream(payload: bytes | str | IO[bytes]) -> IO[bytes]:
    """Wrap a bytes/str payload in a stream; file-like objects pass through."""
    if isinstance(payload, str):
        return io.BytesIO(payload.encode("utf-8"))
    if isinstance(payload, (bytes, bytearray)):
        return io.BytesIO(bytes(payload))
    return payload
