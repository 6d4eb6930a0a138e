"""RequestBuilder - Fluent assembly of outbound HTTP requests.

The builder accumulates a method, a URL (possibly holding {name}
placeholders), headers, query parameters, template variables and an optional
body, then produces a FinalizedRequest with make().

Headers, parameters and variables are mutated according to the current mode,
selected with add(), set(), delete() or remove_matching(); the mode sticks
until changed:

    request = (
        RequestBuilder("https://api.example.com/")
        .path("tenants/{tenant}/users")
        .add()
        .variable("tenant", "acme")
        .query_parameters_from(filters)
        .header("Accept", "application/json")
        .make()
    )

A builder is meant for a single-threaded fluent chain; derive a fresh child
with new() instead of reusing a builder after make().
"""

from __future__ import annotations

import logging
from http import HTTPMethod
from typing import IO, Any, Callable

from request_builder.entity import (
    JSON_CONTENT_TYPE,
    XML_CONTENT_TYPE,
    as_stream,
    marshal_json,
    marshal_xml,
)
from request_builder.extractor import ExtractionResult, extract, render_value
from request_builder.models import ClientConfig, Entity, FinalizedRequest
from request_builder.multimap import (
    MultiMap,
    Operation,
    apply,
    canonical_header_key,
    compile_pattern,
)
from request_builder.urls import append_query, bind_variables, parse_url, resolve_path

logger = logging.getLogger(__name__)

# Tag keys read from record fields by the bulk mutators.
HEADER_TAG = "header"
PARAMETER_TAG = "parameter"
VARIABLE_TAG = "variable"

CONTENT_TYPE_HEADER = "Content-Type"
USER_AGENT_HEADER = "User-Agent"


def _copy(multimap: MultiMap) -> MultiMap:
    return {key: list(values) for key, values in multimap.items()}


class RequestBuilder:
    """Mutable, chainable request description.

    Usage:
        builder = RequestBuilder("https://www.example.com").post()
        builder.set().header("X-Trace", "abc").with_json_entity(payload)
        request = builder.make()
    """

    def __init__(self, url: str = "") -> None:
        """Initialize the builder.

        Args:
            url: Initial URL; may be empty and set later with base().
        """
        self._method: str = HTTPMethod.GET.value
        self._url = url
        self._headers: MultiMap = {}
        self._parameters: MultiMap = {}
        self._variables: MultiMap = {}
        self._mode = Operation.ADD
        self._body: Entity | None = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> RequestBuilder:
        """Create a builder seeded with the configured base URL and default headers."""
        builder = cls(config.base_url).set()
        for key, value in config.headers.items():
            builder.header(key, value)
        if config.user_agent:
            builder.user_agent(config.user_agent)
        return builder.add()

    def new(self, method: str = "", url: str = "") -> RequestBuilder:
        """Derive a child builder.

        The child copies method, URL, headers, parameters and variables. It
        never inherits the body or the mode (children start in ADD mode).
        Empty arguments keep the parent's values.
        """
        child = RequestBuilder(url or self._url)
        child._method = method.upper() if method else self._method
        child._headers = _copy(self._headers)
        child._parameters = _copy(self._parameters)
        child._variables = _copy(self._variables)
        return child

    # -------------------------------------------------------------------------
    # Read-only views (copies; mutating them does not affect the builder)
    # -------------------------------------------------------------------------

    @property
    def http_method(self) -> str:
        return self._method

    @property
    def url(self) -> str:
        return self._url

    @property
    def mode(self) -> Operation:
        return self._mode

    @property
    def headers(self) -> MultiMap:
        return _copy(self._headers)

    @property
    def parameters(self) -> MultiMap:
        return _copy(self._parameters)

    @property
    def variables(self) -> MultiMap:
        return _copy(self._variables)

    @property
    def entity(self) -> Entity | None:
        return self._body

    def get_header(self, key: str) -> list[str]:
        """Values of a header; the key is canonicalized before lookup."""
        return list(self._headers.get(canonical_header_key(key), []))

    def get_query_parameter(self, key: str) -> list[str]:
        return list(self._parameters.get(key, []))

    def get_variable(self, key: str) -> list[str]:
        return list(self._variables.get(key, []))

    # -------------------------------------------------------------------------
    # HTTP method
    # -------------------------------------------------------------------------

    def method(self, method: str | HTTPMethod) -> RequestBuilder:
        """Set the HTTP method. Use method("DELETE") for DELETE: delete() selects a mode."""
        self._method = str(method.value if isinstance(method, HTTPMethod) else method).upper()
        return self

    def get(self) -> RequestBuilder:
        return self.method(HTTPMethod.GET)

    def post(self) -> RequestBuilder:
        return self.method(HTTPMethod.POST)

    def put(self) -> RequestBuilder:
        return self.method(HTTPMethod.PUT)

    def patch(self) -> RequestBuilder:
        return self.method(HTTPMethod.PATCH)

    def head(self) -> RequestBuilder:
        return self.method(HTTPMethod.HEAD)

    def options(self) -> RequestBuilder:
        return self.method(HTTPMethod.OPTIONS)

    def trace(self) -> RequestBuilder:
        return self.method(HTTPMethod.TRACE)

    def connect(self) -> RequestBuilder:
        return self.method(HTTPMethod.CONNECT)

    # -------------------------------------------------------------------------
    # URL composition
    # -------------------------------------------------------------------------

    def base(self, url: str) -> RequestBuilder:
        """Replace the accumulated URL unconditionally."""
        self._url = url
        return self

    def path(self, segment: str) -> RequestBuilder:
        """Append a path segment, resolving "." and ".."; an absolute URL replaces the current one."""
        resolved = resolve_path(self._url, segment)
        logger.debug("Resolved path %r against %r -> %r", segment, self._url, resolved)
        self._url = resolved
        return self

    # -------------------------------------------------------------------------
    # Mode selection
    # -------------------------------------------------------------------------

    def _select(self, mode: Operation) -> RequestBuilder:
        if mode is not self._mode:
            logger.debug("Switching mode %s -> %s", self._mode.value, mode.value)
        self._mode = mode
        return self

    def add(self) -> RequestBuilder:
        """Subsequent mutators append values."""
        return self._select(Operation.ADD)

    def set(self) -> RequestBuilder:
        """Subsequent mutators replace values; no values drops the key."""
        return self._select(Operation.SET)

    def delete(self) -> RequestBuilder:
        """Subsequent mutators drop the exact key."""
        return self._select(Operation.DELETE)

    def remove_matching(self) -> RequestBuilder:
        """Subsequent mutators treat the key as a regex and drop every fully matching key."""
        return self._select(Operation.REMOVE_MATCHING)

    # -------------------------------------------------------------------------
    # Mutators
    # -------------------------------------------------------------------------

    @staticmethod
    def _render(values: tuple[Any, ...]) -> list[str]:
        return [text for value in values for text in render_value(value)]

    def header(self, key: str, *values: Any) -> RequestBuilder:
        """Mutate a header under the current mode; keys are canonicalized."""
        apply(self._headers, self._mode, key, self._render(values), canonical_header_key)
        return self

    def query_parameter(self, key: str, *values: Any) -> RequestBuilder:
        """Mutate a query parameter under the current mode; keys are case-sensitive."""
        apply(self._parameters, self._mode, key, self._render(values))
        return self

    def variable(self, key: str, *values: Any) -> RequestBuilder:
        """Mutate a template variable under the current mode; make() binds the first value."""
        apply(self._variables, self._mode, key, self._render(values))
        return self

    def _apply_all(
        self,
        target: MultiMap,
        extracted: ExtractionResult,
        normalize: Callable[[str], str] | None = None,
    ) -> RequestBuilder:
        if self._mode is Operation.REMOVE_MATCHING:
            for key in extracted:
                if key:
                    compile_pattern(key)
        for key, values in extracted.items():
            apply(target, self._mode, key, values, normalize)
        return self

    def headers_from(self, source: Any) -> RequestBuilder:
        """Apply the current mode once per header harvested from a record or map.

        Raises:
            InvalidSourceKind: If source is neither; the builder is left unchanged.
            InvalidPattern: In REMOVE_MATCHING mode, if any key is not a valid
                            pattern; the builder is left unchanged.
        """
        extracted = extract(HEADER_TAG, source)
        return self._apply_all(self._headers, extracted, canonical_header_key)

    def query_parameters_from(self, source: Any) -> RequestBuilder:
        """Apply the current mode once per query parameter harvested from a record or map.

        Raises:
            InvalidSourceKind: If source is neither; the builder is left unchanged.
            InvalidPattern: In REMOVE_MATCHING mode, if any key is not a valid
                            pattern; the builder is left unchanged.
        """
        extracted = extract(PARAMETER_TAG, source)
        return self._apply_all(self._parameters, extracted)

    def variables_from(self, source: Any) -> RequestBuilder:
        """Apply the current mode once per template variable harvested from a record or map.

        Raises:
            InvalidSourceKind: If source is neither; the builder is left unchanged.
            InvalidPattern: In REMOVE_MATCHING mode, if any key is not a valid
                            pattern; the builder is left unchanged.
        """
        extracted = extract(VARIABLE_TAG, source)
        return self._apply_all(self._variables, extracted)

    def user_agent(self, value: str) -> RequestBuilder:
        """Replace the User-Agent header, whatever the current mode."""
        apply(self._headers, Operation.SET, USER_AGENT_HEADER, [value])
        return self

    def content_type(self, value: str) -> RequestBuilder:
        """Replace the Content-Type header, whatever the current mode."""
        apply(self._headers, Operation.SET, CONTENT_TYPE_HEADER, [value])
        return self

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    def _current_content_type(self) -> str | None:
        values = self._headers.get(CONTENT_TYPE_HEADER)
        return values[0] if values else None

    def with_entity(
        self,
        payload: bytes | str | IO[bytes],
        content_type: str | None = None,
    ) -> RequestBuilder:
        """Attach a raw body. No content type is inferred.

        Args:
            payload: Binary stream, or bytes/str wrapped into one.
            content_type: If given, replaces the Content-Type header; otherwise
                          the header must already have been set by the caller.
        """
        if content_type is not None:
            self.content_type(content_type)
        if self._current_content_type() is None:
            logger.debug("Entity attached without a Content-Type header")
        self._body = Entity(content_type=self._current_content_type(), reader=as_stream(payload))
        return self

    def _with_marshaled(self, data: bytes, default_content_type: str) -> RequestBuilder:
        if self._current_content_type() is None:
            self._headers[CONTENT_TYPE_HEADER] = [default_content_type]
        self._body = Entity(content_type=self._current_content_type(), reader=as_stream(data))
        return self

    def with_json_entity(self, source: Any) -> RequestBuilder:
        """Attach a record marshaled to JSON; Content-Type defaults to application/json.

        Raises:
            InvalidSourceKind: If source is not a record.
        """
        return self._with_marshaled(marshal_json(source), JSON_CONTENT_TYPE)

    def with_xml_entity(self, source: Any) -> RequestBuilder:
        """Attach a record marshaled to XML; Content-Type defaults to text/xml.

        Raises:
            InvalidSourceKind: If source is not a record.
        """
        return self._with_marshaled(marshal_xml(source), XML_CONTENT_TYPE)

    # -------------------------------------------------------------------------
    # Assembly
    # -------------------------------------------------------------------------

    def make(self) -> FinalizedRequest:
        """Produce the finalized request.

        Binds template variables, parses the URL, appends the query
        parameters after any query already in the URL, flattens headers and
        attaches the body (unread).

        Raises:
            MalformedURL: If the bound URL cannot be parsed.
        """
        bound = bind_variables(self._url, self._variables)
        parse_url(bound)
        url = parse_url(append_query(bound, self._parameters))

        headers = [(key, value) for key, values in self._headers.items() for value in values]
        body = self._body.reader if self._body is not None else None
        body_content_type = self._current_content_type() if body is not None else None

        logger.debug("Finalized %s %s (%d header values)", self._method, url, len(headers))
        return FinalizedRequest(
            method=self._method,
            url=url,
            headers=headers,
            body=body,
            body_content_type=body_content_type,
        )

    def __str__(self) -> str:
        lines = [f"{self._method} {self._url}", f"mode: {self._mode.value}"]
        for title, multimap in (
            ("parameters", self._parameters),
            ("headers", self._headers),
            ("variables", self._variables),
        ):
            lines.append(f"{title}:")
            for key, values in multimap.items():
                lines.append(f"  {key}: {', '.join(values)}")
        if self._body is not None:
            lines.append(f"entity: {self._body.content_type or '<no content type>'}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"RequestBuilder(method={self._method!r}, url={self._url!r}, mode={self._mode.value!r})"
