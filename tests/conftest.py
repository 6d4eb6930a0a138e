"""Pytest configuration and shared records for request-builder tests.

This file provides:
- Tagged dataclass and pydantic records exercising every extraction path
- Fixtures building populated instances of those records
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest
from pydantic import BaseModel, Field

from request_builder.models import Operator, TimeFilter

# 2018-03-11T22:11:16.000000Z rendered with the fixed timestamp format.
REFERENCE_TIME = datetime(2018, 3, 11, 22, 11, 16, tzinfo=timezone.utc)


# =============================================================================
# Query parameter records
# =============================================================================


@dataclass
class NestedQuery:
    query7: str = field(metadata={"parameter": "query7"})
    query1: str = field(metadata={"parameter": "query1"})


@dataclass
class EmbeddedQuery:
    query5: str = field(metadata={"parameter": "query5"})
    query6: str = field(metadata={"parameter": "query6"})


@dataclass
class QueryRecord:
    """Mirrors a typical filter struct: scalars, optionals, nested records, a time filter."""

    query1: str = field(metadata={"parameter": "query1"})
    query2: str | None = field(metadata={"parameter": "query2"})
    query3a: bool = field(metadata={"parameter": "query3"})
    query3b: bool = field(metadata={"parameter": "query3"})
    query4: bool | None = field(metadata={"parameter": "query4"})
    embedded: EmbeddedQuery
    nested: NestedQuery | None
    query8: TimeFilter | None = field(metadata={"parameter": "query8,omitempty"})


# Expected extraction for make_query_record(), in insertion order.
QUERY_RECORD_VALUES: dict[str, list[str]] = {
    "query1": ["value1a", "value1b"],
    "query2": ["value2"],
    "query3": ["true", "false"],
    "query4": ["true"],
    "query5": ["value5"],
    "query6": ["value6"],
    "query7": ["value7"],
    "query8": ["eq:2018-03-11T22:11:16.000000Z"],
}


def make_query_record() -> QueryRecord:
    return QueryRecord(
        query1="value1a",
        query2="value2",
        query3a=True,
        query3b=False,
        query4=True,
        embedded=EmbeddedQuery(query5="value5", query6="value6"),
        nested=NestedQuery(query7="value7", query1="value1b"),
        query8=TimeFilter(timestamp=REFERENCE_TIME, operator=Operator.EQ),
    )


# =============================================================================
# Header records (pydantic)
# =============================================================================


class TracingHeaders(BaseModel):
    header1: str = Field(default="", json_schema_extra={"header": "X-Header-1"})
    request_id: str | None = Field(
        default=None, json_schema_extra={"header": "X-Request-Id,omitempty"}
    )


class ClientHeaders(BaseModel):
    header1: str = Field(default="", json_schema_extra={"header": "X-Header-1"})
    accept: list[str] = Field(default_factory=list, json_schema_extra={"header": "accept"})
    secret: str = Field(default="", json_schema_extra={"header": "-"})
    tracing: TracingHeaders = Field(default_factory=TracingHeaders)
    note: str = "untagged"


# =============================================================================
# Template variable records
# =============================================================================


@dataclass
class NestedVariables:
    var1: str = field(metadata={"variable": "var1"})
    var2: str = field(metadata={"variable": "var2"})


@dataclass
class Variables:
    var1: str = field(metadata={"variable": "var1"})
    var2: str | None = field(metadata={"variable": "var2"})
    embedded: NestedVariables
    nested: NestedVariables | None


# =============================================================================
# Entity records
# =============================================================================


@dataclass
class A:
    field1: str | None = None
    field2: bool | None = None
    field3: int | None = None
    field4: str | None = None


@pytest.fixture
def query_record() -> QueryRecord:
    return make_query_record()


@pytest.fixture
def client_headers() -> ClientHeaders:
    return ClientHeaders(
        header1="outer",
        accept=["application/json", "text/plain"],
        secret="hunter2",
        tracing=TracingHeaders(header1="inner", request_id="req-1"),
    )


@pytest.fixture
def variables_record() -> Variables:
    return Variables(
        var1="value1s",
        var2="value2s",
        embedded=NestedVariables(var1="value1e", var2="value2e"),
        nested=NestedVariables(var1="value1n", var2="value2n"),
    )


@pytest.fixture
def entity_record() -> A:
    return A(field1="value1", field2=True, field3=12, field4="value4")
