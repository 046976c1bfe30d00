"""HAR 1.2 data model.

Plain record types for every HAR object plus the two value types that carry
the format's special semantics.

Exports:
    - Archive, Log, Creator, Browser, Page, PageTimings, Entry, Request,
      Response, Cookie, NameValuePair, PostData, Param, Content, Cache,
      CacheData, Timings: HAR records
    - Measure, MeasureState: three-state number (absent / -1 / value)
    - Timestamp: ISO 8601 date-time keeping its raw spelling
"""

from __future__ import annotations

from harfile.schema.records import (
    DEFAULT_VERSION,
    Archive,
    Browser,
    Cache,
    CacheData,
    Content,
    Cookie,
    Creator,
    Entry,
    Log,
    NameValuePair,
    Page,
    PageTimings,
    Param,
    PostData,
    Request,
    Response,
    Timings,
)
from harfile.schema.values import (
    NOT_APPLICABLE_VALUE,
    Measure,
    MeasureState,
    Number,
    Timestamp,
    format_iso8601,
    parse_iso8601,
)

__all__ = [
    # Records
    "Archive",
    "Log",
    "Creator",
    "Browser",
    "Page",
    "PageTimings",
    "Entry",
    "Request",
    "Response",
    "Cookie",
    "NameValuePair",
    "PostData",
    "Param",
    "Content",
    "Cache",
    "CacheData",
    "Timings",
    "DEFAULT_VERSION",
    # Values
    "Measure",
    "MeasureState",
    "Number",
    "Timestamp",
    "NOT_APPLICABLE_VALUE",
    "format_iso8601",
    "parse_iso8601",
]
