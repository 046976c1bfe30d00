"""HAR 1.2 record types.

One dataclass per HAR object, fields in canonical HAR order. Optional fields
default to None (or an unmeasured Measure) and are left out of the encoded
document only in that state. Required fields also default to None so a
record can be filled in step by step; encoding refuses a record whose
required fields are still None.

See: http://www.softwareishard.com/blog/har-12-spec/
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from harfile.schema.values import Measure, Number, Timestamp

if TYPE_CHECKING:
    from harfile.codec.errors import InvalidTimestampError

# Log version assumed when the "version" key is absent
DEFAULT_VERSION = "1.1"


@dataclass
class Creator:
    """Name and version info of the application that exported the log.

    Attributes:
        name: Name of the application used to export the log
        version: Version of the application used to export the log
        comment: A comment provided by the user or the application
    """

    name: str | None = None
    version: str | None = None
    comment: str | None = None


@dataclass
class Browser:
    """Name and version info of the browser used (same shape as Creator)."""

    name: str | None = None
    version: str | None = None
    comment: str | None = None


@dataclass
class PageTimings:
    """Timings for events fired during page load.

    Both values are milliseconds since ``Page.started_date_time``. A
    not-applicable measure is written as -1; an unmeasured one is left out.
    """

    on_content_load: Measure = field(default_factory=Measure.unmeasured)
    on_load: Measure = field(default_factory=Measure.unmeasured)
    comment: str | None = None


@dataclass
class Page:
    """An exported (tracked) page.

    Attributes:
        started_date_time: Beginning of the page load
        id: Unique page identifier within the log; entries refer to it via pageref
        title: Page title
        page_timings: Timing info about the page load
        comment: A comment provided by the user or the application
    """

    started_date_time: Timestamp | None = None
    id: str | None = None
    title: str | None = None
    page_timings: PageTimings | None = None
    comment: str | None = None


@dataclass
class NameValuePair:
    """A header or query string parameter."""

    name: str | None = None
    value: str | None = None
    comment: str | None = None


@dataclass
class Cookie:
    """A cookie sent with a request or set by a response.

    Attributes:
        name: The name of the cookie
        value: The cookie value
        path: The path pertaining to the cookie
        domain: The host of the cookie
        expires: Expiration time, kept as the raw ISO 8601 string
        http_only: True if the cookie is HTTP only
        secure: True if the cookie was transmitted over SSL
        comment: A comment provided by the user or the application
    """

    name: str | None = None
    value: str | None = None
    path: str | None = None
    domain: str | None = None
    expires: str | None = None
    http_only: bool = False
    secure: bool = False
    comment: str | None = None


@dataclass
class Param:
    """A posted parameter or file (embedded in PostData)."""

    name: str | None = None
    value: str | None = None
    file_name: str | None = None
    content_type: str | None = None
    comment: str | None = None


@dataclass
class PostData:
    """Posted data attached to a request.

    ``params`` (URL encoded form) and ``text`` are alternative views of the
    same body. Writers usually fill one of them; both keys are always written,
    empty when unused.
    """

    mime_type: str | None = None
    params: list[Param] = field(default_factory=list)
    text: str = ""
    comment: str | None = None


@dataclass
class Request:
    """Detailed info about the performed request.

    Attributes:
        method: Request method (GET, POST, ...)
        url: Absolute URL of the request, without fragment
        http_version: Request HTTP version
        cookies: Cookie objects
        headers: Header name/value pairs
        query_string: Query parameter name/value pairs
        post_data: Posted data info
        headers_size: Bytes from the start of the message up to the blank line
            before the body; not applicable (-1) if unknown
        body_size: Size of the request body in bytes; not applicable (-1) if unknown
        comment: A comment provided by the user or the application
    """

    method: str | None = None
    url: str | None = None
    http_version: str | None = None
    cookies: list[Cookie] = field(default_factory=list)
    headers: list[NameValuePair] = field(default_factory=list)
    query_string: list[NameValuePair] = field(default_factory=list)
    post_data: PostData | None = None
    headers_size: Measure = field(default_factory=Measure.not_applicable)
    body_size: Measure = field(default_factory=Measure.not_applicable)
    comment: str | None = None


@dataclass
class Content:
    """Details about the response body.

    Attributes:
        size: Length of the returned content in bytes (decoded size)
        compression: Number of bytes saved by compression, None if not known
        mime_type: MIME type of the response text, including charset if available
        text: Response body, HTTP decoded or encoded per ``encoding``
        encoding: Encoding used for ``text``, e.g. "base64"
        comment: A comment provided by the user or the application
    """

    size: int | None = None
    compression: int | None = None
    mime_type: str | None = None
    text: str | None = None
    encoding: str | None = None
    comment: str | None = None


@dataclass
class Response:
    """Detailed info about the response.

    ``body_size`` of 0 means the response came from the cache (304);
    not applicable (-1) means the size is unknown.
    """

    status: int | None = None
    status_text: str | None = None
    http_version: str | None = None
    cookies: list[Cookie] = field(default_factory=list)
    headers: list[NameValuePair] = field(default_factory=list)
    content: Content | None = None
    redirect_url: str | None = None
    headers_size: Measure = field(default_factory=Measure.not_applicable)
    body_size: Measure = field(default_factory=Measure.not_applicable)
    comment: str | None = None


@dataclass
class CacheData:
    """State of a cache entry before or after the request."""

    expires: str | None = None
    last_access: str | None = None
    e_tag: str | None = None
    hit_count: int | None = None
    comment: str | None = None


@dataclass
class Cache:
    """Info about cache usage.

    A missing side means no information, which differs from a CacheData
    that is present but empty.
    """

    before_request: CacheData | None = None
    after_request: CacheData | None = None
    comment: str | None = None


# Phases that count towards Entry.time (ssl is already inside connect)
_SUMMED_PHASES = ("blocked", "dns", "connect")


@dataclass
class Timings:
    """Phases of the request/response round trip, in milliseconds.

    ``blocked``, ``dns``, ``connect`` and ``ssl`` may be unmeasured (absent)
    or not applicable (-1). ``send``, ``wait`` and ``receive`` are required.
    When ``ssl`` is measured, its time is also included in ``connect``.
    """

    blocked: Measure = field(default_factory=Measure.unmeasured)
    dns: Measure = field(default_factory=Measure.unmeasured)
    connect: Measure = field(default_factory=Measure.unmeasured)
    send: Number | None = None
    wait: Number | None = None
    receive: Number | None = None
    ssl: Measure = field(default_factory=Measure.unmeasured)
    comment: str | None = None

    def total(self) -> Number:
        """Return the Entry.time these timings add up to.

        Unmeasured and not-applicable phases are skipped and ssl is never
        added on its own.

        Example:
            >>> Timings(dns=Measure.not_applicable(), send=1, wait=8, receive=1).total()
            10
        """
        total: Number = 0
        for name in _SUMMED_PHASES:
            total += getattr(self, name).value_or(0)
        for value in (self.send, self.wait, self.receive):
            if value is not None and value >= 0:
                total += value
        return total


@dataclass
class Entry:
    """One exported request/response exchange.

    Attributes:
        pageref: Id of the parent page (weak reference, not ownership)
        started_date_time: Request start
        time: Total elapsed time in milliseconds; sum of the applicable timings
        request: Detailed info about the request
        response: Detailed info about the response
        cache: Info about cache usage
        timings: Timing info about the round trip
        server_ip_address: IP address of the server that was connected
        connection: Id of the parent TCP/IP connection, often a port number.
            Treated as opaque and not assumed to be unique.
        comment: A comment provided by the user or the application
    """

    pageref: str | None = None
    started_date_time: Timestamp | None = None
    time: Number | None = None
    request: Request | None = None
    response: Response | None = None
    cache: Cache | None = None
    timings: Timings | None = None
    server_ip_address: str | None = None
    connection: str | None = None
    comment: str | None = None


@dataclass
class Log:
    """Root of the exported data.

    Entries are kept in document order. Sorting by start time is common but
    not guaranteed, so callers must not rely on it.
    """

    version: str | None = None
    creator: Creator | None = None
    browser: Browser | None = None
    pages: list[Page] = field(default_factory=list)
    entries: list[Entry] = field(default_factory=list)
    comment: str | None = None

    @property
    def effective_version(self) -> str:
        """The format version, "1.1" when the log does not say."""
        return self.version if self.version is not None else DEFAULT_VERSION

    def page_index(self) -> dict[str, Page]:
        """Build a page id lookup table (first page wins on duplicate ids)."""
        index: dict[str, Page] = {}
        for page in self.pages:
            if page.id is not None:
                index.setdefault(page.id, page)
        return index

    def entries_for_page(self, page_id: str) -> list[Entry]:
        """Return the entries whose pageref names page_id, in document order."""
        return [entry for entry in self.entries if entry.pageref == page_id]


@dataclass
class Archive:
    """A HAR document: the wrapper object holding the log.

    Attributes:
        log: The exported log
        issues: Recoverable problems found while decoding (e.g. invalid
            timestamps). Not part of the archive's value, so ignored by
            equality and never encoded.
    """

    log: Log | None = None
    issues: list[InvalidTimestampError] = field(default_factory=list, compare=False, repr=False)
