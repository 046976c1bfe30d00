"""Encode the record graph as HAR 1.2 JSON.

Keys are written in canonical HAR order so equal archives always produce
identical bytes. Optional fields are left out only when absent (None or an
unmeasured Measure); explicit empty strings, zeros and -1 markers are kept.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from harfile.codec.errors import UnencodableValueError
from harfile.schema import (
    Archive,
    Browser,
    Cache,
    CacheData,
    Content,
    Cookie,
    Creator,
    Entry,
    Log,
    Measure,
    NameValuePair,
    Page,
    PageTimings,
    Param,
    PostData,
    Request,
    Response,
    Timestamp,
    Timings,
)

_LOGGER = logging.getLogger(__name__)

# Default indentation of encoded documents (None for compact output)
DEFAULT_INDENT = 2


def _required(value: Any, path: str, key: str) -> Any:
    """Return value, refusing a required field that was never set.

    Raises:
        UnencodableValueError: If value is None
    """
    if value is None:
        raise UnencodableValueError(f"Required field '{key}' is not set", f"{path}.{key}")
    return value


def _put(out: dict[str, Any], key: str, value: Any) -> None:
    """Set an optional key, leaving it out when the value is absent."""
    if value is not None:
        out[key] = value


def _put_measure(
    out: dict[str, Any],
    key: str,
    measure: Measure,
    path: str,
    *,
    required: bool = False,
) -> None:
    if required and not measure.is_measured:
        raise UnencodableValueError(f"Required field '{key}' is not measured", f"{path}.{key}")
    _put(out, key, measure.to_wire())


def _timestamp(value: Timestamp | None, path: str, key: str) -> str:
    timestamp: Timestamp = _required(value, path, key)
    return timestamp.raw


# =============================================================================
# Record encoders
# =============================================================================


def _encode_creator(creator: Creator | Browser, path: str) -> dict[str, Any]:
    out = {
        "name": _required(creator.name, path, "name"),
        "version": _required(creator.version, path, "version"),
    }
    _put(out, "comment", creator.comment)
    return out


def _encode_page_timings(timings: PageTimings, path: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    _put_measure(out, "onContentLoad", timings.on_content_load, path)
    _put_measure(out, "onLoad", timings.on_load, path)
    _put(out, "comment", timings.comment)
    return out


def _encode_page(page: Page, path: str) -> dict[str, Any]:
    page_timings: PageTimings = _required(page.page_timings, path, "pageTimings")
    out = {
        "startedDateTime": _timestamp(page.started_date_time, path, "startedDateTime"),
        "id": _required(page.id, path, "id"),
        "title": _required(page.title, path, "title"),
        "pageTimings": _encode_page_timings(page_timings, f"{path}.pageTimings"),
    }
    _put(out, "comment", page.comment)
    return out


def _encode_name_value_pairs(pairs: list[NameValuePair], path: str) -> list[dict[str, Any]]:
    result = []
    for i, pair in enumerate(pairs):
        item_path = f"{path}[{i}]"
        out = {
            "name": _required(pair.name, item_path, "name"),
            "value": _required(pair.value, item_path, "value"),
        }
        _put(out, "comment", pair.comment)
        result.append(out)
    return result


def _encode_cookies(cookies: list[Cookie], path: str) -> list[dict[str, Any]]:
    result = []
    for i, cookie in enumerate(cookies):
        item_path = f"{path}[{i}]"
        out = {
            "name": _required(cookie.name, item_path, "name"),
            "value": _required(cookie.value, item_path, "value"),
        }
        _put(out, "path", cookie.path)
        _put(out, "domain", cookie.domain)
        _put(out, "expires", cookie.expires)
        out["httpOnly"] = cookie.http_only
        out["secure"] = cookie.secure
        _put(out, "comment", cookie.comment)
        result.append(out)
    return result


def _encode_param(param: Param, path: str) -> dict[str, Any]:
    out = {"name": _required(param.name, path, "name")}
    _put(out, "value", param.value)
    _put(out, "fileName", param.file_name)
    _put(out, "contentType", param.content_type)
    _put(out, "comment", param.comment)
    return out


def _encode_post_data(post_data: PostData, path: str) -> dict[str, Any]:
    out: dict[str, Any] = {
        "mimeType": _required(post_data.mime_type, path, "mimeType"),
        "params": [_encode_param(param, f"{path}.params[{i}]") for i, param in enumerate(post_data.params)],
        "text": post_data.text,
    }
    _put(out, "comment", post_data.comment)
    return out


def _encode_request(request: Request, path: str) -> dict[str, Any]:
    out: dict[str, Any] = {
        "method": _required(request.method, path, "method"),
        "url": _required(request.url, path, "url"),
        "httpVersion": _required(request.http_version, path, "httpVersion"),
        "cookies": _encode_cookies(request.cookies, f"{path}.cookies"),
        "headers": _encode_name_value_pairs(request.headers, f"{path}.headers"),
        "queryString": _encode_name_value_pairs(request.query_string, f"{path}.queryString"),
    }
    if request.post_data is not None:
        out["postData"] = _encode_post_data(request.post_data, f"{path}.postData")
    _put_measure(out, "headersSize", request.headers_size, path, required=True)
    _put_measure(out, "bodySize", request.body_size, path, required=True)
    _put(out, "comment", request.comment)
    return out


def _encode_content(content: Content, path: str) -> dict[str, Any]:
    out: dict[str, Any] = {"size": _required(content.size, path, "size")}
    _put(out, "compression", content.compression)
    out["mimeType"] = _required(content.mime_type, path, "mimeType")
    _put(out, "text", content.text)
    _put(out, "encoding", content.encoding)
    _put(out, "comment", content.comment)
    return out


def _encode_response(response: Response, path: str) -> dict[str, Any]:
    content: Content = _required(response.content, path, "content")
    out: dict[str, Any] = {
        "status": _required(response.status, path, "status"),
        "statusText": _required(response.status_text, path, "statusText"),
        "httpVersion": _required(response.http_version, path, "httpVersion"),
        "cookies": _encode_cookies(response.cookies, f"{path}.cookies"),
        "headers": _encode_name_value_pairs(response.headers, f"{path}.headers"),
        "content": _encode_content(content, f"{path}.content"),
        "redirectURL": _required(response.redirect_url, path, "redirectURL"),
    }
    _put_measure(out, "headersSize", response.headers_size, path, required=True)
    _put_measure(out, "bodySize", response.body_size, path, required=True)
    _put(out, "comment", response.comment)
    return out


def _encode_cache_data(data: CacheData, path: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    _put(out, "expires", data.expires)
    out["lastAccess"] = _required(data.last_access, path, "lastAccess")
    out["eTag"] = _required(data.e_tag, path, "eTag")
    out["hitCount"] = _required(data.hit_count, path, "hitCount")
    _put(out, "comment", data.comment)
    return out


def _encode_cache(cache: Cache, path: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if cache.before_request is not None:
        out["beforeRequest"] = _encode_cache_data(cache.before_request, f"{path}.beforeRequest")
    if cache.after_request is not None:
        out["afterRequest"] = _encode_cache_data(cache.after_request, f"{path}.afterRequest")
    _put(out, "comment", cache.comment)
    return out


def _encode_timings(timings: Timings, path: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    _put_measure(out, "blocked", timings.blocked, path)
    _put_measure(out, "dns", timings.dns, path)
    _put_measure(out, "connect", timings.connect, path)
    out["send"] = _required(timings.send, path, "send")
    out["wait"] = _required(timings.wait, path, "wait")
    out["receive"] = _required(timings.receive, path, "receive")
    _put_measure(out, "ssl", timings.ssl, path)
    _put(out, "comment", timings.comment)
    return out


def _encode_entry(entry: Entry, path: str) -> dict[str, Any]:
    request: Request = _required(entry.request, path, "request")
    response: Response = _required(entry.response, path, "response")
    cache: Cache = _required(entry.cache, path, "cache")
    timings: Timings = _required(entry.timings, path, "timings")

    out: dict[str, Any] = {}
    _put(out, "pageref", entry.pageref)
    out["startedDateTime"] = _timestamp(entry.started_date_time, path, "startedDateTime")
    out["time"] = _required(entry.time, path, "time")
    out["request"] = _encode_request(request, f"{path}.request")
    out["response"] = _encode_response(response, f"{path}.response")
    out["cache"] = _encode_cache(cache, f"{path}.cache")
    out["timings"] = _encode_timings(timings, f"{path}.timings")
    _put(out, "serverIPAddress", entry.server_ip_address)
    _put(out, "connection", entry.connection)
    _put(out, "comment", entry.comment)
    return out


def _encode_log(log: Log, path: str) -> dict[str, Any]:
    creator: Creator = _required(log.creator, path, "creator")

    out: dict[str, Any] = {}
    _put(out, "version", log.version)
    out["creator"] = _encode_creator(creator, f"{path}.creator")
    if log.browser is not None:
        out["browser"] = _encode_creator(log.browser, f"{path}.browser")
    if log.pages:
        out["pages"] = [_encode_page(page, f"{path}.pages[{i}]") for i, page in enumerate(log.pages)]
    out["entries"] = [_encode_entry(entry, f"{path}.entries[{i}]") for i, entry in enumerate(log.entries)]
    _put(out, "comment", log.comment)
    return out


def to_document(archive: Archive) -> dict[str, Any]:
    """Build the JSON-ready dict for an archive, keys in canonical order.

    Raises:
        UnencodableValueError: If a required field is not set
    """
    if archive.log is None:
        raise UnencodableValueError("Required field 'log' is not set", "log")
    return {"log": _encode_log(archive.log, "log")}


def encode(archive: Archive, *, indent: int | None = DEFAULT_INDENT) -> bytes:
    """Encode an archive as UTF-8 HAR JSON.

    Args:
        archive: Archive to encode
        indent: Indentation width, or None for compact single-line output

    Returns:
        UTF-8 encoded HAR document

    Raises:
        UnencodableValueError: If a required field is not set, or a number
            is not finite

    Example:
        >>> from harfile.schema import Archive, Creator, Log
        >>> encode(Archive(log=Log(creator=Creator("x", "1"))), indent=None)
        b'{"log": {"creator": {"name": "x", "version": "1"}, "entries": []}}'
    """
    document = to_document(archive)
    try:
        text = json.dumps(document, indent=indent, ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        raise UnencodableValueError(f"Cannot encode value: {e}") from e

    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates (from \ud800-style escapes) only survive as escapes
        data = json.dumps(document, indent=indent, ensure_ascii=True, allow_nan=False).encode("ascii")

    _LOGGER.debug("Encoded HAR: %d entries, %d bytes", len(document["log"]["entries"]), len(data))
    return data
