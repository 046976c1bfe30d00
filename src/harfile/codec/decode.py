"""Decode HAR 1.2 JSON into the record graph.

Structural problems (missing required keys, wrong JSON types) abort the
whole decode. An invalid timestamp does not: the raw string is kept on the
record and an InvalidTimestampError is appended to ``Archive.issues``.
Unknown keys are ignored at every level.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from harfile.codec.errors import InvalidTimestampError, MalformedInputError, TypeMismatchError
from harfile.schema import (
    NOT_APPLICABLE_VALUE,
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
from harfile.schema.values import Number

_LOGGER = logging.getLogger(__name__)

_MISSING = object()


# =============================================================================
# Field readers
# =============================================================================


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _get(obj: dict[str, Any], key: str, path: str, required: bool) -> Any:
    """Return obj[key], _MISSING for an absent optional key.

    JSON null is treated like an absent key.

    Raises:
        MalformedInputError: If a required key is absent or null
    """
    value = obj.get(key)
    if value is None:
        if required:
            raise MalformedInputError(f"Missing required '{key}' key", _join(path, key))
        return _MISSING
    return value


def _read_string(obj: dict[str, Any], key: str, path: str, *, required: bool = False) -> str | None:
    value = _get(obj, key, path, required)
    if value is _MISSING:
        return None
    if not isinstance(value, str):
        raise TypeMismatchError("string", value, _join(path, key))
    return value


def _read_bool(obj: dict[str, Any], key: str, path: str) -> bool | None:
    value = _get(obj, key, path, False)
    if value is _MISSING:
        return None
    if not isinstance(value, bool):
        raise TypeMismatchError("boolean", value, _join(path, key))
    return value


def _read_number(obj: dict[str, Any], key: str, path: str, *, required: bool = False) -> Number | None:
    value = _get(obj, key, path, required)
    if value is _MISSING:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeMismatchError("number", value, _join(path, key))
    # Literals like 1e400 overflow to inf in json.loads
    if isinstance(value, float) and not math.isfinite(value):
        raise MalformedInputError("Number out of range", _join(path, key))
    return value


def _read_int(obj: dict[str, Any], key: str, path: str, *, required: bool = False) -> int | None:
    value = _read_number(obj, key, path, required=required)
    if value is None or isinstance(value, int):
        return value
    # Some exporters write integral sizes as floats (e.g. 200.0)
    if value.is_integer():
        return int(value)
    raise TypeMismatchError("integer", value, _join(path, key))


def _read_measure(obj: dict[str, Any], key: str, path: str, *, required: bool = False) -> Measure:
    """Read a number where -1 means "not applicable" and absence means "not measured"."""
    value = _read_number(obj, key, path, required=required)
    if value is None:
        return Measure.unmeasured()
    if value == NOT_APPLICABLE_VALUE:
        return Measure.not_applicable()
    if value < 0:
        raise TypeMismatchError("non-negative number or -1", value, _join(path, key))
    return Measure.of(value)


def _read_object(
    obj: dict[str, Any], key: str, path: str, *, required: bool = False
) -> dict[str, Any] | None:
    value = _get(obj, key, path, required)
    if value is _MISSING:
        return None
    if not isinstance(value, dict):
        raise TypeMismatchError("object", value, _join(path, key))
    return value


def _require_object(obj: dict[str, Any], key: str, path: str) -> dict[str, Any]:
    value = _get(obj, key, path, True)
    if not isinstance(value, dict):
        raise TypeMismatchError("object", value, _join(path, key))
    return value


def _read_array(obj: dict[str, Any], key: str, path: str, *, required: bool = False) -> list[Any] | None:
    value = _get(obj, key, path, required)
    if value is _MISSING:
        return None
    if not isinstance(value, list):
        raise TypeMismatchError("array", value, _join(path, key))
    return value


def _read_objects(
    obj: dict[str, Any], key: str, path: str, *, required: bool = False
) -> list[tuple[dict[str, Any], str]] | None:
    """Read an array of objects, pairing each item with its path."""
    items = _read_array(obj, key, path, required=required)
    if items is None:
        return None
    result = []
    for i, item in enumerate(items):
        item_path = f"{_join(path, key)}[{i}]"
        if not isinstance(item, dict):
            raise TypeMismatchError("object", item, item_path)
        result.append((item, item_path))
    return result


def _read_timestamp(
    obj: dict[str, Any],
    key: str,
    path: str,
    issues: list[InvalidTimestampError],
) -> Timestamp:
    raw = _get(obj, key, path, True)
    if not isinstance(raw, str):
        raise TypeMismatchError("string", raw, _join(path, key))
    timestamp = Timestamp.parse(raw)
    if not timestamp.is_valid:
        issue = InvalidTimestampError(raw, _join(path, key))
        _LOGGER.warning("%s, keeping raw value", issue)
        issues.append(issue)
    return timestamp


# =============================================================================
# Record decoders
# =============================================================================


def _decode_creator(obj: dict[str, Any], path: str) -> Creator:
    return Creator(
        name=_read_string(obj, "name", path, required=True),
        version=_read_string(obj, "version", path, required=True),
        comment=_read_string(obj, "comment", path),
    )


def _decode_browser(obj: dict[str, Any], path: str) -> Browser:
    return Browser(
        name=_read_string(obj, "name", path, required=True),
        version=_read_string(obj, "version", path, required=True),
        comment=_read_string(obj, "comment", path),
    )


def _decode_page_timings(obj: dict[str, Any], path: str) -> PageTimings:
    return PageTimings(
        on_content_load=_read_measure(obj, "onContentLoad", path),
        on_load=_read_measure(obj, "onLoad", path),
        comment=_read_string(obj, "comment", path),
    )


def _decode_page(obj: dict[str, Any], path: str, issues: list[InvalidTimestampError]) -> Page:
    page_timings = _require_object(obj, "pageTimings", path)
    return Page(
        started_date_time=_read_timestamp(obj, "startedDateTime", path, issues),
        id=_read_string(obj, "id", path, required=True),
        title=_read_string(obj, "title", path, required=True),
        page_timings=_decode_page_timings(page_timings, f"{path}.pageTimings"),
        comment=_read_string(obj, "comment", path),
    )


def _decode_name_value_pairs(obj: dict[str, Any], key: str, path: str) -> list[NameValuePair]:
    pairs = _read_objects(obj, key, path, required=True) or []
    return [
        NameValuePair(
            name=_read_string(item, "name", item_path, required=True),
            value=_read_string(item, "value", item_path, required=True),
            comment=_read_string(item, "comment", item_path),
        )
        for item, item_path in pairs
    ]


def _decode_cookies(obj: dict[str, Any], path: str) -> list[Cookie]:
    cookies = _read_objects(obj, "cookies", path, required=True) or []
    return [
        Cookie(
            name=_read_string(item, "name", item_path, required=True),
            value=_read_string(item, "value", item_path, required=True),
            path=_read_string(item, "path", item_path),
            domain=_read_string(item, "domain", item_path),
            expires=_read_string(item, "expires", item_path),
            http_only=_read_bool(item, "httpOnly", item_path) or False,
            secure=_read_bool(item, "secure", item_path) or False,
            comment=_read_string(item, "comment", item_path),
        )
        for item, item_path in cookies
    ]


def _decode_post_data(obj: dict[str, Any], path: str) -> PostData:
    # Some exporters leave out params or text; they decode as empty
    params = _read_objects(obj, "params", path) or []
    return PostData(
        mime_type=_read_string(obj, "mimeType", path, required=True),
        params=[
            Param(
                name=_read_string(item, "name", item_path, required=True),
                value=_read_string(item, "value", item_path),
                file_name=_read_string(item, "fileName", item_path),
                content_type=_read_string(item, "contentType", item_path),
                comment=_read_string(item, "comment", item_path),
            )
            for item, item_path in params
        ],
        text=_read_string(obj, "text", path) or "",
        comment=_read_string(obj, "comment", path),
    )


def _decode_request(obj: dict[str, Any], path: str) -> Request:
    post_data = _read_object(obj, "postData", path)
    return Request(
        method=_read_string(obj, "method", path, required=True),
        url=_read_string(obj, "url", path, required=True),
        http_version=_read_string(obj, "httpVersion", path, required=True),
        cookies=_decode_cookies(obj, path),
        headers=_decode_name_value_pairs(obj, "headers", path),
        query_string=_decode_name_value_pairs(obj, "queryString", path),
        post_data=None if post_data is None else _decode_post_data(post_data, f"{path}.postData"),
        headers_size=_read_measure(obj, "headersSize", path, required=True),
        body_size=_read_measure(obj, "bodySize", path, required=True),
        comment=_read_string(obj, "comment", path),
    )


def _decode_content(obj: dict[str, Any], path: str) -> Content:
    return Content(
        size=_read_int(obj, "size", path, required=True),
        compression=_read_int(obj, "compression", path),
        mime_type=_read_string(obj, "mimeType", path, required=True),
        text=_read_string(obj, "text", path),
        encoding=_read_string(obj, "encoding", path),
        comment=_read_string(obj, "comment", path),
    )


def _decode_response(obj: dict[str, Any], path: str) -> Response:
    content = _require_object(obj, "content", path)
    return Response(
        status=_read_int(obj, "status", path, required=True),
        status_text=_read_string(obj, "statusText", path, required=True),
        http_version=_read_string(obj, "httpVersion", path, required=True),
        cookies=_decode_cookies(obj, path),
        headers=_decode_name_value_pairs(obj, "headers", path),
        content=_decode_content(content, f"{path}.content"),
        redirect_url=_read_string(obj, "redirectURL", path, required=True),
        headers_size=_read_measure(obj, "headersSize", path, required=True),
        body_size=_read_measure(obj, "bodySize", path, required=True),
        comment=_read_string(obj, "comment", path),
    )


def _decode_cache_data(obj: dict[str, Any], key: str, path: str) -> CacheData | None:
    data = _read_object(obj, key, path)
    if data is None:
        return None
    data_path = _join(path, key)
    return CacheData(
        expires=_read_string(data, "expires", data_path),
        last_access=_read_string(data, "lastAccess", data_path, required=True),
        e_tag=_read_string(data, "eTag", data_path, required=True),
        hit_count=_read_int(data, "hitCount", data_path, required=True),
        comment=_read_string(data, "comment", data_path),
    )


def _decode_cache(obj: dict[str, Any], path: str) -> Cache:
    return Cache(
        before_request=_decode_cache_data(obj, "beforeRequest", path),
        after_request=_decode_cache_data(obj, "afterRequest", path),
        comment=_read_string(obj, "comment", path),
    )


def _decode_timings(obj: dict[str, Any], path: str) -> Timings:
    return Timings(
        blocked=_read_measure(obj, "blocked", path),
        dns=_read_measure(obj, "dns", path),
        connect=_read_measure(obj, "connect", path),
        send=_read_number(obj, "send", path, required=True),
        wait=_read_number(obj, "wait", path, required=True),
        receive=_read_number(obj, "receive", path, required=True),
        ssl=_read_measure(obj, "ssl", path),
        comment=_read_string(obj, "comment", path),
    )


def _decode_entry(obj: dict[str, Any], path: str, issues: list[InvalidTimestampError]) -> Entry:
    request = _require_object(obj, "request", path)
    response = _require_object(obj, "response", path)
    cache = _require_object(obj, "cache", path)
    timings = _require_object(obj, "timings", path)
    return Entry(
        pageref=_read_string(obj, "pageref", path),
        started_date_time=_read_timestamp(obj, "startedDateTime", path, issues),
        time=_read_number(obj, "time", path, required=True),
        request=_decode_request(request, f"{path}.request"),
        response=_decode_response(response, f"{path}.response"),
        cache=_decode_cache(cache, f"{path}.cache"),
        timings=_decode_timings(timings, f"{path}.timings"),
        server_ip_address=_read_string(obj, "serverIPAddress", path),
        connection=_read_string(obj, "connection", path),
        comment=_read_string(obj, "comment", path),
    )


def _decode_log(obj: dict[str, Any], path: str, issues: list[InvalidTimestampError]) -> Log:
    creator = _require_object(obj, "creator", path)
    browser = _read_object(obj, "browser", path)
    pages = _read_objects(obj, "pages", path) or []
    entries = _read_objects(obj, "entries", path, required=True) or []
    return Log(
        version=_read_string(obj, "version", path),
        creator=_decode_creator(creator, f"{path}.creator"),
        browser=None if browser is None else _decode_browser(browser, f"{path}.browser"),
        pages=[_decode_page(item, item_path, issues) for item, item_path in pages],
        entries=[_decode_entry(item, item_path, issues) for item, item_path in entries],
        comment=_read_string(obj, "comment", path),
    )


def _reject_constant(name: str) -> Any:
    raise MalformedInputError(f"Invalid JSON: {name} is not a valid number")


def decode(data: bytes | str) -> Archive:
    """Decode a HAR document.

    Args:
        data: UTF-8 encoded HAR JSON (a leading BOM is tolerated), or text

    Returns:
        The decoded archive. ``Archive.issues`` lists recovered problems.

    Raises:
        MalformedInputError: If the input is not JSON, has no "log" object,
            or a required key is missing
        TypeMismatchError: If a value has the wrong JSON type

    Example:
        >>> archive = decode(b'{"log": {"creator": {"name": "x", "version": "1"}, "entries": []}}')
        >>> archive.log.effective_version
        '1.1'
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            text = bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"Input is not valid UTF-8: {e.reason} at byte {e.start}") from e
    else:
        text = data

    try:
        document = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Invalid JSON: {e.msg} at line {e.lineno} column {e.colno}") from e
    except RecursionError as e:
        raise MalformedInputError("Invalid JSON: nesting too deep") from e

    if not isinstance(document, dict):
        raise MalformedInputError("Top level must be an object")
    log = document.get("log")
    if not isinstance(log, dict):
        raise MalformedInputError("Missing required 'log' object", "log")

    issues: list[InvalidTimestampError] = []
    decoded_log = _decode_log(log, "log", issues)

    _LOGGER.debug(
        "Decoded HAR: %d pages, %d entries, %d issues",
        len(decoded_log.pages),
        len(decoded_log.entries),
        len(issues),
    )
    return Archive(log=decoded_log, issues=issues)
