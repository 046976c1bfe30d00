"""Pytest configuration and fixtures for harfile tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

# Single-entry document whose time equals send + wait + receive
_SCENARIO_HAR = (
    b'{"log":{"version":"1.2","creator":{"name":"x","version":"1"},"entries":[{"startedDateTime":'
    b'"2020-01-01T00:00:00.000Z","time":10,"request":{"method":"GET","url":"http://a/","httpVersion":'
    b'"HTTP/1.1","cookies":[],"headers":[],"queryString":[],"headersSize":-1,"bodySize":-1},"response":'
    b'{"status":200,"statusText":"OK","httpVersion":"HTTP/1.1","cookies":[],"headers":[],"content":'
    b'{"size":0,"mimeType":"text/plain"},"redirectURL":"","headersSize":-1,"bodySize":0},"cache":{},'
    b'"timings":{"send":1,"wait":8,"receive":1}}]}}'
)


@pytest.fixture
def scenario_har() -> bytes:
    """Raw bytes of a minimal one-entry HAR document."""
    return _SCENARIO_HAR


@pytest.fixture
def sample_har_entry():
    """Create a minimal valid HAR entry dict for testing."""

    def _create_entry(
        method: str = "GET",
        url: str = "http://example.com/",
        status: int = 200,
        started: str = "2020-01-01T00:00:00.000Z",
        time: float = 10,
        timings: dict[str, Any] | None = None,
        pageref: str | None = None,
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "startedDateTime": started,
            "time": time,
            "request": {
                "method": method,
                "url": url,
                "httpVersion": "HTTP/1.1",
                "cookies": [],
                "headers": [],
                "queryString": [],
                "headersSize": -1,
                "bodySize": -1,
            },
            "response": {
                "status": status,
                "statusText": "OK",
                "httpVersion": "HTTP/1.1",
                "cookies": [],
                "headers": [],
                "content": {"size": 0, "mimeType": "text/html"},
                "redirectURL": "",
                "headersSize": -1,
                "bodySize": -1,
            },
            "cache": {},
            "timings": timings if timings is not None else {"send": 1, "wait": 8, "receive": 1},
        }
        if pageref is not None:
            entry["pageref"] = pageref
        return entry

    return _create_entry


@pytest.fixture
def sample_har(sample_har_entry):
    """Create a HAR document dict wrapping the given entries."""

    def _create_har(
        entries: list[dict[str, Any]] | None = None,
        pages: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        log: dict[str, Any] = {
            "version": "1.2",
            "creator": {"name": "test", "version": "1.0"},
        }
        if pages is not None:
            log["pages"] = pages
        log["entries"] = entries if entries is not None else [sample_har_entry()]
        return {"log": log}

    return _create_har


@pytest.fixture
def temp_har_file(tmp_path: Path, sample_har):
    """Write a HAR document to a temporary file."""

    def _create_file(har_data: dict[str, Any] | None = None, name: str = "capture.har") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(har_data if har_data is not None else sample_har()), encoding="utf-8")
        return path

    return _create_file
