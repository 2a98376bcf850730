"""
Tests for evaluating conditions straight from raw request and response headers.

Unparseable header values must be treated as absent, never raised.
"""

from __future__ import annotations

from email.utils import formatdate
from typing import Dict, Optional

import pytest
from inline_snapshot import snapshot

from notmodified import (
    WILDCARD,
    ConditionalOptions,
    EntityTag,
    Headers,
    Method,
    Request,
    Response,
    Verdict,
    extract_conditionals,
    extract_validators,
    meets_conditions,
)

NOW = 784111777
HOUR = 3600


def http_date(timeval: float) -> str:
    return formatdate(timeval=timeval, usegmt=True)


def create_request(method: str = "GET", headers: Optional[Dict[str, str]] = None) -> Request:
    return Request(method=method, url="https://example.com/resource", headers=Headers(headers or {}))


def create_response(status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> Response:
    return Response(status_code=status_code, headers=Headers(headers or {}))


def test_extract_conditionals() -> None:
    request = create_request(
        method="get",
        headers={
            "If-Match": '"a", W/"b"',
            "If-None-Match": "*",
            "If-Modified-Since": "Sun, 06 Nov 1994 08:49:37 GMT",
            "If-Unmodified-Since": "Sunday, 06-Nov-94 08:49:37 GMT",
            "Range": "bytes=0-99",
        },
    )

    conditionals = extract_conditionals(request)

    assert conditionals.if_match == (EntityTag("a"), EntityTag("b", weak=True))
    assert conditionals.if_none_match == (WILDCARD,)
    assert conditionals.if_modified_since == NOW
    assert conditionals.if_unmodified_since == NOW
    assert conditionals.has_range is True
    assert conditionals.method is Method.GET


def test_extract_conditionals_without_headers() -> None:
    conditionals = extract_conditionals(create_request(method="DELETE"))

    assert conditionals.if_match == ()
    assert conditionals.if_none_match == ()
    assert conditionals.if_modified_since is None
    assert conditionals.if_unmodified_since is None
    assert conditionals.has_range is False
    assert conditionals.method is Method.OTHER


@pytest.mark.parametrize("method, expected", [("head", Method.HEAD), ("Get", Method.GET), ("PATCH", Method.OTHER)])
def test_method_is_case_normalized(method: str, expected: Method) -> None:
    assert extract_conditionals(create_request(method=method)).method is expected


def test_unparseable_headers_are_treated_as_absent(caplog: pytest.LogCaptureFixture) -> None:
    request = create_request(
        headers={
            "If-Match": '"unterminated',
            "If-None-Match": '*, "a"',
            "If-Unmodified-Since": "yesterday",
        }
    )

    with caplog.at_level("DEBUG", logger="notmodified"):
        conditionals = extract_conditionals(request)

    assert conditionals.if_match == ()
    assert conditionals.if_none_match == ()
    assert conditionals.if_unmodified_since is None
    assert caplog.messages == snapshot(
        [
            "Ignoring unparseable if-match header '\"unterminated': Invalid quotes around the entity-tag.",
            "Ignoring unparseable if-none-match header '*, \"a\"': The wildcard cannot be combined with entity-tags.",
            "Ignoring unparseable if-unmodified-since header 'yesterday'",
        ]
    )


def test_extract_validators() -> None:
    response = create_response(
        headers={"ETag": 'W/"v1"', "Last-Modified": "Sun, 06 Nov 1994 08:49:37 GMT"},
    )

    validators = extract_validators(response)

    assert validators.etag == EntityTag("v1", weak=True)
    assert validators.last_modified == NOW
    assert validators.status == 200


def test_extract_validators_ignores_malformed_values() -> None:
    response = create_response(status_code=201, headers={"ETag": '"a" "b"', "Last-Modified": "never"})

    validators = extract_validators(response)

    assert validators.etag is None
    assert validators.last_modified is None
    assert validators.status == 201


def test_missing_status_uses_default() -> None:
    assert extract_validators(create_response(status_code=0)).status == 200
    assert extract_validators(create_response(status_code=0), ConditionalOptions(default_status=404)).status == 404


def test_unparseable_if_unmodified_since_never_fails() -> None:
    request = create_request(headers={"If-Unmodified-Since": "not a date"})

    assert meets_conditions(request, create_response(), now=NOW) is Verdict.PROCEED


def test_meets_conditions_not_modified_from_raw_headers() -> None:
    request = create_request(headers={"If-None-Match": '"xyzzy", "r2d2xxxx"'})
    response = create_response(headers={"ETag": '"r2d2xxxx"'})

    assert meets_conditions(request, response, now=NOW) is Verdict.NOT_MODIFIED


def test_meets_conditions_weak_etag_under_range() -> None:
    request = create_request(headers={"If-None-Match": '"abc"', "Range": "bytes=0-10"})
    response = create_response(headers={"ETag": 'W/"abc"'})

    assert meets_conditions(request, response, now=NOW) is Verdict.PROCEED


def test_meets_conditions_post_with_matching_etag_fails() -> None:
    request = create_request(method="POST", headers={"If-None-Match": '"abc"'})
    response = create_response(headers={"ETag": '"abc"'})

    assert meets_conditions(request, response, now=NOW) is Verdict.PRECONDITION_FAILED


def test_meets_conditions_if_modified_since_from_raw_dates() -> None:
    last_modified = http_date(NOW - HOUR)
    response = create_response(headers={"Last-Modified": last_modified})

    not_modified = meets_conditions(create_request(headers={"If-Modified-Since": last_modified}), response, now=NOW)
    future = meets_conditions(
        create_request(headers={"If-Modified-Since": http_date(NOW + HOUR)}), response, now=NOW
    )

    assert not_modified is Verdict.NOT_MODIFIED
    assert future is Verdict.PROCEED


def test_empty_range_header_allows_weak_comparison() -> None:
    request = create_request(headers={"If-None-Match": '"abc"', "Range": ""})
    response = create_response(headers={"ETag": 'W/"abc"'})

    assert meets_conditions(request, response, now=NOW) is Verdict.NOT_MODIFIED
