from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    AsyncIterable,
    AsyncIterator,
    Iterator,
    Mapping,
    Optional,
    Tuple,
    TypedDict,
    cast,
)

from notmodified._core._headers import ETagCandidate, EntityTag, Headers
from notmodified._utils import make_sync_iterator


class AnyIterable:
    """A body that yields `content` once, from either a sync or an async loop."""

    def __init__(self, content: bytes | None = None) -> None:
        self.consumed = False
        self.content = content

    def __next__(self) -> bytes:
        if self.content is not None and not self.consumed:
            self.consumed = True
            return self.content
        raise StopIteration()

    def __iter__(self) -> Iterator[bytes]:
        return self

    async def __anext__(self) -> bytes:
        if self.content is not None and not self.consumed:
            self.consumed = True
            return self.content
        raise StopAsyncIteration()

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self

    def __eq__(self, value: Any) -> bool:
        return isinstance(value, AnyIterable)


class Method(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    OTHER = "OTHER"

    @classmethod
    def from_str(cls, method: str) -> Method:
        normalized = method.upper()
        if normalized == "GET":
            return cls.GET
        if normalized == "HEAD":
            return cls.HEAD
        return cls.OTHER


class Verdict(Enum):
    PROCEED = "proceed"
    """Send the response unchanged."""

    NOT_MODIFIED = "not_modified"
    """Replace the response with an empty 304 Not Modified."""

    PRECONDITION_FAILED = "precondition_failed"
    """Replace the response with an empty 412 Precondition Failed."""

    @property
    def status_code(self) -> Optional[int]:
        if self is Verdict.NOT_MODIFIED:
            return 304
        if self is Verdict.PRECONDITION_FAILED:
            return 412
        return None


@dataclass(frozen=True)
class ConditionalRequestHeaders:
    """
    The conditional part of a request, already parsed.

    Headers that are missing or could not be parsed are represented as empty
    tuples or None, never as errors.
    """

    if_match: Tuple[ETagCandidate, ...] = ()
    if_none_match: Tuple[ETagCandidate, ...] = ()
    if_modified_since: Optional[int] = None
    if_unmodified_since: Optional[int] = None
    has_range: bool = False
    method: Method = Method.GET


@dataclass(frozen=True)
class ResponseValidators:
    etag: Optional[EntityTag] = None
    last_modified: Optional[int] = None
    status: int = 200


class ResponseMetadata(TypedDict, total=False):
    # All the names here should be prefixed with "notmodified_" to avoid collisions with user data
    notmodified_finalized: bool
    """Set once the finalization pipeline has run for this response."""

    notmodified_verdict: str
    """Value of the Verdict the conditional finalizer reached."""


@dataclass
class Request:
    method: str
    url: str
    headers: Headers = field(default_factory=lambda: Headers({}))


@dataclass
class Response:
    status_code: int
    headers: Headers = field(default_factory=lambda: Headers({}))
    stream: Iterator[bytes] | AsyncIterator[bytes] = field(default_factory=lambda: iter(AnyIterable()))
    metadata: ResponseMetadata | Mapping[str, Any] = field(default_factory=dict)

    async def _aiter_stream(self) -> AsyncIterator[bytes]:
        if hasattr(self, "collected_body"):
            yield getattr(self, "collected_body")
            return
        if isinstance(self.stream, (AsyncIterator, AsyncIterable)):
            async for chunk in self.stream:
                yield chunk
        else:
            raise TypeError("Response stream is not an AsyncIterator")

    def read(self) -> bytes:
        """
        Synchronously reads the entire response body without consuming the stream.
        """
        if not isinstance(self.stream, Iterator):
            raise TypeError("Response stream is not an Iterator")

        if hasattr(self, "collected_body"):
            return cast(bytes, getattr(self, "collected_body"))

        collected = b"".join([chunk for chunk in self.stream])
        setattr(self, "collected_body", collected)
        self.stream = make_sync_iterator([collected])
        return collected

