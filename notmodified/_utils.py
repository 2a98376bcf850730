from __future__ import annotations

import calendar
import typing as tp
from email.utils import mktime_tz, parsedate_tz
from typing import AsyncIterator, Iterable, Iterator

HEADERS_ENCODING = "iso-8859-1"


def parse_date(date: str) -> tp.Optional[int]:
    """
    Parse an HTTP-date into integer seconds since the epoch.

    Accepts the IMF-fixdate, obsolete RFC 850 and asctime forms. A missing
    zone is read as GMT.

    Returns None when the value cannot be parsed.

    Examples:
        >>> parse_date("Sun, 06 Nov 1994 08:49:37 GMT")
        784111777
        >>> parse_date("not a date") is None
        True
    """
    try:
        parsed = parsedate_tz(date)
    except (TypeError, ValueError, IndexError):  # pragma: nocover
        return None
    if parsed is None:
        return None
    if parsed[9] is None:
        return calendar.timegm(parsed[:6])
    try:
        return mktime_tz(parsed)
    except (OverflowError, ValueError):  # pragma: nocover
        return None


async def make_async_iterator(
    iterable: Iterable[bytes],
) -> AsyncIterator[bytes]:
    for item in iterable:
        yield item


def make_sync_iterator(iterable: Iterable[bytes]) -> Iterator[bytes]:
    for item in iterable:
        yield item
