# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Page-number pagination over any page-returning operation.

Strava list endpoints take ``page`` (1-based) and ``per_page`` parameters and
signal the end of a collection by returning a short or empty page.
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Sequence, TypeVar

from .errors import StravaValidationError

T = TypeVar("T")

PageFetcher = Callable[[int, int], Sequence[T]]


def iterate_pages(fetch_page: PageFetcher, per_page: int) -> Iterator[T]:
    """
    Lazily yield items from successive pages.

    Pages are requested only as items are consumed: page 1 is fetched on the
    first ``next()``, page 2 once page 1 is exhausted, and so on. Iteration ends
    after an empty page or a page shorter than ``per_page``, so a short final
    page never triggers an extra request. Calling this function again starts
    over from page 1.

    :param fetch_page: Called as ``fetch_page(page, per_page)``; returns the items of that page.
    :type fetch_page: callable
    :param per_page: Page size requested from ``fetch_page``.
    :type per_page: int
    :return: Iterator over the items of all pages in fetch order.
    :raises StravaValidationError: If ``per_page`` is not a positive integer.

    Example::

        for activity in iterate_pages(
            lambda page, size: client.activities.list(page=page, per_page=size), 100
        ):
            if activity["distance"] > 42195:
                break  # no further pages are fetched
    """
    if isinstance(per_page, bool) or not isinstance(per_page, int) or per_page < 1:
        raise StravaValidationError(f"per_page must be a positive integer, got {per_page!r}")
    return _pages(fetch_page, per_page)


def _pages(fetch_page: PageFetcher, per_page: int) -> Iterator[T]:
    page = 1
    while True:
        items = fetch_page(page, per_page)
        if not items:
            return
        yield from items
        if len(items) < per_page:
            return
        page += 1


def collect_all(fetch_page: PageFetcher, per_page: int) -> List[T]:
    """
    Fetch every page and return all items in fetch order.

    Equivalent to ``list(iterate_pages(fetch_page, per_page))``.
    """
    return list(iterate_pages(fetch_page, per_page))


__all__ = ["PageFetcher", "iterate_pages", "collect_all"]
