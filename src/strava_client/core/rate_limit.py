# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Rate-limit snapshot parsed from Strava response headers.

Strava reports two windows (15-minute and daily) as comma-separated pairs::

    X-RateLimit-Limit: 100,1000
    X-RateLimit-Usage: 50,200
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from ._error_codes import HEADER_RATE_LIMIT_LIMIT, HEADER_RATE_LIMIT_USAGE


@dataclass(frozen=True)
class RateLimitWindow:
    """
    Usage and limit for one rate-limit window.

    :param usage: Requests consumed in the window.
    :type usage: float
    :param limit: Requests allowed in the window.
    :type limit: float
    """

    usage: float
    limit: float


@dataclass(frozen=True)
class RateLimitInfo:
    """
    Most recent rate-limit state reported by the API.

    :param short_term: 15-minute window.
    :type short_term: RateLimitWindow
    :param long_term: Daily window.
    :type long_term: RateLimitWindow
    """

    short_term: RateLimitWindow
    long_term: RateLimitWindow


def _parse_pair(value: Optional[str]) -> Optional[Tuple[float, float]]:
    if not value:
        return None
    parts = value.split(",")
    if len(parts) != 2:
        return None
    try:
        first, second = float(parts[0].strip()), float(parts[1].strip())
    except ValueError:
        return None
    if not (math.isfinite(first) and math.isfinite(second)):
        return None
    return _as_number(first), _as_number(second)


def _as_number(value: float) -> float:
    return int(value) if value.is_integer() else value


def parse_rate_limit_headers(headers: Mapping[str, str]) -> Optional[RateLimitInfo]:
    """
    Build a :class:`RateLimitInfo` from response headers.

    Both headers must be present and each must hold exactly two numbers;
    otherwise ``None`` is returned and no partial snapshot is produced.

    :param headers: Response headers (matched case-insensitively).
    :return: The parsed snapshot or ``None``.
    """
    lowered = {str(k).lower(): v for k, v in (headers or {}).items()}
    limits = _parse_pair(lowered.get(HEADER_RATE_LIMIT_LIMIT))
    usages = _parse_pair(lowered.get(HEADER_RATE_LIMIT_USAGE))
    if limits is None or usages is None:
        return None
    return RateLimitInfo(
        short_term=RateLimitWindow(usage=usages[0], limit=limits[0]),
        long_term=RateLimitWindow(usage=usages[1], limit=limits[1]),
    )


__all__ = ["RateLimitWindow", "RateLimitInfo", "parse_rate_limit_headers"]
