# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Internal pandas helpers"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Union

import pandas as pd


def records_to_dataframe(records: List[Dict[str, Any]]) -> pd.DataFrame:
    """Convert a list of JSON objects to a DataFrame, flattening nested objects.

    Nested keys become dotted column names (``athlete.id``, ``map.summary_polyline``).

    :param records: Items returned by a list endpoint.
    """
    if not records:
        return pd.DataFrame()
    return pd.json_normalize(records)


def _streams_by_type(streams: Union[Mapping[str, Any], List[Dict[str, Any]]]) -> Dict[str, List[Any]]:
    # key_by_type=true returns {"time": {"data": [...]}}; otherwise a list of {"type": ..., "data": [...]}
    if isinstance(streams, Mapping):
        return {name: list((s or {}).get("data") or []) for name, s in streams.items()}
    return {s["type"]: list(s.get("data") or []) for s in streams if "type" in s}


def streams_to_dataframe(streams: Union[Mapping[str, Any], List[Dict[str, Any]]]) -> pd.DataFrame:
    """Convert an activity/segment/route streams payload to a DataFrame.

    One column per stream type, one row per sample. The ``latlng`` stream is
    split into ``lat`` and ``lng`` columns. Streams of unequal length are
    padded with missing values.

    :param streams: Streams payload, keyed by type or as a list.
    """
    columns: Dict[str, pd.Series] = {}
    for name, data in _streams_by_type(streams).items():
        if name == "latlng":
            columns["lat"] = pd.Series([p[0] if p else None for p in data], dtype="float64")
            columns["lng"] = pd.Series([p[1] if p else None for p in data], dtype="float64")
        else:
            columns[name] = pd.Series(data)
    if not columns:
        return pd.DataFrame()
    return pd.DataFrame(columns)
