# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Gear operations namespace."""

from __future__ import annotations

from typing import Any, Dict, Optional, TYPE_CHECKING

from ..core._transport import RequestConfig
from ..core.cancellation import CancellationToken

if TYPE_CHECKING:
    from ..client import StravaClient


__all__ = ["GearOperations"]


class GearOperations:
    """Namespace for gear endpoints. Accessed via ``client.gear``."""

    def __init__(self, client: StravaClient) -> None:
        self._client = client

    def get(self, gear_id: str, *, cancellation: Optional[CancellationToken] = None) -> Dict[str, Any]:
        """Return a piece of gear.

        :param gear_id: Gear ID (``"b12345"`` for bikes, ``"g12345"`` for shoes).
        :type gear_id: :class:`str`
        """
        return self._client._execute(RequestConfig("GET", f"/gear/{gear_id}", cancellation=cancellation))
