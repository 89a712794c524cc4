# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Utility helpers for the Strava client."""

__all__ = []
