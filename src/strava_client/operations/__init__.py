# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Operation namespace classes for the Strava client.

This module contains the operation namespace classes that organize
endpoints under intuitive namespaces:
- AthleteOperations: the authenticated athlete, stats and zones
- ActivityOperations: activities, streams, laps, comments and kudos
- ClubOperations: clubs, members and club activities
- GearOperations: gear lookup
- RouteOperations: routes and route exports
- SegmentOperations: segments, segment efforts and streams
- UploadOperations: activity file uploads
- WebhookOperations: push subscriptions and webhook helpers
"""

__all__ = []
