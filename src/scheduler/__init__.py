from __future__ import annotations

from .path import (
    build_optimal_path,
    dedupe,
    matches_direction,
    merge_requests,
    partition_requests,
    sort_inside_requests,
    sort_queue,
)
from .request import Direction, Request

__all__ = [
    "Direction",
    "Request",
    "build_optimal_path",
    "dedupe",
    "matches_direction",
    "merge_requests",
    "partition_requests",
    "sort_inside_requests",
    "sort_queue",
]
