from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .request import Direction, Request


def dedupe(requests: Iterable[Request]) -> List[Request]:
    """Drop repeated requests, keeping the first occurrence of each."""

    seen = set()
    unique: List[Request] = []
    for request in requests:
        if request in seen:
            continue
        seen.add(request)
        unique.append(request)
    return unique


def partition_requests(requests: Iterable[Request]) -> Tuple[List[Request], List[Request]]:
    inside: List[Request] = []
    outside: List[Request] = []
    for request in requests:
        if request.is_inside:
            inside.append(request)
        else:
            outside.append(request)
    return inside, outside


def sort_inside_requests(start_floor: int, requests: Iterable[Request]) -> List[Request]:
    """Order cabin-panel calls as one sweep away from ``start_floor`` and back.

    Calls above the start floor are visited in ascending order, the rest in
    descending order. The larger of the two groups is served first; when they
    are the same size the downward group goes first.
    """

    going_up = sorted((r for r in requests if r.floor > start_floor), key=lambda r: r.floor)
    going_down = sorted((r for r in requests if r.floor <= start_floor), key=lambda r: -r.floor)
    if len(going_up) > len(going_down):
        return going_up + going_down
    return going_down + going_up


def matches_direction(moving_up: bool, request: Request) -> bool:
    return (moving_up and request.direction is Direction.UP) or (
        not moving_up and request.direction is Direction.DOWN
    )


def merge_requests(inside_requests: Iterable[Request], outside_requests: Iterable[Request]) -> List[Request]:
    """Splice hall calls into the cabin-call path.

    Each hall call goes into the first adjacent pair ``(current, next)`` whose
    floor span ``current.floor <= floor <= next.floor`` holds it and whose
    travel direction matches the call. Calls that fit nowhere go to the end.
    Earlier placements are never revisited.
    """

    merged: List[Request] = list(inside_requests)
    for outside in outside_requests:
        for index in range(len(merged) - 1):
            current, following = merged[index], merged[index + 1]
            moving_up = following.floor > current.floor
            in_range = current.floor <= outside.floor <= following.floor
            if in_range and matches_direction(moving_up, outside):
                merged.insert(index + 1, outside)
                break
        else:
            merged.append(outside)
    return merged


def build_optimal_path(start_floor: int, requests: Iterable[Request]) -> List[Request]:
    inside, outside = partition_requests(requests)
    return merge_requests(sort_inside_requests(start_floor, inside), outside)


def sort_queue(
    pending: Iterable[Request],
    active: Optional[Request],
    current_floor: int,
) -> List[Request]:
    """Rebuild the pending queue: dedupe, drop the active floor, re-path."""

    requests = dedupe(pending)
    if active is not None:
        requests = [r for r in requests if r.floor != active.floor]
    return build_optimal_path(current_floor, requests)
