"""Camera groups for the live view: runtime groups and the visible camera order."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Protocol, Sequence

ALL_CAMERAS = "All Cameras"


class _GroupInfo(Protocol):
    id: int
    name: str


@dataclass
class CameraGroup:
    """A named group holding indexes into the camera list."""

    id: int = -1
    name: str = ""
    camera_indexes: list[int] = field(default_factory=list)


def build_groups(
    groups: Iterable[_GroupInfo],
    camera_ids_for_group: Callable[[int], Iterable[int]],
    camera_id_to_index: Mapping[int, int],
) -> list[CameraGroup]:
    """Turn stored groups into runtime groups, dropping cameras that are not loaded."""
    result = []
    for info in groups:
        indexes = [
            idx
            for cam_id in camera_ids_for_group(info.id)
            if (idx := camera_id_to_index.get(cam_id, -1)) >= 0
        ]
        result.append(CameraGroup(info.id, info.name, indexes))
    return result


def fallback_group(camera_count: int) -> CameraGroup:
    """The in-memory group with every camera, used when no store is available."""
    return CameraGroup(-1, ALL_CAMERAS, list(range(camera_count)))


def clamp_group_index(index: int, group_count: int) -> int:
    """A valid group index: out of range falls back to 0, no groups gives -1."""
    if group_count <= 0:
        return -1
    return index if 0 <= index < group_count else 0


def visible_order_for(
    groups: Sequence[CameraGroup], current_index: int, camera_count: int
) -> list[int]:
    """Camera indexes shown for the current group; all cameras if none is selected."""
    if 0 <= current_index < len(groups):
        return list(groups[current_index].camera_indexes)
    return list(range(camera_count))