# ==============================================
# Segment
# ==============================================
#
# PURPOSE:
#   One candidate object extracted from a point cloud: an integer
#   id, the 3-D points belonging to it, and its features.
#
# CLASSES:
# --------
# - Point (NamedTuple)      → integer x, y, z
# - Segment (dataclass)
#     segment_id: int        → INVALID_ID until assigned
#     point_cloud: list[Point]
#     features: Features
#
#   A segment is "valid" once it has a non-sentinel id and at
#   least one point. Only valid segments enter a SegmentedCloud.
#
# ==============================================

from dataclasses import dataclass, field
from typing import List, NamedTuple, Tuple

from .features import Features

# Sentinel for "no id / uninitialized"
INVALID_ID = -1


class Point(NamedTuple):
    x: int
    y: int
    z: int


@dataclass
class Segment:
    """A segment id with its points and features."""
    segment_id: int = INVALID_ID
    point_cloud: List[Point] = field(default_factory=list)
    features: Features = field(default_factory=Features)

    def has_valid_id(self) -> bool:
        return self.segment_id != INVALID_ID

    def empty(self) -> bool:
        """True when the segment holds no points."""
        return not self.point_cloud

    def is_valid(self) -> bool:
        return self.has_valid_id() and not self.empty()

    def add_point(self, x: int, y: int, z: int) -> None:
        self.point_cloud.append(Point(int(x), int(y), int(z)))

    @property
    def centroid(self) -> Tuple[float, float, float]:
        """
        Arithmetic mean of the segment's points.

        Raises:
            ValueError: If the segment has no points.
        """
        if not self.point_cloud:
            raise ValueError(f"Segment {self.segment_id} has no points")
        count = len(self.point_cloud)
        return (
            sum(p.x for p in self.point_cloud) / count,
            sum(p.y for p in self.point_cloud) / count,
            sum(p.z for p in self.point_cloud) / count,
        )

    def __len__(self) -> int:
        return len(self.point_cloud)
