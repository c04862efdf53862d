# ==============================================
# SegmentedCloud
# ==============================================
#
# PURPOSE:
#   The collection of valid segments produced by one segmentation
#   run. The codec reads it on export and fills it on import.
#
# CLASS: SegmentedCloud
# ---------------------
#   Stateful — keeps segments in insertion order plus an
#   id → position index.
#
#   Methods:
#   --------
#   - get_number_of_valid_segments() -> int
#   - get_valid_segment_by_index(index: int) -> Segment
#   - find_valid_segment_by_id(segment_id: int) -> Segment | None
#   - add_valid_segment(segment: Segment) -> bool
#       Rejects invalid segments and duplicate ids.
#   - segment_ids() -> list[int]
#   - clear() -> None
#
# ==============================================

import logging
from typing import Dict, Iterator, List, Optional

from .segment import Segment

logger = logging.getLogger(__name__)


class SegmentedCloud:
    """Ordered collection of valid segments, unique by id."""

    def __init__(self):
        self._segments: List[Segment] = []
        self._positions: Dict[int, int] = {}

    def get_number_of_valid_segments(self) -> int:
        return len(self._segments)

    def get_valid_segment_by_index(self, index: int) -> Segment:
        return self._segments[index]

    def find_valid_segment_by_id(self, segment_id: int) -> Optional[Segment]:
        """
        Look up a segment by id.

        Returns:
            The stored segment (mutable, not a copy), or None.
        """
        position = self._positions.get(segment_id)
        if position is None:
            return None
        return self._segments[position]

    def add_valid_segment(self, segment: Segment) -> bool:
        """
        Add a segment to the collection.

        Args:
            segment: Segment with a valid id and at least one point

        Returns:
            True if added, False if the segment is invalid or its id
            is already present.
        """
        if not segment.is_valid():
            logger.warning(f"Refusing to add invalid segment (id {segment.segment_id}, "
                           f"{len(segment.point_cloud)} points).")
            return False
        if segment.segment_id in self._positions:
            logger.warning(f"A segment with id {segment.segment_id} already exists.")
            return False
        self._positions[segment.segment_id] = len(self._segments)
        self._segments.append(segment)
        return True

    def segment_ids(self) -> List[int]:
        return [segment.segment_id for segment in self._segments]

    def clear(self) -> None:
        self._segments.clear()
        self._positions.clear()

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __contains__(self, segment_id: int) -> bool:
        return segment_id in self._positions
