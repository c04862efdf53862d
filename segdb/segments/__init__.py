# ==============================================
# TOPIC 2: SEGMENTS
# ==============================================
#
# In-memory model of the segmentation output that the
# persistence layer reads and writes.
#
# Modules:
# --------
# - features.py         → Feature, Features and the merge policy
# - segment.py          → Point, Segment and the invalid id sentinel
# - segmented_cloud.py  → Ordered collection of valid segments keyed by id
#
# ==============================================

from .features import Feature, Features, FeatureMergePolicy
from .segment import INVALID_ID, Point, Segment
from .segmented_cloud import SegmentedCloud

__all__ = [
    "Feature",
    "Features",
    "FeatureMergePolicy",
    "INVALID_ID",
    "Point",
    "Segment",
    "SegmentedCloud",
]
