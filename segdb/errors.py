# ==============================================
# Errors
# ==============================================
#
# Normal failures (missing files, duplicate ids, unknown ids) are
# reported through return values and log records, never exceptions.
# The classes below cover the two remaining cases:
#
#   - programming errors  → IdentityMatchError (a ValueError)
#   - fatal import faults → FeatureMergeAbortError
#
# ==============================================


class SegDBError(Exception):
    """Base class for all segdb errors."""


class IdentityMatchError(ValueError):
    """Raised when a match between an id and itself is asserted."""

    def __init__(self, segment_id: int):
        self.segment_id = segment_id
        super().__init__(
            f"No point in adding match between identical ids ({segment_id})."
        )


class FeatureMergeAbortError(SegDBError):
    """
    Raised when features are imported into a segment that already has
    features and the merge policy is ABORT.

    The whole features import stops at the offending line. Segments
    updated before that line keep their new features.
    """

    def __init__(self, segment_id: int, filename: str = ""):
        self.segment_id = segment_id
        self.filename = filename
        super().__init__(
            f"Segment {segment_id} into which features are being imported "
            f"already has features, and tolerance has not been set. Aborting."
        )
