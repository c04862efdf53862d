import logging
from pathlib import Path
from typing import Optional, Tuple

from segdb.config import SegDBConfig, get_config
from segdb.matching.id_matches import IdMatches
from segdb.segments.segmented_cloud import SegmentedCloud

from .codec import (
    export_features,
    export_features_and_centroids,
    export_matches,
    export_segments,
    import_features,
    import_matches,
    import_segments,
)

logger = logging.getLogger(__name__)


# ==============================================
# SessionStore
# ==============================================
#
# PURPOSE:
#   Save and load one complete session (segments, their features,
#   and the id matches) as three files under a base directory.
#
# SUCCESS RULES:
#   Each file succeeds or fails on its own. A session save/load
#   succeeds only if all three do, and stops at the first failure.
#   Nothing is rolled back: after a failed load, whatever was read
#   stays in the returned cloud / matches for inspection.
#
# CLASS: SessionStore
# -------------------
#   Constructor:
#   ------------
#   - __init__(config: SegDBConfig | None = None)
#
#   Methods:
#   --------
#   - save_session(segmented_cloud, id_matches) -> bool
#   - load_session(segmented_cloud=None, id_matches=None)
#         -> (SegmentedCloud, IdMatches, bool)
#   - export_centroids(segmented_cloud, filename=None) -> bool
#   - exists() -> bool
#   - clear() -> None
#
class SessionStore:
    """
    Handles persistence of a segmentation/matching session.

    Files created (default names):
    - <base_dir>/segments_database.csv → Points per segment
    - <base_dir>/features_database.csv → Features per segment
    - <base_dir>/matches_database.csv  → Groups of matching ids
    """

    def __init__(self, config: Optional[SegDBConfig] = None):
        """
        Args:
            config: Where and how to store the session. If None, loads
                from environment.
        """
        self._config = config or get_config()
        database = self._config.database

        self.base_dir = database.base_dir
        self.segments_file = database.path_for(database.segments_filename)
        self.features_file = database.path_for(database.features_filename)
        self.matches_file = database.path_for(database.matches_filename)
        self.centroids_file = database.path_for(database.centroids_filename)
        self.feature_merge_policy = self._config.feature_merge_policy

    def save_session(self, segmented_cloud: SegmentedCloud, id_matches: IdMatches) -> bool:
        """
        Write segments, features and matches, overwriting older files.

        Returns:
            True if all three files were written.
        """
        saved = bool(
            export_segments(self.segments_file, segmented_cloud)
            and export_features(self.features_file, segmented_cloud)
            and export_matches(self.matches_file, id_matches)
        )
        if saved:
            logger.info(f"Session saved to {self.base_dir}")
        else:
            logger.error(f"Failed to save session to {self.base_dir}")
        return saved

    def load_session(
        self,
        segmented_cloud: Optional[SegmentedCloud] = None,
        id_matches: Optional[IdMatches] = None
    ) -> Tuple[SegmentedCloud, IdMatches, bool]:
        """
        Read segments, then features into those segments, then matches.

        Args:
            segmented_cloud: Cloud to load into (a new one if None)
            id_matches: Empty store to load into (a new one if None)

        Returns:
            Tuple of (segmented_cloud, id_matches, success)

        Raises:
            FeatureMergeAbortError: If the merge policy is ABORT and a
                segment receives features twice.
        """
        if segmented_cloud is None:
            segmented_cloud = SegmentedCloud()
        if id_matches is None:
            id_matches = IdMatches()

        loaded = bool(
            import_segments(self.segments_file, segmented_cloud)
            and import_features(self.features_file, segmented_cloud, self.feature_merge_policy)
            and import_matches(self.matches_file, id_matches)
        )
        if loaded:
            logger.info(f"Session loaded from {self.base_dir}: "
                        f"{len(segmented_cloud)} segments, {len(id_matches)} match groups")
        else:
            logger.error(f"Failed to load session from {self.base_dir}")
        return segmented_cloud, id_matches, loaded

    def export_centroids(self, segmented_cloud: SegmentedCloud, filename: Optional[str] = None) -> bool:
        """Write the centroid/feature-value file (default: under base_dir)."""
        return bool(export_features_and_centroids(filename or self.centroids_file, segmented_cloud))

    def _session_files(self):
        return [Path(self.segments_file), Path(self.features_file), Path(self.matches_file)]

    def exists(self) -> bool:
        """
        Check if any session file exists.

        Returns:
            True if a previous session was saved here
        """
        return any(path.exists() for path in self._session_files())

    def clear(self) -> None:
        """Delete the session files (for testing or reset)."""
        for path in self._session_files():
            if path.exists():
                path.unlink()
                logger.info(f"Deleted {path}")
