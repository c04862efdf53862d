# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules.
#
# CLASSES:
# --------
# - DatabaseConfig (dataclass)
#     base_dir: str             (default "/tmp/segmatch/")
#     segments_filename: str    (default "segments_database.csv")
#     features_filename: str    (default "features_database.csv")
#     matches_filename: str     (default "matches_database.csv")
#     centroids_filename: str   (default "features_and_centroids.csv")
#
# - SegDBConfig (dataclass)
#     database: DatabaseConfig
#     feature_merge_policy: FeatureMergePolicy  (default ABORT)
#     log_level: str                            (default "INFO")
#
# FUNCTIONS:
# ----------
# - get_config() -> SegDBConfig
#     Load .env using python-dotenv, construct SegDBConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Forget the singleton so the next get_config() reloads.
#
# USAGE:
# ------
#   from segdb.config import get_config
#   config = get_config()
#   print(config.database.base_dir)
#   print(config.feature_merge_policy)
#
# ==============================================

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from segdb.segments.features import FeatureMergePolicy


@dataclass
class DatabaseConfig:
    """Location of the three session files (plus the centroid export)."""
    base_dir: str = "/tmp/segmatch/"
    segments_filename: str = "segments_database.csv"
    features_filename: str = "features_database.csv"
    matches_filename: str = "matches_database.csv"
    centroids_filename: str = "features_and_centroids.csv"

    def path_for(self, filename: str) -> str:
        """Join a file name onto the base directory."""
        return os.path.join(self.base_dir, filename)


@dataclass
class SegDBConfig:
    """Main application configuration."""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    # What to do when imported features hit a segment that already has some
    feature_merge_policy: FeatureMergePolicy = FeatureMergePolicy.ABORT
    log_level: str = "INFO"


# Singleton instance
_config_instance: Optional[SegDBConfig] = None


def get_config() -> SegDBConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        SegDBConfig: Application configuration

    Raises:
        ValueError: If SEGDB_FEATURE_MERGE_POLICY names an unknown policy.
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    defaults = DatabaseConfig()
    database_config = DatabaseConfig(
        base_dir=os.getenv("SEGDB_BASE_DIR", defaults.base_dir),
        segments_filename=os.getenv("SEGDB_SEGMENTS_FILENAME", defaults.segments_filename),
        features_filename=os.getenv("SEGDB_FEATURES_FILENAME", defaults.features_filename),
        matches_filename=os.getenv("SEGDB_MATCHES_FILENAME", defaults.matches_filename),
        centroids_filename=os.getenv("SEGDB_CENTROIDS_FILENAME", defaults.centroids_filename),
    )

    _config_instance = SegDBConfig(
        database=database_config,
        feature_merge_policy=FeatureMergePolicy.from_name(
            os.getenv("SEGDB_FEATURE_MERGE_POLICY", FeatureMergePolicy.ABORT.value)
        ),
        log_level=os.getenv("SEGDB_LOG_LEVEL", "INFO"),
    )

    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration (used by tests)."""
    global _config_instance
    _config_instance = None
