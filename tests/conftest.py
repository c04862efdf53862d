# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - clean_environment (autouse): no SEGDB_* variables, no cached
#   config, no leftover handlers on the "segdb" logger
# - config:          SegDBConfig rooted in tmp_path
# - session_store:   SessionStore using that config
# - segmented_cloud: two segments (7 and 9) with features
# - id_matches:      groups [[1, 2], [3, 4, 5]]
# - make_segment:    factory for segments with points and features
# - write_file:      helper writing text files under tmp_path
#
# ==============================================

import logging
import os

import pytest

from segdb.config import DatabaseConfig, SegDBConfig, reset_config
from segdb.matching import IdMatches
from segdb.persistence import SessionStore
from segdb.segments import FeatureMergePolicy, Segment, SegmentedCloud


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in list(os.environ):
        if name.startswith("SEGDB_"):
            monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()
    package_logger = logging.getLogger("segdb")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


def _make_segment(segment_id, points, features=None):
    segment = Segment(segment_id=segment_id)
    for x, y, z in points:
        segment.add_point(x, y, z)
    for name, value in features or []:
        segment.features.add(name, value)
    return segment


@pytest.fixture
def make_segment():
    """Factory: make_segment(id, [(x, y, z), ...], [(name, value), ...])."""
    return _make_segment


@pytest.fixture
def config(tmp_path):
    return SegDBConfig(
        database=DatabaseConfig(base_dir=str(tmp_path / "segmatch")),
        feature_merge_policy=FeatureMergePolicy.ABORT,
    )


@pytest.fixture
def session_store(config):
    return SessionStore(config)


@pytest.fixture
def segmented_cloud():
    cloud = SegmentedCloud()
    cloud.add_valid_segment(_make_segment(7, [(0, 0, 0), (1, 0, 0)], [("a", 1.0), ("b", 2.5)]))
    cloud.add_valid_segment(_make_segment(9, [(2, 2, 2)], [("a", -0.125)]))
    return cloud


@pytest.fixture
def id_matches():
    return IdMatches([[1, 2], [3, 4, 5]])


@pytest.fixture
def write_file(tmp_path):
    def _write(name, text):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write
