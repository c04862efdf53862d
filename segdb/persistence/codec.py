# ==============================================
# Text Codec
# ==============================================
#
# PURPOSE:
#   Read and write the three session files. Each file maps to one
#   in-memory entity and is always read or written whole.
#
# FILE FORMATS:
# -------------
#   segments  → one line per point:    "<id> <x> <y> <z>"
#               Lines of one segment are contiguous. A segment ends
#               where the id changes (no blank-line separators).
#   features  → one line per segment:  "<id> <name> <value> <name> <value> ... "
#   matches   → one line per group:    "<id> <id> ... "
#
#   Coordinates are integers. Feature values are written with
#   repr(float), which is locale-independent and round-trips exactly.
#
# RESULTS:
# --------
#   Every function returns a CodecResult, truthy iff the operation
#   succeeded. Per-record problems (duplicate ids, unknown ids,
#   malformed lines) are logged and counted in `skipped` but do not
#   make the operation fail. The one fatal case is importing
#   features into a segment that already has features under
#   FeatureMergePolicy.ABORT, which raises FeatureMergeAbortError.
#
# FUNCTIONS:
# ----------
# - export_segments(filename, segmented_cloud) -> CodecResult
# - export_features(filename, segmented_cloud) -> CodecResult
# - export_features_and_centroids(filename, segmented_cloud) -> CodecResult
# - export_matches(filename, id_matches) -> CodecResult
# - import_segments(filename, segmented_cloud) -> CodecResult
# - import_features(filename, segmented_cloud, policy) -> CodecResult
# - import_matches(filename, id_matches) -> CodecResult
#
# ==============================================

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from segdb.errors import FeatureMergeAbortError
from segdb.matching.id_matches import IdMatches
from segdb.segments.features import Feature, FeatureMergePolicy, Features
from segdb.segments.segment import INVALID_ID, Point, Segment
from segdb.segments.segmented_cloud import SegmentedCloud

from .filesystem import ensure_directory_exists_for_filename

logger = logging.getLogger(__name__)


@dataclass
class CodecResult:
    filename: str
    success: bool = True
    records: int = 0  # segments / feature lines / groups written or imported
    skipped: int = 0  # records rejected with a diagnostic
    errors: List[str] = field(default_factory=list)

    def fail(self, message: str) -> "CodecResult":
        self.success = False
        self.errors.append(message)
        return self

    def skip(self, message: str) -> None:
        self.skipped += 1
        self.errors.append(message)

    def __bool__(self) -> bool:
        return self.success


def _format_value(value: float) -> str:
    return repr(float(value))


def _parse_id(token: str) -> int:
    segment_id = int(token)
    if segment_id == INVALID_ID:
        raise ValueError(f"segment id {INVALID_ID} is reserved")
    return segment_id


def _open_failure(result: CodecResult, mode: str, what: str, error: Exception) -> CodecResult:
    message = f"Could not open file {result.filename} for {mode} {what}: {error}"
    logger.error(message)
    return result.fail(message)


def _decode_failure(result: CodecResult, what: str, error: UnicodeDecodeError) -> CodecResult:
    message = f"Could not decode {what} file {result.filename} as UTF-8: {error}"
    logger.error(message)
    return result.fail(message)


# ======================================
# Export
# ======================================
def export_segments(filename: str, segmented_cloud: SegmentedCloud) -> CodecResult:
    """
    Write every point of every valid segment, in collection order.

    Args:
        filename: Absolute path of the segments file (truncated)
        segmented_cloud: Segments to write

    Returns:
        CodecResult with records = number of segments written.
    """
    ensure_directory_exists_for_filename(filename)
    result = CodecResult(filename)
    count = segmented_cloud.get_number_of_valid_segments()
    try:
        with open(filename, "w", encoding="utf-8", newline="\n") as output_file:
            for index in range(count):
                segment = segmented_cloud.get_valid_segment_by_index(index)
                for point in segment.point_cloud:
                    output_file.write(f"{segment.segment_id} {point.x} {point.y} {point.z}\n")
    except OSError as e:
        return _open_failure(result, "writing", "segments", e)

    result.records = count
    logger.info(f"{count} segments written to {filename}")
    return result


def export_features(filename: str, segmented_cloud: SegmentedCloud) -> CodecResult:
    """Write one features line per valid segment, in collection order."""
    ensure_directory_exists_for_filename(filename)
    result = CodecResult(filename)
    count = segmented_cloud.get_number_of_valid_segments()
    try:
        with open(filename, "w", encoding="utf-8", newline="\n") as output_file:
            for index in range(count):
                segment = segmented_cloud.get_valid_segment_by_index(index)
                pairs = "".join(
                    f"{feature.name} {_format_value(feature.value)} "
                    for feature in segment.features
                )
                output_file.write(f"{segment.segment_id} {pairs}\n")
    except OSError as e:
        return _open_failure(result, "writing", "features", e)

    result.records = count
    logger.info(f"Features written to {filename}")
    return result


def export_features_and_centroids(filename: str, segmented_cloud: SegmentedCloud) -> CodecResult:
    """
    Write "cx, cy, cz, v1, v2, ..." per valid segment.

    This file carries no ids and no feature names. It is meant for
    external training tools, never read back.
    """
    ensure_directory_exists_for_filename(filename)
    result = CodecResult(filename)
    count = segmented_cloud.get_number_of_valid_segments()
    try:
        with open(filename, "w", encoding="utf-8", newline="\n") as output_file:
            for index in range(count):
                segment = segmented_cloud.get_valid_segment_by_index(index)
                columns = list(segment.centroid) + segment.features.values()
                output_file.write(", ".join(_format_value(v) for v in columns) + "\n")
    except OSError as e:
        return _open_failure(result, "writing", "features", e)

    result.records = count
    logger.info(f"Features written to {filename}")
    return result


def export_matches(filename: str, id_matches: IdMatches) -> CodecResult:
    """Write the groups of id_matches, one line per group."""
    ensure_directory_exists_for_filename(filename)
    result = CodecResult(filename)
    try:
        with open(filename, "w", encoding="utf-8", newline="\n") as output_file:
            output_file.write(id_matches.as_string())
    except OSError as e:
        return _open_failure(result, "writing", "matches", e)

    result.records = id_matches.size()
    logger.info(f"Matches written to {filename}")
    return result


# ======================================
# Import
# ======================================
def _parse_point_line(tokens: List[str]) -> Tuple[int, Point]:
    if len(tokens) != 4:
        raise ValueError(f"expected 4 fields, got {len(tokens)}")
    return _parse_id(tokens[0]), Point(int(tokens[1]), int(tokens[2]), int(tokens[3]))


def _store_segment(segment: Segment, segmented_cloud: SegmentedCloud, result: CodecResult) -> None:
    if segmented_cloud.find_valid_segment_by_id(segment.segment_id) is not None:
        message = (f"Did not import segment of id {segment.segment_id}. "
                   f"A segment with that id already exists.")
        logger.warning(message)
        result.skip(message)
        return
    if segmented_cloud.add_valid_segment(segment):
        result.records += 1
    else:
        result.skip(f"Segment of id {segment.segment_id} was rejected by the cloud.")


def import_segments(filename: str, segmented_cloud: SegmentedCloud) -> CodecResult:
    """
    Read segments and add them to segmented_cloud.

    Segments whose id already exists in the cloud are skipped with a
    warning; the existing segment is left untouched.

    Returns:
        CodecResult with records = number of segments added. Fails if the
        file cannot be opened or is not valid UTF-8; segments read
        before the undecodable part stay in the cloud.
    """
    result = CodecResult(filename)
    try:
        input_file = open(filename, "r", encoding="utf-8")
    except OSError as e:
        return _open_failure(result, "importing", "segments", e)

    segment = Segment()
    try:
        with input_file:
            for line_number, line in enumerate(input_file, start=1):
                tokens = line.split()
                if not tokens:
                    continue
                try:
                    line_id, point = _parse_point_line(tokens)
                except ValueError as e:
                    message = f"{filename}:{line_number}: skipping malformed segment line ({e})"
                    logger.error(message)
                    result.skip(message)
                    continue

                # Id changed: the accumulated segment is complete
                if line_id != segment.segment_id and not segment.empty():
                    _store_segment(segment, segmented_cloud, result)
                    segment = Segment()
                segment.segment_id = line_id
                segment.point_cloud.append(point)
    except UnicodeDecodeError as e:
        return _decode_failure(result, "segments", e)

    if segment.has_valid_id():
        _store_segment(segment, segmented_cloud, result)

    logger.info(f"Imported {result.records} segments from file {filename}")
    return result


def _parse_features(tokens: List[str]) -> Features:
    if len(tokens) % 2:
        raise ValueError(f"feature '{tokens[-1]}' has no value")
    features = Features()
    for name, value in zip(tokens[0::2], tokens[1::2]):
        features.push_back(Feature(name, float(value)))
    return features


def import_features(
    filename: str,
    segmented_cloud: SegmentedCloud,
    policy: FeatureMergePolicy
) -> CodecResult:
    """
    Read features and attach them to the segments of segmented_cloud.

    Args:
        filename: Features file
        segmented_cloud: Already populated cloud; lines for unknown
            ids are skipped
        policy: What to do when a segment already has features

    Returns:
        CodecResult with records = number of segments that received
        features.

    Raises:
        FeatureMergeAbortError: If policy is ABORT and a segment
            already has features. Lines before it stay imported.
    """
    result = CodecResult(filename)
    try:
        input_file = open(filename, "r", encoding="utf-8")
    except OSError as e:
        return _open_failure(result, "importing", "features", e)

    try:
        with input_file:
            for line_number, line in enumerate(input_file, start=1):
                tokens = line.split()
                if not tokens:
                    continue
                try:
                    segment_id = _parse_id(tokens[0])
                except ValueError as e:
                    message = f"{filename}:{line_number}: could not read id ({e})"
                    logger.error(message)
                    result.skip(message)
                    continue

                segment = segmented_cloud.find_valid_segment_by_id(segment_id)
                if segment is None:
                    message = (f"Could not find segment of id {segment_id} "
                               f"when importing features for that id.")
                    logger.error(message)
                    result.skip(message)
                    continue

                try:
                    features = _parse_features(tokens[1:])
                except ValueError as e:
                    message = f"{filename}:{line_number}: skipping malformed features of segment {segment_id} ({e})"
                    logger.error(message)
                    result.skip(message)
                    continue

                if segment.features.empty():
                    segment.features = features
                elif policy is FeatureMergePolicy.ABORT:
                    error = FeatureMergeAbortError(segment_id, filename)
                    logger.critical(str(error))
                    raise error
                else:
                    segment.features.merge(features, policy)
                result.records += 1
    except UnicodeDecodeError as e:
        return _decode_failure(result, "features", e)

    logger.info(f"Imported features for {result.records} segments from file {filename}")
    return result


def import_matches(filename: str, id_matches: IdMatches) -> CodecResult:
    """
    Load match groups into an empty IdMatches.

    Groups that satisfy the store's invariants (disjoint, at least two
    distinct ids) are adopted as written. Otherwise the store is rebuilt
    by replaying add_match over each group, which merges overlapping
    groups and drops singletons.

    Returns:
        CodecResult with records = number of groups loaded. Fails
        without touching id_matches if it is not empty, the file cannot
        be opened or decoded as UTF-8, or a token is not an integer.
    """
    result = CodecResult(filename)
    if not id_matches.empty():
        message = "Should not import matches into non-empty IdMatches object."
        logger.error(message)
        return result.fail(message)

    try:
        input_file = open(filename, "r", encoding="utf-8")
    except OSError as e:
        return _open_failure(result, "importing", "matches", e)

    groups: List[List[int]] = []
    try:
        with input_file:
            for line_number, line in enumerate(input_file, start=1):
                tokens = line.split()
                if not tokens:
                    continue
                try:
                    groups.append([int(token) for token in tokens])
                except ValueError as e:
                    message = f"{filename}:{line_number}: invalid id in matches ({e})"
                    logger.error(message)
                    return result.fail(message)
    except UnicodeDecodeError as e:
        return _decode_failure(result, "matches", e)

    problems = IdMatches.check_groups(groups)
    if problems:
        logger.warning(f"Matches in {filename} are inconsistent ({'; '.join(problems)}). "
                       f"Rebuilding groups from pairwise matches.")
        rebuilt = IdMatches()
        for group in groups:
            members = list(dict.fromkeys(group))
            for other in members[1:]:
                rebuilt.add_match(members[0], other)
        groups = rebuilt.groups()
        result.errors.extend(problems)

    id_matches.set_groups(groups)
    result.records = id_matches.size()
    logger.info(f"Imported {result.records} matches from file {filename}")
    return result
