# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Inspect a stored session from the command line.
#
# COMMANDS:
# ---------
# 1. Show what the session contains:
#    python -m segdb.cli summary
#
# 2. Show all match groups, or the matches of one segment:
#    python -m segdb.cli matches
#    python -m segdb.cli matches 42
#
# 3. Write the centroid/feature-value file:
#    python -m segdb.cli centroids /tmp/segmatch/centroids.csv
#
# OPTIONS:
# --------
#   --base-dir DIR     Session directory (default from SEGDB_BASE_DIR)
#   --policy NAME      Feature merge policy: concatenate, replace, abort
#   -v / --verbose     Debug logging
#
# EXIT CODES:
# -----------
#   0 success, 1 session could not be loaded / written,
#   2 features import aborted by the merge policy
#
# ==============================================

import argparse
import dataclasses
import sys
from typing import List, Optional

from segdb.config import SegDBConfig, get_config
from segdb.errors import FeatureMergeAbortError
from segdb.logging_config import setup_logging
from segdb.persistence.session import SessionStore
from segdb.segments.features import FeatureMergePolicy

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ABORTED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="segdb",
        description="Inspect a stored segmentation/matching session."
    )
    parser.add_argument("--base-dir", help="Directory holding the session files")
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in FeatureMergePolicy],
        help="What to do when a segment receives features twice"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("summary", help="Show counts of segments, features and matches")

    matches_parser = subparsers.add_parser("matches", help="Show match groups")
    matches_parser.add_argument("segment_id", nargs="?", type=int,
                                help="Only show the matches of this segment")

    centroids_parser = subparsers.add_parser("centroids", help="Write centroids and feature values")
    centroids_parser.add_argument("output", help="Absolute path of the file to write")
    return parser


def _resolve_config(args: argparse.Namespace) -> SegDBConfig:
    config = get_config()
    if args.base_dir:
        config = dataclasses.replace(
            config, database=dataclasses.replace(config.database, base_dir=args.base_dir)
        )
    if args.policy:
        config = dataclasses.replace(
            config, feature_merge_policy=FeatureMergePolicy.from_name(args.policy)
        )
    return config


def _summary(segmented_cloud, id_matches) -> None:
    points = sum(len(segment) for segment in segmented_cloud)
    featured = sum(1 for segment in segmented_cloud if not segment.features.empty())
    print(f"Segments:          {len(segmented_cloud)}")
    print(f"Points:            {points}")
    print(f"With features:     {featured}")
    print(f"Match groups:      {id_matches.size()}")
    print(f"Matched ids:       {id_matches.id_count()}")


def _matches(id_matches, segment_id: Optional[int]) -> None:
    if segment_id is None:
        sys.stdout.write(id_matches.as_string())
        return
    matches = id_matches.find_matches(segment_id)
    if matches is None:
        print(f"Segment {segment_id} has no matches")
    else:
        print(" ".join(str(match) for match in matches))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = _resolve_config(args)
        setup_logging("DEBUG" if args.verbose else config.log_level)
    except ValueError as e:
        print(f"✗ Invalid configuration: {e}", file=sys.stderr)
        return EXIT_FAILED

    store = SessionStore(config)
    try:
        segmented_cloud, id_matches, loaded = store.load_session()
    except FeatureMergeAbortError as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_ABORTED

    if not loaded:
        print(f"✗ Could not load session from {store.base_dir}", file=sys.stderr)
        return EXIT_FAILED

    if args.command == "summary":
        _summary(segmented_cloud, id_matches)
    elif args.command == "matches":
        _matches(id_matches, args.segment_id)
    elif args.command == "centroids":
        if not store.export_centroids(segmented_cloud, args.output):
            print(f"✗ Could not write {args.output}", file=sys.stderr)
            return EXIT_FAILED
        print(f"✓ Centroids of {len(segmented_cloud)} segments written to {args.output}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
