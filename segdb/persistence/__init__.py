# ==============================================
# TOPIC 3: PERSISTENCE (Sessions across restarts)
# ==============================================
#
# This package saves and loads the segments, features and id
# matches of a session as line-oriented text files.
#
# Modules:
# --------
# - filesystem.py → Directory preconditions for the session files
# - codec.py      → Read/write the segments, features and matches files
# - session.py    → SessionStore: save/load a whole session
#
# ==============================================

from .codec import (
    CodecResult,
    export_features,
    export_features_and_centroids,
    export_matches,
    export_segments,
    import_features,
    import_matches,
    import_segments,
)
from .filesystem import ensure_directory_exists, ensure_directory_exists_for_filename
from .session import SessionStore

__all__ = [
    "CodecResult",
    "export_features",
    "export_features_and_centroids",
    "export_matches",
    "export_segments",
    "import_features",
    "import_matches",
    "import_segments",
    "ensure_directory_exists",
    "ensure_directory_exists_for_filename",
    "SessionStore",
]
