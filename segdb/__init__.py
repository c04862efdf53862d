# ==============================================
# Segment Match Database
# ==============================================
#
# Package Structure (3 Topics + Session Facade):
#
# segdb/
# ├── matching/         # Topic 1: Equivalence groups of matching segment ids
# ├── segments/         # Topic 2: Segment model and the segmented cloud
# ├── persistence/      # Topic 3: Text codec, directories, session facade
# ├── config.py         # Configuration management
# ├── logging_config.py # Package logger setup
# ├── errors.py         # Exception hierarchy
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
