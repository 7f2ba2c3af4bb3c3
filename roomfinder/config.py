"""Configuration constants for roomfinder."""

import os

# Optional: set via environment or .env
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", 8000))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = os.environ.get("LOG_FORMAT", "standard")

# sentinel value that disables a selectable filter
ALL_OPTION = os.environ.get("ALL_OPTION", "all")

# minimum rapidfuzz partial_ratio score for station/university matches
FUZZY_MATCH_THRESHOLD = int(os.environ.get("FUZZY_MATCH_THRESHOLD", 80))
