"""
Server-wide constants.
"""

PROJECT_NAME = "ytgify-share"
API_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"

# Extension-facing routes are served unversioned, e.g. ``/api/auth/login``.
API_PREFIX = "/api"

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100
