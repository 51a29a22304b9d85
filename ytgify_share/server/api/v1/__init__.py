"""
API routers.

Each module exposes ``router``; ``ytgify_share.server.main`` mounts them
under ``/api`` (health and version at the root).
"""
