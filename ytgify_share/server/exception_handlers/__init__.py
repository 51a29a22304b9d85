"""
Exception handlers for the ytgify-share server.

Domain errors, request validation errors and unhandled exceptions each get a
handler; ``setup_exception_handlers`` registers all of them.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
