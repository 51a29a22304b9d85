"""
Server core: configuration and constants.
"""
