"""
Shared utilities: logging configuration and small data helpers.
"""
