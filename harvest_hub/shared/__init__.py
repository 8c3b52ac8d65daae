"""
Shared Kernel - Common Utilities and Infrastructure

Configuration, security, error types, logging, and the clients for the
hosted database and image store used by every Harvest Hub module.
"""

__all__ = []
