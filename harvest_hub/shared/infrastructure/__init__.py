"""
Shared infrastructure: the hosted database client and the image store adapter.
"""
