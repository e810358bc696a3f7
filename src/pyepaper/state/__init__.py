"""State/store layer.

This package owns the single in-memory snapshot of everything loaded from
the display server, the copy-on-write helpers that replace it, and the
durable storage that mirrors the bitmap cache across process restarts.
"""
