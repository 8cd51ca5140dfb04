"""
TaskBoard client.

Keeps an optimistic in-memory copy of the board, reconciles it with the
server's answers and rolls back when a call fails.
"""

__version__ = "0.1.0"
