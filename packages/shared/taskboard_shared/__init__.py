"""Schemas shared by the TaskBoard server and client."""

__version__ = "0.1.0"
