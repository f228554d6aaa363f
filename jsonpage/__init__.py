"""JSON page server: ordered JSON documents rendered to HTML."""

__version__ = "0.1.0"
