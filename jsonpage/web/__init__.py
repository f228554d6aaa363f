"""HTTP surface of the page server."""
