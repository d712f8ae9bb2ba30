"""Routers for the preview server."""
