"""Serving boundary: terminal handlers and the Starlette application."""
