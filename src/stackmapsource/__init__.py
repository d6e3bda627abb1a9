"""Translate minified JavaScript stack traces using source maps."""
