"""Logs package - logging setup for the sandbox."""
