"""Helpers for the CLI: file watching and in-place resume edits."""
