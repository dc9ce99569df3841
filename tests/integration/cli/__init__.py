"""CLI integration tests.

This package contains integration tests for CLI-specific functionality.
Tests in this package verify:
- Cursor persistence between runs
- Config updates written back by --update-notes
"""
