"""Integration tests for Instapaper highlight sync.

These tests drive the sync engine and CLI commands against a real temporary
vault on disk, with the remote API replaced by an in-memory fake. No
credentials or network access are required.
"""
