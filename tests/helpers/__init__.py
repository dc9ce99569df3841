"""Test helpers for Instapaper highlight sync tests."""

from .fake_instapaper import FakeInstapaperAPI

__all__ = ['FakeInstapaperAPI']
