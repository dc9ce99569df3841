"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration).
"""

import pytest

from src.instapaper_client.models import AccessToken
from src.note_mapper.vault import Vault


@pytest.fixture
def token() -> AccessToken:
    """Access token used for all fake API calls."""
    return AccessToken(key="token-key", secret="token-secret")


@pytest.fixture
def vault(tmp_path) -> Vault:
    """Empty vault rooted in a temporary directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return Vault(str(root))
