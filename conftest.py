"""Shared pytest fixtures."""

import pytest

from cyfer.models import KdfParams

# Smallest Argon2id costs accepted; keeps the suite fast
FAST_PARAMS = KdfParams(memory_cost=64, time_cost=1, parallelism=1)


@pytest.fixture
def fast_params():
    return FAST_PARAMS


@pytest.fixture
def vault_path(tmp_path):
    """Path for a vault file that does not exist yet."""
    return tmp_path / "vault.json"
