"""Общие fixtures: сеть с fork-состоянием Lido и HookBundle поверх неё."""

import pytest

from src.plugins.lido import make_lido_chain, make_lido_hooks


@pytest.fixture
def chain():
    """Свежая сеть для каждого теста."""
    return make_lido_chain()


@pytest.fixture
def hooks(chain):
    return make_lido_hooks(chain)


@pytest.fixture
def alice(chain):
    return chain.get_signers()[1]
