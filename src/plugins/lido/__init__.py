"""Lido плагин: wstETH collateral."""

from src.plugins.lido.helpers import lido_fork_genesis, make_lido_chain, mint_wsteth, reset_fork
from src.plugins.lido.suite import (
    CHAINLINK_DEFAULT_ANSWER,
    CHAINLINK_TARGET_UNIT_DEFAULT_ANSWER,
    COLLATERAL_NAME,
    DEFAULT_LIDO_COLLATERAL_OPTS,
    LidoFixtureContext,
    deploy_collateral,
    get_expected_price,
    make_collateral_fixture_context,
    make_lido_hooks,
    merge_opts,
)

__all__ = [
    "CHAINLINK_DEFAULT_ANSWER",
    "CHAINLINK_TARGET_UNIT_DEFAULT_ANSWER",
    "COLLATERAL_NAME",
    "DEFAULT_LIDO_COLLATERAL_OPTS",
    "LidoFixtureContext",
    "deploy_collateral",
    "get_expected_price",
    "lido_fork_genesis",
    "make_collateral_fixture_context",
    "make_lido_chain",
    "make_lido_hooks",
    "merge_opts",
    "mint_wsteth",
    "reset_fork",
]
