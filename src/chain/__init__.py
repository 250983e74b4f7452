"""
Simulated chain — in-process сеть для harness.

Сеть, handles контрактов и scoped impersonation.
"""

from src.chain.contract import Contract
from src.chain.impersonation import while_impersonating
from src.chain.simulated_chain import ChainConfig, Genesis, Signer, SimulatedChain

__all__ = [
    "ChainConfig",
    "Contract",
    "Genesis",
    "Signer",
    "SimulatedChain",
    "while_impersonating",
]
