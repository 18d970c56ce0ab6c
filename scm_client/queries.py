"""
Read-only queries against the token and ICO contracts.

Each query makes exactly one contract call and never submits a transaction.
"""
from .chain import ChainClient
from .registry import WETH, SCM, ICO


def weth_balance(chain: ChainClient, address: str) -> int:
    """WETH balance of ``address`` in wei"""
    return chain.call(WETH, "balanceOf", address)


def scm_balance(chain: ChainClient, address: str) -> int:
    """SCM balance of ``address`` in wei"""
    return chain.call(SCM, "balanceOf", address)


def claimable_scm(chain: ChainClient, address: str) -> int:
    """Amount of SCM ``address`` can claim from the ICO, in wei"""
    return chain.call(ICO, "claimableScm", address)


def ico_status(chain: ChainClient) -> bool:
    """Whether the ICO is completed"""
    return chain.call(ICO, "isCompleted")
