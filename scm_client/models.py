"""
Data models for the SCM client.
"""
from typing import Dict, Any, Optional, List, Tuple
from pydantic import BaseModel, Field


class TransactionIntent(BaseModel):
    """A contract call that has not been filled, signed or submitted yet"""
    contract: str
    method: str
    args: Tuple[Any, ...] = ()
    nonce: Optional[int] = None
    gas: Optional[int] = None

    class Config:
        frozen = True


class PendingTransaction(BaseModel):
    """Handle of a submitted transaction awaiting inclusion"""
    tx_hash: str
    nonce: int


class TxReceipt(BaseModel):
    """Transaction receipt from the blockchain"""
    tx_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    block_hash: str = Field(..., alias="blockHash")
    status: int
    gas_used: int = Field(..., alias="gasUsed")
    from_address: str = Field(..., alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    logs: List[Dict[str, Any]]

    class Config:
        populate_by_name = True
