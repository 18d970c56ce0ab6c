"""
ChainClient - thin wrapper over web3 for the SCM contracts.
"""
import logging
from typing import Dict, Any, Optional, Tuple

from web3 import Web3
from web3.contract.contract import ContractFunction
from web3.exceptions import TimeExhausted
from web3.types import TxParams, TxReceipt as Web3TxReceipt

from .config import NetworkSettings
from .exceptions import ContractCallError, TransactionError, TxStep
from .models import PendingTransaction, TransactionIntent, TxReceipt
from .registry import ContractRegistry
from .signer import Signer


class ChainClient:
    """
    Client for the contracts of one network.

    This client handles:
    1. Read-only contract calls
    2. Filling transaction fields (nonce, gas, fees) from chain state
    3. Signing and submitting transactions
    4. Waiting for a submitted transaction to be included

    Mutating operations require a signer.
    """

    def __init__(
        self,
        settings: NetworkSettings,
        signer: Optional[Signer] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the ChainClient

        Args:
            settings: Network settings (RPC endpoint, chain id, contract addresses)
            signer: Account used to sign transactions (optional for read-only use)
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ConfigError: If a contract address in the settings is malformed
        """
        self.settings = settings
        self.signer = signer
        self.logger = logger or logging.getLogger(__name__)
        self.registry = ContractRegistry.from_settings(settings)

        self.w3 = Web3(Web3.HTTPProvider(
            settings.rpc_url,
            request_kwargs={"timeout": settings.request_timeout}
        ))

    @property
    def address(self) -> str:
        """
        Get the signer's address

        Raises:
            ValueError: If no signer is available
        """
        if self.signer is None:
            raise ValueError("No signer available")
        return self.signer.address

    def _function(self, contract_name: str, method: str, args: Tuple[Any, ...]) -> ContractFunction:
        entry = self.registry.get(contract_name)
        contract = self.w3.eth.contract(address=entry.address, abi=entry.abi)
        return getattr(contract.functions, method)(*args)

    def call(self, contract_name: str, method: str, *args: Any) -> Any:
        """
        Invoke a read-only contract method

        Raises:
            ContractCallError: If the call fails or its result can't be decoded
        """
        operation = f"{contract_name}.{method}"
        try:
            result = self._function(contract_name, method, args).call()
        except Exception as e:
            self.logger.error(f"Call to {operation} failed: {e}")
            raise ContractCallError(operation, str(e)) from e

        self.logger.debug(f"{operation}{args} -> {result}")
        return result

    def fill(self, intent: TransactionIntent) -> TxParams:
        """
        Populate the unset fields of a transaction from chain state

        The nonce is read from the chain unless the intent overrides it, and the
        gas limit is estimated with a simulated execution unless the intent
        overrides it. Fee fields and the chain id are always set.

        Args:
            intent: The contract call to fill

        Returns:
            Transaction params ready for signing

        Raises:
            TransactionError: If any field can't be filled
        """
        operation = f"{intent.contract}.{intent.method}"
        try:
            from_address = self.address
            tx_params: Dict[str, Any] = {
                'from': from_address,
                'chainId': self.settings.chain_id,
            }

            if intent.nonce is None:
                tx_params['nonce'] = self.w3.eth.get_transaction_count(from_address, 'pending')
            else:
                tx_params['nonce'] = intent.nonce

            # web3 only estimates gas when no limit is given
            if intent.gas is not None:
                tx_params['gas'] = intent.gas

            tx = self._function(intent.contract, intent.method, intent.args).build_transaction(tx_params)
        except Exception as e:
            self.logger.error(f"Failed to fill {operation}: {e}")
            raise TransactionError(TxStep.FILL, f"can't fill fields of transaction {operation}: {e}") from e

        self.logger.debug(f"Filled {operation}: nonce={tx.get('nonce')} gas={tx.get('gas')}")
        return tx

    def send(self, tx: TxParams) -> PendingTransaction:
        """
        Sign and submit a filled transaction without waiting for it to be mined

        Returns:
            Handle of the pending transaction

        Raises:
            TransactionError: If signing or submission fails
        """
        try:
            signed_tx = self.signer.sign_transaction(tx)
        except Exception as e:
            self.logger.error(f"Transaction signing failed: {e}")
            raise TransactionError(TxStep.SIGN, f"Failed to sign transaction: {e}") from e

        try:
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except Exception as e:
            self.logger.error(f"Failed to send transaction: {e}")
            raise TransactionError(TxStep.SEND, f"can't send transaction: {e}") from e

        pending = PendingTransaction(tx_hash=Web3.to_hex(tx_hash), nonce=tx['nonce'])
        self.logger.info(f"Transaction sent: {pending.tx_hash} (nonce {pending.nonce})")
        return pending

    def wait(self, pending: PendingTransaction) -> TxReceipt:
        """
        Wait once for a pending transaction to be included

        Raises:
            TransactionError: If waiting times out, the RPC call fails, or the
                transaction was reverted
        """
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                pending.tx_hash,
                timeout=self.settings.receipt_timeout,
                poll_latency=self.settings.poll_latency
            )
        except TimeExhausted as e:
            raise TransactionError(
                TxStep.CONFIRM,
                f"Transaction {pending.tx_hash} not included after {self.settings.receipt_timeout}s; "
                "it may still be mined later",
                tx_hash=pending.tx_hash
            ) from e
        except Exception as e:
            self.logger.error(f"Failed to fetch receipt for {pending.tx_hash}: {e}")
            raise TransactionError(
                TxStep.CONFIRM,
                f"Failed to await transaction {pending.tx_hash}: {e}",
                tx_hash=pending.tx_hash
            ) from e

        result = self._convert_receipt(receipt)
        if result.status != 1:
            raise TransactionError(
                TxStep.CONFIRM,
                f"Transaction {pending.tx_hash} was reverted in block {result.block_number}",
                tx_hash=pending.tx_hash
            )
        self.logger.info(f"Transaction {result.tx_hash} included in block {result.block_number}")
        return result

    def _convert_receipt(self, web3_receipt: Web3TxReceipt) -> TxReceipt:
        """
        Convert Web3 receipt to our TxReceipt model

        Args:
            web3_receipt: The Web3 transaction receipt

        Returns:
            Our TxReceipt model
        """
        receipt_dict = dict(web3_receipt)

        # Convert bytes to hex strings
        for key, value in list(receipt_dict.items()):
            if isinstance(value, bytes):
                receipt_dict[key] = Web3.to_hex(value)
        receipt_dict['logs'] = [dict(log) for log in receipt_dict.get('logs', [])]

        return TxReceipt.model_validate(receipt_dict)
