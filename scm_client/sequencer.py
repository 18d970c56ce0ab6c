"""
Transaction sequences for claiming SCM and investing in the ICO.

Investing takes two transactions from the same account: an ``approve`` on the
WETH token raising the ICO's allowance, then ``invest`` on the ICO. How the
second transaction is prepared relative to the first is decided by a
:class:`SequencingPolicy`.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .chain import ChainClient
from .config import DEFAULT_INVEST_GAS_LIMIT
from .exceptions import TransactionError, TxStep
from .models import PendingTransaction, TransactionIntent, TxReceipt
from .registry import WETH, ICO
from .units import parse_amount

logger = logging.getLogger(__name__)


class SequencingPolicy(ABC):
    """
    Decides how the invest transaction follows the submitted approval.
    """

    @abstractmethod
    def next_intent(
        self,
        chain: ChainClient,
        approval: PendingTransaction,
        intent: TransactionIntent
    ) -> TransactionIntent:
        """
        Prepare the invest intent for filling

        Args:
            chain: Client the approval was submitted through
            approval: The submitted, possibly unconfirmed, approval
            intent: The invest intent without overrides

        Returns:
            The intent to fill and submit
        """
        pass


class FireAndForgetPolicy(SequencingPolicy):
    """
    Submit the invest transaction right after the approval, without waiting
    for the approval to be included.

    The nonce is derived from the approval's instead of being read from the
    chain, where it may not have been incremented yet. The gas limit is fixed
    because estimating it would simulate ``invest`` against the old allowance
    and revert.
    """

    def __init__(self, gas_limit: int = DEFAULT_INVEST_GAS_LIMIT):
        self.gas_limit = gas_limit

    def next_intent(self, chain, approval, intent):
        logger.warning(
            f"Approval {approval.tx_hash} is not confirmed yet; submitting {intent.method} "
            f"with nonce {approval.nonce + 1} and gas limit {self.gas_limit}. "
            "If the approval fails, this transaction will revert."
        )
        return intent.model_copy(update={"nonce": approval.nonce + 1, "gas": self.gas_limit})


class AwaitApprovalPolicy(SequencingPolicy):
    """
    Wait for the approval to be included, then fill the invest transaction
    from chain state like any other.
    """

    def next_intent(self, chain, approval, intent):
        chain.wait(approval)
        return intent


class ClaimSequencer:
    """Submits ``claim()`` on the ICO"""

    def __init__(self, chain: ChainClient, logger: Optional[logging.Logger] = None):
        self.chain = chain
        self.logger = logger or logging.getLogger(__name__)

    def claim(self) -> PendingTransaction:
        """
        Sign and submit a claim transaction; does not wait for inclusion

        Raises:
            TransactionError: If filling, signing or sending fails
        """
        tx = self.chain.fill(TransactionIntent(contract=ICO, method="claim"))
        pending = self.chain.send(tx)
        self.logger.info(f"Claim submitted: {pending.tx_hash}")
        return pending


class InvestmentSequencer:
    """
    Runs the approve-then-invest sequence for one account.

    With the default :class:`FireAndForgetPolicy` both transactions are
    submitted without waiting for the approval to be included. If ``invest``
    can't be submitted after the approval went out, the allowance stays raised
    and no investment is made; this is reported, not rolled back.
    """

    def __init__(
        self,
        chain: ChainClient,
        policy: Optional[SequencingPolicy] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.chain = chain
        self.policy = policy or FireAndForgetPolicy(chain.settings.invest_gas_limit)
        self.logger = logger or logging.getLogger(__name__)

    def invest(
        self,
        amount: str,
        unit: str,
        on_submitted: Optional[Callable[[PendingTransaction], None]] = None
    ) -> TxReceipt:
        """
        Approve and invest ``amount`` ``unit`` of WETH in the ICO

        Args:
            amount: Decimal amount, e.g. "1.5"
            unit: Unit of the amount, e.g. "ether"
            on_submitted: Called with the invest transaction once it is submitted,
                before waiting for its inclusion

        Returns:
            Receipt of the invest transaction

        Raises:
            AmountParseError: If the amount or unit is malformed
            TransactionError: If any transaction can't be filled, signed, sent
                or confirmed
        """
        wei = parse_amount(amount, unit)
        ico_address = self.chain.registry.address(ICO)

        # 1. Approve; the only fill that reads the nonce and estimates gas
        approval_tx = self.chain.fill(
            TransactionIntent(contract=WETH, method="approve", args=(ico_address, wei))
        )
        approval = self.chain.send(approval_tx)
        self.logger.info(f"Approval of {wei} wei submitted: {approval.tx_hash} (nonce {approval.nonce})")

        # 2. Invest; the approval may still be pending from here on
        try:
            intent = self.policy.next_intent(
                self.chain, approval, TransactionIntent(contract=ICO, method="invest", args=(wei,))
            )
            invest_tx = self.chain.fill(intent)
            pending = self.chain.send(invest_tx)
        except TransactionError as e:
            if e.step == TxStep.CONFIRM and e.tx_hash == approval.tx_hash:
                # the approval itself failed; its error already says what happened
                self.logger.error(f"Approval {approval.tx_hash} failed: {e}")
                raise
            self.logger.error(
                f"Investment failed after approval {approval.tx_hash} was submitted; "
                f"the ICO allowance stays raised: {e}"
            )
            raise TransactionError(
                e.step,
                f"{e} (approval {approval.tx_hash} was already submitted; the allowance stays raised)",
                tx_hash=approval.tx_hash
            ) from e
        self.logger.info(f"Investment submitted: {pending.tx_hash} (nonce {pending.nonce})")

        if on_submitted is not None:
            on_submitted(pending)

        return self.chain.wait(pending)
