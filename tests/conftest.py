"""
Pytest fixtures for the SCM client tests.
"""
import pytest
from unittest.mock import MagicMock
from eth_account import Account
from hexbytes import HexBytes
from web3 import Web3
from web3.providers.rpc import HTTPProvider

from scm_client.config import NetworkSettings
from scm_client.chain import ChainClient
from scm_client.exceptions import TransactionError, TxStep
from scm_client.models import PendingTransaction, TxReceipt
from scm_client.registry import ContractRegistry

# Constants for testing
TEST_RPC_URL = "http://localhost:8545"
TEST_CHAIN_ID = 31337
TEST_WETH = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TEST_SCM = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
TEST_ICO = "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0"
TEST_WALLET = "0x1234567890123456789012345678901234567890"
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_TX_HASH = "0x" + "ab" * 32


@pytest.fixture(autouse=True)
def _patch_http_provider(monkeypatch):
    """
    Stub every Web3 HTTP call so no DNS / network traffic is triggered.
    Works for all tests because it is autouse.
    """
    def _dummy(self, method, params=None, _=None):      # signature match
        if method in {"eth_chainId"}:
            return {"jsonrpc": "2.0", "id": 1, "result": hex(TEST_CHAIN_ID)}
        if method in {"eth_gasPrice"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x3b9aca00"}  # 1 gwei
        # everything else – return something harmless
        return {"jsonrpc": "2.0", "id": 1, "result": "0x0"}

    monkeypatch.setattr(HTTPProvider, "make_request", _dummy, raising=True)


@pytest.fixture
def settings():
    return NetworkSettings(
        name="test-network",
        chain_id=TEST_CHAIN_ID,
        rpc_url=TEST_RPC_URL,
        weth_address=TEST_WETH,
        scm_address=TEST_SCM,
        ico_address=TEST_ICO,
    )


@pytest.fixture
def mock_account():
    """Create a deterministic test account"""
    return Account.from_key(TEST_PRIV_KEY)


@pytest.fixture
def mock_w3():
    """
    Create a mock of Web3 with the eth methods the client touches.

    ``build_transaction`` mimics web3: gas is only estimated when absent.
    """
    mock = MagicMock(spec=Web3)
    eth = MagicMock()
    eth.get_transaction_count = MagicMock(return_value=7)
    eth.send_raw_transaction = MagicMock(return_value=HexBytes(TEST_TX_HASH))
    eth.wait_for_transaction_receipt = MagicMock(return_value={
        'transactionHash': HexBytes(TEST_TX_HASH),
        'blockNumber': 12345,
        'blockHash': HexBytes("0x" + "cd" * 32),
        'status': 1,
        'gasUsed': 85000,
        'from': TEST_WALLET,
        'to': TEST_ICO,
        'logs': []
    })

    contracts = {}

    def contract(address, abi):
        if address not in contracts:
            contract_mock = MagicMock()
            contract_mock.address = address
            contract_mock.estimate_gas = MagicMock(return_value=46000)

            def factory(method):
                def make_function(*args):
                    function = MagicMock()

                    def build_tx(tx_params):
                        tx = dict(tx_params)
                        if 'gas' not in tx:
                            tx['gas'] = contract_mock.estimate_gas(method, args)
                        tx.update({'to': address, 'data': '0x1234', 'gasPrice': 1000000000, 'value': 0})
                        return tx

                    function.build_transaction = MagicMock(side_effect=build_tx)
                    function.call = MagicMock(return_value=contract_mock.results.get(method))
                    return function
                return make_function

            contract_mock.results = {}
            contract_mock.functions.balanceOf = MagicMock(side_effect=factory("balanceOf"))
            contract_mock.functions.approve = MagicMock(side_effect=factory("approve"))
            contract_mock.functions.claimableScm = MagicMock(side_effect=factory("claimableScm"))
            contract_mock.functions.isCompleted = MagicMock(side_effect=factory("isCompleted"))
            contract_mock.functions.invest = MagicMock(side_effect=factory("invest"))
            contract_mock.functions.claim = MagicMock(side_effect=factory("claim"))
            contracts[address] = contract_mock
        return contracts[address]

    eth.contract = MagicMock(side_effect=contract)
    mock.eth = eth
    mock.contracts = contracts
    return mock


@pytest.fixture
def chain_client(settings, mock_account, mock_w3):
    """ChainClient with a real signer and a mocked web3"""
    client = ChainClient(settings, signer=mock_account)
    client.w3 = mock_w3
    return client


class FakeChain:
    """
    In-memory stand-in for ChainClient recording every operation in order.

    ``fail_on`` maps ``(operation, method)`` to an exception to raise, e.g.
    ``("send", "approve")``.
    """

    def __init__(self, settings, start_nonce=7, results=None, fail_on=None):
        self.settings = settings
        self.registry = ContractRegistry.from_settings(settings)
        self.next_chain_nonce = start_nonce
        self.results = results or {}
        self.fail_on = fail_on or {}
        self.events = []
        self.nonce_queries = 0
        self.estimates = 0

    def _maybe_fail(self, operation, method):
        error = self.fail_on.get((operation, method))
        if error is not None:
            raise error

    def call(self, contract_name, method, *args):
        self.events.append(("call", contract_name, method, args))
        self._maybe_fail("call", method)
        return self.results.get(method)

    def fill(self, intent):
        self.events.append(("fill", intent.contract, intent.method, intent.args))
        self._maybe_fail("fill", intent.method)
        if intent.nonce is None:
            self.nonce_queries += 1
            nonce = self.next_chain_nonce
        else:
            nonce = intent.nonce
        if intent.gas is None:
            self.estimates += 1
            gas = 50000
        else:
            gas = intent.gas
        return {"method": intent.method, "nonce": nonce, "gas": gas, "chainId": self.settings.chain_id}

    def send(self, tx):
        self.events.append(("send", tx["method"], tx["nonce"], tx["gas"]))
        self._maybe_fail("send", tx["method"])
        return PendingTransaction(tx_hash=f"0x{tx['method']}{tx['nonce']}", nonce=tx["nonce"])

    def wait(self, pending):
        self.events.append(("wait", pending.tx_hash))
        self._maybe_fail("wait", pending.tx_hash)
        # once mined, the chain reports the next nonce
        self.next_chain_nonce = max(self.next_chain_nonce, pending.nonce + 1)
        return TxReceipt(
            transactionHash=pending.tx_hash,
            blockNumber=100,
            blockHash="0x" + "00" * 32,
            status=1,
            gasUsed=21000,
            **{"from": TEST_WALLET},
            to=TEST_ICO,
            logs=[]
        )

    def operations(self, kind):
        return [event for event in self.events if event[0] == kind]


@pytest.fixture
def fake_chain(settings):
    return FakeChain(settings)


def send_failure(message="nonce too low"):
    return TransactionError(TxStep.SEND, f"can't send transaction: {message}")
