"""
Command-line interface for the SCM ICO and token.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import typer

from scm_client import queries
from scm_client.chain import ChainClient
from scm_client.config import DEFAULT_NETWORK, NetworkConfig, NetworkSettings
from scm_client.exceptions import ScmClientError
from scm_client.sequencer import (
    AwaitApprovalPolicy, ClaimSequencer, FireAndForgetPolicy, InvestmentSequencer
)
from scm_client.signer import load_signer, parse_address
from scm_client.version import __version__

app = typer.Typer(
    help="Let's you interact with the SCM ICO and token",
    no_args_is_help=True,
    add_completion=False,
)

logger = logging.getLogger(__name__)

WALLET_OPTION = typer.Option(..., "-w", "--wallet", metavar="ADDRESS", help="Address to query")
KEY_OPTION = typer.Option(
    ..., "-k", "--key", metavar="PRIVATE_KEY", envvar="SCM_PRIVATE_KEY",
    help="Hex private key, with or without 0x prefix"
)


@contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except ScmClientError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"scm-client {__version__}")
        raise typer.Exit()


def _settings(ctx: typer.Context) -> NetworkSettings:
    options = ctx.obj
    return NetworkConfig.get_settings(
        options["network"],
        rpc_url=options["rpc_url"],
        weth_address=options["weth_address"],
        scm_address=options["scm_address"],
        ico_address=options["ico_address"],
    )


@app.callback()
def main(
    ctx: typer.Context,
    network: str = typer.Option(DEFAULT_NETWORK, "-n", "--network", envvar="SCM_NETWORK", help="Network preset"),
    rpc_url: Optional[str] = typer.Option(None, "-r", "--rpc-url", envvar="SCM_RPC_URL", help="RPC endpoint"),
    weth_address: Optional[str] = typer.Option(None, "--weth-address", envvar="SCM_WETH_ADDRESS"),
    scm_address: Optional[str] = typer.Option(None, "--scm-address", envvar="SCM_SCM_ADDRESS"),
    ico_address: Optional[str] = typer.Option(None, "--ico-address", envvar="SCM_ICO_ADDRESS"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Let's you interact with the SCM ICO and token"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Settings are resolved per command so that --help works without an RPC endpoint
    ctx.obj = {
        "network": network,
        "rpc_url": rpc_url,
        "weth_address": weth_address,
        "scm_address": scm_address,
        "ico_address": ico_address,
    }


@app.command("weth-balance")
def weth_balance(ctx: typer.Context, wallet: str = WALLET_OPTION):
    """Tells you how much WETH you own"""
    with _handle_errors():
        address = parse_address(wallet)
        balance = queries.weth_balance(ChainClient(_settings(ctx)), address)
    typer.echo(f"WETH balance: {balance} wei")


@app.command("scm-balance")
def scm_balance(ctx: typer.Context, wallet: str = WALLET_OPTION):
    """Tells you how much SCM you own"""
    with _handle_errors():
        address = parse_address(wallet)
        balance = queries.scm_balance(ChainClient(_settings(ctx)), address)
    typer.echo(f"SCM balance: {balance} wei")


@app.command("claimable-scm")
def claimable_scm(ctx: typer.Context, wallet: str = WALLET_OPTION):
    """Tells you how much SCM you can claim"""
    with _handle_errors():
        address = parse_address(wallet)
        claimable = queries.claimable_scm(ChainClient(_settings(ctx)), address)
    typer.echo(f"claimable SCM: {claimable} wei")


@app.command("ico-status")
def ico_status(ctx: typer.Context):
    """Queries status of ICO."""
    with _handle_errors():
        is_completed = queries.ico_status(ChainClient(_settings(ctx)))
    typer.echo(f"ICO completed: {str(is_completed).lower()}")


@app.command("claim-scm")
def claim_scm(ctx: typer.Context, key: str = KEY_OPTION):
    """Claim your hard earned SCM"""
    with _handle_errors():
        signer = load_signer(key)
        pending = ClaimSequencer(ChainClient(_settings(ctx), signer=signer)).claim()
    typer.echo(f"claim submitted: {pending.tx_hash}")


@app.command("invest")
def invest(
    ctx: typer.Context,
    key: str = KEY_OPTION,
    amount: str = typer.Option(..., "-a", "--amount", metavar="AMOUNT", help="How much to invest into SCM"),
    unit: str = typer.Option(..., "-u", "--unit", metavar="UNIT", help="Supply unit like wei, gwei, ether"),
    gas_limit: Optional[int] = typer.Option(
        None, "--gas-limit", min=1, help="Gas limit of the invest transaction (default from network preset)"
    ),
    wait_for_approval: bool = typer.Option(
        False, "--wait-for-approval", help="Wait for the approval to be mined before investing"
    ),
):
    """Invest in the ICO"""
    def _submitted(_pending):
        typer.echo("waiting for inclusion in the chain")

    with _handle_errors():
        signer = load_signer(key)
        settings = _settings(ctx)
        if wait_for_approval:
            policy = AwaitApprovalPolicy()
        else:
            policy = FireAndForgetPolicy(gas_limit or settings.invest_gas_limit)
        sequencer = InvestmentSequencer(ChainClient(settings, signer=signer), policy=policy)
        receipt = sequencer.invest(amount, unit, on_submitted=_submitted)
        logger.debug(f"Investment included in block {receipt.block_number}")
    typer.echo(f"invested amount: {amount} {unit}")


if __name__ == "__main__":
    app()
