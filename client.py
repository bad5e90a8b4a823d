import asyncio
import logging
from typing import Optional

import typer
from httpx import HTTPError
from pydantic import ValidationError
from web3 import Web3
from web3.exceptions import Web3Exception

import app.main
from app.config import HashOracleKind, Settings, SignatureMode
from app.exceptions import BundlerError, ConfigurationError, TransactionError

cli = typer.Typer()
logger = logging.getLogger("client")


@cli.callback()
def main(ctx: typer.Context):
    try:
        settings = Settings()
    except ValidationError as e:
        logger.error("Configuration error: %s", e)
        raise typer.Exit(code=1)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


@cli.command(help="Build, sign and send the configured UserOp to the bundler")
def send_user_op(
    ctx: typer.Context,
    hash_oracle: Optional[HashOracleKind] = typer.Option(
        None,
        help="Where to compute the UserOp hash: on-chain getUserOpHash or "
        "locally",
    ),
    signature_mode: Optional[SignatureMode] = typer.Option(
        None,
        help="Sign the hash as an EIP-191 personal message or sign the bare "
        "hash",
    ),
):
    settings = _override(
        ctx.obj, hash_oracle=hash_oracle, signature_mode=signature_mode
    )
    response = _run(app.main.send_user_operation(settings))
    print(response)


@cli.command(
    help="Show the EntryPoint deposit and native balance of an address"
)
def check_balance(
    ctx: typer.Context,
    address: Optional[str] = typer.Argument(
        None, help="Address to check, the configured account by default"
    ),
):
    deposit, balance = _run(app.main.check_balance(ctx.obj, address))
    print(f"EntryPoint balance: {Web3.from_wei(deposit, 'ether')} ETH")
    print(f"Account balance: {Web3.from_wei(balance, 'ether')} ETH")


@cli.command(help="Lock stake with the paymaster through addStake")
def stake(
    ctx: typer.Context,
    amount: Optional[float] = typer.Option(None, help="Stake amount in ETH"),
    delay: Optional[int] = typer.Option(
        None, help="Unstake delay in seconds"
    ),
):
    settings = _override(
        ctx.obj,
        stake_amount=None if amount is None else Web3.to_wei(amount, "ether"),
        unstake_delay=delay,
    )
    response = _run(app.main.stake_for_paymaster(settings))
    print(response)


@cli.command(help="Get a UserOp by its hash")
def get_user_op(
    ctx: typer.Context,
    hash_: str = typer.Argument(..., help="Hash of the UserOp"),
):
    response = _run(_call_bundler(ctx.obj, "get_user_op", hash_))
    print(response)


@cli.command(help="Get a UserOp receipt by its hash")
def get_user_op_receipt(
    ctx: typer.Context,
    hash_: str = typer.Argument(..., help="Hash of the UserOp"),
):
    response = _run(_call_bundler(ctx.obj, "get_user_op_receipt", hash_))
    print(response)


@cli.command(help="Get a list of entry points supported by the bundler")
def supported_entry_points(ctx: typer.Context):
    response = _run(_call_bundler(ctx.obj, "supported_entry_points"))
    print(response)


async def _call_bundler(settings: Settings, method: str, *args):
    async with app.main.bundler_client(settings) as bundler:
        return await getattr(bundler, method)(*args)


def _override(settings: Settings, **kwargs) -> Settings:
    update = {k: v for k, v in kwargs.items() if v is not None}
    if not update:
        return settings

    return Settings(**{**settings.model_dump(), **update})


def _run(coroutine):
    try:
        return asyncio.run(coroutine)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
    except BundlerError as e:
        logger.error("Bundler error: %s", e)
    except TransactionError as e:
        logger.error("%s", e)
    except HTTPError as e:
        logger.error("HTTP error: %s", e)
    except Web3Exception as e:
        logger.error("Node error: %s", e)
    except ValidationError as e:
        logger.error("Invalid value: %s", e)

    raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
