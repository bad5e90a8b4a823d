import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from httpx import AsyncBaseTransport, AsyncClient
from web3 import AsyncWeb3, Web3
from web3.contract import AsyncContract

import utils.web3
from app.config import HashOracleKind, Settings
from utils.client import BundlerClient
from utils.hashing import EntryPointHashOracle, HashOracle, LocalHashOracle
from utils.signer import Signer
from utils.user_op import UserOp

logger = logging.getLogger(__name__)


def build_user_op(settings: Settings, nonce: int, call_data: bytes) -> UserOp:
    user_op = UserOp(
        sender=settings.account_address,
        nonce=nonce,
        call_data=call_data,
        call_gas_limit=settings.call_gas_limit,
        verification_gas_limit=settings.verification_gas_limit,
        pre_verification_gas=settings.pre_verification_gas,
        max_fee_per_gas=settings.max_fee_per_gas,
        max_priority_fee_per_gas=settings.max_priority_fee_per_gas,
    )
    if settings.use_paymaster:
        user_op.paymaster = settings.paymaster_address
        user_op.paymaster_verification_gas_limit = (
            settings.paymaster_verification_gas_limit
        )
        user_op.paymaster_post_op_gas_limit = (
            settings.paymaster_post_op_gas_limit
        )
        user_op.paymaster_data = settings.paymaster_data

    return user_op


def get_hash_oracle(
    settings: Settings, entry_point: AsyncContract
) -> HashOracle:
    if settings.hash_oracle == HashOracleKind.LOCAL:
        return LocalHashOracle(settings.entry_point_address, settings.chain_id)

    return EntryPointHashOracle(entry_point)


@asynccontextmanager
async def bundler_client(
    settings: Settings, transport: Optional[AsyncBaseTransport] = None
) -> AsyncIterator[BundlerClient]:
    settings.require("bundler_url")
    async with AsyncClient(
        transport=transport, timeout=settings.http_timeout
    ) as client:
        yield BundlerClient(client, settings.bundler_url)


async def send_user_operation(
    settings: Settings,
    entry_point: Optional[AsyncContract] = None,
    hash_oracle: Optional[HashOracle] = None,
    transport: Optional[AsyncBaseTransport] = None,
) -> str:
    """
    Build, sign and submit one UserOp, returning the hash reported by the
    bundler.
    """
    settings.require("private_key", "bundler_url")
    signer = Signer(settings.private_key, settings.signature_mode)

    if entry_point is None:
        entry_point = utils.web3.EntryPoint(
            utils.web3.get_w3(settings.sepolia_rpc_url),
            settings.entry_point_address,
        )
    if hash_oracle is None:
        hash_oracle = get_hash_oracle(settings, entry_point)

    nonce = await utils.web3.get_nonce(entry_point, settings.account_address)
    logger.info("Sender %s, nonce %d", settings.account_address, nonce)

    call_data = utils.web3.encode_execute_call_data(
        settings.destination, settings.call_value, settings.call_func
    )
    user_op = build_user_op(settings, nonce, call_data)

    user_op_hash = await hash_oracle.get_user_op_hash(user_op)
    logger.info("userOpHash: 0x%s", user_op_hash.hex())
    user_op.signature = signer.sign_user_op_hash(user_op_hash)

    async with bundler_client(settings, transport) as bundler:
        user_operation_hash = await bundler.send_user_op(
            user_op, settings.entry_point_address
        )

    logger.info("userOperationHash: %s", user_operation_hash)
    return user_operation_hash


async def check_balance(
    settings: Settings,
    address: Optional[str] = None,
    w3: Optional[AsyncWeb3] = None,
    entry_point: Optional[AsyncContract] = None,
) -> (int, int):
    """Return the EntryPoint deposit and the native balance of `address`."""
    address = address or settings.account_address
    if w3 is None:
        w3 = utils.web3.get_w3(settings.sepolia_rpc_url)
    if entry_point is None:
        entry_point = utils.web3.EntryPoint(w3, settings.entry_point_address)

    deposit = await utils.web3.get_deposit(entry_point, address)
    logger.info("EntryPoint balance: %s ETH", Web3.from_wei(deposit, "ether"))

    balance = await utils.web3.get_balance(w3, address)
    logger.info("Account balance: %s ETH", Web3.from_wei(balance, "ether"))

    return deposit, balance


async def stake_for_paymaster(
    settings: Settings,
    w3: Optional[AsyncWeb3] = None,
    paymaster: Optional[AsyncContract] = None,
) -> str:
    settings.require("private_key")
    signer = Signer(settings.private_key)

    if w3 is None:
        w3 = utils.web3.get_w3(settings.sepolia_rpc_url)
    if paymaster is None:
        paymaster = utils.web3.Paymaster(w3, settings.paymaster_address)

    logger.info(
        "Staking %s ETH for paymaster %s from %s, unstake delay %d seconds",
        Web3.from_wei(settings.stake_amount, "ether"),
        settings.paymaster_address,
        signer.address,
        settings.unstake_delay,
    )
    tx_hash = await utils.web3.add_stake(
        w3, paymaster, signer, settings.stake_amount, settings.unstake_delay
    )
    logger.info("Stake transaction %s confirmed", tx_hash)

    return tx_hash
