import json
from pathlib import Path

from web3 import AsyncWeb3, Web3
from web3.contract import AsyncContract

import app.constants as constants
from app.exceptions import TransactionError
from utils.packing import to_bytes

ABI_DIR = Path(__file__).parent / "abi"


def load_abi(contract_name: str) -> list:
    with open(ABI_DIR / f"{contract_name}.json") as f:
        return json.load(f)["abi"]


entry_point_abi = load_abi("EntryPoint")
account_abi = load_abi("SimpleAccount")
paymaster_abi = load_abi("Paymaster")


def get_w3(rpc_endpoint_uri: str) -> AsyncWeb3:
    # an empty URI falls back to the provider default, http://localhost:8545
    return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_endpoint_uri or None))


def EntryPoint(w3: AsyncWeb3, address: str) -> AsyncContract:
    return w3.eth.contract(
        address=Web3.to_checksum_address(address), abi=entry_point_abi
    )


def Paymaster(w3: AsyncWeb3, address: str) -> AsyncContract:
    return w3.eth.contract(
        address=Web3.to_checksum_address(address), abi=paymaster_abi
    )


def encode_execute_call_data(dest: str, value: int, func) -> bytes:
    """ABI-encode `SimpleAccount.execute(dest, value, func)`."""
    account = Web3().eth.contract(abi=account_abi)
    call_data = account.encode_abi(
        "execute", args=[Web3.to_checksum_address(dest), value, to_bytes(func)]
    )
    return Web3.to_bytes(hexstr=call_data)


async def get_nonce(
    entry_point: AsyncContract, sender: str, key: int = constants.NONCE_KEY
) -> int:
    return await entry_point.functions.getNonce(
        Web3.to_checksum_address(sender), key
    ).call()


async def get_deposit(entry_point: AsyncContract, address: str) -> int:
    return await entry_point.functions.balanceOf(
        Web3.to_checksum_address(address)
    ).call()


async def get_balance(w3: AsyncWeb3, address: str) -> int:
    return await w3.eth.get_balance(Web3.to_checksum_address(address))


async def add_stake(
    w3: AsyncWeb3, paymaster: AsyncContract, signer, amount: int, delay: int
) -> str:
    tx = await paymaster.functions.addStake(delay).build_transaction(
        {
            "from": signer.address,
            "value": amount,
            "nonce": await w3.eth.get_transaction_count(signer.address),
        }
    )
    tx_hash = await w3.eth.send_raw_transaction(signer.sign_transaction(tx))
    receipt = await w3.eth.wait_for_transaction_receipt(tx_hash)
    if receipt["status"] != 1:
        raise TransactionError(tx_hash.to_0x_hex())

    return tx_hash.to_0x_hex()
