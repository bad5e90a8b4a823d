from typing import Optional, Union

from web3 import Web3

import app.constants as constants


def pack_uint128_pair(hi: int, lo: int, names=("hi", "lo")) -> bytes:
    """
    Pack two uint128 values into one bytes32 word, `hi` in the upper 16
    bytes and `lo` in the lower 16 bytes, both big-endian.
    """
    return to_uint128_bytes(hi, names[0]) + to_uint128_bytes(lo, names[1])


def pack_paymaster_and_data(
    paymaster: Union[str, bytes],
    verification_gas_limit: int,
    post_op_gas_limit: int,
    data: Union[str, bytes] = b"",
) -> bytes:
    return (
        address_to_bytes(paymaster)
        + to_uint128_bytes(
            verification_gas_limit, "paymaster_verification_gas_limit"
        )
        + to_uint128_bytes(post_op_gas_limit, "paymaster_post_op_gas_limit")
        + to_bytes(data)
    )


def pack_init_code(
    factory: Optional[Union[str, bytes]], factory_data: Union[str, bytes] = b""
) -> bytes:
    if not factory:
        return b""

    return address_to_bytes(factory) + to_bytes(factory_data)


def to_uint128_bytes(v: int, name: str = "value") -> bytes:
    if not (isinstance(v, int) and 0 <= v < constants.MAX_UINT128):
        raise ValueError(f"'{name}' must be in range [0, 2**128).")

    return v.to_bytes(constants.UINT128_SIZE, "big")


def address_to_bytes(address: Union[str, bytes]) -> bytes:
    if isinstance(address, bytes):
        if len(address) != constants.ADDRESS_SIZE:
            raise ValueError("Must be an Ethereum address.")
        return address

    if not Web3.is_address(address):
        raise ValueError("Must be an Ethereum address.")

    return Web3.to_bytes(hexstr=address)


def to_bytes(v: Union[str, bytes, None]) -> bytes:
    if not v:
        return b""

    return v if isinstance(v, bytes) else Web3.to_bytes(hexstr=v)
