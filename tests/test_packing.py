import pytest

from utils.packing import (
    pack_init_code,
    pack_paymaster_and_data,
    pack_uint128_pair,
)

PAYMASTER = "0x846d83E646B8e740bDe4F5f63C0849208817Cff9"


def test_packs_account_gas_limits():
    packed = pack_uint128_pair(60000, 200000)

    assert packed.hex() == (
        "0000000000000000000000000000ea60" "00000000000000000000000000030d40"
    )


@pytest.mark.parametrize(
    "hi, lo",
    [(0, 0), (1, 2**128 - 1), (2**128 - 1, 0), (5_000_000_000, 50_000_000_000)],
)
def test_packs_hi_in_upper_and_lo_in_lower_half(hi, lo):
    packed = pack_uint128_pair(hi, lo)

    assert len(packed) == 32
    assert packed[:16] == hi.to_bytes(16, "big")
    assert packed[16:] == lo.to_bytes(16, "big")


def test_swapped_pair_packs_differently():
    assert pack_uint128_pair(1, 2) != pack_uint128_pair(2, 1)
    assert pack_uint128_pair(0, 2**64) != pack_uint128_pair(1, 0)


@pytest.mark.parametrize("value", [-1, 2**128, 2**256])
def test_rejects_values_out_of_uint128_range(value):
    with pytest.raises(ValueError, match=r"must be in range \[0, 2\*\*128\)"):
        pack_uint128_pair(value, 0)
    with pytest.raises(ValueError, match="'call_gas_limit' must be in range"):
        pack_uint128_pair(
            0, value, names=("verification_gas_limit", "call_gas_limit")
        )


def test_packs_paymaster_and_data():
    data = bytes.fromhex("deadbeef")
    packed = pack_paymaster_and_data(PAYMASTER, 20000, 7, data)

    assert len(packed) == 20 + 16 + 16 + len(data)
    assert packed[:20] == bytes.fromhex(PAYMASTER[2:])
    assert packed[20:36] == (20000).to_bytes(16, "big")
    assert packed[36:52] == (7).to_bytes(16, "big")
    assert packed[52:] == data


def test_packs_paymaster_and_data_without_paymaster_data():
    packed = pack_paymaster_and_data(PAYMASTER, 20000, 0, "0x")

    assert len(packed) == 52
    assert packed[36:52] == b"\x00" * 16


def test_rejects_paymaster_that_is_not_an_address():
    with pytest.raises(ValueError, match="Must be an Ethereum address"):
        pack_paymaster_and_data(PAYMASTER[:-1], 0, 0)
    with pytest.raises(ValueError, match="Must be an Ethereum address"):
        pack_paymaster_and_data(b"\x01" * 19, 0, 0)


def test_rejects_paymaster_gas_limits_out_of_range():
    with pytest.raises(
        ValueError, match="'paymaster_post_op_gas_limit' must be in range"
    ):
        pack_paymaster_and_data(PAYMASTER, 0, 2**128)


def test_packs_init_code():
    factory = "0x91e60e0613810449d098b0b5ec8b51a0fe8c8985"

    assert pack_init_code(None, b"\x01") == b""
    assert pack_init_code(factory, "0x5fbfb9cf") == bytes.fromhex(
        factory[2:] + "5fbfb9cf"
    )
