from typing import Optional

from eth_utils import is_hex
from pydantic import BaseModel, ConfigDict, field_validator
from web3 import Web3

from utils.packing import (
    pack_init_code,
    pack_paymaster_and_data,
    pack_uint128_pair,
    to_bytes,
)


class UserOp(BaseModel):
    """
    ERC-4337 v0.7 UserOperation in its unpacked form.

    The packed `PackedUserOperation` fields (`init_code`,
    `account_gas_limits`, `gas_fees`, `paymaster_and_data`) are derived on
    demand, so the gas values can be changed up to the moment of hashing.
    """

    model_config = ConfigDict(validate_assignment=True)

    sender: str
    nonce: int
    factory: Optional[str] = None
    factory_data: bytes = b""
    call_data: bytes = b""
    call_gas_limit: int = 0
    verification_gas_limit: int = 0
    pre_verification_gas: int = 0
    max_fee_per_gas: int = 0
    max_priority_fee_per_gas: int = 0
    paymaster: Optional[str] = None
    paymaster_verification_gas_limit: int = 0
    paymaster_post_op_gas_limit: int = 0
    paymaster_data: bytes = b""
    signature: bytes = b""

    @field_validator("sender", "factory", "paymaster")
    @classmethod
    def address(cls, v):
        if v is not None and not Web3.is_address(v):
            raise ValueError("Must be an Ethereum address.")
        return v

    @field_validator(
        "factory_data",
        "call_data",
        "paymaster_data",
        "signature",
        mode="before",
    )
    @classmethod
    def bytes_(cls, v):
        if isinstance(v, str) and not is_hex(v):
            raise ValueError("Not a hex value.")
        return to_bytes(v)

    @property
    def init_code(self) -> bytes:
        return pack_init_code(self.factory, self.factory_data)

    @property
    def account_gas_limits(self) -> bytes:
        return pack_uint128_pair(
            self.verification_gas_limit,
            self.call_gas_limit,
            names=("verification_gas_limit", "call_gas_limit"),
        )

    @property
    def gas_fees(self) -> bytes:
        return pack_uint128_pair(
            self.max_priority_fee_per_gas,
            self.max_fee_per_gas,
            names=("max_priority_fee_per_gas", "max_fee_per_gas"),
        )

    @property
    def paymaster_and_data(self) -> bytes:
        if not self.paymaster:
            return b""

        return pack_paymaster_and_data(
            self.paymaster,
            self.paymaster_verification_gas_limit,
            self.paymaster_post_op_gas_limit,
            self.paymaster_data,
        )

    def unsigned(self) -> "UserOp":
        return self.model_copy(update={"signature": b""})

    def values(self) -> list:
        """`PackedUserOperation` as the tuple the EntryPoint takes."""
        return [
            Web3.to_checksum_address(self.sender),
            self.nonce,
            self.init_code,
            self.call_data,
            self.account_gas_limits,
            self.pre_verification_gas,
            self.gas_fees,
            self.paymaster_and_data,
            self.signature,
        ]

    def rpc_json(self) -> dict:
        json = {
            "sender": Web3.to_checksum_address(self.sender),
            "nonce": hex(self.nonce),
        }
        if self.factory:
            json["factory"] = Web3.to_checksum_address(self.factory)
            json["factoryData"] = self._to_hex(self.factory_data)

        json.update(
            {
                "callData": self._to_hex(self.call_data),
                "callGasLimit": hex(self.call_gas_limit),
                "verificationGasLimit": hex(self.verification_gas_limit),
                "preVerificationGas": hex(self.pre_verification_gas),
                "maxFeePerGas": hex(self.max_fee_per_gas),
                "maxPriorityFeePerGas": hex(self.max_priority_fee_per_gas),
            }
        )
        if self.paymaster:
            json.update(
                {
                    "paymaster": Web3.to_checksum_address(self.paymaster),
                    "paymasterVerificationGasLimit": hex(
                        self.paymaster_verification_gas_limit
                    ),
                    "paymasterPostOpGasLimit": hex(
                        self.paymaster_post_op_gas_limit
                    ),
                    "paymasterData": self._to_hex(self.paymaster_data),
                }
            )

        json["signature"] = self._to_hex(self.signature)
        return json

    @classmethod
    def _to_hex(cls, v: bytes) -> str:
        return "0x" + v.hex()
