"""
Canonical UserOperation hashes.

Both oracles hash the operation with an empty signature and return the
32-byte digest the account is expected to sign. `LocalHashOracle`
re-implements `EntryPoint.getUserOpHash` of the v0.7 EntryPoint;
`EntryPointHashOracle` asks the deployed contract.
"""
import eth_abi
from web3 import Web3
from web3.contract import AsyncContract

from utils.user_op import UserOp


class HashOracle:
    async def get_user_op_hash(self, user_op: UserOp) -> bytes:
        raise NotImplementedError


class LocalHashOracle(HashOracle):
    def __init__(self, entry_point_address: str, chain_id: int):
        self.entry_point = Web3.to_checksum_address(entry_point_address)
        self.chain_id = chain_id

    async def get_user_op_hash(self, user_op: UserOp) -> bytes:
        return self.hash(user_op)

    def hash(self, user_op: UserOp) -> bytes:
        packed_user_op_hash = Web3.keccak(self.pack(user_op))
        return bytes(
            Web3.keccak(
                eth_abi.encode(
                    ["bytes32", "address", "uint256"],
                    [packed_user_op_hash, self.entry_point, self.chain_id],
                )
            )
        )

    @classmethod
    def pack(cls, user_op: UserOp) -> bytes:
        return eth_abi.encode(
            [
                "address",  # sender
                "uint256",  # nonce
                "bytes32",  # keccak(init_code)
                "bytes32",  # keccak(call_data)
                "bytes32",  # account_gas_limits
                "uint256",  # pre_verification_gas
                "bytes32",  # gas_fees
                "bytes32",  # keccak(paymaster_and_data)
            ],
            [
                Web3.to_checksum_address(user_op.sender),
                user_op.nonce,
                Web3.keccak(user_op.init_code),
                Web3.keccak(user_op.call_data),
                user_op.account_gas_limits,
                user_op.pre_verification_gas,
                user_op.gas_fees,
                Web3.keccak(user_op.paymaster_and_data),
            ],
        )


class EntryPointHashOracle(HashOracle):
    def __init__(self, entry_point: AsyncContract):
        self.entry_point = entry_point

    async def get_user_op_hash(self, user_op: UserOp) -> bytes:
        return bytes(
            await self.entry_point.functions.getUserOpHash(
                user_op.unsigned().values()
            ).call()
        )
