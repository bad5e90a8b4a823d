from typing import Literal

from eth_account import Account
from eth_account.messages import encode_defunct


class Signer:
    """
    Owner key of the smart account.

    In "eip191" mode the UserOp hash is signed as a personal message
    (`"\\x19Ethereum Signed Message:\\n32" + hash`), which is what
    SimpleAccount-style accounts recover against. In "raw" mode the bare
    hash is signed.
    """

    def __init__(
        self, private_key: str, mode: Literal["eip191", "raw"] = "eip191"
    ):
        if mode not in ("eip191", "raw"):
            raise ValueError(f"Unknown signature mode '{mode}'.")
        self._account = Account.from_key(private_key)
        self.mode = mode

    @property
    def address(self) -> str:
        return self._account.address

    def sign_user_op_hash(self, user_op_hash: bytes) -> bytes:
        if self.mode == "raw":
            signed = self._account.unsafe_sign_hash(user_op_hash)
        else:
            signed = self._account.sign_message(
                encode_defunct(primitive=user_op_hash)
            )
        return bytes(signed.signature)

    def sign_transaction(self, tx: dict) -> bytes:
        return bytes(self._account.sign_transaction(tx).raw_transaction)
