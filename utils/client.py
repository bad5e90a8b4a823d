import itertools
import logging
from typing import Optional

from httpx import AsyncClient, DecodingError, Response

import app.constants as constants
from app.exceptions import BundlerError
from utils.user_op import UserOp

logger = logging.getLogger(__name__)


class JsonRpcRequest:
    def __init__(self, method: str, params: list, id_: int = 1):
        self.method = method
        self.params = params
        self.id = id_

    def json(self) -> dict:
        return {
            "jsonrpc": constants.JSON_RPC_VERSION,
            "id": self.id,
            "method": self.method,
            "params": self.params,
        }


class BundlerClient:
    """
    JSON-RPC client for an ERC-4337 bundler.

    Requests are POSTed to `url` through `client`, which the caller opens
    and closes.
    """

    def __init__(self, client: AsyncClient, url: str):
        self.client = client
        self.url = url
        self._ids = itertools.count(1)

    async def send_user_op(self, user_op: UserOp, entry_point: str) -> str:
        return await self._make_request(
            "eth_sendUserOperation", [user_op.rpc_json(), entry_point]
        )

    async def get_user_op(self, hash_: str) -> Optional[dict]:
        return await self._make_request("eth_getUserOperationByHash", [hash_])

    async def get_user_op_receipt(self, hash_: str) -> Optional[dict]:
        return await self._make_request("eth_getUserOperationReceipt", [hash_])

    async def supported_entry_points(self) -> list:
        return await self._make_request("eth_supportedEntryPoints", [])

    async def _make_request(self, method: str, params: list):
        request = JsonRpcRequest(method, params, next(self._ids))
        response = await self.client.post(self.url, json=request.json())
        response_json = self._json(response)

        if response_json.get("error"):
            error = BundlerError.from_response(response_json["error"])
            logger.error("%s failed: %s", method, error)
            raise error

        response.raise_for_status()
        return response_json.get("result")

    @classmethod
    def _json(cls, response: Response) -> dict:
        try:
            response_json = response.json()
        except ValueError:
            response_json = None

        if not isinstance(response_json, dict):
            response.raise_for_status()
            raise DecodingError(
                f"Not a JSON-RPC response: {response.text[:200]!r}",
                request=response.request,
            )

        return response_json
