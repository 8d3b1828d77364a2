"""
Execution-layer (and Avalanche C-chain) readiness over Ethereum JSON-RPC.

Raw responses are fetched through the web3 provider so that hex quantities
are decoded by healthmon.hexcodec instead of web3's formatters:

    eth_syncing                          -> false | {currentBlock, highestBlock, ...}
    eth_getBlockByNumber ["latest", false] -> {number, timestamp, ...}
"""

from typing import Any, Dict, Optional

import requests
from web3 import Web3
from web3._utils.http_session_manager import HTTPSessionManager
from web3.providers import HTTPProvider
from web3.types import RPCEndpoint

from healthmon.adapter import ChainAdapter
from healthmon.errors import BlockDecodeError, ProtocolError, TransportError
from healthmon.hexcodec import HexParseError, parse_hex_uint, parse_hex_uint_strict
from healthmon.models import Block, SyncInfo, SyncStatus

AVAX_C_CHAIN_PATH = "/ext/bc/C/rpc"


class StrictHTTPSessionManager(HTTPSessionManager):
    """Rejects every status other than 200, not only 4xx/5xx."""

    def get_response_from_post_request(self, endpoint_uri: Any, *args: Any, **kwargs: Any) -> requests.Response:
        response = super().get_response_from_post_request(endpoint_uri, *args, **kwargs)
        if response.status_code != 200:
            response.close()
            raise requests.HTTPError(
                f"incorrect response status code: {response.status_code}", response=response)
        return response


class BearerHTTPProvider(HTTPProvider):
    """HTTPProvider that adds `Authorization: Bearer <token>` when a token is set."""

    token: Optional[str] = None

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._request_session_manager = StrictHTTPSessionManager()

    def get_request_headers(self) -> Dict[str, str]:
        headers = dict(super().get_request_headers())
        headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


def make_w3(url: str, timeout: float) -> Web3:
    """
    Create a Web3 client for one node. Provider-level retries are disabled:
    the poll cadence is the only retry mechanism.
    """
    provider = BearerHTTPProvider(
        url,
        request_kwargs={"timeout": timeout},
        exception_retry_configuration=None,
    )
    return Web3(provider)


def execution_url(addr: str, port: int) -> str:
    if addr.startswith("http://") or addr.startswith("https://"):
        return f"{addr}:{port}"
    return f"http://{addr}:{port}"


def avax_url(addr: str, port: int) -> str:
    return execution_url(addr, port) + AVAX_C_CHAIN_PATH


def decode_sync_result(result: Any) -> SyncStatus:
    """
    eth_syncing returns either a progress object or a boolean.
    `true` carries no distance and cannot be judged.
    """
    if isinstance(result, dict):
        info = SyncInfo(
            current_block=parse_hex_uint(result.get("currentBlock")),
            highest_block=parse_hex_uint(result.get("highestBlock")),
        )
        return SyncStatus.with_distance(info.distance)
    if result is False:
        return SyncStatus.not_syncing()
    if result is True:
        return SyncStatus.unknown()
    raise ProtocolError(f"unexpected eth_syncing result: {result!r}")


def decode_block_result(result: Any) -> Block:
    if not isinstance(result, dict):
        raise ProtocolError(f"unexpected eth_getBlockByNumber result: {result!r}")
    try:
        number = parse_hex_uint_strict(result.get("number"))
    except HexParseError as e:
        raise BlockDecodeError(f"can not parse block number: {e}") from e
    try:
        timestamp = parse_hex_uint_strict(result.get("timestamp"))
    except HexParseError as e:
        raise BlockDecodeError(f"can not parse block timestamp: {e}") from e
    return Block(number=number, timestamp=timestamp)


class ExecutionAdapter(ChainAdapter):
    def __init__(self, url: str, timeout: float, **kwargs: Any) -> None:
        super().__init__(url, timeout, **kwargs)
        self.w3 = make_w3(url, timeout)

    def _rpc(self, method: str, params: list, token: Optional[str]) -> Any:
        provider = self.w3.provider
        provider.token = token  # type: ignore[attr-defined]
        try:
            resp = provider.make_request(RPCEndpoint(method), params)
        except requests.RequestException as e:
            raise TransportError(f"{method} request failed: {e}") from e
        except ValueError as e:
            raise ProtocolError(f"{method} returned invalid JSON: {e}") from e

        if not isinstance(resp, dict):
            raise ProtocolError(f"{method} returned {type(resp).__name__}, expected object")
        if resp.get("error") is not None:
            raise ProtocolError(f"{method} error: {resp['error']}")
        if "result" not in resp:
            raise ProtocolError(f"{method} response has no result")
        return resp["result"]

    def get_sync_status(self, token: Optional[str]) -> SyncStatus:
        return decode_sync_result(self._rpc("eth_syncing", [], token))

    def get_latest_block(self, token: Optional[str]) -> Block:
        return decode_block_result(self._rpc("eth_getBlockByNumber", ["latest", False], token))
