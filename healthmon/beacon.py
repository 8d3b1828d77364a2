"""
Beacon-node readiness over the standard REST API.

Numbers in beacon responses are decimal strings. The head block's slot plays
the role of the block number; its timestamp is derived from genesis time and
SECONDS_PER_SLOT, which are fetched once and cached.
"""

import logging
from typing import Any, Optional, Union

import requests

from healthmon.adapter import ChainAdapter
from healthmon.errors import BlockDecodeError, ProtocolError, TransportError
from healthmon.models import Block, SyncStatus

LOG = logging.getLogger(__name__)

SYNCING_PATH = "/eth/v1/node/syncing"
HEAD_HEADER_PATH = "/eth/v1/beacon/headers/head"
GENESIS_PATH = "/eth/v1/beacon/genesis"
CONFIG_SPEC_PATH = "/eth/v1/config/spec"


def beacon_url(addr: str, port: int, certificate: Optional[str] = None) -> str:
    if addr.startswith("http://") or addr.startswith("https://"):
        return f"{addr}:{port}"
    scheme = "https" if certificate else "http"
    return f"{scheme}://{addr}:{port}"


def _uint(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None


def _data(body: Any, path: str) -> Any:
    if not isinstance(body, dict) or "data" not in body:
        raise ProtocolError(f"{path} response has no data field")
    return body["data"]


def decode_syncing(body: Any) -> SyncStatus:
    data = _data(body, SYNCING_PATH)
    if not isinstance(data, dict):
        raise ProtocolError(f"unexpected {SYNCING_PATH} data: {data!r}")

    is_syncing = data.get("is_syncing")
    if is_syncing is False:
        return SyncStatus.not_syncing()
    if is_syncing is not True:
        raise ProtocolError(f"unexpected is_syncing value: {is_syncing!r}")

    distance = _uint(data.get("sync_distance"))
    if distance is None:
        return SyncStatus.unknown()
    return SyncStatus.with_distance(distance)


def decode_head_slot(body: Any) -> int:
    data = _data(body, HEAD_HEADER_PATH)
    try:
        raw_slot = data["header"]["message"]["slot"]
    except (KeyError, TypeError) as e:
        raise ProtocolError(f"head header has no slot: {e}") from e
    slot = _uint(raw_slot)
    if slot is None:
        raise BlockDecodeError(f"can not parse head slot: {raw_slot!r}")
    return slot


class BeaconAdapter(ChainAdapter):
    def __init__(
        self,
        url: str,
        timeout: float,
        certificate: Optional[str] = None,
        session: Optional[requests.Session] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(url, timeout, **kwargs)
        self.session = session if session is not None else requests.Session()
        self.verify: Union[str, bool] = certificate if certificate else True
        self.genesis_time: Optional[int] = None
        self.seconds_per_slot: Optional[int] = None

    def _get(self, path: str) -> Any:
        try:
            resp = self.session.get(self.url + path, timeout=self.timeout, verify=self.verify)
        except requests.RequestException as e:
            raise TransportError(f"GET {path} failed: {e}") from e
        if resp.status_code != 200:
            raise TransportError(f"incorrect response status code: {resp.status_code} ({path})")
        try:
            return resp.json()
        except ValueError as e:
            raise ProtocolError(f"GET {path} returned invalid JSON: {e}") from e

    def _load_chain_timing(self) -> None:
        if self.genesis_time is None:
            raw = _data(self._get(GENESIS_PATH), GENESIS_PATH)
            value = _uint(raw.get("genesis_time") if isinstance(raw, dict) else None)
            if value is None:
                raise ProtocolError(f"can not parse genesis_time: {raw!r}")
            self.genesis_time = value
        if self.seconds_per_slot is None:
            raw = _data(self._get(CONFIG_SPEC_PATH), CONFIG_SPEC_PATH)
            value = _uint(raw.get("SECONDS_PER_SLOT") if isinstance(raw, dict) else None)
            if not value:
                raise ProtocolError(f"can not parse SECONDS_PER_SLOT from {CONFIG_SPEC_PATH}")
            self.seconds_per_slot = value
            LOG.info("beacon chain genesis %d, %ds slots",
                     self.genesis_time, self.seconds_per_slot)

    def get_sync_status(self, token: Optional[str]) -> SyncStatus:
        return decode_syncing(self._get(SYNCING_PATH))

    def get_latest_block(self, token: Optional[str]) -> Block:
        slot = decode_head_slot(self._get(HEAD_HEADER_PATH))
        self._load_chain_timing()
        assert self.genesis_time is not None and self.seconds_per_slot is not None
        return Block(number=slot, timestamp=self.genesis_time + slot * self.seconds_per_slot)
