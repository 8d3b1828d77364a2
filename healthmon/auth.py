"""
Engine API authentication: a 32-byte hex secret shared with the node, from
which a short-lived HS256 token is minted for every poll cycle.
"""

import binascii
import pathlib
import time
from typing import Callable, Union

import jwt

from healthmon.errors import ConfigError

SECRET_LENGTH = 32


def load_jwt_secret(path: Union[str, pathlib.Path]) -> bytes:
    try:
        raw = pathlib.Path(path).read_text().strip()
    except OSError as exc:
        raise ConfigError(f"can not read JWT secret {path}: {exc}") from exc

    if raw.startswith(("0x", "0X")):
        raw = raw[2:]
    try:
        secret = binascii.unhexlify("".join(raw.split()))
    except (binascii.Error, ValueError) as exc:
        raise ConfigError(f"JWT secret {path} is not valid hex: {exc}") from exc

    if len(secret) != SECRET_LENGTH:
        raise ConfigError(
            f"JWT secret {path} must be {SECRET_LENGTH} bytes, got {len(secret)}")
    return secret


class JwtTokenIssuer:
    """Mints `{"iat": now}` tokens; the node accepts iat within +-60s."""

    def __init__(self, secret: bytes, clock: Callable[[], float] = time.time) -> None:
        self._secret = secret
        self._clock = clock

    @classmethod
    def from_file(cls, path: Union[str, pathlib.Path]) -> "JwtTokenIssuer":
        return cls(load_jwt_secret(path))

    def mint(self) -> str:
        token = jwt.encode({"iat": int(self._clock())}, self._secret, algorithm="HS256")
        return token if isinstance(token, str) else token.decode()
