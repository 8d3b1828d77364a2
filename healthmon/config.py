"""
Startup configuration: validated settings plus the factories that turn them
into one adapter / token issuer pair for the monitored node.
"""

from dataclasses import dataclass
from typing import Optional

from healthmon.adapter import ChainAdapter
from healthmon.auth import JwtTokenIssuer
from healthmon.beacon import BeaconAdapter, beacon_url
from healthmon.errors import ConfigError
from healthmon.execution import ExecutionAdapter, avax_url, execution_url
from healthmon.models import ChainKind
from healthmon.poller import DEFAULT_INTERVAL_S
from healthmon.tracker import DEFAULT_STALL_THRESHOLD_S, LivenessTracker

DEFAULT_HTTP_ADDR = "localhost"
DEFAULT_HTTP_PORT = 21171


def parse_chain_kind(value: str) -> ChainKind:
    try:
        return ChainKind(value)
    except ValueError:
        raise ConfigError(f"unknown chain: {value}") from None


@dataclass
class Settings:
    chain: ChainKind
    addr: str = "localhost"
    port: Optional[int] = None
    timeout: float = 5.0
    stall_threshold: float = DEFAULT_STALL_THRESHOLD_S
    interval: float = DEFAULT_INTERVAL_S
    engine_jwt: Optional[str] = None
    sync_tolerance: int = 0
    certificate: Optional[str] = None
    http_addr: str = DEFAULT_HTTP_ADDR
    http_port: int = DEFAULT_HTTP_PORT

    def __post_init__(self) -> None:
        if not isinstance(self.chain, ChainKind):
            self.chain = parse_chain_kind(self.chain)
        if self.timeout <= 0:
            raise ConfigError("--timeout must be positive")
        if self.stall_threshold <= 0:
            raise ConfigError("--stall-threshold must be positive")
        if self.interval <= 0:
            raise ConfigError("--interval must be positive")
        if self.sync_tolerance < 0:
            raise ConfigError("--execution.sync-tolerance must not be negative")
        if self.engine_jwt and self.chain is ChainKind.BEACON:
            raise ConfigError("--execution.engine-jwt is not supported for beacon nodes")

    @property
    def node_port(self) -> int:
        return self.port if self.port else self.chain.default_port

    @property
    def node_url(self) -> str:
        if self.chain is ChainKind.AVAX:
            return avax_url(self.addr, self.node_port)
        if self.chain is ChainKind.BEACON:
            return beacon_url(self.addr, self.node_port, self.certificate)
        return execution_url(self.addr, self.node_port)

    @property
    def service_addr(self) -> str:
        return f"{self.http_addr}:{self.http_port}"


def build_adapter(settings: Settings) -> ChainAdapter:
    tracker = LivenessTracker(stall_threshold=settings.stall_threshold)
    if settings.chain is ChainKind.BEACON:
        return BeaconAdapter(
            settings.node_url,
            settings.timeout,
            certificate=settings.certificate,
            sync_tolerance=settings.sync_tolerance,
            tracker=tracker,
        )
    return ExecutionAdapter(
        settings.node_url,
        settings.timeout,
        sync_tolerance=settings.sync_tolerance,
        tracker=tracker,
    )


def build_token_issuer(settings: Settings) -> Optional[JwtTokenIssuer]:
    if not settings.engine_jwt:
        return None
    return JwtTokenIssuer.from_file(settings.engine_jwt)
