"""
Failure taxonomy for one readiness evaluation.

Every error raised by an adapter during a poll cycle is a ReadinessError;
the poll loop records str(error) as the verdict's last error.
"""


def seconds_to_human_readable(seconds: float) -> str:
    total = max(0, int(seconds))
    days, rem = divmod(total, 86_400)
    hours, rem = divmod(rem, 3_600)
    minutes, secs = divmod(rem, 60)
    if days:
        return f"{days}d {hours}h {minutes}m {secs}s"
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


class ConfigError(Exception):
    """Invalid startup configuration. Fatal: raised before polling starts."""


class ReadinessError(Exception):
    """Base class for every non-fatal evaluation failure."""


class TransportError(ReadinessError):
    """Network failure, timeout or non-200 HTTP status."""


class ProtocolError(ReadinessError):
    """Response body does not match any expected shape."""


class AmbiguousSyncStatus(ReadinessError):
    def __init__(self, detail: str = "node reports syncing without a distance") -> None:
        super().__init__(f"ambiguous sync status: {detail}")


class SyncLag(ReadinessError):
    def __init__(self, distance: int, tolerance: int) -> None:
        self.distance = distance
        self.tolerance = tolerance
        super().__init__(
            f"syncing, distance {distance} blocks (tolerance: {tolerance})")


class BlockDecodeError(ReadinessError):
    """Malformed block number or timestamp."""


class StaleBlock(ReadinessError):
    def __init__(self, age: float) -> None:
        self.age = age
        super().__init__(
            f"latest block is too old: {seconds_to_human_readable(age)}")


class StallDetected(ReadinessError):
    def __init__(self, elapsed: float) -> None:
        self.elapsed = elapsed
        super().__init__(
            f"no new block for {seconds_to_human_readable(elapsed)}")
