import logging
import threading
import time
from typing import Optional

from healthmon.adapter import ChainAdapter
from healthmon.auth import JwtTokenIssuer
from healthmon.errors import ReadinessError
from healthmon.state import ReadinessState

LOG = logging.getLogger(__name__)

DEFAULT_INTERVAL_S = 1.0


class Poller:
    """
    Sole writer of `state` and sole owner of `adapter` (and its tracker).
    Each cycle is independent; the fixed cadence is the retry mechanism.
    """

    def __init__(
        self,
        adapter: ChainAdapter,
        state: ReadinessState,
        token_issuer: Optional[JwtTokenIssuer] = None,
        interval: float = DEFAULT_INTERVAL_S,
    ) -> None:
        self.adapter = adapter
        self.state = state
        self.token_issuer = token_issuer
        self.interval = interval
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> None:
        try:
            token = self.token_issuer.mint() if self.token_issuer is not None else None
            self.adapter.is_ready(token)
        except ReadinessError as e:
            self.state.mark_unhealthy(e)
        except Exception as e:
            LOG.exception("unexpected error while evaluating %s", self.adapter.url)
            self.state.mark_unhealthy(e)
        else:
            self.state.mark_healthy()

    def run_forever(self) -> None:
        while True:
            time.sleep(self.interval)
            self.run_once()

    def start(self) -> threading.Thread:
        t = threading.Thread(target=self.run_forever, name="healthmon-poller", daemon=True)
        t.start()
        self._thread = t
        return t
