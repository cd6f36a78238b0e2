import logging
import time

from leadflow.errors import TransportError

logger = logging.getLogger(__name__)


class RetryPolicy:
    """
    Bounded retry within a single job run.

    Only exceptions in ``retry_on`` are retried; anything else propagates on
    the first attempt. Delay before retry n is ``base_delay ** n`` seconds.
    """

    def __init__(self, max_attempts=1, base_delay=2, retry_on=(TransportError,), sleep=time.sleep):
        self.max_attempts = max(1, int(max_attempts))
        self.base_delay = base_delay
        self.retry_on = retry_on
        self.sleep = sleep

    @classmethod
    def from_config(cls, config):
        return cls(
            max_attempts=config.get("AUTOMATION_MAX_ATTEMPTS", 1),
            base_delay=config.get("AUTOMATION_RETRY_BASE_DELAY", 2),
        )

    def call(self, operation):
        attempt = 0
        while True:
            attempt += 1
            try:
                return operation()
            except self.retry_on as e:
                if attempt >= self.max_attempts:
                    raise
                delay = self.base_delay ** attempt if self.base_delay else 0
                logger.warning(
                    f"Retrying after transport error: {e}",
                    extra={"attempt": attempt, "delay": delay},
                )
                if delay:
                    self.sleep(delay)
