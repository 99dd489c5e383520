"""
Timer decorator to profile the durations of chain calls and services.

Usage:
```python
from testnetfaucet.utils.timer import async_timer

logger = api_logger.get()

@async_timer("chain_gateway_repository.get_balance", logger=logger)
async def get_balance(self, address: str) -> int:
    ...
```

In the logs you will see:
{
  "asctime": "2024-10-17 11:34:18,471",
  "name": "TESTNET_FAUCET",
  "levelname": "DEBUG",
  "message": "Timer: chain_gateway_repository.get_balance took 0.051923 s",
  "taskName": "Task-1"
}

"""

import functools
import logging
from datetime import datetime
from datetime import timezone
from typing import Optional


class Timer:
    """Measure elapsed time"""

    started_at: datetime
    ended_at: Optional[datetime] = None

    def __init__(self, text: Optional[str] = None, logger=None):
        self.text = text
        self.logger = logging.getLogger(__name__) if logger is None else logger

    @property
    def elapsed(self) -> float:
        """Elapsed time in seconds"""
        if self.ended_at is None:
            return (datetime.now(timezone.utc) - self.started_at).total_seconds()
        return (self.ended_at - self.started_at).total_seconds()

    async def __aenter__(self):
        self.started_at = datetime.now(timezone.utc)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.ended_at = datetime.now(timezone.utc)
        if self.text is not None:
            failed = " (failed)" if exc_type is not None else ""
            self.logger.debug("Timer: %s took %f s%s", self.text, self.elapsed, failed)


def async_timer(name: str, logger: logging.Logger):
    def decorator(function):
        @functools.wraps(function)
        async def wrapper(*args, **kwargs):
            async with Timer(name, logger=logger):
                return await function(*args, **kwargs)

        return wrapper

    return decorator
