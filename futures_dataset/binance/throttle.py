from __future__ import annotations

import time
from functools import wraps
from typing import Callable, Optional, TypeVar


T = TypeVar("T")

# Binance bans IPs that hammer the public data endpoints; 2s on each side keeps
# a single sequential client well under the limit.
DEFAULT_DELAY_SECONDS = 2.0


def throttled(
    func: Callable[..., T],
    delay: float = DEFAULT_DELAY_SECONDS,
    sleep: Optional[Callable[[float], None]] = None,
) -> Callable[..., T]:
    """Wrap func so every call sleeps `delay` seconds before and after it.

    The trailing sleep also runs when func raises, so pacing holds across errors.
    """
    sleep = sleep or time.sleep

    @wraps(func)
    def wrapper(*args, **kwargs) -> T:
        sleep(delay)
        try:
            return func(*args, **kwargs)
        finally:
            sleep(delay)

    return wrapper
