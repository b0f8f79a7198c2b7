import logging
import time
from typing import Callable, TypeVar


T = TypeVar("T")

logger = logging.getLogger(__name__)


def with_retry(
    func: Callable[[], T],
    retries: int = 3,
    base_delay: float = 1.0,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    last_error: Exception | None = None
    for attempt in range(retries):
        try:
            return func()
        except retry_on as exc:
            last_error = exc
            if attempt == retries - 1:
                break
            delay = base_delay * (2 ** attempt)
            logger.warning("[retry] attempt %d/%d failed: %s; sleeping %.1fs", attempt + 1, retries, exc, delay)
            time.sleep(delay)
    if last_error:
        raise last_error
    raise RuntimeError("Retry failed without exception")
