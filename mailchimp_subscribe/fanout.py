"""
fanout.py

Run independent Mailchimp calls side by side and wait for all of them.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, List

from . import config


def fan_out(func: Callable[[Any], Any], items: Iterable[Any], max_workers: int = None) -> List[Any]:
    """
    Submit func(item) for every item before waiting on any of them.

    Results come back in the order of `items`. The first failure (in that
    order) is re-raised once submitted work has stopped; calls not yet
    started are cancelled. Nothing is retried.
    """
    items = list(items)
    if not items:
        return []

    workers = min(max_workers or config.MAX_WORKERS, len(items))
    executor = ThreadPoolExecutor(max_workers=workers)
    try:
        futures = [executor.submit(func, item) for item in items]
        return [future.result() for future in futures]
    finally:
        executor.shutdown(wait=True, cancel_futures=True)
