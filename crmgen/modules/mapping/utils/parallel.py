#  Copyright (c) 2025 Evolveum and contributors
#
#  Licensed under the EUPL-1.2 or later.

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def map_in_parallel(
    items: Sequence[T],
    worker: Callable[[T], R],
    *,
    max_workers: int,
    logger_scope: str = "",
) -> List[R]:
    """
    Apply worker to every item on a thread pool and return results aligned with items.

    Workers must only touch their own item. The first worker exception is re-raised
    once all submitted work has finished.

    Args:
        items: Work items; each is handed to exactly one worker call
        worker: Function processing a single item
        max_workers: Upper bound on pool threads; 1 (or a single item) runs inline
        logger_scope: Scope prefix for logging (e.g., "Mapping:Reconcile")

    Returns:
        List of worker results in the order of items
    """
    if not items:
        return []

    if max_workers <= 1 or len(items) == 1:
        return [worker(item) for item in items]

    pool_size = min(max_workers, len(items))
    logger.debug("[%s] Processing %d items on %d threads", logger_scope, len(items), pool_size)
    with ThreadPoolExecutor(max_workers=pool_size) as executor:
        return list(executor.map(worker, items))
