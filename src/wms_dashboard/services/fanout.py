from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Generic, Hashable, Mapping, TypeVar

from .errors import ServiceError, normalize_error

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class FanOutResult(Generic[K, V]):
    values: dict[K, V] = field(default_factory=dict)
    errors: dict[K, ServiceError] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.errors


def fan_out(tasks: Mapping[K, Callable[[], V]], *, max_workers: int = 8) -> FanOutResult[K, V]:
    """Run independent loads concurrently and join them.

    Completion order is not preserved; callers only ever see the joined
    result, keyed the same way as ``tasks``.
    """
    result: FanOutResult[K, V] = FanOutResult()
    if not tasks:
        return result
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(tasks)))) as executor:
        futures = {executor.submit(task): key for key, task in tasks.items()}
        for future in as_completed(futures):
            key = futures[future]
            try:
                result.values[key] = future.result()
            except Exception as exc:
                result.errors[key] = normalize_error(exc)
    if result.errors:
        logger.warning("fan_out_partial", extra={"failed": len(result.errors), "total": len(tasks)})
    return result
