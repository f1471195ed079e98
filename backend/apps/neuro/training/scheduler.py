"""
Data-parallel fan-out for per-individual work.

Forward passes and update chains touch only the individual they
process (plus read-only access to the champion), so they can run on
any worker in any order. Work is split into one contiguous chunk per
worker and every call to map() is a barrier: it returns only after
every chunk has finished.

PyTorch releases the GIL inside tensor kernels, so a thread pool is
enough to spread the forward passes over the available cores.
"""
import os
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from ..networks import Network

T = TypeVar('T')
R = TypeVar('R')


def _split(items: Sequence[T], parts: int) -> List[Sequence[T]]:
    """Split items into at most `parts` contiguous, non-empty chunks."""
    parts = max(1, min(parts, len(items)))
    size, extra = divmod(len(items), parts)
    chunks = []
    start = 0
    for index in range(parts):
        end = start + size + (1 if index < extra else 0)
        chunks.append(items[start:end])
        start = end
    return chunks


def _run_chunk(fn: Callable[[T], R], chunk: Sequence[T]) -> List[R]:
    return [fn(item) for item in chunk]


def _step(network: Network) -> None:
    network.step()


class ParallelStepScheduler:
    """
    Structured parallel-for with a join after every fan-out.

    With one worker everything runs inline on the calling thread.

    Example:
        with ParallelStepScheduler(workers=4) as scheduler:
            scheduler.step_all(population.networks)
            scheduler.map(update_one, individual_ids)
    """

    def __init__(self, workers: Optional[int] = None):
        """
        Initialize the scheduler.

        Args:
            workers: Number of worker threads. None uses one per CPU.
        """
        self.workers = workers if workers is not None else (os.cpu_count() or 1)
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

        self._executor = None
        if self.workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers,
                thread_name_prefix='neuro-worker',
            )

    def __enter__(self) -> 'ParallelStepScheduler':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> List[R]:
        """
        Apply fn to every item, in parallel, and wait for all of them.

        Results are returned in input order. If any call raised, the
        first exception (in input order) is re-raised after every chunk
        has finished.
        """
        items = list(items)
        if self._executor is None or len(items) <= 1:
            return _run_chunk(fn, items)

        futures = [
            self._executor.submit(_run_chunk, fn, chunk)
            for chunk in _split(items, self.workers)
        ]
        wait(futures)

        results: List[R] = []
        for future in futures:
            results.extend(future.result())
        return results

    def step_all(self, networks: Iterable[Network]) -> None:
        """Run step() on every network; returns once all are done."""
        self.map(_step, networks)

    def close(self) -> None:
        """Shut the worker pool down."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
