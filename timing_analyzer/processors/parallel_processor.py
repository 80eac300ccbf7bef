"""
Parallel processor: runs a distributed operation on a pool of worker processes
and gathers each worker's timings back into the driver's session.
"""

import os
from multiprocessing import Pool
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.recorder import MetricsRecorder, MetricsSession, OperationTimer, current_recorder, use_recorder
from ..core.timer import Timer
from ..core.types import TimingPath


def _process_single_item(
    args: Tuple[Callable[[Any], Any], Any, Optional[Sequence[TimingPath]], str]
) -> Tuple[Any, Dict[TimingPath, Timer]]:
    """
    Process one item independently. Designed to run in a worker process.

    Args:
        args: Tuple of (fn, item, open_paths, task_name). open_paths is None
              when the driver is not recording.

    Returns:
        Tuple of (fn result, worker timer mapping)
    """
    fn, item, open_paths, task_name = args

    if open_paths is None:
        return fn(item), {}

    recorder = MetricsSession().new_recorder(open_paths)
    with use_recorder(recorder):
        with OperationTimer(task_name).time():
            result = fn(item)
    return result, recorder.snapshot()


class ParallelTimingProcessor:
    """Run work items in parallel using multiprocessing, as one distributed operation."""

    def __init__(self, num_workers: Optional[int] = None):
        """
        Initialize parallel processor.

        Args:
            num_workers: Number of worker processes (default: CPU count)
        """
        self.num_workers = num_workers or os.cpu_count() or 4

    def map(
        self,
        name: str,
        fn: Callable[[Any], Any],
        items: Iterable[Any],
        recorder: Optional[MetricsRecorder] = None
    ) -> List[Any]:
        """
        Apply `fn` to every item as the distributed operation `name`.

        The whole call is timed on the driver as a distributed operation, so its
        time is removed from the enclosing operations' driver-only totals. Each
        call of `fn` is timed in its worker as "<name> task" beneath it.

        Args:
            name: Operation label
            fn: Picklable callable applied to each item
            items: Work items
            recorder: Recorder to use (default: the current recorder; nothing is
                      recorded when there is none)

        Returns:
            Results in the order of `items`
        """
        recorder = recorder if recorder is not None else current_recorder()
        items = list(items)

        with OperationTimer(name, recorder=recorder, is_distributed=True).time():
            open_paths = recorder.open_paths() if recorder is not None else None
            work_items = [(fn, item, open_paths, f"{name} task") for item in items]

            if len(work_items) <= 1 or self.num_workers <= 1:
                outputs = self._process_sequential(work_items)
            else:
                effective_workers = min(self.num_workers, len(work_items))
                with Pool(processes=effective_workers) as pool:
                    outputs = pool.map(_process_single_item, work_items, chunksize=1)

        results = []
        for result, timers in outputs:
            if recorder is not None and timers:
                recorder.session.contribute(timers)
            results.append(result)
        return results

    @staticmethod
    def _process_sequential(work_items: List[Tuple]) -> List[Tuple[Any, Dict[TimingPath, Timer]]]:
        """
        Fallback sequential processing for a single item or a single worker.
        """
        return [_process_single_item(work_item) for work_item in work_items]
