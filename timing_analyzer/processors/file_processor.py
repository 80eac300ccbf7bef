"""
Snapshot file processing using streaming parser.
"""

import json
from typing import Dict, List, Tuple

import ijson

from ..core.timer import Timer
from ..core.types import SerializedPathSegment, SerializedTimer, StageTiming, TimingPath


def _optional_int(value):
    return None if value is None else int(value)


class SnapshotFileProcessor:
    """Reads and writes contributor timer snapshots as JSON files."""

    @staticmethod
    def serialize_path(path: TimingPath) -> List[SerializedPathSegment]:
        return [
            {'name': p.name, 'sequence_id': p.sequence_id, 'distributed': p.is_distributed}
            for p in path.ancestry()
        ]

    @staticmethod
    def serialize(timers: Dict[TimingPath, Timer]) -> Dict[str, List[SerializedTimer]]:
        """
        Convert a timer mapping to the snapshot JSON structure.

        Args:
            timers: Mapping of TimingPath -> Timer

        Returns:
            Dictionary with a 'timers' list
        """
        return {
            'timers': [
                {
                    'path': SnapshotFileProcessor.serialize_path(path),
                    'total_time_ns': timer.total_time,
                    'count': timer.count,
                    'min_ns': timer.min_time,
                    'max_ns': timer.max_time,
                }
                for path, timer in timers.items()
            ]
        }

    @staticmethod
    def dump(timers: Dict[TimingPath, Timer], file_path: str) -> None:
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(SnapshotFileProcessor.serialize(timers), f)

    @staticmethod
    def load(file_path: str) -> Dict[TimingPath, Timer]:
        """
        Read a snapshot file into a timer mapping.

        Paths sharing a prefix share the same parent TimingPath objects.
        An entry that repeats a path already read is merged into it.

        Args:
            file_path: Path to the snapshot JSON file

        Returns:
            Mapping of TimingPath -> Timer
        """
        timers: Dict[TimingPath, Timer] = {}
        interned: Dict[Tuple, TimingPath] = {}

        with open(file_path, 'rb') as f:
            for entry in ijson.items(f, 'timers.item'):
                path = None
                key: Tuple = ()
                for segment in entry.get('path', []):
                    key = key + ((segment['name'], int(segment['sequence_id'])),)
                    existing = interned.get(key)
                    if existing is None:
                        existing = TimingPath(
                            segment['name'],
                            int(segment['sequence_id']),
                            path,
                            bool(segment.get('distributed', False))
                        )
                        interned[key] = existing
                    path = existing

                if path is None:
                    continue

                timer = Timer(
                    total_time=int(entry.get('total_time_ns', 0)),
                    count=int(entry.get('count', 0)),
                    min_time=_optional_int(entry.get('min_ns')),
                    max_time=_optional_int(entry.get('max_ns')),
                )
                timers[path] = timers[path].merged(timer) if path in timers else timer

        return timers

    @staticmethod
    def load_stage_timings(file_path: str) -> List[StageTiming]:
        """
        Read stage timings from a JSON list of
        {"stage_name": ..., "stage_id": ..., "duration_ns": ...} objects.

        Args:
            file_path: Path to the stage timings JSON file

        Returns:
            List of StageTiming in file order
        """
        stages = []
        with open(file_path, 'rb') as f:
            for entry in ijson.items(f, 'item'):
                stages.append(StageTiming(
                    stage_name=entry.get('stage_name'),
                    stage_id=entry.get('stage_id'),
                    duration=int(entry.get('duration_ns', 0)),
                ))
        return stages
