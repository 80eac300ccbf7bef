"""
Main timing analyzer orchestrator.
"""

from multiprocessing import Pool
from typing import Dict, Iterable, List, Optional, TextIO

from ..formatters.table_renderer import TableRenderer
from ..processors import SnapshotFileProcessor, merge, merge_all
from ..report.assembler import ReportAssembler
from ..report.rows import TimingReport
from .timer import Timer
from .types import AnalyzerConfig, StageTiming, TimingPath


class TimingAnalyzer:
    """Main orchestrator for building reports from contributor snapshots."""

    def __init__(
        self,
        num_workers: Optional[int] = None,
        warn_on_dropped_nodes: bool = True
    ):
        """
        Initialize the TimingAnalyzer.

        Args:
            num_workers: Worker processes used to read snapshot files (default: 1)
            warn_on_dropped_nodes: If True, logs a warning for timers left out of the tree
        """
        # Configuration
        self.config = AnalyzerConfig(
            num_workers=num_workers,
            warn_on_dropped_nodes=warn_on_dropped_nodes
        )

        # Contributor mappings and optional stage metadata
        self.contributions: List[Dict[TimingPath, Timer]] = []
        self.stage_timings: Optional[List[StageTiming]] = None

        # Initialize components
        self.file_processor = SnapshotFileProcessor()
        self.report_assembler = ReportAssembler(self.config)
        self.renderer = TableRenderer()

    def add_contribution(self, timers: Dict[TimingPath, Timer]) -> None:
        self.contributions.append(timers)

    def process_snapshot_files(self, file_paths: Iterable[str]) -> None:
        """
        Read contributor snapshot files. With more than one worker the files
        are read in parallel and merged as they arrive.

        Args:
            file_paths: Paths to snapshot JSON files
        """
        file_paths = list(file_paths)
        num_workers = self.config.num_workers or 1

        if num_workers <= 1 or len(file_paths) <= 1:
            for file_path in file_paths:
                print(f"Processing {file_path}...")
                self.add_contribution(self.file_processor.load(file_path))
        else:
            merged: Dict[TimingPath, Timer] = {}
            with Pool(processes=min(num_workers, len(file_paths))) as pool:
                for completed, timers in enumerate(
                        pool.imap_unordered(SnapshotFileProcessor.load, file_paths), start=1):
                    merged = merge(merged, timers)
                    print(f"  Read {completed}/{len(file_paths)} snapshot files...")
            self.add_contribution(merged)

        print(f"Found {len(self.merged_timers())} unique timers across {len(file_paths)} snapshot file(s).")

    def process_stage_file(self, file_path: str) -> None:
        self.stage_timings = self.file_processor.load_stage_timings(file_path)
        print(f"Found {len(self.stage_timings)} stage timings.")

    def merged_timers(self) -> Dict[TimingPath, Timer]:
        return merge_all(self.contributions)

    def build_report(self) -> TimingReport:
        """
        Merge all contributions and assemble the report tables.

        Returns:
            TimingReport

        Raises:
            MissingCorrelatedMonitor: if the report pipeline produced an inconsistent row
        """
        return self.report_assembler.build_report(self.merged_timers(), self.stage_timings)

    def render(self, out: TextIO) -> TimingReport:
        report = self.build_report()
        self.renderer.render_report(out, report)
        return report
