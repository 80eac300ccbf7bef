#!/usr/bin/env python3
"""
Timing Analyzer - command line entry point
"""

import sys

from timing_analyzer import TimingAnalyzer
from timing_analyzer.utils import setup_logger


def main(argv=None):
    import argparse
    parser = argparse.ArgumentParser(
        description='Merge timer snapshots from a driver and its workers and print the timing report.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analyze_timings.py driver.json worker-*.json
  python analyze_timings.py driver.json worker-*.json --stages stages.json
  python analyze_timings.py driver.json worker-*.json -o report.txt --workers 4
        """
    )
    parser.add_argument('snapshot_files', nargs='+', help='Contributor snapshot JSON files')
    parser.add_argument('--stages', dest='stage_file', help='Stage timings JSON file')
    parser.add_argument('-o', '--output', dest='output_file', help='Write the report to this file instead of stdout')
    parser.add_argument('--workers', type=int, default=1, help='Worker processes used to read snapshot files')
    parser.add_argument('--no-dropped-warning', action='store_true',
                        help='Do not warn about timers whose parent was never recorded')
    args = parser.parse_args(argv)

    setup_logger()

    analyzer = TimingAnalyzer(
        num_workers=args.workers,
        warn_on_dropped_nodes=not args.no_dropped_warning
    )

    try:
        print(f"\nConfiguration:")
        print(f"  Snapshot files: {len(args.snapshot_files)}")
        print(f"  Stage file: {args.stage_file or '-'}")
        print(f"  Workers: {args.workers}\n")
        analyzer.process_snapshot_files(args.snapshot_files)
        if args.stage_file:
            analyzer.process_stage_file(args.stage_file)

        if args.output_file:
            with open(args.output_file, 'w', encoding='utf-8') as out:
                analyzer.render(out)
            print(f"\n✓ Report written to {args.output_file}")
        else:
            print()
            analyzer.render(sys.stdout)
    except FileNotFoundError as e:
        print(f"Error: File '{e.filename}' not found.")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
