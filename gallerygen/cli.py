"""
Command Line Interface for the gallery asset pipeline.
"""

import argparse
import logging
from typing import List, Optional

from .batch_progress import BatchProgress
from .config import PipelineConfig
from .manifest import ALL_YEARS, Manifest
from .pipeline import Pipeline
from .reporter import Reporter


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('gallerygen')


def get_config(args: argparse.Namespace) -> PipelineConfig:
    """Get pipeline configuration from environment and CLI overrides."""
    config = PipelineConfig.from_env()

    if getattr(args, 'root', None):
        config.project_root = args.root
    if getattr(args, 'source', None):
        config.source_dir = args.source
    if getattr(args, 'optimized_dir', None):
        config.optimized_dir = args.optimized_dir
    if getattr(args, 'thumbs_dir', None):
        config.thumbs_dir = args.thumbs_dir
    if getattr(args, 'output', None):
        config.manifest_path = args.output
    if getattr(args, 'ffmpeg', None):
        config.ffmpeg_binary = args.ffmpeg
    if getattr(args, 'timeout', None):
        config.encoder_timeout = args.timeout

    return config


def cmd_build(args: argparse.Namespace) -> int:
    """Execute build command."""
    logger = setup_logging(args.verbose)

    config = get_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    logger.info(f"Source: {config.source_root}")
    logger.info(f"Optimized: {config.optimized_root}")
    logger.info(f"Thumbnails: {config.thumbs_root}")
    logger.info(f"Manifest: {config.manifest_file}")
    logger.info(f"Encoder timeout: {config.encoder_timeout:g}s")

    if args.limit:
        logger.info(f"Test mode: limiting to {args.limit} files")

    progress = None
    if not args.quiet:
        progress = BatchProgress(show_files=args.show_files, logger=logger)

    try:
        result = Pipeline(config, logger=logger).run(progress=progress, limit=args.limit)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    if result is None:
        return 1

    stats = result.stats
    if not args.quiet:
        print()
        print(f"Processed: {stats.processed}")
        print(f"Errors: {stats.errors}")
        print(f"Time: {stats.elapsed_seconds:.1f}s")

    return 0


def cmd_report(args: argparse.Namespace) -> int:
    """Execute report command."""
    logger = setup_logging(args.verbose)

    try:
        manifest = Manifest.load(args.manifest)
    except FileNotFoundError:
        logger.error(f"Manifest not found: {args.manifest}")
        return 1
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Failed to load manifest: {e}")
        return 1

    reporter = Reporter()

    if args.type == 'summary':
        reporter.report_summary(manifest)
    elif args.type == 'years':
        reporter.report_year(manifest, year=args.year, base_url=args.base_url)
    elif args.type == 'verify':
        missing = manifest.verify(args.root)
        reporter.report_missing_files(manifest, missing)
        if missing:
            return 1

    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='gallerygen',
        description='Build web-ready gallery assets and their manifest',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  1. Build:   python -m gallerygen build
  2. Report:  python -m gallerygen report -m index.json
  3. Verify:  python -m gallerygen report -m index.json -t verify

Testing:
  Use --limit 3 to process only 3 files
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Build command
    build_parser = subparsers.add_parser('build', help='Transcode source media and write the manifest')
    build_parser.add_argument('--root', help='Project root (default: current directory)')
    build_parser.add_argument('--source', help='Source directory (default: images)')
    build_parser.add_argument('--optimized-dir', help='Full-tier output directory (default: images-optimized)')
    build_parser.add_argument('--thumbs-dir', help='Thumbnail output directory (default: images-thumbs)')
    build_parser.add_argument('-o', '--output', help='Manifest file (default: index.json)')
    build_parser.add_argument('--ffmpeg', help='ffmpeg executable (default: ffmpeg)')
    build_parser.add_argument('--timeout', type=float, metavar='SECONDS',
                              help='Budget per encoder invocation (default: 90)')
    build_parser.add_argument('--limit', type=int, metavar='N',
                              help='Limit to N files (for testing)')
    build_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    build_parser.add_argument('--show-files', action='store_true',
                              help='Print each file as processed with result')
    build_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    # Report command
    report_parser = subparsers.add_parser('report', help='Generate reports from a manifest')
    report_parser.add_argument('-m', '--manifest', default='index.json', help='Input manifest file')
    report_parser.add_argument('-t', '--type', choices=['summary', 'years', 'verify'],
                               default='summary', help='Report type')
    report_parser.add_argument('--year', default=ALL_YEARS, help='Year to list (years report)')
    report_parser.add_argument('--base-url', help='Print public URLs under this base (years report)')
    report_parser.add_argument('--root', default='.', help='Project root for verify')
    report_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'build':
        return cmd_build(parsed_args)
    elif parsed_args.command == 'report':
        return cmd_report(parsed_args)

    return 1
