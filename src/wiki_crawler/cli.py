"""
Command Line Interface for the Wiki Crawler.

This module provides a command-line interface for running a keyword-directed
crawl and managing configurations.

Usage Examples:
--------------

# Basic crawl
wiki-crawler crawl /wiki/Tennis -k tennis

# Several keywords, bounded graph, custom output
wiki-crawler crawl /wiki/Tennis -k tennis -k "grand slam" -n 50 -o data/tennis.txt

# Crawl with custom configuration
wiki-crawler crawl /wiki/Tennis -c config/tennis.yaml

# Title-only relevance, stored in SQLite
wiki-crawler crawl /wiki/Tennis -k tennis --policy path --format sqlite -o data/tennis.db

# Create default configuration
wiki-crawler config --create-default -o config/default.yaml

# Validate configuration
wiki-crawler config --validate config/my_config.yaml

# Verbose logging
wiki-crawler -v crawl /wiki/Tennis -k tennis
"""

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

from .core.crawl_engine import CrawlEngine
from .config.crawler_config import ConfigLoader, validate_config, ConfigurationError


def setup_logging(verbose: bool = False):
    """
    Setup logging configuration.

    Args:
        verbose: Enable debug-level logging if True
    """
    level = logging.DEBUG if verbose else logging.INFO

    log_dir = Path('logs')
    log_dir.mkdir(exist_ok=True)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_dir / 'crawler.log')
        ]
    )

    # Set third-party loggers to WARNING to reduce noise
    if not verbose:
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)


def apply_overrides(config, args):
    """Apply command-line overrides on top of the loaded configuration."""
    logger = logging.getLogger(__name__)

    config.seed_path = args.seed

    if args.keywords:
        config.keywords = args.keywords
        logger.info(f"Set keywords to {args.keywords}")

    if args.max_vertices is not None:
        config.max_vertices = args.max_vertices
        logger.info(f"Set max_vertices to {args.max_vertices}")

    if args.output:
        config.storage.output_path = args.output

    if args.format:
        config.storage.storage_type = args.format

    if args.policy:
        config.relevance.policy = args.policy
        logger.info(f"Set relevance policy to {args.policy}")

    if args.threshold is not None:
        config.relevance.threshold = args.threshold

    if args.case_sensitive:
        config.relevance.case_sensitive = True

    if args.base_url:
        config.fetch.base_url = args.base_url
        config.link_extraction.base_url = args.base_url
        logger.info(f"Set base_url to {args.base_url}")

    if args.pause is not None:
        config.politeness.pause_seconds = args.pause
        logger.info(f"Set pause to {args.pause} seconds")

    if args.no_robots:
        config.robots.respect_robots_txt = False

    if args.no_prune:
        config.prune_unvisited_edges = False

    return config


def print_summary(result):
    """Print a formatted summary of a finished crawl."""
    print("\n" + "="*60)
    print("CRAWL SUMMARY")
    print("="*60)
    print(f"Termination:      {result.termination_reason.value}")
    print(f"Vertices:         {len(result.graph)}")
    print(f"Edges:            {result.graph.edge_count()}")
    print(f"Pages visited:    {len(result.visited)}")
    print(f"Fetch errors:     {result.fetch_errors}")
    print(f"Links examined:   {result.candidates_examined}")
    print(f"Pauses:           {result.politeness_pauses}")
    print(f"Runtime:          {result.runtime_seconds:.2f} seconds")
    if result.persisted:
        print("Graph persisted:  yes")
    else:
        print(f"Graph persisted:  no ({result.sink_error})")
    print("="*60 + "\n")


def crawl_command(args):
    """
    Execute the crawl command.

    Args:
        args: Parsed command-line arguments
    """
    logger = logging.getLogger(__name__)

    try:
        if args.config:
            logger.info(f"Loading configuration from {args.config}")
            config = ConfigLoader.load_from_yaml(args.config)
        else:
            logger.info("Using default configuration")
            config = ConfigLoader.create_default_config()

        apply_overrides(config, args)
        validate_config(config)
    except ConfigurationError as e:
        logger.error(f"Configuration validation failed: {e}")
        sys.exit(1)

    cancel_event = threading.Event()

    def request_stop(signum, frame):
        logger.info("Crawl interrupted by user, finishing up...")
        cancel_event.set()

    previous_handler = signal.signal(signal.SIGINT, request_stop)

    try:
        print("\n" + "="*60)
        print("STARTING WIKI CRAWLER")
        print("="*60)

        with CrawlEngine(config) as engine:
            result = engine.run(cancel_event)

    except Exception as e:
        logger.error(f"Crawl failed: {e}", exc_info=True)
        sys.exit(1)

    finally:
        signal.signal(signal.SIGINT, previous_handler)

    print_summary(result)

    if not result.persisted:
        sys.exit(1)

    print(f"✓ Graph written to: {config.storage.output_path}")
    logger.info("Crawl finished successfully")


def config_command(args):
    """
    Execute the config command.

    Args:
        args: Parsed command-line arguments
    """
    logger = logging.getLogger(__name__)

    try:
        if args.create_default:
            config = ConfigLoader.create_default_config()
            output_path = args.output or 'config/default.yaml'

            ConfigLoader.save_to_yaml(config, output_path)
            print(f"✓ Default configuration created at: {output_path}")
            logger.info(f"Default configuration created at {output_path}")

        elif args.validate:
            print(f"Validating configuration: {args.validate}")
            config = ConfigLoader.load_from_yaml(args.validate)
            validate_config(config)
            print(f"✓ Configuration is valid: {args.validate}")
            logger.info(f"Configuration {args.validate} is valid")

        else:
            print("Error: Please specify --create-default or --validate")
            sys.exit(1)

    except ConfigurationError as e:
        print(f"✗ Configuration error: {e}")
        logger.error(f"Configuration error: {e}")
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wiki-crawler',
        description='Wiki Crawler - A keyword-directed encyclopedia crawler',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s crawl /wiki/Tennis -k tennis
  %(prog)s crawl /wiki/Tennis -k tennis -n 50 -o data/tennis.txt
  %(prog)s crawl /wiki/Tennis -c config/tennis.yaml
  %(prog)s config --create-default -o config/default.yaml
  %(prog)s config --validate config/my_config.yaml
        """
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose (debug) logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========================================================================
    # CRAWL COMMAND
    # ========================================================================
    crawl_parser = subparsers.add_parser(
        'crawl',
        help='Crawl outward from a seed article',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description='Breadth-first crawl from a seed article, following relevant links'
    )

    crawl_parser.add_argument(
        'seed',
        help='Seed article path, e.g. /wiki/Tennis'
    )

    crawl_parser.add_argument(
        '-k', '--keyword',
        dest='keywords',
        action='append',
        metavar='KEYWORD',
        help='Relevance keyword (repeat for several)'
    )

    crawl_parser.add_argument(
        '-n', '--max-vertices',
        type=int,
        metavar='N',
        help='Maximum number of vertices in the graph'
    )

    crawl_parser.add_argument(
        '-o', '--output',
        metavar='FILE',
        help='Where to write the graph'
    )

    crawl_parser.add_argument(
        '-c', '--config',
        help='Path to YAML configuration file (default: use built-in defaults)'
    )

    crawl_parser.add_argument(
        '--policy',
        choices=['scored', 'path'],
        help='Relevance policy: anchor/context score or article title match'
    )

    crawl_parser.add_argument(
        '--threshold',
        type=int,
        metavar='N',
        help='Minimum relevance score for the scored policy'
    )

    crawl_parser.add_argument(
        '--case-sensitive',
        action='store_true',
        help='Match keywords case-sensitively'
    )

    crawl_parser.add_argument(
        '--format',
        choices=['text', 'sqlite'],
        help='Graph output format'
    )

    crawl_parser.add_argument(
        '--base-url',
        metavar='URL',
        help='Site to crawl (default: https://en.wikipedia.org)'
    )

    crawl_parser.add_argument(
        '--pause',
        type=float,
        metavar='SECONDS',
        help='Politeness pause length (seconds)'
    )

    crawl_parser.add_argument(
        '--no-robots',
        action='store_true',
        help='Do not load robots.txt exclusion rules'
    )

    crawl_parser.add_argument(
        '--no-prune',
        action='store_true',
        help='Keep edges to vertices that were never visited'
    )

    crawl_parser.set_defaults(func=crawl_command)

    # ========================================================================
    # CONFIG COMMAND
    # ========================================================================
    config_parser = subparsers.add_parser(
        'config',
        help='Configuration management',
        description='Create or validate configuration files'
    )

    config_parser.add_argument(
        '--create-default',
        action='store_true',
        help='Create a default configuration file'
    )

    config_parser.add_argument(
        '--validate',
        metavar='FILE',
        help='Validate a configuration file'
    )

    config_parser.add_argument(
        '-o', '--output',
        metavar='FILE',
        help='Output path for created configuration (default: config/default.yaml)'
    )

    config_parser.set_defaults(func=config_command)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == '__main__':
    main()
