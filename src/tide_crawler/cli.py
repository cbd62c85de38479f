"""
Command line interface for the tide crawler.

Fetches the annual tide predictions for a NOAA station and replaces the
station's prediction table:
- Loads settings from YAML and database credentials from the environment
- Runs the ingestion pipeline
- Optionally exports the normalized predictions to CSV/parquet
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import build_database_url, load_database_config, load_settings
from .core import NOAAClient
from .errors import ConfigError
from .logging_utils import setup_logging
from .pipeline import run_ingestion
from .predictions import PredictionSet
from .store import PredictionStore

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Load NOAA annual tide predictions into PostgreSQL'
    )

    parser.add_argument(
        '--station',
        help='NOAA station ID (defaults to the station in the settings file)'
    )

    parser.add_argument(
        '--settings',
        type=Path,
        help='Custom settings file path'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Fetch and normalize predictions without touching the database'
    )

    parser.add_argument(
        '--export',
        type=Path,
        help='Also write the normalized predictions to a .csv or .parquet file'
    )

    parser.add_argument(
        '--log-file',
        type=Path,
        help='Also write the log to this file'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser.parse_args(argv)


def export_predictions(prediction_set: PredictionSet, output_path: Path) -> Path:
    """Write a prediction set to CSV or parquet, chosen by file suffix."""
    df = prediction_set.to_dataframe()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if output_path.suffix == '.csv':
        df.to_csv(output_path, index=False)
    elif output_path.suffix == '.parquet':
        df.to_parquet(output_path, index=False)
    else:
        raise ValueError(f"Unsupported export format: {output_path.suffix}")

    logger.info(f"Output saved to: {output_path}")
    return output_path


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    if args.export and args.export.suffix not in ('.csv', '.parquet'):
        logger.error(f"Unsupported export format: {args.export}")
        return 1

    logger.info("Starting tide crawler...")

    try:
        settings = load_settings(args.settings)
        store = None
        if not args.dry_run:
            db_config = load_database_config()
            url = build_database_url(db_config, sslmode=settings['database']['sslmode'])
            store = PredictionStore.from_url(url, table_name=settings['database']['table'])
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    station_id = args.station or str(settings['station']['id'])
    client = NOAAClient(
        base_url=settings['api']['base_url'],
        datatype=settings['api']['datatype'],
        timeout=settings['api']['timeout']
    )

    try:
        result = run_ingestion(
            client,
            store,
            station_id,
            abbreviation=settings['time']['abbreviation'],
            zone=settings['time']['zone']
        )
    finally:
        client.close()
        if store is not None:
            store.close()

    if not result.succeeded:
        logger.error(f"Tide crawler stopped at the {result.failed_stage} stage")
        return 1

    if args.export:
        export_predictions(result.records, args.export)

    logger.info("Shutting down tide crawler...")
    return 0


if __name__ == '__main__':
    sys.exit(main())
