#!/usr/bin/env python3
"""
Refresh one kind of bank offerings from scraper output.

Reads a JSONL file of raw records, normalizes bank names, translates every
field into uz / ru / en / oz and swaps the result into the offering store
(Postgres when DATABASE_URL is set).

Usage:
    python scripts/run_offering_refresh.py --kind deposit --input data/raw/deposits.jsonl
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

# Add repo root to path so `quotehub.*` imports work when running from scripts/
sys.path.insert(0, str(Path(__file__).parent.parent))

from quotehub.integrations.contracts.offerings import OfferingKind
from quotehub.jobs.offering_refresh import JsonlOfferingSource, OfferingRefreshJob
from quotehub.normalization.bank_normalizer import BankNameNormalizer
from quotehub.services import build_cache, build_store, build_translator
from quotehub.utils.config_loader import load_settings


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler()]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="Normalize and store scraped bank offerings")
    parser.add_argument(
        "--kind",
        required=True,
        choices=[k.value for k in OfferingKind],
        help="Offering kind to refresh",
    )
    parser.add_argument("--input", type=Path, required=True, help="Path to scraper output (JSON lines)")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to providers config YAML (default: config/providers.yml)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=Path("logs/offering_refresh.log"),
        help="Path to log file (default: logs/offering_refresh.log)",
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, log_file=args.log_file)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(args.config)
        cache = build_cache(settings)
        bank_normalizer = BankNameNormalizer()
        kind = OfferingKind(args.kind)
        job = OfferingRefreshJob(
            kind=kind,
            source=JsonlOfferingSource(args.input, kind),
            translator=build_translator(settings, cache, bank_normalizer),
            bank_normalizer=bank_normalizer,
            store=build_store(settings),
        )

        logger.info("Refreshing %s offerings from %s", kind.value, args.input)
        result = asyncio.run(job.run())

        logger.info("DONE")
        logger.info("Records fetched: %s", result.fetched)
        logger.info("Non-bank records (skipped): %s", result.skipped_non_bank)
        logger.info("Offerings stored: %s", result.stored)
        return 0
    except KeyboardInterrupt:
        logger.warning("Refresh interrupted by user")
        return 130
    except Exception as e:
        logger.error("Error during refresh: %s: %s", type(e).__name__, str(e), exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
