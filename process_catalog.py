#!/usr/bin/env python3
"""
Catalog Processing Script

Runs the upload pipeline without the web UI: extracts products from one or
more PDF price catalogs, optionally applies a bulk price change, and writes
the updated PDF price list. State is shared with the web app through the
same snapshot file, so runs append to the saved catalog.

Usage:
    python3 process_catalog.py --pdf lista.pdf
    python3 process_catalog.py --pdf page1.pdf --pdf page2.pdf --percent 10
    python3 process_catalog.py --add 5000 --output output/
    python3 process_catalog.py --clear
"""

import argparse
import logging
import os
import sys

from catalog_editor.common.config_loader import load_settings
from catalog_editor.common.log_config import setup_logging
from catalog_editor.common.price_utils import format_pyg, parse_amount
from catalog_editor.exceptions import ConfigurationError
from catalog_editor.models import BulkActionType, ProcessingStatus, ProcessingStep
from catalog_editor.services import (
    create_exporter,
    create_extraction_client,
    create_pipeline,
    create_store,
)

logger = logging.getLogger(__name__)


def print_status(status: ProcessingStatus) -> None:
    print(f"  [{status.step.value:9}] {status.message}")


def parse_bulk_args(args: argparse.Namespace) -> list:
    """Collect requested bulk operations in a fixed order (add, subtract, percent)."""
    operations = []
    for action, raw in (
        (BulkActionType.ADD, args.add),
        (BulkActionType.SUBTRACT, args.subtract),
        (BulkActionType.PERCENTAGE, args.percent),
    ):
        if raw is None:
            continue
        amount = parse_amount(raw)
        if amount is None:
            raise ValueError(f"Invalid amount for {action.value}: {raw!r}")
        operations.append((action, amount))
    return operations


def print_catalog(store) -> None:
    """Print the catalog as a table."""
    print("\n" + "=" * 80)
    print(f"Catalog: {len(store)} products" + (f" (from {store.file_name})" if store.file_name else ""))
    print("=" * 80)
    for idx, product in enumerate(store.products, 1):
        photo = "photo" if product.has_image else "-"
        print(f"  {idx:3}. {product.name[:40]:40} {format_pyg(product.original_price):>14} "
              f"{format_pyg(product.updated_price):>14}  {photo}")


def main():
    parser = argparse.ArgumentParser(
        description="Extract products from PDF price catalogs and export an updated price list"
    )
    parser.add_argument(
        "--pdf", "-p",
        action="append",
        default=[],
        help="PDF catalog to process (repeatable; products are appended)"
    )
    parser.add_argument("--add", help="Add this amount to every final price")
    parser.add_argument("--subtract", help="Subtract this amount from every final price (floored at 0)")
    parser.add_argument("--percent", help="Scale every final price by this percentage")
    parser.add_argument(
        "--output", "-o",
        help="Write the updated PDF here (file path or directory)"
    )
    parser.add_argument(
        "--state",
        help="Snapshot file (default: storage.path from config/settings.yaml)"
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Clear the saved catalog before processing"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        settings = load_settings()
        operations = parse_bulk_args(args)
    except (ConfigurationError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(2)

    store = create_store(settings, state_path=args.state)
    if args.clear:
        store.clear()
        print("Saved catalog cleared.")

    if args.pdf:
        client = create_extraction_client(settings)
        if not client.is_configured:
            logger.error("API key missing: set GEMINI_API_KEY in the environment or .env")
            sys.exit(1)

        pipeline = create_pipeline(settings, store, client)
        with client:
            for pdf_path in args.pdf:
                if not os.path.exists(pdf_path):
                    logger.error("PDF not found: %s", pdf_path)
                    sys.exit(1)

                print(f"\nProcessing {pdf_path}")
                with open(pdf_path, "rb") as f:
                    status = pipeline.process(f.read(), os.path.basename(pdf_path), on_status=print_status)
                if status.step == ProcessingStep.ERROR:
                    sys.exit(1)

    for action, amount in operations:
        store.bulk_adjust(action, amount)

    print_catalog(store)

    if args.output:
        if not len(store):
            logger.error("Nothing to export: the catalog is empty")
            sys.exit(1)
        exporter = create_exporter(settings)
        path = exporter.export(store.products, args.output)
        print(f"\nPDF written: {path}")


if __name__ == "__main__":
    main()
