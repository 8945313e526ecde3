#!/usr/bin/env python3
"""
Validate a JSON file against a registered model type, without the API.

A JSON object is validated as one record; a JSON array as an array run.

Usage:
    python scripts/validate_file.py incident samples/incidents.json
    python scripts/validate_file.py incident samples/incidents.json --threshold 90
"""

import argparse
import json
import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.exceptions import ValidatorServiceException
from core.models.array import RunStatus
from core.services.array_validator import validate_array, validate_record
from registry import get_registry


def print_entries(label, entries):
    for entry in entries:
        print(f"  {label} [{entry.code}] {entry.field}: {entry.message}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("model_type", help="Registered model type, e.g. incident")
    parser.add_argument("path", help="JSON file holding one record or a list of records")
    parser.add_argument("--threshold", type=float, default=None, help="Minimum success rate (0-100)")
    args = parser.parse_args(argv)

    with open(args.path, encoding="utf-8") as f:
        data = json.load(f)

    store = get_registry()
    print(f"Registered model types: {', '.join(store.type_names())}")

    try:
        if isinstance(data, list):
            result = validate_array(store, args.model_type, data, threshold=args.threshold)
        else:
            result = validate_record(store, args.model_type, data)
    except ValidatorServiceException as e:
        print(f"ERROR [{e.code}] {e.message}")
        return 2

    print(f"\n{'='*60}")
    if isinstance(data, list):
        print(f"{result.valid_records}/{result.total_records} valid "
              f"({result.success_rate:.2f}%) -> {result.status.value}")
        print(f"{'='*60}")
        for row in result.results:
            print(f"\nRow {row.row_index} ({row.record_identifier}): {row.test_name}")
            print_entries("ERROR", row.errors)
            print_entries("WARN ", row.warnings)
        return 0 if result.status == RunStatus.SUCCESS else 1

    print(f"{'VALID' if result.is_valid else 'INVALID'} ({result.duration_ms} ms)")
    print(f"{'='*60}")
    print_entries("ERROR", result.errors)
    print_entries("WARN ", result.warnings)
    return 0 if result.is_valid else 1


if __name__ == "__main__":
    sys.exit(main())
