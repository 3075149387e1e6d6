"""
CSV Utilities

Reading and writing positional CSV rows with a fixed header.
Handles large description fields.
"""

import csv
import os
from pathlib import Path
from typing import Iterable, List, Sequence


def configure_csv(field_size_limit: int = 10 * 1024 * 1024) -> None:
    """
    Configure CSV module for large fields.

    Args:
        field_size_limit: Maximum field size in bytes (default: 10MB)
    """
    csv.field_size_limit(field_size_limit)


def read_rows(file_path: str | Path, encoding: str = 'utf-8') -> List[List[str]]:
    """
    Read all rows of a CSV file, header included.

    Args:
        file_path: Path to CSV file
        encoding: File encoding (default: utf-8)

    Returns:
        List of rows, each a list of strings
    """
    with open(file_path, 'r', encoding=encoding, newline='') as f:
        return [row for row in csv.reader(f)]


def write_rows(
    file_path: str | Path,
    header: Sequence[str],
    rows: Iterable[Sequence],
    encoding: str = 'utf-8'
) -> int:
    """
    Write a header row followed by data rows.

    Args:
        file_path: Path to output CSV file
        header: Column names, written first
        rows: Data rows (any sequence of values)
        encoding: File encoding (default: utf-8)

    Returns:
        Number of data rows written
    """
    os.makedirs(os.path.dirname(str(file_path)) or '.', exist_ok=True)

    count = 0
    with open(file_path, 'w', encoding=encoding, newline='') as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in rows:
            writer.writerow(row)
            count += 1

    return count


# Initialize CSV configuration on module import
configure_csv()
