#!/usr/bin/env python3
"""Generate a synthetic phage host-range workbook.

Layout written:
- Row 1: free-text title (ignored by the parser)
- Row 2: header; column A labels the strain column, column B is reserved,
  phage names start in column C
- Row 3+: one bacterium per row, 0/1 values from column C

With --messy the sheet also gets the irregularities seen in lab files:
blank spacer rows, jagged rows, stray text marks ("+", "n.d.") and
fractional efficiency values.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

CLUSTERS = ["A", "B", "C", "D"]
STRAY_MARKS = ["+", "n.d.", "-", "?"]


def generate_matrix(bacteria: int, phages: int, density: float = 0.3, seed: int = 42) -> pd.DataFrame:
    """Random binary interaction matrix indexed by strain, columns by phage.

    Args:
        bacteria: Number of host strains (rows)
        phages: Number of phages (columns)
        density: Probability that a host/phage pair is positive
        seed: Random seed for reproducible data
    """
    rng = np.random.default_rng(seed)
    values = (rng.random((bacteria, phages)) < density).astype(int)
    index = [f"Strain_{i + 1:04d}" for i in range(bacteria)]
    columns = [f"phi{i + 1:03d}" for i in range(phages)]
    return pd.DataFrame(values, index=index, columns=columns)


def build_sheet_rows(
    matrix: pd.DataFrame, title: str, messy: bool = False, seed: int = 42
) -> list[list[Any]]:
    rng = np.random.default_rng(seed + 1)
    rows: list[list[Any]] = [[title], ["Strain", "Cluster", *matrix.columns]]
    for name, values in matrix.iterrows():
        row: list[Any] = [name, str(rng.choice(CLUSTERS)), *values.tolist()]
        if messy:
            roll = rng.random()
            if roll < 0.05:
                rows.append([])
            elif roll < 0.10:
                row = row[: max(3, len(row) - int(rng.integers(1, 4)))]
            elif roll < 0.15:
                row[int(rng.integers(2, len(row)))] = str(rng.choice(STRAY_MARKS))
            elif roll < 0.20:
                row[int(rng.integers(2, len(row)))] = round(float(rng.uniform(0.01, 0.99)), 2)
        rows.append(row)
    return rows


def write_workbook(output_path: Path, rows: list[list[Any]], sheet_name: str = "HostRange") -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic phage host-range workbook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/sample.xlsx
  %(prog)s data/large.xlsx --bacteria 2000 --phages 300 --density 0.1
  %(prog)s data/messy.xlsx --messy --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--bacteria", type=int, default=50, help="Host strains (default: 50)")
    parser.add_argument("--phages", type=int, default=20, help="Phages (default: 20)")
    parser.add_argument("--density", type=float, default=0.3, help="Fraction of positives (default: 0.3)")
    parser.add_argument("--title", default="Host range assay (synthetic)", help="Title row text")
    parser.add_argument("--messy", action="store_true", help="Add spacer rows, jagged rows and stray marks")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.bacteria <= 0 or args.phages <= 0:
        print("Error: --bacteria and --phages must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.density <= 1.0:
        print("Error: --density must be between 0 and 1", file=sys.stderr)
        return 1

    matrix = generate_matrix(args.bacteria, args.phages, args.density, args.seed)
    rows = build_sheet_rows(matrix, args.title, args.messy, args.seed)
    try:
        write_workbook(args.output, rows)
    except OSError as e:
        print(f"Error writing {args.output}: {e}", file=sys.stderr)
        return 1

    print(f"Created workbook: {args.output}")
    print(f"  Bacteria: {args.bacteria}  Phages: {args.phages}")
    print(f"  Positives: {int(matrix.to_numpy().sum()):,}{' (before messy edits)' if args.messy else ''}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
