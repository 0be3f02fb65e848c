#!/usr/bin/env python3
"""Generate a synthetic qNTA surrogate statistics workbook.

The workbook has the layout the strip plot reader expects:
- Row 1: header (Feature ID, Chemical Name, Ionization Mode, Retention Time,
  a few unrelated columns, then one "RF <sample>" column per sample)
- Row 2+: one row per chemical x ionization mode

Some chemicals are detected in both modes, some in one only, and a few RF
cells are left empty, so every path of the viewer gets exercised.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

CHEMICALS = [
    "Atrazine", "Benzotriazole", "Caffeine", "Carbamazepine", "DEET",
    "Diclofenac", "Fluconazole", "Gemfibrozil", "Ibuprofen", "Lamotrigine",
    "Metformin", "Naproxen", "PFOA", "PFOS", "Sucralose", "Sulfamethoxazole",
    "Triclosan", "Venlafaxine",
]
MODE_SETS = [["ESI+"], ["ESI-"], ["ESI+", "ESI-"]]


def generate_rows(n_samples: int, seed: int = 42, empty_fraction: float = 0.05) -> pd.DataFrame:
    """Build the sheet contents as a DataFrame (header = column names)."""
    rng = np.random.default_rng(seed)
    samples = [f"WW2DW_{i + 1:02d}" + ("_" if i % 3 == 0 else "") for i in range(n_samples)]

    records: list[dict[str, Any]] = []
    feature_id = 1000
    for chem in CHEMICALS:
        modes = MODE_SETS[int(rng.choice(len(MODE_SETS), p=[0.45, 0.25, 0.30]))]
        center = rng.uniform(2.0, 9.0)  # typical ln(RF) level for this chemical
        for mode in modes:
            feature_id += 1
            record: dict[str, Any] = {
                "Feature ID": feature_id,
                "Chemical Name": chem,
                "Ionization Mode": mode,
                "Retention Time": round(float(rng.uniform(0.5, 14.0)), 2),
                "Formula": "",
                "Mass Error (ppm)": round(float(rng.normal(0, 2)), 2),
            }
            for sample in samples:
                if rng.random() < empty_fraction:
                    record[f"RF {sample}"] = None
                else:
                    record[f"RF {sample}"] = round(float(np.exp(rng.normal(center, 0.6))), 3)
            records.append(record)
    return pd.DataFrame(records)


def create_workbook(output_path: Path, n_samples: int, seed: int = 42) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df = generate_rows(n_samples, seed)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Sheet1", index=False)
    print(f"Created workbook: {output_path}")
    print(f"  Rows: {len(df)} (chemical x mode)")
    print(f"  Samples: {n_samples}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a synthetic qNTA workbook for the strip plot viewer")
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--samples", type=int, default=8, help="Number of RF sample columns (default: 8)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.samples <= 0:
        print("Error: --samples must be positive", file=sys.stderr)
        return 1

    try:
        create_workbook(args.output, args.samples, args.seed)
    except OSError as e:
        print(f"Error writing workbook: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
