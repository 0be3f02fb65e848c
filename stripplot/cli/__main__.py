from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from stripplot.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    apply_env_overrides,
    default_config,
    load_config,
)
from stripplot.logging.init import enable_debug, get_logger, log_summary, setup_logging
from stripplot.models.config_models import StripPlotConfig
from stripplot.models.view_state import ModeFilter, SortKey, ViewState
from stripplot.services.orchestrator import ProcessingError, process_all, scan_workbooks
from stripplot.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (or built-in defaults when the default
  config file is absent)
- Apply environment and command-line overrides
- Render every workbook and print the SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; .env values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="stripplot",
        description="Render log response-factor strip plots from qNTA workbooks",
    )
    p.add_argument("--config", help=f"YAML config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--input", help="Workbook or directory of .xlsx workbooks")
    p.add_argument("--output-dir", help="Directory for the generated HTML pages")
    p.add_argument("--sort", choices=[k.value for k in SortKey], help="Initial sort: rt or ml")
    p.add_argument("--mode", choices=[m.value for m in ModeFilter], help="Initial ionization mode filter")
    p.add_argument("--show-help", action="store_true", help="Show the usage panel on the plot")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet headers & first rows then exit")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> StripPlotConfig:
    logger = get_logger()
    if args.config:
        cfg = load_config(Path(args.config))
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_config(DEFAULT_CONFIG_PATH)
    else:
        logger.debug(f"no config at {DEFAULT_CONFIG_PATH}, using defaults")
        cfg = default_config()

    cfg = apply_env_overrides(cfg)
    if args.input:
        cfg = replace(cfg, input_path=args.input)
    if args.output_dir:
        cfg = replace(cfg, output_directory=args.output_dir)
    if args.sort:
        cfg = replace(cfg, default_sort=SortKey(args.sort))
    if args.mode:
        cfg = replace(cfg, default_mode=ModeFilter(args.mode))
    return cfg


def _inspect_data(cfg: StripPlotConfig) -> int:
    from stripplot.excel.reader import FormatError, SpreadsheetReadError, normalize_sheet, read_excel_file

    try:
        workbooks = scan_workbooks(Path(cfg.input_path))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not workbooks:
        print("inspect: no .xlsx files")
        return EXIT_SUCCESS_ALL
    for f in workbooks:
        print(f"FILE: {f.name}")
        try:
            raw = read_excel_file(f)
        except SpreadsheetReadError as e:
            print(f"  read_error: {e}")
            continue
        for sname, df in raw.items():
            try:
                sd = normalize_sheet(df, sname, header_row=cfg.header_row)
            except FormatError as e:
                print(f"  SHEET: {sname} error={e}")
                continue
            print(f"  SHEET: {sname} cols={sd.columns}")
            # datetime cells are not JSON friendly; show them as ISO strings
            sample = [
                {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.values.items()}
                for r in sd.rows[:3]
            ]
            print("    sample_rows=", sample)
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when no list was given; an empty list means "no args"
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    view_state = ViewState(
        sort_key=cfg.default_sort,
        mode_filter=cfg.default_mode,
        show_help=args.show_help,
    )
    logger.info(f"Rendering from: {cfg.input_path}")
    try:
        result = process_all(cfg, view_state=view_state)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files == 0:
        return EXIT_SUCCESS_ALL
    if result.success_files == 0:
        return EXIT_FATAL
    return EXIT_PARTIAL_FAILURE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
