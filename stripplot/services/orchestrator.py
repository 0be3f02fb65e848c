from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from ..excel.reader import FormatError, SpreadsheetReadError, load_rows
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import StripPlotConfig
from ..models.excel_file import FileStatus
from ..models.processing_result import FileStat, ProcessingResult
from ..models.view_state import ViewState
from ..render.strip_plot import active_point_count, build_dashboard, write_figure
from .cleaner import InvalidValueError, clean
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Run orchestration: workbook(s) -> strip plot HTML page(s).

For each workbook:
1. load the configured sheet (read / format errors fail the file, nothing
   is written for it)
2. clean rows; rejected rows are logged and buffered in the error log
3. write the dashboard page to <output_directory>/<stem>.html (a write
   error fails the file and the run goes on)

Counts are aggregated into a ProcessingResult for the SUMMARY line.
"""


class ProcessingError(Exception):
    """Fatal error that prevents the run from starting."""


def scan_workbooks(input_path: Path) -> list[Path]:
    """Resolve the input to workbooks: the file itself, or the .xlsx files of a directory.

    Raises:
        ProcessingError: if the path does not exist or the directory can't be read
    """
    if not input_path.exists():
        raise ProcessingError(f"input not found: {input_path}")
    if input_path.is_file():
        return [input_path]
    try:
        return sorted(
            p for p in input_path.iterdir()
            if p.is_file() and p.suffix == ".xlsx" and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"error reading directory {input_path}: {e}") from e


def output_path_for(workbook: Path, config: StripPlotConfig) -> Path:
    return Path(config.output_directory) / f"{workbook.stem}.html"


def _failed(workbook: Path, start: datetime, error: str) -> FileStat:
    elapsed = (datetime.now(timezone.utc) - start).total_seconds()
    return FileStat(
        file_name=workbook.name,
        status=FileStatus.FAILED.value,
        rows=0,
        points=0,
        rejected_rows=0,
        elapsed_seconds=elapsed,
        error=error,
    )


def process_workbook(
    workbook: Path,
    config: StripPlotConfig,
    view_state: ViewState,
    error_log: ErrorLogBuffer,
) -> FileStat:
    """Render one workbook. Failures are recorded, never raised."""
    start = datetime.now(timezone.utc)
    sheet = config.sheet_name

    try:
        raw_rows = load_rows(workbook, sheet, header_row=config.header_row)
    except SpreadsheetReadError as e:
        logger.error(f"{workbook.name}: {e}")
        error_log.append(ErrorRecord.create(workbook.name, sheet, -1, "READ_ERROR", str(e)))
        return _failed(workbook, start, str(e))
    except FormatError as e:
        logger.error(f"{workbook.name}: {e}")
        error_log.append(ErrorRecord.create(workbook.name, sheet, -1, "FORMAT_ERROR", str(e)))
        return _failed(workbook, start, str(e))

    logger.debug(f"{workbook.name}: loaded {len(raw_rows)} rows from '{sheet}'")

    try:
        result = clean(raw_rows, policy=config.invalid_value_policy)
    except InvalidValueError as e:
        logger.error(f"{workbook.name}: {e}")
        error_log.append(ErrorRecord.create(workbook.name, sheet, e.row_number, "INVALID_VALUE", str(e)))
        return _failed(workbook, start, str(e))

    for rejected in result.rejected:
        message = f"column '{rejected.column}': {rejected.reason} ({rejected.value!r})"
        logger.warning(f"{workbook.name}: row {rejected.row_number} rejected, {message}")
        error_log.append(
            ErrorRecord.create(workbook.name, sheet, rejected.row_number, "INVALID_VALUE", message)
        )

    fig = build_dashboard(
        result.rows,
        view_state,
        color_strategy=config.color_strategy,
        title=config.title or workbook.stem,
    )
    points = active_point_count(fig)

    try:
        out = write_figure(fig, output_path_for(workbook, config), config.include_plotlyjs)
    except OSError as e:
        logger.error(f"{workbook.name}: cannot write output: {e}")
        error_log.append(ErrorRecord.create(workbook.name, sheet, -1, "WRITE_ERROR", str(e)))
        return _failed(workbook, start, str(e))
    logger.info(f"{workbook.name}: rows={len(result.rows)} points={points} -> {out}")

    elapsed = (datetime.now(timezone.utc) - start).total_seconds()
    return FileStat(
        file_name=workbook.name,
        status=FileStatus.SUCCESS.value,
        rows=len(result.rows),
        points=points,
        rejected_rows=len(result.rejected),
        elapsed_seconds=elapsed,
        output_path=str(out),
    )


def process_all(
    config: StripPlotConfig,
    *,
    view_state: ViewState | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Render every workbook the configured input resolves to.

    Args:
        config: run configuration
        view_state: initial view of the written pages (defaults from config)
        error_log: buffer for error records (a fresh one if omitted)

    Raises:
        ProcessingError: the input path does not exist or can't be listed
    """
    start_time = datetime.now(timezone.utc)
    if view_state is None:
        view_state = ViewState(sort_key=config.default_sort, mode_filter=config.default_mode)
    if error_log is None:
        error_log = ErrorLogBuffer()

    workbooks = scan_workbooks(Path(config.input_path))

    file_stats: list[FileStat] = []
    try:
        with ProgressTracker(len(workbooks)) as progress:
            for workbook in workbooks:
                progress.start_file(workbook)
                file_stats.append(process_workbook(workbook, config, view_state, error_log))
                progress.set_postfix(
                    success=sum(1 for s in file_stats if s.status == FileStatus.SUCCESS.value),
                    failed=sum(1 for s in file_stats if s.status == FileStatus.FAILED.value),
                )
                progress.finish_file()
    finally:
        # records of finished workbooks are kept even if a later one raises
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log written: {log_path}")

    succeeded = [s for s in file_stats if s.status == FileStatus.SUCCESS.value]
    end_time = datetime.now(timezone.utc)
    return ProcessingResult(
        success_files=len(succeeded),
        failed_files=len(file_stats) - len(succeeded),
        total_rows=sum(s.rows for s in succeeded),
        total_points=sum(s.points for s in succeeded),
        rejected_rows=sum(s.rejected_rows for s in succeeded),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
        error_log_path=str(log_path) if log_path is not None else None,
    )
