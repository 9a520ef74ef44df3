"""
Delimited text reader for heatmap3d.

Reads CSV, semicolon- or tab-delimited files into a RawGrid using pandas.
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from .base import GridReader, RawGrid
from ..core.errors import GridImportError

logger = logging.getLogger(__name__)


def _detect_delimiter(sample_line: str) -> str:
    """Detect the delimiter from a sample line.

    Priority: tab → semicolon → comma.
    """
    if '\t' in sample_line:
        return '\t'
    if ';' in sample_line:
        return ';'
    return ','


def _first_content_line(path: Path) -> Optional[str]:
    """Return the first non-blank line of a text file, or None."""
    with open(path, 'r', encoding='utf-8-sig') as fh:
        for line in fh:
            if line.strip():
                return line
    return None


# Cell text that means "no data"
_NO_DATA_TOKENS = ('', 'nan', 'NaN', 'NAN')


def _clean_cell(cell) -> Optional[str]:
    """Strip a field; fields missing from a short line become None."""
    return cell.strip() if isinstance(cell, str) else None


class DelimitedGridReader(GridReader):
    """Reader for delimited text grids.

    The file is read as text. Headers are returned exactly as written
    (blank headers stay ''; duplicates are kept). Blank cells and 'NaN'
    tokens become NaN (no data). Any other non-numeric cell rejects the
    whole file.

    A line with fewer fields than the first line keeps its real length, so
    GridVariable.validate() reports it as a row length mismatch. A line with
    more fields is a parse error.

    Example:
        >>> reader = DelimitedGridReader()
        >>> raw = reader.read('data/10x10.csv', has_row_headers=True, has_column_headers=True)
        >>> raw.row_count, raw.col_count
        (10, 10)
    """

    def read(self, path: str, has_row_headers: bool, has_column_headers: bool) -> RawGrid:
        """Read a delimited file.

        Args:
            path: File path
            has_row_headers: True if the first column holds row headers
            has_column_headers: True if the first row holds column headers

        Returns:
            RawGrid whose declared column count comes from the first line

        Raises:
            GridImportError: If the file is missing, empty, unparseable, or
                contains non-numeric cells
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise GridImportError(f"File not found: {path}", path=str(path))

        try:
            sample = _first_content_line(file_path)
            if sample is None:
                raise GridImportError(f"File is empty: {path}", path=str(path))

            table = pd.read_csv(
                file_path,
                sep=_detect_delimiter(sample),
                header=None,
                dtype=str,
                keep_default_na=False,
                encoding='utf-8-sig',
                skip_blank_lines=True,
                skipinitialspace=True,
            )
        except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise GridImportError(f"Error reading {path}: {e}", path=str(path)) from e

        first_col = 1 if has_row_headers else 0
        col_count = table.shape[1] - first_col

        column_headers = None
        if has_column_headers:
            column_headers = [str(h) for h in table.iloc[0, first_col:]]
            table = table.iloc[1:]

        if table.shape[0] == 0 or col_count <= 0:
            raise GridImportError(f"No data rows or columns found in {path}", path=str(path))

        row_headers = [str(h) for h in table.iloc[:, 0]] if has_row_headers else None

        body = table.iloc[:, first_col:].map(_clean_cell)
        missing = body.isna().to_numpy()
        widths = (~missing).sum(axis=1)

        numeric = body.apply(pd.to_numeric, errors='coerce')
        no_data = missing | body.isin(_NO_DATA_TOKENS).to_numpy()
        bad_cells = numeric.isna().to_numpy() & ~no_data
        if bad_cells.any():
            row_pos, col_pos = np.argwhere(bad_cells)[0]
            raise GridImportError(
                f"Non-numeric value {body.iat[row_pos, col_pos]!r} at data row "
                f"{row_pos}, column {col_pos} in {path}",
                path=str(path)
            )

        short_rows = np.flatnonzero(widths < col_count)
        if short_rows.size:
            logger.warning(
                f"{short_rows.size} data row(s) in {path} have fewer than "
                f"{col_count} fields (first: row {short_rows[0]})"
            )

        values = numeric.to_numpy(dtype=np.float64)
        logger.info(f"Read {values.shape[0]}x{col_count} grid from {path}")

        return RawGrid(
            rows=[values[r, :widths[r]].copy() for r in range(values.shape[0])],
            row_count=values.shape[0],
            col_count=col_count,
            row_headers=row_headers,
            column_headers=column_headers,
        )
