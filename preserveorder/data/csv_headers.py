"""
CSV header merging for preserveorder.

Reads header rows from several CSV exports, merges them into one column order
that respects every file, and combines the rows under that order.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd
import structlog

from preserveorder.core.exceptions import CSVParsingError, PreserveOrderError
from preserveorder.core.models import HeaderSource, MergeReport
from preserveorder.ordering.api import merge_with_report

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


class CSVHeaderProcessor:
    """
    Header extraction and column alignment across CSV files.
    """

    def __init__(
        self, strict_validation: bool = True, delimiter: str = ",", encoding: str = "utf-8"
    ):
        self.strict_validation = strict_validation
        self.delimiter = delimiter
        self.encoding = encoding

    def read_header(self, path: PathLike) -> HeaderSource:
        """
        Read only the header row of a CSV file.

        Columns are returned verbatim, so a header that repeats a name is
        rejected by the merge instead of being renamed by pandas.

        Raises:
            CSVParsingError: If the file is missing, unreadable, or has no header
        """
        path = Path(path)
        try:
            df = pd.read_csv(
                path,
                sep=self.delimiter,
                encoding=self.encoding,
                header=None,
                nrows=1,
                dtype=str,
                keep_default_na=False,
            )
        except FileNotFoundError as e:
            raise CSVParsingError(f"CSV file not found: {path}", details={"path": str(path)}) from e
        except pd.errors.EmptyDataError as e:
            raise CSVParsingError(f"CSV file has no header: {path}", details={"path": str(path)}) from e
        except (pd.errors.ParserError, UnicodeDecodeError, LookupError, OSError) as e:
            logger.error("Header read failed", path=str(path), error=str(e))
            raise CSVParsingError(f"Failed to read CSV file {path}: {e}") from e

        columns = [str(c).strip() for c in df.iloc[0].tolist()] if len(df) else []
        if not columns or not any(columns):
            raise CSVParsingError(f"CSV file has no header: {path}", details={"path": str(path)})

        logger.debug("Header read", path=str(path), columns=len(columns))
        return HeaderSource(path=str(path), columns=columns)

    def read_headers(self, paths: Sequence[PathLike]) -> List[HeaderSource]:
        """Read the header of every file, skipping unusable ones unless strict."""
        headers = []
        for path in paths:
            try:
                headers.append(self.read_header(path))
            except CSVParsingError as e:
                if self.strict_validation:
                    raise
                logger.warning("Skipping CSV file", path=str(path), error=e.message)

        if not headers:
            raise CSVParsingError("No readable CSV headers", details={"paths": [str(p) for p in paths]})
        return headers

    def merge_headers(self, paths: Sequence[PathLike]) -> MergeReport:
        """Merge the header rows of ``paths`` into one column order."""
        headers = self.read_headers(paths)
        try:
            report = merge_with_report([h.columns for h in headers])
        except PreserveOrderError as e:
            logger.error("Header merge failed", files=[h.path for h in headers], error=e.message)
            raise

        logger.info(
            "Headers merged",
            files=len(headers),
            columns=report.label_count,
            unordered_pairs=report.unordered_pairs,
        )
        return report

    def combine(self, paths: Sequence[PathLike], output: Optional[PathLike] = None) -> pd.DataFrame:
        """
        Concatenate the rows of ``paths`` under their merged header.

        Cells for columns a file does not have are left empty.

        Raises:
            CSVParsingError: If a file is unreadable or a row has more fields
                than its header
        """
        headers = self.read_headers(paths)
        columns = merge_with_report([h.columns for h in headers]).labels

        frames = []
        for header in headers:
            # The header row is parsed as data so its width bounds every row
            try:
                df = pd.read_csv(
                    header.path,
                    sep=self.delimiter,
                    encoding=self.encoding,
                    header=None,
                    on_bad_lines="error",
                    dtype=str,
                    keep_default_na=False,
                )
            except (pd.errors.ParserError, UnicodeDecodeError, LookupError, OSError) as e:
                logger.error("CSV read failed", path=header.path, error=str(e))
                raise CSVParsingError(
                    f"Failed to read CSV file {header.path}: {e}", details={"path": header.path}
                ) from e
            if len(df.columns) != len(header.columns):
                raise CSVParsingError(
                    f"Rows in {header.path} do not match its {len(header.columns)}-column header",
                    details={"path": header.path},
                )
            df = df.iloc[1:].reset_index(drop=True)
            df.columns = header.columns
            frames.append(df.reindex(columns=columns))

        combined = pd.concat(frames, ignore_index=True).fillna("")

        if output is not None:
            combined.to_csv(output, index=False, sep=self.delimiter, encoding=self.encoding)
            logger.info("Combined CSV written", path=str(output), rows=len(combined))

        return combined


def read_csv_header(path: PathLike, delimiter: str = ",", encoding: str = "utf-8") -> HeaderSource:
    """Read the header row of one CSV file."""
    processor = CSVHeaderProcessor(delimiter=delimiter, encoding=encoding)
    return processor.read_header(path)


def merge_csv_headers(
    paths: Sequence[PathLike],
    strict_validation: bool = True,
    delimiter: str = ",",
    encoding: str = "utf-8",
) -> MergeReport:
    """
    Merge the headers of several CSV files.

    Args:
        paths: CSV files to read
        strict_validation: Raise on unreadable files instead of skipping them
        delimiter: Field delimiter
        encoding: File encoding

    Returns:
        MergeReport with the merged column order in ``labels``

    Raises:
        CSVParsingError: On unreadable files
        InvalidInputError: If the headers order columns inconsistently
    """
    processor = CSVHeaderProcessor(strict_validation, delimiter, encoding)
    return processor.merge_headers(paths)


def combine_csv_files(
    paths: Sequence[PathLike],
    output: Optional[PathLike] = None,
    strict_validation: bool = True,
    delimiter: str = ",",
    encoding: str = "utf-8",
) -> pd.DataFrame:
    """Combine the rows of several CSV files under their merged header."""
    processor = CSVHeaderProcessor(strict_validation, delimiter, encoding)
    return processor.combine(paths, output)
