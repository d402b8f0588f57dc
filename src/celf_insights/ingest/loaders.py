"""
Assessment file loading.

Reads a delimited export with a header row into raw string rows and hands
them to the normalizer. Failure to read the file as a whole is fatal and is
raised as IngestionError; problems inside individual rows are not.
"""

from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Union
import logging

import pandas as pd

from ..errors import IngestionError
from ..models.assessment import AssessmentRecord
from .normalizer import normalize

logger = logging.getLogger(__name__)


def read_csv_rows(filepath: Union[str, Path]) -> List[Dict[str, str]]:
    """
    Read a CSV export into a list of rows keyed by column header.

    Cells are kept as strings with no NA coercion so that sentinels such as
    '#N/A' and '-1' reach the normalizer verbatim.
    """
    path = Path(filepath)

    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except FileNotFoundError:
        logger.error(f"Assessment file not found: {path}")
        raise IngestionError(f"Assessment file not found: {path}")
    except pd.errors.EmptyDataError:
        logger.error(f"Assessment file is empty: {path}")
        raise IngestionError(f"Assessment file is empty: {path}")
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        logger.error(f"Error parsing assessment file {path}: {e}")
        raise IngestionError(f"Failed to parse assessment file {path}: {e}") from e

    df.columns = df.columns.str.strip()
    rows = df.to_dict(orient="records")

    logger.info(f"Read {len(rows)} rows from {path}")
    return rows


def load_assessments(filepath: Union[str, Path], load_date: Optional[date] = None) -> List[AssessmentRecord]:
    """Read and normalize an assessment export."""
    rows = read_csv_rows(filepath)
    records = normalize(rows, load_date=load_date)

    skipped = len(rows) - len(records)
    if skipped:
        logger.info(f"Skipped {skipped} rows without a student id or test scores")
    logger.info(f"Loaded {len(records)} assessment records from {filepath}")
    return records
