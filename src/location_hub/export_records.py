"""
Flat record export for bulk loading.

Flattens every village of the location tree into one FlattenedLocationRecord
row (no search-letter filtering) and saves the table as CSV or Parquet. This
is the file handed to whatever bulk-loads the live location store.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Union

import pandas as pd

from .code_strategy import CodeStrategy, DeterministicCodeStrategy
from .exceptions import WriteError
from .sharder import build_location_record

logger = logging.getLogger(__name__)

RECORD_COLUMNS = [
    'stateName', 'stateCode',
    'districtName', 'districtCode',
    'talukaName', 'talukaCode',
    'villageName', 'villageCode',
    'uniqueCode', 'fullPath', 'searchText',
]

CODE_COLUMNS = ['stateCode', 'districtCode', 'talukaCode', 'villageCode']

PROGRESS_LOG_INTERVAL = 10_000


def flatten_location_tree(
    tree: Mapping[str, Any],
    code_strategy: Optional[CodeStrategy] = None
) -> Iterator[Dict[str, Any]]:
    """
    Yield one flattened record per village, in source order.

    Example:
        >>> next(flatten_location_tree(tree))['fullPath']
        'Maharashtra > Mumbai > Andheri > Bandra'
    """
    if code_strategy is None:
        code_strategy = DeterministicCodeStrategy()

    count = 0
    for state in tree['states']:
        for district in state['districts']:
            for taluka in district['talukas']:
                for village in taluka['villages']:
                    yield build_location_record(state, district, taluka, village, code_strategy)
                    count += 1
                    if count % PROGRESS_LOG_INTERVAL == 0:
                        logger.info(f"Processed {count:,} locations...")


def location_records_frame(
    tree: Mapping[str, Any],
    code_strategy: Optional[CodeStrategy] = None
) -> pd.DataFrame:
    """
    All flattened records as a DataFrame with a fixed column order.

    Code columns are stored as text so string and integer source codes can
    share one Parquet column.
    """
    df = pd.DataFrame(list(flatten_location_tree(tree, code_strategy)), columns=RECORD_COLUMNS)
    df[CODE_COLUMNS] = df[CODE_COLUMNS].astype(str)
    return df


def export_location_records(
    tree: Mapping[str, Any],
    output_path: Union[str, Path],
    code_strategy: Optional[CodeStrategy] = None
) -> Dict[str, Any]:
    """
    Save all flattened records to CSV or Parquet (chosen by file suffix).

    Args:
        tree: Verified location tree
        output_path: ``.csv`` or ``.parquet`` target
        code_strategy: uniqueCode generator (deterministic by default)

    Returns:
        dict: Export summary with row and distinct counts

    Raises:
        ValueError: If the suffix is not supported
        WriteError: If the file cannot be written
    """
    output_file = Path(output_path)
    suffix = output_file.suffix.lower()
    if suffix not in ('.csv', '.parquet'):
        raise ValueError(f"Unsupported export format '{suffix}' (use .csv or .parquet)")

    df = location_records_frame(tree, code_strategy)
    logger.info(f"Exporting {len(df):,} location records to {output_file}")

    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        if suffix == '.csv':
            df.to_csv(output_file, index=False, encoding='utf-8')
        else:
            df.to_parquet(output_file, index=False, compression='snappy')
    except OSError as e:
        logger.error(f"Failed to export records: {e}")
        raise WriteError(f"Cannot write {output_file}: {e}") from e

    summary = {
        'output_path': str(output_file.absolute()),
        'rows': len(df),
        'states': int(df['stateCode'].nunique()),
        'districts': int(df[['stateCode', 'districtCode']].drop_duplicates().shape[0]),
        'talukas': int(df[['stateCode', 'districtCode', 'talukaCode']].drop_duplicates().shape[0]),
        'duplicate_unique_codes': int(df['uniqueCode'].duplicated().sum()),
    }

    if summary['duplicate_unique_codes'] > 0:
        logger.warning(
            f"{summary['duplicate_unique_codes']:,} duplicate uniqueCode values - "
            f"sibling codes are not unique in the source"
        )

    logger.info(
        f"Export complete: {summary['rows']:,} rows, {summary['states']} states, "
        f"{summary['districts']:,} districts, {summary['talukas']:,} talukas"
    )
    return summary
