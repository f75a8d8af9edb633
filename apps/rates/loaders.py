"""
Rate table loading.

Reads exchange_rates.csv, term_rates.csv and admin_fees.csv using pandas
when RATE_TABLES_DIR is configured, otherwise uses the built-in defaults.
Tables are loaded once per process and shared read-only.
"""

import logging
from functools import lru_cache
from pathlib import Path

import pandas as pd
from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver

from apps.core.exceptions import RateTableError
from apps.rates.tables import RateTables, build_rate_tables, default_rate_tables

logger = logging.getLogger(__name__)

EXCHANGE_RATES_FILE = 'exchange_rates.csv'
TERM_RATES_FILE = 'term_rates.csv'
ADMIN_FEES_FILE = 'admin_fees.csv'

EXCHANGE_RATES_COLUMNS = ('currency', 'rate')
TERM_RATES_COLUMNS = ('term', 'method', 'rate')
ADMIN_FEES_COLUMNS = ('upper_bound', 'deduction_fee', 'cash_fee')


def _read_table(file_path: Path, required_columns) -> pd.DataFrame:
    """Read a CSV as strings with normalized column names."""
    if not file_path.exists():
        raise RateTableError(f"Rate table file not found: {file_path}")

    df = pd.read_csv(file_path, dtype=str, keep_default_na=False)

    # Normalize column names
    df.columns = [col.strip().lower().replace(' ', '_') for col in df.columns]

    missing = [col for col in required_columns if col not in df.columns]
    if missing:
        raise RateTableError(
            f"{file_path.name}: missing column(s) {', '.join(missing)}"
        )

    logger.info("Read %d rows from %s", len(df), file_path.name)
    return df


def _parse_term(value, file_name: str, index: int) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        raise RateTableError(
            f"{file_name} row {index}: term {value!r} is not an integer"
        )


def load_rate_tables(directory) -> RateTables:
    """
    Load and validate rate tables from a directory of CSV files.

    Args:
        directory: Path containing exchange_rates.csv, term_rates.csv
            and admin_fees.csv.

    Returns:
        RateTables instance.

    Raises:
        RateTableError: If a file is missing or its data is malformed.
    """
    directory = Path(directory)

    rates_df = _read_table(directory / EXCHANGE_RATES_FILE, EXCHANGE_RATES_COLUMNS)
    exchange_rates = {}
    for _, row in rates_df.iterrows():
        code = row['currency'].strip().upper()
        if code in exchange_rates:
            raise RateTableError(f"{EXCHANGE_RATES_FILE}: duplicate currency {code}")
        exchange_rates[code] = row['rate']

    terms_df = _read_table(directory / TERM_RATES_FILE, TERM_RATES_COLUMNS)
    has_bank = 'bank' in terms_df.columns
    term_rates = []
    for index, row in terms_df.iterrows():
        bank = row['bank'].strip() if has_bank else ''
        term_rates.append((
            _parse_term(row['term'], TERM_RATES_FILE, index),
            row['method'].strip(),
            bank or None,
            row['rate'],
        ))

    fees_df = _read_table(directory / ADMIN_FEES_FILE, ADMIN_FEES_COLUMNS)
    admin_fees = []
    for _, row in fees_df.iterrows():
        upper_bound = row['upper_bound'].strip()
        admin_fees.append((
            upper_bound or None,
            row['deduction_fee'],
            row['cash_fee'],
        ))

    tables = build_rate_tables(exchange_rates, term_rates, admin_fees)
    logger.info(
        "Loaded rate tables from %s: %d currencies, %d term rates, %d fee brackets",
        directory,
        len(tables.exchange_rates.codes),
        len(tables.term_rates.entries),
        len(tables.admin_fees.brackets),
    )
    return tables


@lru_cache(maxsize=1)
def get_rate_tables() -> RateTables:
    """Process-wide rate tables, per the RATE_TABLES_DIR setting."""
    directory = getattr(settings, 'RATE_TABLES_DIR', None)
    if directory:
        return load_rate_tables(directory)
    logger.debug("RATE_TABLES_DIR not set, using built-in rate tables")
    return default_rate_tables()


@receiver(setting_changed)
def _reset_rate_tables(setting, **kwargs):
    if setting == 'RATE_TABLES_DIR':
        get_rate_tables.cache_clear()
