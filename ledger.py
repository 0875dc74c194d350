#
# Copyright (c) 2024-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

#
# Per-year invoice ledger, stored as a CSV file named invoices_YYYY.csv.
#
# Every data row is followed by an empty row.  Blank rows are ignored when
# reading, so files with or without separator rows both parse.
#


import csv
import dataclasses
import datetime
import io
import logging
import math
import os.path

from collections.abc import Iterable
from decimal import Decimal


__all__ = [
    'Invoice',
    'Ledger',
    'LedgerError',
    'LedgerIOFailure',
    'MalformedRecord',
    'header',
]


logger = logging.getLogger('ledger')


header = (
    'name',
    'date',
    'days_worked',
    'daily_rate',
    'currency',
    'gross_profit',
    'net_profit',
    'government_tax',
    'social_contribution_tax',
    'total_tax',
)


@dataclasses.dataclass(frozen=True)
class Invoice:
    name: str
    # Milliseconds since the Unix epoch
    date: int
    days_worked: int
    daily_rate: float
    currency: str
    gross_profit: float
    net_profit: float
    government_tax: float
    social_contribution_tax: float
    total_tax: float

    def issued_at(self) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(self.date / 1000, datetime.timezone.utc)


assert tuple(field.name for field in dataclasses.fields(Invoice)) == header


class LedgerError(Exception):

    pass


class LedgerIOFailure(LedgerError):

    def __init__(self, filename:str, cause:OSError):
        super().__init__(f'{filename}: {cause.strerror or cause}')
        self.filename = filename
        self.cause = cause


class MalformedRecord(LedgerError):

    def __init__(self, filename:str, line_no:int|None, field:str|None, value:str|None, reason:str):
        location = filename if line_no is None else f'{filename}:{line_no}'
        if field is None:
            message = f'{location}: {reason}'
        else:
            message = f'{location}: {field}: {reason}: {value!r}'
        super().__init__(message)
        self.filename = filename
        self.line_no = line_no
        self.field = field
        self.value = value


def format_number(value:float|int) -> str:
    if isinstance(value, int):
        return str(value)
    # Whole amounts are written without a fractional part, e.g. 2500 not 2500.0
    if value.is_integer() and abs(value) < 2**53:
        return str(int(value))
    # Shortest round-trip digits, in positional notation (no exponent)
    return format(Decimal(repr(value)), 'f')


def _parse_float(value:str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError('not a finite number')
    return number


def _parse_int(value:str) -> int:
    return int(value)


_parsers = {
    'name': str,
    'date': _parse_int,
    'days_worked': _parse_int,
    'daily_rate': _parse_float,
    'currency': str,
    'gross_profit': _parse_float,
    'net_profit': _parse_float,
    'government_tax': _parse_float,
    'social_contribution_tax': _parse_float,
    'total_tax': _parse_float,
}


class Ledger:

    def __init__(self, directory:str, year:int):
        self.directory = directory
        self.year = year
        self.filename = os.path.join(directory, f'invoices_{year}.csv')

    @classmethod
    def for_date(cls, directory:str, date:datetime.date) -> 'Ledger':
        return cls(directory, date.year)

    def __repr__(self) -> str:
        return f'Ledger({self.filename!r})'

    def exists(self) -> bool:
        return os.path.exists(self.filename)

    def _write_header(self, mode:str) -> None:
        stream = io.StringIO()
        csv.writer(stream, lineterminator='\n').writerow(header)
        with open(self.filename, mode, newline='') as f:
            f.write(stream.getvalue())

    def create(self) -> None:
        try:
            self._write_header('xt')
        except FileExistsError:
            return
        except OSError as ex:
            raise LedgerIOFailure(self.filename, ex) from ex
        logger.info(f'created {self.filename}')

    def read(self) -> list[Invoice]:
        if not self.exists():
            self.create()
            return []

        try:
            if os.path.getsize(self.filename) == 0:
                # Empty file, e.g. truncated by hand
                logger.warning(f'{self.filename} is empty; writing header')
                self._write_header('wt')
                return []
            with open(self.filename, 'rt', newline='') as f:
                return self.parse(f)
        except UnicodeDecodeError as ex:
            raise MalformedRecord(self.filename, None, None, None, str(ex)) from ex
        except OSError as ex:
            raise LedgerIOFailure(self.filename, ex) from ex
        except csv.Error as ex:
            raise MalformedRecord(self.filename, None, None, None, str(ex)) from ex

    def parse(self, stream:Iterable[str]) -> list[Invoice]:
        invoices = []
        reader = csv.reader(stream)
        seen_header = False
        for row in reader:
            line_no = reader.line_num
            if not row or row == ['']:
                continue
            if not seen_header:
                if tuple(row) != header:
                    raise MalformedRecord(self.filename, line_no, None, None, f'unexpected header {",".join(row)!r}')
                seen_header = True
                continue
            if len(row) != len(header):
                raise MalformedRecord(self.filename, line_no, None, None, f'expected {len(header)} fields, got {len(row)}')
            fields = {}
            for name, value in zip(header, row):
                try:
                    fields[name] = _parsers[name](value)
                except ValueError as ex:
                    raise MalformedRecord(self.filename, line_no, name, value, str(ex)) from ex
            invoices.append(Invoice(**fields))

        if not seen_header:
            raise MalformedRecord(self.filename, None, None, None, 'missing header')

        return invoices

    def append(self, invoice:Invoice) -> None:
        if not self.exists():
            self.create()

        row = []
        for name in header:
            value = getattr(invoice, name)
            if isinstance(value, str):
                row.append(value)
            else:
                row.append(format_number(value))

        # Single write, so a failure leaves no partial record behind
        stream = io.StringIO()
        writer = csv.writer(stream, lineterminator='\n')
        writer.writerow(row)
        writer.writerow([])
        try:
            with open(self.filename, 'at', newline='') as f:
                f.write(stream.getvalue())
        except OSError as ex:
            raise LedgerIOFailure(self.filename, ex) from ex
        logger.info(f'appended {invoice.name!r} to {self.filename}')
