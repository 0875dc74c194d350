#
# Copyright (c) 2024-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import datetime
import os.path

import pytest

from ledger import Invoice, Ledger, LedgerIOFailure, MalformedRecord, format_number, header


header_line = ','.join(header) + '\n'

invoice = Invoice(
    name='first',
    date=1709251200000,
    days_worked=5,
    daily_rate=500.0,
    currency='EUR',
    gross_profit=2500.0,
    net_profit=1490.625,
    government_tax=625.0,
    social_contribution_tax=384.375,
    total_tax=1009.375,
)


def write(ledger:Ledger, content:str) -> None:
    with open(ledger.filename, 'wt') as f:
        f.write(content)


def test_filename(tmp_path):
    ledger = Ledger(str(tmp_path), 2024)
    assert ledger.filename == os.path.join(str(tmp_path), 'invoices_2024.csv')
    assert Ledger.for_date(str(tmp_path), datetime.date(2025, 12, 31)).year == 2025


def test_read_creates(tmp_path):
    ledger = Ledger(str(tmp_path), 2024)
    assert not ledger.exists()
    assert ledger.read() == []
    assert open(ledger.filename, 'rt').read() == header_line
    assert ledger.read() == []


def test_append(tmp_path):
    ledger = Ledger(str(tmp_path), 2024)
    ledger.append(invoice)
    assert open(ledger.filename, 'rt').read() == (
        header_line +
        'first,1709251200000,5,500,EUR,2500,1490.625,625,384.375,1009.375\n'
        '\n'
    )
    assert ledger.read() == [invoice]


def test_read_quoted_name(tmp_path):
    ledger = Ledger(str(tmp_path), 2024)
    other = Invoice('ACME, Inc.', *[getattr(invoice, name) for name in header[1:]])
    ledger.append(invoice)
    ledger.append(other)
    assert '"ACME, Inc."' in open(ledger.filename, 'rt').read()
    assert ledger.read() == [invoice, other]


def test_read_empty(tmp_path):
    ledger = Ledger(str(tmp_path), 2024)
    write(ledger, '')
    assert ledger.read() == []
    assert open(ledger.filename, 'rt').read() == header_line
    ledger.append(invoice)
    assert ledger.read() == [invoice]


def test_read_without_separator_rows(tmp_path):
    ledger = Ledger(str(tmp_path), 2024)
    write(ledger, header_line +
        'a,1709251200000,1,500.5,EUR,500.5,300,125.125,75,200.125\n'
        'b,1709251200001,2,500,USD,1000,600,250,150,400\n'
    )
    invoices = ledger.read()
    assert [(invoice.name, invoice.days_worked, invoice.daily_rate) for invoice in invoices] == [
        ('a', 1, 500.5),
        ('b', 2, 500.0),
    ]


@pytest.mark.parametrize("row,field,value", [
    ('a,1709251200000,five,500,EUR,2500,1490.625,625,384.375,1009.375', 'days_worked', 'five'),
    ('a,yesterday,5,500,EUR,2500,1490.625,625,384.375,1009.375', 'date', 'yesterday'),
    ('a,1709251200000,5,500,EUR,,1490.625,625,384.375,1009.375', 'gross_profit', ''),
    ('a,1709251200000,5,nan,EUR,2500,1490.625,625,384.375,1009.375', 'daily_rate', 'nan'),
])
def test_read_malformed_field(tmp_path, row, field, value):
    ledger = Ledger(str(tmp_path), 2024)
    write(ledger, header_line + 'ok,1709251200000,5,500,EUR,2500,1490.625,625,384.375,1009.375\n\n' + row + '\n\n')
    with pytest.raises(MalformedRecord) as excinfo:
        ledger.read()
    assert excinfo.value.line_no == 4
    assert excinfo.value.field == field
    assert excinfo.value.value == value
    assert field in str(excinfo.value)


@pytest.mark.parametrize("content", [
    'name,date\n',
    header_line + 'a,1709251200000,5\n',
    header_line + 'a,1709251200000,5,500,EUR,2500,1490.625,625,384.375,1009.375,extra\n',
])
def test_read_malformed(tmp_path, content):
    ledger = Ledger(str(tmp_path), 2024)
    write(ledger, content)
    with pytest.raises(MalformedRecord):
        ledger.read()


def test_io_failure(tmp_path):
    ledger = Ledger(os.path.join(str(tmp_path), 'missing'), 2024)
    with pytest.raises(LedgerIOFailure) as excinfo:
        ledger.read()
    assert excinfo.value.filename == ledger.filename
    with pytest.raises(LedgerIOFailure):
        ledger.append(invoice)


@pytest.mark.parametrize("value,text", [
    (0, '0'),
    (5, '5'),
    (2500.0, '2500'),
    (-6130.0, '-6130'),
    (384.375, '384.375'),
    (0.1, '0.1'),
    (1e20, '100000000000000000000'),
    (-1e20, '-100000000000000000000'),
    (1e-07, '0.0000001'),
    (5.9625e-08, '0.000000059625'),
])
def test_format_number(value, text):
    assert format_number(value) == text
