#!/usr/bin/env python3
#
# Copyright (c) 2024-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

#
# Freelance invoice tax calculator.
#
# Records each invoice in a per-year ledger and works out the income tax and
# social contribution due on it, taking the gross profit already invoiced that
# year as the starting point for the marginal income tax brackets.
#


import argparse
import dataclasses
import datetime
import logging
import math
import sys
import typing

from collections.abc import Iterable, Sequence

import environ

from ledger import Invoice, Ledger, LedgerError
from report import Report, TextReport, HtmlReport
from tax.be import TaxBracket, income_tax_bands, social_contribution_rate


__all__ = [
    'BracketAllocation',
    'Invoice',
    'PreconditionViolation',
    'Taxes',
    'Totals',
    'allocate',
    'compute_taxes',
    'create_invoice',
    'government_tax',
    'social_contribution',
    'summarize',
    'validate',
    'write_report',
]


logger = logging.getLogger('invoicetax')


default_daily_rate = 500.0
default_currency = 'EUR'


class PreconditionViolation(ValueError):

    pass


class BracketAllocation(typing.NamedTuple):

    amount: float
    rate: float


def allocate(prior_profit:float, new_profit:float, bands:Sequence[TaxBracket]=income_tax_bands) -> list[BracketAllocation]:
    '''Split new_profit across the marginal tax brackets, given the profit
    already made earlier in the year.

    NOTE: Brackets are tested against the full interval occupied by the new
    profit, which is never narrowed after a split.  As a result, when the
    interval straddles a bracket boundary, the amount placed in the lower
    bracket is zero or negative and the next bracket absorbs the excess.
    Already persisted ledgers depend on these figures, so do not change this
    without a migration plan.
    '''

    if prior_profit < 0:
        raise ValueError(f'negative prior profit {prior_profit!r}')
    if new_profit < 0:
        raise ValueError(f'negative profit {new_profit!r}')

    allocations: list[BracketAllocation] = []
    if not new_profit:
        return allocations

    lower, upper = prior_profit, prior_profit + new_profit
    remaining = new_profit

    for upper_bound, rate in bands:
        if upper_bound is None:
            allocations.append(BracketAllocation(remaining, rate))
            break
        elif lower > upper_bound:
            continue
        elif upper < upper_bound:
            allocations.append(BracketAllocation(remaining, rate))
            break
        else:
            amount = upper_bound - upper
            allocations.append(BracketAllocation(amount, rate))
            remaining -= amount

    return allocations


def government_tax(allocations:Iterable[BracketAllocation]) -> tuple[float, float]:
    '''Return the profit remaining after income tax, and the income tax.'''

    remainder = 0.0
    tax = 0.0
    for amount, rate in allocations:
        tax += amount * rate
        # XXX: subtracts the tax accumulated so far, not just this bracket's
        remainder += amount - tax
    return remainder, tax


def social_contribution(remainder:float) -> tuple[float, float]:
    '''Return the net profit, and the social contribution.'''

    contribution = remainder * social_contribution_rate
    net_profit = remainder - contribution
    return net_profit, contribution


class Taxes(typing.NamedTuple):

    gross_profit: float
    net_profit: float
    government_tax: float
    social_contribution_tax: float

    @property
    def total_tax(self) -> float:
        return self.government_tax + self.social_contribution_tax


def compute_taxes(days_worked:int, daily_rate:float, prior_invoices:Iterable[Invoice]) -> Taxes:
    prior_profit = sum(invoice.gross_profit for invoice in prior_invoices)
    gross_profit = days_worked * daily_rate

    allocations = allocate(prior_profit, gross_profit)
    logger.debug(f'prior profit {prior_profit}, profit {gross_profit}: allocations {allocations}')

    remainder, gov_tax = government_tax(allocations)
    net_profit, social_tax = social_contribution(remainder)

    return Taxes(gross_profit, net_profit, gov_tax, social_tax)


def validate(name:str, days_worked:int, daily_rate:float) -> None:
    if not name:
        raise PreconditionViolation('`name` can not be empty')
    if days_worked <= 0:
        raise PreconditionViolation(f'`days_worked` must be positive, got {days_worked!r}')
    if not math.isfinite(daily_rate) or daily_rate <= 0.0:
        raise PreconditionViolation(f'`daily_rate` must be positive, got {daily_rate!r}')


def timestamp_millis(now:datetime.datetime) -> int:
    delta = now - datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
    return delta // datetime.timedelta(milliseconds=1)


def create_invoice(ledger:Ledger, name:str, days_worked:int, daily_rate:float=default_daily_rate, currency:str=default_currency, now:datetime.datetime|None=None) -> Invoice:
    # Checked before touching the ledger
    validate(name, days_worked, daily_rate)

    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    elif now.tzinfo is None:
        raise PreconditionViolation(f'`now` must be timezone aware, got {now!r}')

    currency = currency.upper()
    if currency != default_currency:
        # TODO: convert daily_rate to EUR once an exchange rate source is available
        logger.warning(f'{currency} daily rate taken as {default_currency}; currency conversion is not supported')

    invoices = ledger.read()
    if any(invoice.name == name for invoice in invoices):
        raise PreconditionViolation(f'`name` needs to be unique, {name!r} already in {ledger.filename}')

    taxes = compute_taxes(days_worked, daily_rate, invoices)

    invoice = Invoice(
        name=name,
        date=timestamp_millis(now),
        days_worked=days_worked,
        daily_rate=daily_rate,
        currency=currency,
        gross_profit=taxes.gross_profit,
        net_profit=taxes.net_profit,
        government_tax=taxes.government_tax,
        social_contribution_tax=taxes.social_contribution_tax,
        total_tax=taxes.total_tax,
    )

    ledger.append(invoice)

    return invoice


@dataclasses.dataclass
class Totals:
    gross_profit: float = 0.0
    net_profit: float = 0.0
    government_tax: float = 0.0
    social_contribution_tax: float = 0.0
    total_tax: float = 0.0


def summarize(invoices:Iterable[Invoice]) -> Totals:
    totals = Totals()
    for invoice in invoices:
        totals.gross_profit += invoice.gross_profit
        totals.net_profit += invoice.net_profit
        totals.government_tax += invoice.government_tax
        totals.social_contribution_tax += invoice.social_contribution_tax
        totals.total_tax += invoice.total_tax
    return totals


def write_report(report:Report, invoices:Sequence[Invoice], year:int) -> None:
    report.start(f'Invoices {year}')

    report.write_heading(f'Summary {year}')

    totals = summarize(invoices)
    rows = [
        ('Total gross profit', totals.gross_profit),
        ('Total net profit', totals.net_profit),
        ('Total government tax', totals.government_tax),
        ('Total social contribution', totals.social_contribution_tax),
        ('Total taxes', totals.total_tax),
    ]
    report.write_table(rows, just='lr', indent='  ')

    report.write_heading('Invoices')

    if invoices:
        header = ['Name', 'Date', 'Days', 'Daily rate', 'Currency', 'Gross profit', 'Net profit', 'Government tax', 'Social contribution', 'Total tax']
        rows = []
        for invoice in invoices:
            rows.append((
                invoice.name,
                invoice.issued_at().date(),
                invoice.days_worked,
                invoice.daily_rate,
                invoice.currency,
                invoice.gross_profit,
                invoice.net_profit,
                invoice.government_tax,
                invoice.social_contribution_tax,
                invoice.total_tax,
            ))
        footer = ['Total', '', sum(invoice.days_worked for invoice in invoices), '', '',
                  totals.gross_profit, totals.net_profit, totals.government_tax, totals.social_contribution_tax, totals.total_tax]
        report.write_table(rows, header=header, footer=footer, just='lcrrlrrrrr', indent='  ')
    else:
        report.write_paragraph('No invoices.')

    report.write_heading('About')

    report.write_paragraph(f'Generated by invoicetax.py version {environ.get_version()}.')

    report.end()


def main() -> int:
    logging.basicConfig(format='%(asctime)s %(name)s %(levelname)s %(message)s', level=logging.INFO)

    argparser = argparse.ArgumentParser(description='Record a freelance invoice and report the taxes due this year.')
    argparser.add_argument('name', metavar='NAME', nargs='?', default=None, help='unique invoice name')
    argparser.add_argument('days_worked', metavar='DAYS_WORKED', nargs='?', type=int, default=None, help='number of days worked')
    argparser.add_argument('-r', '--daily-rate', metavar='RATE', type=float, default=default_daily_rate, help=f'daily rate (default: {default_daily_rate})')
    argparser.add_argument('-c', '--currency', metavar='CODE', default=default_currency, help=f'currency code (default: {default_currency})')
    argparser.add_argument('-d', '--ledger-dir', metavar='DIR', default=None, help='directory holding the ledger files (default: $INVOICE_LEDGER_DIR or current directory)')
    argparser.add_argument('-s', '--summary', action='store_true', help='only report the ledger, do not record an invoice')
    argparser.add_argument('--format', choices=['text', 'html'], default='text')
    args = argparser.parse_args()

    ledger_dir = args.ledger_dir if args.ledger_dir is not None else environ.ledger_dir()
    now = datetime.datetime.now(datetime.timezone.utc)
    ledger = Ledger.for_date(ledger_dir, now.astimezone().date())

    try:
        if not args.summary:
            if args.name is None or args.days_worked is None:
                argparser.error('NAME and DAYS_WORKED are required unless --summary is given')
            try:
                create_invoice(ledger, args.name, args.days_worked, args.daily_rate, args.currency, now=now)
            except PreconditionViolation as ex:
                argparser.error(str(ex))
        invoices = ledger.read()
    except LedgerError as ex:
        sys.stderr.write(f'error: {ex}\n')
        return 1

    report: Report
    if args.format == 'text':
        report = TextReport(sys.stdout)
    else:
        assert args.format == 'html'
        report = HtmlReport(sys.stdout)
    write_report(report, invoices, ledger.year)

    return 0


if __name__ == '__main__':
    sys.exit(main())
