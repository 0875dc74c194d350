#
# Copyright (c) 2024-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import datetime
import io
import logging

import streamlit as st

import common
import environ

from invoicetax import compute_taxes, create_invoice, default_currency, default_daily_rate, write_report, PreconditionViolation
from ledger import Ledger, LedgerError
from report import TextReport


common.set_page_config(
    page_title="Invoice Tax",
    layout="wide",
)


st.title('Invoice Tax Calculator')


logger = logging.getLogger('app')


#
# Parameters
#

with st.sidebar:
    st.header("Invoice")

    name = st.text_input("Name", key="name", help="Must be unique within the year.")
    days_worked = st.number_input("Days worked", value=1, min_value=1, max_value=366, step=1, key="days_worked")
    daily_rate = st.number_input("Daily rate", value=default_daily_rate, min_value=0.01, step=50.0, format='%.2f', key="daily_rate")
    currency = st.text_input("Currency", value=default_currency, max_chars=3, key="currency", help="Rates are not converted.")


#
# Ledger
#

today = datetime.datetime.now(datetime.timezone.utc).astimezone().date()
ledger = Ledger.for_date(environ.ledger_dir(), today)

try:
    invoices = ledger.read()
except LedgerError as ex:
    logger.error(str(ex))
    st.error(str(ex), icon="🚨")
    st.stop()


#
# Preview
#

taxes = compute_taxes(int(days_worked), float(daily_rate), invoices)

st.header('Preview')

col1, col2, col3, col4 = st.columns(4)
col1.metric("Gross profit", f'{taxes.gross_profit:,.2f}')
col2.metric("Government tax", f'{taxes.government_tax:,.2f}')
col3.metric("Social contribution", f'{taxes.social_contribution_tax:,.2f}')
col4.metric("Net profit", f'{taxes.net_profit:,.2f}')

if st.button("Record invoice", key="record", disabled=not name, use_container_width=True):
    try:
        invoice = create_invoice(ledger, name, int(days_worked), float(daily_rate), currency)
    except (PreconditionViolation, LedgerError) as ex:
        st.error(str(ex), icon="🚨")
    else:
        st.success(f'Recorded invoice {invoice.name!r}.')
        invoices = ledger.read()


#
# Report
#

st.header(f'Ledger {ledger.year}')

if invoices:
    st.dataframe(common.invoices_dataframe(invoices), hide_index=True, use_container_width=True)

text = io.StringIO()
write_report(TextReport(text), invoices, ledger.year)
st.markdown('```\n' + text.getvalue() + '```\n')
