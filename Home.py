#
# Copyright (c) 2023 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import logging

import streamlit as st

import common


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(name)s %(levelname)s %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    force=True,
)


common.set_page_config(
    page_title="Freelance invoice taxes",
    layout="centered",
    initial_sidebar_state="expanded"
)

st.title("Freelance invoice taxes")

st.markdown('''Welcome!

This site keeps a yearly ledger of your freelance invoices and, for every new
invoice, works out the income tax and social contribution due on it.

Income tax is progressive: the profit already invoiced earlier in the year
determines which tax brackets the new invoice falls into.

Choose the calculator on the left sidebar.
''')
