#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import dataclasses

import pandas as pd
import streamlit as st

from ledger import Invoice


# https://docs.streamlit.io/library/api-reference/utilities/st.set_page_config
def set_page_config(page_title, page_icon=":material/receipt_long:", layout="centered", initial_sidebar_state="auto"):
    st.set_page_config(
        page_title=page_title,
        page_icon=page_icon,
        layout=layout,
        initial_sidebar_state=initial_sidebar_state,
        menu_items={
            "About": """Freelance invoice tax calculator.

Records invoices in a yearly ledger and works out the income tax and social
contribution due on each of them.
""",
        }
    )


def invoices_dataframe(invoices:list[Invoice]) -> pd.DataFrame:
    columns = [field.name for field in dataclasses.fields(Invoice)]
    df = pd.DataFrame([dataclasses.astuple(invoice) for invoice in invoices], columns=columns)
    df['date'] = pd.to_datetime(df['date'], unit='ms', utc=True)
    return df
