#
# Copyright (c) 2023-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import typing


class TaxBracket(typing.NamedTuple):

    # None for the top bracket
    upper_bound: int|None
    rate: float


# https://taxsummaries.pwc.com/belgium/individual/taxes-on-personal-income
income_tax_bands = (
    TaxBracket( 13870, 0.25 ),
    TaxBracket( 24480, 0.40 ),
    TaxBracket( 42370, 0.45 ),
    TaxBracket(  None, 0.50 ),
)


# https://taxsummaries.pwc.com/belgium/individual/other-taxes
# Self-employed social security contribution, applied after income tax
social_contribution_rate = 0.205


def check_bands(bands:typing.Sequence[TaxBracket]) -> None:
    if not bands:
        raise ValueError('no tax brackets')
    prev_upper_bound = None
    for i, (upper_bound, rate) in enumerate(bands):
        if not 0.0 <= rate <= 1.0:
            raise ValueError(f'bracket {i}: rate {rate!r} out of range')
        if upper_bound is None:
            if i + 1 != len(bands):
                raise ValueError(f'bracket {i}: only the last bracket can be unbounded')
            return
        if upper_bound < 0:
            raise ValueError(f'bracket {i}: negative upper bound {upper_bound!r}')
        if prev_upper_bound is not None and upper_bound <= prev_upper_bound:
            raise ValueError(f'bracket {i}: upper bound {upper_bound!r} not above {prev_upper_bound!r}')
        prev_upper_bound = upper_bound
    raise ValueError('last bracket must be unbounded')


check_bands(income_tax_bands)
