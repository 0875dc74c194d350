#
# Copyright (c) 2024-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import io

from report import Report, TextReport, HtmlReport


def test_format():
    assert Report.format(None) == ''
    assert Report.format(float('nan')) == ''
    assert Report.format(1234.5) == '1,234.50'
    assert Report.format(5) == '5'
    assert Report.format('EUR') == 'EUR'


def test_text_report():
    stream = io.StringIO()
    report = TextReport(stream)
    report.write_heading('Summary')
    report.write_table([('a', 1.0), ('bb', 22.5)], header=['Name', 'Value'], footer=['Total', 23.5], just='lr')
    report.write_paragraph('Done.')
    assert stream.getvalue() == (
        'SUMMARY\n'
        '\n'
        'Name   Value\n'
        '────────────\n'
        'a       1.00\n'
        'bb     22.50\n'
        '────────────\n'
        'Total  23.50\n'
        '\n'
        'Done.\n'
        '\n'
    )


def test_text_report_indent():
    stream = io.StringIO()
    report = TextReport(stream)
    report.write_table([('x', 'y')], just='ll', indent='  ')
    assert stream.getvalue() == '  x  y\n\n'


def test_html_report():
    stream = io.StringIO()
    report = HtmlReport(stream)
    report.start('Invoices <2024>')
    report.write_heading('Summary')
    report.write_table([('a&b', 1.0)], header=['Name', 'Value'], just='lr')
    report.end()
    html = stream.getvalue()
    assert '<title>Invoices &lt;2024&gt;</title>' in html
    assert '<h2>Summary</h2>' in html
    assert '<th class="text-left">Name</th><th class="text-right">Value</th>' in html
    assert '<td class="text-left">a&amp;b</td><td class="text-right">1.00</td>' in html
    assert html.endswith('</html>\n')
