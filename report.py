#
# Copyright (c) 2024-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import html
import sys
import textwrap

from typing import Sequence, Any, TextIO
from abc import ABC, abstractmethod


__all__ = [
    'Report',
    'TextReport',
    'HtmlReport',
]


class Report(ABC):

    def start(self, title:str) -> None:
        pass

    @abstractmethod
    def write_heading(self, heading:str, level:int=1) -> None:  # pragma: no cover
        raise NotImplementedError

    @abstractmethod
    def write_paragraph(self, paragraph:str) -> None:  # pragma: no cover
        raise NotImplementedError

    @abstractmethod
    def write_table(self, rows:Sequence[Sequence[Any]], header:Sequence[Any]|None=None, footer:Sequence[Any]|None=None, just:str|None=None, indent:str='') -> None:  # pragma: no cover
        raise NotImplementedError

    @staticmethod
    def format(field:Any) -> str:
        if field is None or field != field:
            return ''
        if isinstance(field, float):
            return f'{field:,.2f}'
        return str(field)

    def end(self) -> None:
        pass


class TextReport(Report):

    _just = {
        'c': str.center,
        'l': str.ljust,
        'r': str.rjust,
    }

    def __init__(self, stream:TextIO=sys.stdout):
        self.stream = stream
        self.heading_sep = ''

    def _isatty(self) -> bool:
        isatty = getattr(self.stream, 'isatty', None)
        return isatty is not None and isatty()

    def write_heading(self, heading:str, level:int=1) -> None:
        if level <= 1:
            heading = heading.upper()
        if sys.platform != 'win32' and self._isatty():
            # Ansi escape
            heading = '\33[1m' + heading + '\33[0m'
        self.stream.write(self.heading_sep + heading + '\n\n')
        self.heading_sep = ''

    def write_paragraph(self, paragraph:str) -> None:
        paragraph = '\n'.join(textwrap.wrap(paragraph, width=120))
        self.stream.write(paragraph + '\n\n')
        self.heading_sep = '\n'

    def write_table(self, rows:Sequence[Sequence[Any]], header:Sequence[Any]|None=None, footer:Sequence[Any]|None=None, just:str|None=None, indent:str='') -> None:
        lines = [[self.format(field) for field in row] for row in rows]
        ncols = max((len(line) for line in lines), default=0)
        if header is not None:
            header = [self.format(field) for field in header]
            ncols = max(ncols, len(header))
        if footer is not None:
            footer = [self.format(field) for field in footer]
            ncols = max(ncols, len(footer))
        if just is None:
            just = 'c' * ncols
        assert len(just) == ncols

        widths = [0] * ncols
        for line in [header, footer] + lines:
            if line is None:
                continue
            assert len(line) == ncols
            for c, cell in enumerate(line):
                widths[c] = max(widths[c], len(cell))

        sep = '  '

        def write_line(line:list[str]) -> None:
            cells = [self._just[j](cell, width) for cell, j, width in zip(line, just, widths)]
            self.stream.write(indent + sep.join(cells).rstrip() + '\n')

        rule = indent + '─' * len(sep.join(' ' * width for width in widths)) + '\n'

        if header is not None:
            write_line(header)
            self.stream.write(rule)
        for line in lines:
            write_line(line)
        if footer is not None:
            self.stream.write(rule)
            write_line(footer)

        self.stream.write('\n')

        self.heading_sep = '\n'


class HtmlReport(Report):

    _css = '''
body {
  font-family: "Noto Sans Mono", monospace;
  font-size: 0.75rem;
  background-color: white;
}

h1, h2, h3, h4 {
  font-size: 100%;
  font-weight: bold;
  text-transform: uppercase;
  margin-top: 2em;
  margin-bottom: 1em;
}

h1 { text-align: center; }

.text-center { text-align: center; }
.text-right { text-align: right; }
.text-left { text-align: left; }

table {
  margin: 1em auto 1em 2ch;
  border-spacing: 0;
}

thead tr th { border-bottom: 1.5px solid; }
tfoot tr th { border-top: 1.5px solid; }

th, td { padding: 0.25em 1ch; }
'''

    _just = {
        'c': 'text-center',
        'l': 'text-left',
        'r': 'text-right',
    }

    def __init__(self, stream:TextIO):
        self.stream = stream

    def start(self, title:str) -> None:
        title = html.escape(title)
        self.stream.write(f'''<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>{self._css}</style>
</head>
<body>
<h1>{title}</h1>
''')

    def write_heading(self, heading:str, level:int=1) -> None:
        level += 1
        heading = html.escape(heading)
        self.stream.write(f'\n<h{level}>{heading}</h{level}>\n\n')

    def write_paragraph(self, paragraph:str) -> None:
        paragraph = html.escape(paragraph)
        self.stream.write(f'<p>{paragraph}</p>\n\n')

    def _cells(self, tag:str, fields:Sequence[Any], just:Sequence[str]) -> str:
        return ''.join(f'<{tag} class="{j}">{html.escape(self.format(field))}</{tag}>' for field, j in zip(fields, just))

    def write_table(self, rows:Sequence[Sequence[Any]], header:Sequence[Any]|None=None, footer:Sequence[Any]|None=None, just:str|None=None, indent:str='') -> None:
        classes: Sequence[str]
        if just is None:
            ncols = max([len(row) for row in rows] + [len(header or []), len(footer or [])])
            classes = ['text-center'] * ncols
        else:
            classes = [self._just[j] for j in just]

        self.stream.write('<table>\n')
        if header:
            self.stream.write('<thead><tr>' + self._cells('th', header, classes) + '</tr></thead>\n')
        self.stream.write('<tbody>\n')
        for row in rows:
            self.stream.write('<tr>' + self._cells('td', row, classes) + '</tr>\n')
        self.stream.write('</tbody>\n')
        if footer:
            self.stream.write('<tfoot><tr>' + self._cells('th', footer, classes) + '</tr></tfoot>\n')
        self.stream.write('</table>\n')

    def end(self) -> None:
        self.stream.write('\n</body>\n</html>\n')
