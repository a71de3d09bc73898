#!/usr/bin/env python

"""
@file casroots/util/tabwriter.py
@brief Writes tab separated text as aligned columns.

Text is buffered until flush(). Every tab terminated cell belongs to a
column; all cells of a column are padded to the same width (the widest cell
plus padding, at least minwidth). The text after the last tab of a line is
written as is.
"""

from casroots.core import rootsinit

CONF = rootsinit.config(__name__)

class TabWriter(object):

    def __init__(self, output, minwidth=None, tabwidth=None, padding=None, padchar=' '):
        """
        @param output file like object to write the aligned text to
        @param tabwidth width of a tab character, only used when padchar is
            a tab
        """
        self.output = output
        self.minwidth = CONF.getValue('minwidth', 0) if minwidth is None else minwidth
        self.tabwidth = CONF.getValue('tabwidth', 8) if tabwidth is None else tabwidth
        self.padding = CONF.getValue('padding', 1) if padding is None else padding
        self.padchar = padchar
        self._buf = ''

    def write(self, text):
        self._buf += text

    def _lines(self):
        lines = self._buf.split('\n')
        # a trailing newline leaves an empty final piece
        terminated = lines[:-1]
        rest = lines[-1]
        return [line.split('\t') for line in terminated], rest

    def _widths(self, rows):
        widths = []
        for cells in rows:
            for i, cell in enumerate(cells[:-1]):
                width = len(cell) + self.padding
                if i == len(widths):
                    widths.append(max(width, self.minwidth))
                elif width > widths[i]:
                    widths[i] = width
        if self.padchar == '\t':
            # round up to full tab stops
            widths = [((w + self.tabwidth - 1) // self.tabwidth) * self.tabwidth for w in widths]
        return widths

    def _pad(self, cell, width):
        if self.padchar == '\t':
            missing = width - len(cell)
            return cell + '\t' * ((missing + self.tabwidth - 1) // self.tabwidth)
        return cell + self.padchar * (width - len(cell))

    def flush(self):
        """
        @brief Format and write all complete lines. An unterminated last line
        is kept in the buffer.
        """
        rows, rest = self._lines()
        widths = self._widths(rows)
        for cells in rows:
            line = ''.join(self._pad(cell, widths[i]) for i, cell in enumerate(cells[:-1]))
            self.output.write(line + cells[-1] + '\n')
        self._buf = rest
        if hasattr(self.output, 'flush'):
            self.output.flush()
