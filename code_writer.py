"""
code_writer.py
Indentation-aware text sink used by the C# generators.

Blocks are opened with bracket() and closed with end_bracket(); scope() wraps the pair in
a context manager so a block is closed even when generation unwinds with an exception.
"""
from contextlib import contextmanager
from io import StringIO
from xml.sax.saxutils import escape

from generation_errors import ScopeError


class CodeWriter:
    def __init__(self, indent: str = '    ', newline: str = '\n'):
        """
        Args:
            indent: Text written once per nesting level ('\\t' or four spaces)
            newline: Line terminator
        """
        self.indent = indent
        self.newline = newline
        self._buffer = StringIO()
        self._headers = []

    @property
    def depth(self) -> int:
        return len(self._headers)

    @property
    def code(self) -> str:
        return self._buffer.getvalue()

    def write_line(self, line: str = '') -> None:
        """Write one line at the current indentation. Empty lines carry no indentation."""
        if line:
            self._buffer.write(self.indent * self.depth + line + self.newline)
        else:
            self._buffer.write(self.newline)

    def comment(self, text: str) -> None:
        for line in text.split('\n'):
            self.write_line('// ' + line)

    def summary(self, text) -> None:
        """Write text as an XML doc comment. Nothing is written for empty text."""
        if not text:
            return
        self.write_line('/// <summary>')
        for line in text.strip().split('\n'):
            self.write_line('/// ' + escape(line.rstrip()))
        self.write_line('/// </summary>')

    def bracket(self, header: str) -> None:
        self.write_line(header)
        self.write_line('{')
        self._headers.append(header)

    def end_bracket(self) -> None:
        if not self._headers:
            raise ScopeError("end_bracket() without a matching bracket()")
        self._headers.pop()
        self.write_line('}')

    @contextmanager
    def scope(self, header: str):
        self.bracket(header)
        depth = self.depth
        try:
            yield self
        finally:
            # inner scopes opened with bracket() but left open are closed too
            while self.depth >= depth:
                self.end_bracket()
