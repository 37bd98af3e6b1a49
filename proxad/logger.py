"""Print monitored scalars as table rows, optionally also to a CSV file."""

from __future__ import annotations

import sys
from numbers import Integral
from typing import Any, Callable, Optional, TextIO


class TableLogger:
    """Prints one row of monitored values each time ``print_row`` is called.

    Each column is read from a callable that takes no arguments when a row is
    printed. Integers are printed as integers and other values as floats. The
    row of column names is printed before the first data row. When a file is
    attached with ``save_when_print``, rows are also written to it, with floats
    in scientific notation with eight digits.
    """

    def __init__(self, stream: Optional[TextIO] = None, width: int = 14):
        self.stream = sys.stdout if stream is None else stream
        self.width = int(width)
        self._columns: list[tuple[str, Callable[[], Any]]] = []
        self._names_printed = False
        self._file: Optional[TextIO] = None

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._columns]

    def append(self, name, source):
        """Monitor ``source()``, printed under the column ``name``."""
        if not callable(source):
            raise TypeError(
                "TableLogger: source must be a callable that returns the value"
            )
        self._columns.append((str(name), source))

    def _header(self) -> str:
        return ",\t".join(f"{name:>{self.width}}" for name in self.names)

    def _screen_field(self, value) -> str:
        if isinstance(value, Integral):
            return f"{int(value):>{self.width}d}"
        return f"{float(value):>{self.width}g}"

    def _file_field(self, value) -> str:
        if isinstance(value, Integral):
            return f"{int(value):>{self.width}d}"
        return f"{float(value):>{self.width}.8e}"

    def print_row(self, print_names=False):
        """Print the current values; the names too on the first call or if asked."""
        if not self._names_printed or print_names:
            header = self._header()
            self.stream.write(header + "\n")
            if not self._names_printed and self._file is not None:
                self._file.write(header + "\n")
            self._names_printed = True
        values = [source() for _, source in self._columns]
        self.stream.write(
            ",\t".join(self._screen_field(v) for v in values) + "\n"
        )
        self.stream.flush()
        if self._file is not None:
            self._file.write(
                ",\t".join(self._file_field(v) for v in values) + "\n"
            )
            self._file.flush()

    def save_when_print(self, filename, mode="w"):
        """Also write every printed row to ``filename + '.csv'``."""
        self.close_file()
        path = f"{filename}.csv"
        try:
            self._file = open(path, mode, encoding="utf-8")
        except OSError as error:
            raise OSError(f"Cannot open file {path}") from error

    def close_file(self):
        """Close the attached file, if any."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close_file()
        return False