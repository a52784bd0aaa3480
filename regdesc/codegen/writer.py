# regdesc register description tools
# Copyright (c) 2026 regdesc authors
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

from contextlib import contextmanager
from typing import (Iterator, List, Optional)

class CodeWriter:
    """@brief Accumulates lines of generated Python source.

    Indentation is tracked as a level and applied when a line is added. Empty lines never carry
    trailing whitespace.
    """

    INDENT = "    "

    def __init__(self) -> None:
        self._lines: List[str] = []
        self._level = 0

    def line(self, text: str = "") -> None:
        self._lines.append((self.INDENT * self._level) + text if text else "")

    def lines(self, text: str) -> None:
        """@brief Add a multi-line block of text at the current indentation."""
        for line in text.splitlines():
            self.line(line)

    def blank(self, count: int = 1) -> None:
        for _ in range(count):
            self.line()

    @contextmanager
    def indented(self) -> Iterator[None]:
        self._level += 1
        try:
            yield
        finally:
            self._level -= 1

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        """@brief Write @a header, which should end with a colon, and indent the body."""
        self.line(header)
        with self.indented():
            yield

    def docstring(self, text: Optional[str]) -> None:
        """@brief Write a docstring for the enclosing class or function, if @a text is not empty."""
        if not text:
            return
        text = text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
        if text.endswith('"') and not text.endswith('\\"'):
            text = text[:-1] + '\\"'
        parts = text.splitlines()
        if len(parts) == 1:
            self.line(f'"""{parts[0]}"""')
        else:
            self.line(f'"""{parts[0]}')
            for part in parts[1:]:
                self.line(part.rstrip())
            self.line('"""')

    def text(self) -> str:
        while self._lines and not self._lines[-1]:
            self._lines.pop()
        return "\n".join(self._lines) + "\n"
