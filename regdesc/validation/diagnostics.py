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

import logging
from contextlib import contextmanager
from enum import Enum
from typing import (Iterable, Iterator, List, Optional, Sequence, Tuple)

LOG = logging.getLogger(__name__)

class TableKind(Enum):
    """@brief Kind of document table a diagnostic refers to."""
    ROOT_DESCRIPTION = "RootDescription"
    REGISTER = "Register"
    BIT_FIELD = "BitField"
    ENUM = "Enum"
    ENUM_VALUE = "EnumValue"

    def __str__(self) -> str:
        return self.value

class Diagnostic:
    """@brief Base class of validation diagnostics.

    A diagnostic records the kind of table being validated, the breadcrumb context active when
    the problem was found and, for key-related problems, the key. Diagnostics compare
    structurally.
    """
    __slots__ = ('_table', '_context', '_key', '_message')

    ## Short name of the diagnostic kind used when rendering.
    KIND = "error"

    def __init__(
                self,
                table: TableKind,
                context: Sequence[str],
                key: Optional[str],
                message: str
            ) -> None:
        self._table = table
        self._context = tuple(context)
        self._key = key
        self._message = message

    @property
    def table(self) -> TableKind:
        return self._table

    @property
    def context(self) -> Tuple[str, ...]:
        """@brief Breadcrumbs from the outermost to the innermost entity."""
        return self._context

    @property
    def key(self) -> Optional[str]:
        return self._key

    @property
    def message(self) -> str:
        return self._message

    @property
    def breadcrumb(self) -> str:
        return "".join(f"\n\t--> {c}" for c in self._context)

    def _fields(self) -> tuple:
        return (type(self), self._table, self._context, self._key, self._message)

    def __eq__(self, o: object) -> bool:
        return isinstance(o, Diagnostic) and (self._fields() == o._fields())

    def __hash__(self) -> int:
        return hash(self._fields())

    def __str__(self) -> str:
        if self._key is None:
            return f"{self.KIND}: {self._message}, table type: '{self._table}'{self.breadcrumb}"
        return (f"{self.KIND}: {self._message}, key: '{self._key}', "
                f"table type: '{self._table}'{self.breadcrumb}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._table.value} key={self._key!r} {self._message!r}>"

class MissingKey(Diagnostic):
    """@brief A required key is absent."""
    KIND = "missing key"

    def __init__(self, table: TableKind, context: Sequence[str], key: str) -> None:
        super().__init__(table, context, key, "required key is missing")

class UnknownKey(Diagnostic):
    """@brief A key is not part of the table's allowed key set."""
    KIND = "unknown key"

    def __init__(self, table: TableKind, context: Sequence[str], key: str) -> None:
        super().__init__(table, context, key, "unsupported key")

class InvalidValue(Diagnostic):
    """@brief Type or contents of a present value was unexpected."""
    KIND = "invalid value"

class ConstraintError(Diagnostic):
    """@brief Table is invalid because of another value or entity.

    For example defining a bit field at bit 15 of an 8-bit register produces this error.
    """
    KIND = "constraint error"

    def __init__(self, table: TableKind, context: Sequence[str], message: str) -> None:
        super().__init__(table, context, None, message)

class DiagnosticContext:
    """@brief Collects diagnostics and tracks the breadcrumb context.

    One instance is threaded through a whole validation pass. Validators enter a `scope()` for
    each nested entity; every diagnostic recorded while the scope is active carries its
    breadcrumb. The scope is left on every exit path, including an `EntityRejected` unwinding
    out of the entity.
    """

    def __init__(self) -> None:
        self._stack: List[str] = []
        self._diagnostics: List[Diagnostic] = []

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """@brief Recorded diagnostics in the order they were found."""
        return self._diagnostics

    @property
    def breadcrumbs(self) -> Tuple[str, ...]:
        return tuple(self._stack)

    @property
    def has_errors(self) -> bool:
        return bool(self._diagnostics)

    @contextmanager
    def scope(self, breadcrumb: Optional[str]) -> Iterator[None]:
        """@brief Context manager pushing @a breadcrumb for the duration of the block.

        Passing None pushes nothing, which lets callers enter a scope for an entity whose name
        could not be determined.
        """
        if breadcrumb is None:
            yield
            return
        self._stack.append(breadcrumb)
        try:
            yield
        finally:
            self._stack.pop()

    def add(self, diagnostic: Diagnostic) -> None:
        LOG.debug("diagnostic: %s", diagnostic)
        self._diagnostics.append(diagnostic)

    def missing_key(self, table: TableKind, key: str) -> None:
        self.add(MissingKey(table, self._stack, key))

    def unknown_key(self, table: TableKind, key: str) -> None:
        self.add(UnknownKey(table, self._stack, key))

    def invalid_value(self, table: TableKind, key: str, message: str) -> None:
        self.add(InvalidValue(table, self._stack, key, message))

    def constraint_error(self, table: TableKind, message: str) -> None:
        self.add(ConstraintError(table, self._stack, message))

def render_diagnostics(diagnostics: Iterable[Diagnostic]) -> str:
    """@brief Render a batch of diagnostics followed by a summary line."""
    diagnostics = list(diagnostics)
    parts = [f"{d}\n" for d in diagnostics]
    if len(diagnostics) == 1:
        parts.append("error: aborting due to previous error")
    else:
        parts.append(f"error: aborting due to {len(diagnostics)} previous errors")
    return "\n".join(parts)
