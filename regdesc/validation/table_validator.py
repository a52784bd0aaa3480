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
from typing import (Any, Callable, ContextManager, Iterable, List, Mapping, Optional, TypeVar)

from .diagnostics import (DiagnosticContext, TableKind)
from ..core.exceptions import EntityRejected
from ..utility.naming import is_identifier

LOG = logging.getLogger(__name__)

T = TypeVar("T")

## Largest value of an unsigned 64-bit integer.
U64_MAX = (1 << 64) - 1

def describe_value(value: Any) -> str:
    """@brief Short description of a document value for error messages."""
    if isinstance(value, bool):
        return f"boolean {str(value).lower()}"
    elif isinstance(value, int):
        return f"integer {value}"
    elif isinstance(value, float):
        return f"float {value}"
    elif isinstance(value, str):
        return f"string {value!r}"
    elif isinstance(value, Mapping):
        return "table"
    elif isinstance(value, list):
        return "array"
    else:
        return f"{type(value).__name__} {value!r}"

class TableValidator:
    """@brief Typed access to the keys of one document table.

    Each accessor returns None when the key is absent. When the key is present but holds a value
    of the wrong type or with invalid contents, an `InvalidValue` diagnostic is recorded, the
    validator is marked as failed, and None is returned. This lets a table validator report
    every bad key before `check()` abandons the entity.
    """

    def __init__(self, table: Mapping[str, Any], kind: TableKind, context: DiagnosticContext) -> None:
        self._table = table
        self._kind = kind
        self._context = context
        self._failed = False

    @property
    def kind(self) -> TableKind:
        return self._kind

    @property
    def context(self) -> DiagnosticContext:
        return self._context

    @property
    def failed(self) -> bool:
        return self._failed

    def has(self, key: str) -> bool:
        return key in self._table

    def scope(self, breadcrumb: Optional[str]) -> ContextManager[None]:
        return self._context.scope(breadcrumb)

    def check_unknown_keys(self, possible_keys: Iterable[str]) -> None:
        """@brief Record an `UnknownKey` for every key outside @a possible_keys."""
        allowed = set(possible_keys)
        for key in self._table:
            if key not in allowed:
                self._context.unknown_key(self._kind, key)

    def fail(self) -> None:
        """@brief Mark the entity as failed without recording anything."""
        self._failed = True

    def check(self) -> None:
        """@brief Abandon the entity if any accessor failed.
        @exception EntityRejected The entity is invalid; its diagnostics are already recorded.
        """
        if self._failed:
            raise EntityRejected(self._kind.value)

    def missing_key(self, key: str) -> None:
        self._context.missing_key(self._kind, key)
        self._failed = True

    def invalid_value(self, key: str, message: str) -> None:
        self._context.invalid_value(self._kind, key, message)
        self._failed = True

    def constraint_error(self, message: str) -> None:
        """@brief Record a constraint error. Does not fail the entity."""
        self._context.constraint_error(self._kind, message)

    def reject(self, message: str) -> None:
        """@brief Record a constraint error and abandon the entity immediately.
        @exception EntityRejected Always raised.
        """
        self._context.constraint_error(self._kind, message)
        self._failed = True
        raise EntityRejected(self._kind.value)

    def require(self, key: str, value: Optional[T]) -> Optional[T]:
        """@brief Record a `MissingKey` if @a key is absent.

        A key that is present but failed conversion has already been reported, so only the
        failure flag is relevant in that case.
        """
        if value is None and key not in self._table:
            self.missing_key(key)
        return value

    def value(self, key: str) -> Any:
        return self._table.get(key)

    def _typed(self, key: str, accept: Callable[[Any], bool], expected: str) -> Any:
        value = self._table.get(key)
        if value is None:
            return None
        if not accept(value):
            self.invalid_value(key, f"expected {expected}, found: {describe_value(value)}")
            return None
        return value

    def text(self, key: str) -> Optional[str]:
        return self._typed(key, lambda v: isinstance(v, str), "a string")

    def boolean(self, key: str) -> Optional[bool]:
        return self._typed(key, lambda v: isinstance(v, bool), "a boolean")

    def integer(self, key: str) -> Optional[int]:
        return self._typed(key, lambda v: isinstance(v, int) and not isinstance(v, bool), "an integer")

    def table(self, key: str) -> Optional[Mapping[str, Any]]:
        return self._typed(key, lambda v: isinstance(v, Mapping), "a table")

    def array(self, key: str) -> Optional[List[Any]]:
        return self._typed(key, lambda v: isinstance(v, list), "an array")

    def array_of_tables(self, key: str) -> Optional[List[Mapping[str, Any]]]:
        array = self.array(key)
        if array is None:
            return None
        for item in array:
            if not isinstance(item, Mapping):
                self.invalid_value(key, f"expected an array of tables, found: {describe_value(item)}")
                return None
        return array

    def unsigned(self, key: str, maximum: int = U64_MAX) -> Optional[int]:
        """@brief Non-negative integer no larger than @a maximum."""
        number = self.integer(key)
        if number is None:
            return None
        if number < 0:
            self.invalid_value(key, f"negative value '{number}'")
            return None
        if number > maximum:
            self.invalid_value(key, f"value '{number}' is larger than the maximum '{maximum}'")
            return None
        return number

    def name(self, key: str) -> Optional[str]:
        """@brief String usable as an identifier in generated code."""
        text = self.text(key)
        if text is None:
            return None
        if not is_identifier(text):
            self.invalid_value(key, f"invalid name '{text}', names must start with a letter or "
                    "underscore and contain only letters, digits and underscores")
            return None
        return text

    def convert(self, key: str, converter: Callable[[Any], T]) -> Optional[T]:
        """@brief Convert the raw value of @a key.

        @a converter raises ValueError with a human readable message for invalid values.
        """
        value = self._table.get(key)
        if value is None:
            return None
        try:
            return converter(value)
        except ValueError as err:
            self.invalid_value(key, str(err))
            return None

    def convert_text(self, key: str, converter: Callable[[str], T]) -> Optional[T]:
        """@brief Same as `convert()` but the value must first be a string."""
        text = self.text(key)
        if text is None:
            return None
        try:
            return converter(text)
        except ValueError as err:
            self.invalid_value(key, str(err))
            return None
