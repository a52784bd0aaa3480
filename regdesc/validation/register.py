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
import re
from typing import (Any, Callable, List, Mapping, Optional, Sequence, Tuple, TypeVar)

from .diagnostics import (DiagnosticContext, TableKind)
from . import semantic
from .table_validator import (TableValidator, U64_MAX, describe_value)
from ..core.bit_range import BitRange
from ..core.exceptions import EntityRejected
from ..core.model import (
    AccessMode,
    BitField,
    EnumValue,
    Extension,
    Location,
    LocationKind,
    Register,
    RegisterDescription,
    RegisterEnum,
    RegisterSize,
    )

LOG = logging.getLogger(__name__)

T = TypeVar("T")

NAME_KEY = "name"
DESCRIPTION_KEY = "description"
BIT_KEY = "bit"
ACCESS_KEY = "access"
ABSOLUTE_ADDRESS_KEY = LocationKind.ABSOLUTE.value
RELATIVE_ADDRESS_KEY = LocationKind.RELATIVE.value
INDEX_KEY = LocationKind.INDEX.value
SIZE_KEY = "size"
BIT_FIELDS_KEY = "bit_fields"
ENUMS_KEY = "enum"
RESERVED_KEY = "reserved"
VALUES_KEY = "values"
VALUE_KEY = "value"

POSSIBLE_KEYS_REGISTER = (
    NAME_KEY,
    DESCRIPTION_KEY,
    ACCESS_KEY,
    ABSOLUTE_ADDRESS_KEY,
    RELATIVE_ADDRESS_KEY,
    INDEX_KEY,
    SIZE_KEY,
    BIT_FIELDS_KEY,
    ENUMS_KEY,
    )

POSSIBLE_KEYS_BIT_FIELD = (
    BIT_KEY,
    NAME_KEY,
    DESCRIPTION_KEY,
    RESERVED_KEY,
    )

POSSIBLE_KEYS_ENUM = (
    NAME_KEY,
    BIT_KEY,
    DESCRIPTION_KEY,
    VALUES_KEY,
    )

POSSIBLE_KEYS_ENUM_VALUE = (
    VALUE_KEY,
    NAME_KEY,
    DESCRIPTION_KEY,
    )

LOCATION_KEYS = (ABSOLUTE_ADDRESS_KEY, RELATIVE_ADDRESS_KEY, INDEX_KEY)

## Character replaced in a split address template.
SPLIT_ADDRESS_PLACEHOLDER = "?"
## Hex digit substituted for the placeholder to form the read address.
SPLIT_ADDRESS_READ = "C"
## Hex digit substituted for the placeholder to form the write address.
SPLIT_ADDRESS_WRITE = "D"

## Largest slot index accepted next to an address.
MAX_SLOT_INDEX = 0xffff

_SPLIT_ADDRESS_RE = re.compile(r"^(0[xX])?[0-9A-Fa-f]*\?[0-9A-Fa-f]*$")

def expand_split_address(template: str) -> Tuple[int, int]:
    """@brief Expand a split address template into its read and write addresses.

    @code
      >>> [hex(a) for a in expand_split_address("0x3?A")]
      ['0x3ca', '0x3da']
    @endcode

    @exception ValueError The template does not contain exactly one placeholder or is not
        otherwise a hexadecimal number.
    """
    if template.count(SPLIT_ADDRESS_PLACEHOLDER) != 1:
        raise ValueError(f"split address template '{template}' must contain exactly one "
                f"'{SPLIT_ADDRESS_PLACEHOLDER}' placeholder")
    if not _SPLIT_ADDRESS_RE.match(template):
        raise ValueError(f"split address template '{template}' is not a hexadecimal number")
    read = int(template.replace(SPLIT_ADDRESS_PLACEHOLDER, SPLIT_ADDRESS_READ), 16)
    write = int(template.replace(SPLIT_ADDRESS_PLACEHOLDER, SPLIT_ADDRESS_WRITE), 16)
    return read, write

def _children(
            tables: Optional[Sequence[Mapping[str, Any]]],
            check: Callable[[Mapping[str, Any], DiagnosticContext], T],
            context: DiagnosticContext
        ) -> Tuple[List[T], List[Mapping[str, Any]]]:
    """@brief Validate child tables, dropping the rejected ones.
    @return Tuple of the accepted children and the dropped tables.
    """
    children: List[T] = []
    dropped: List[Mapping[str, Any]] = []
    for table in tables or ():
        try:
            children.append(check(table, context))
        except EntityRejected:
            dropped.append(table)
    return children, dropped

def _dropped_bit_ranges(tables: Sequence[Mapping[str, Any]]) -> Optional[List[BitRange]]:
    """@brief Bit ranges of dropped bit field tables.

    The redundant `"N:N"` spelling is read as bit N here, it was already reported.

    @return None if any of the tables has no usable range.
    """
    ranges = []
    for table in tables:
        text = table.get(BIT_KEY)
        if not isinstance(text, str):
            return None
        try:
            ranges.append(BitRange.parse(text, strict=False))
        except ValueError:
            return None
    return ranges

def check_enum_value(table: Mapping[str, Any], context: DiagnosticContext) -> EnumValue:
    v = TableValidator(table, TableKind.ENUM_VALUE, context)
    name = v.require(NAME_KEY, v.name(NAME_KEY))
    with v.scope(f"enum value '{name}'" if name is not None else None):
        v.check_unknown_keys(POSSIBLE_KEYS_ENUM_VALUE)
        value = v.require(VALUE_KEY, v.unsigned(VALUE_KEY))
        description = v.text(DESCRIPTION_KEY)
        v.check()
        assert name is not None and value is not None
        return EnumValue(value, name, description)

def check_enum(table: Mapping[str, Any], context: DiagnosticContext) -> RegisterEnum:
    """@brief Validate one table of a register's `enum` array.

    Enum values that fail validation are dropped from the enum. Matching the enum to a bit field
    happens later, once every bit field of the register is known.
    """
    v = TableValidator(table, TableKind.ENUM, context)
    name = v.require(NAME_KEY, v.name(NAME_KEY))
    with v.scope(f"enum '{name}'" if name is not None else None):
        v.check_unknown_keys(POSSIBLE_KEYS_ENUM)
        bit_range = v.require(BIT_KEY, v.convert_text(BIT_KEY, BitRange.parse))
        description = v.text(DESCRIPTION_KEY)
        value_tables = v.require(VALUES_KEY, v.array_of_tables(VALUES_KEY))
        values, _ = _children(value_tables, check_enum_value, context)
        v.check()
        assert name is not None and bit_range is not None
        return RegisterEnum(name, bit_range, values, description)

def check_bit_field(table: Mapping[str, Any], context: DiagnosticContext) -> BitField:
    """@brief Validate one table of a register's `bit_fields` array.

    A bit field is either reserved, in which case it may not have a name or description, or it
    is a normal bit field and requires a name.
    """
    v = TableValidator(table, TableKind.BIT_FIELD, context)
    bit_range = v.require(BIT_KEY, v.convert_text(BIT_KEY, BitRange.parse))
    with v.scope(f"bit field with range '{bit_range}'" if bit_range is not None else None):
        v.check_unknown_keys(POSSIBLE_KEYS_BIT_FIELD)
        reserved = v.boolean(RESERVED_KEY)
        name = v.name(NAME_KEY)
        description = v.text(DESCRIPTION_KEY)
        v.check()
        assert bit_range is not None

        if reserved:
            for key in (NAME_KEY, DESCRIPTION_KEY):
                if v.has(key):
                    v.constraint_error(f"key '{key}' is not allowed when bit field is marked "
                            "as reserved")
                    v.fail()
            v.check()
            return BitField.reserved(bit_range)

        if name is None:
            v.missing_key(NAME_KEY)
            v.check()
        return BitField(bit_range, name, description)

class _RegisterLocations:
    """@brief Resolve the location keys of a register table."""

    def __init__(self, v: TableValidator, rd: RegisterDescription) -> None:
        self._v = v
        self._rd = rd
        self.read: Optional[Location] = None
        self.write: Optional[Location] = None
        self.slot_index: Optional[int] = None

    @property
    def _is_vga(self) -> bool:
        return self._rd.extension is Extension.VGA

    @property
    def _max_address(self) -> int:
        if self._rd.address_size is None:
            return U64_MAX
        return self._rd.address_size.max_value

    def resolve(self) -> None:
        v = self._v
        present = [key for key in LOCATION_KEYS if v.has(key)]

        # With split addresses an index next to an address selects a slot.
        if self._is_vga and INDEX_KEY in present and len(present) > 1:
            present.remove(INDEX_KEY)
            self.slot_index = v.unsigned(INDEX_KEY, MAX_SLOT_INDEX)

        if not present:
            v.reject(f"register location field '{ABSOLUTE_ADDRESS_KEY}', '{RELATIVE_ADDRESS_KEY}', "
                    f"or '{INDEX_KEY}' is required")
        elif len(present) > 1:
            v.reject("register location field count error: only one location field is supported")

        key = present[0]
        kind = LocationKind(key)
        if kind is LocationKind.INDEX:
            index = v.unsigned(key, self._rd.index_size.max_value)
            if index is not None:
                self.read = self.write = Location(kind, index)
        else:
            self._address(key, kind)

    def _address(self, key: str, kind: LocationKind) -> None:
        v = self._v
        value = v.value(key)
        if isinstance(value, str):
            if not self._is_vga:
                v.invalid_value(key, f"expected an integer, found: {describe_value(value)}, "
                        f"address templates require extension '{Extension.VGA.value}'")
                return
            addresses = v.convert_text(key, expand_split_address)
            if addresses is None:
                return
            for address in addresses:
                if address > self._max_address:
                    v.invalid_value(key, f"address {address:#x} does not fit in address size "
                            f"{self._rd.address_size_text}")
                    return
            self.read = Location(kind, addresses[0])
            self.write = Location(kind, addresses[1])
        else:
            address = v.unsigned(key, self._max_address)
            if address is not None:
                self.read = self.write = Location(kind, address)

def _resolve_default(v: TableValidator, key: str, value: Optional[T], default: Optional[T], what: str) -> Optional[T]:
    if value is not None or v.has(key):
        return value
    if default is None:
        v.constraint_error(f"register {what} is undefined")
        v.fail()
    return default

def check_register(table: Mapping[str, Any], rd: RegisterDescription, context: DiagnosticContext) -> Register:
    """@brief Validate a register table and its bit fields and enums.

    Problems with individual bit fields, enums or enum values drop only that child. Once the
    register itself is built, the semantic checks run on it under the register's breadcrumb.

    @exception EntityRejected The register could not be built. Diagnostics are already recorded.
    """
    v = TableValidator(table, TableKind.REGISTER, context)
    name = v.require(NAME_KEY, v.name(NAME_KEY))
    with v.scope(f"register '{name}'" if name is not None else None):
        v.check_unknown_keys(POSSIBLE_KEYS_REGISTER)
        v.check()
        assert name is not None

        description = v.text(DESCRIPTION_KEY)
        locations = _RegisterLocations(v, rd)
        locations.resolve()

        size = _resolve_default(v, SIZE_KEY, v.convert(SIZE_KEY, RegisterSize.from_value),
                rd.default_register_size, "size")
        access = _resolve_default(v, ACCESS_KEY, v.convert_text(ACCESS_KEY, AccessMode.from_text),
                rd.default_register_access, "access mode")

        field_tables = v.require(BIT_FIELDS_KEY, v.array_of_tables(BIT_FIELDS_KEY))
        bit_fields, dropped_fields = _children(field_tables, check_bit_field, context)
        enums, _ = _children(v.array_of_tables(ENUMS_KEY), check_enum, context)
        v.check()
        assert size is not None and access is not None
        assert locations.read is not None and locations.write is not None

        register = Register(
            name=name,
            access_mode=access,
            size=size,
            read_location=locations.read,
            write_location=locations.write,
            bit_fields=bit_fields,
            enums=enums,
            description=description,
            index=locations.slot_index,
            )
        semantic.check_register(register, context, _dropped_bit_ranges(dropped_fields))
        LOG.debug("register '%s' at %s, %d bit fields, %d enums", name, register.location,
                len(bit_fields), len(enums))
        return register
