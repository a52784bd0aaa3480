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

from dataclasses import (dataclass, field)
from enum import (Enum, IntEnum)
from typing import (Any, Iterator, List, NamedTuple, Optional, Tuple, Union)

from .bit_range import BitRange
from ..utility.mask import max_unsigned


class RegisterSize(IntEnum):
    """@brief Supported register and location widths in bits."""
    SIZE_8 = 8
    SIZE_16 = 16
    SIZE_32 = 32
    SIZE_64 = 64

    @classmethod
    def from_value(cls, value: Any) -> RegisterSize:
        """@brief Convert an integer or its decimal string form.
        @exception ValueError The value is not one of the supported sizes.
        """
        if isinstance(value, str) and value.isdigit():
            value = int(value)
        if isinstance(value, int) and not isinstance(value, bool):
            for size in cls:
                if size.value == value:
                    return size
        raise ValueError(f"unsupported register size {value}, supported register sizes are "
                "8, 16, 32 and 64")

    @property
    def max_value(self) -> int:
        return max_unsigned(self.value)

    def __str__(self) -> str:
        return str(self.value)

class AccessMode(Enum):
    """@brief Register access mode."""
    READ = "r"
    WRITE = "w"
    READ_WRITE = "rw"

    @classmethod
    def from_text(cls, text: str) -> AccessMode:
        for mode in cls:
            if mode.value == text:
                return mode
        raise ValueError(f"unsupported register access mode '{text}', supported modes are "
                "'r', 'w' or 'rw'")

    @property
    def is_readable(self) -> bool:
        return self is not AccessMode.WRITE

    @property
    def is_writable(self) -> bool:
        return self is not AccessMode.READ

    def __str__(self) -> str:
        return self.value

class SpecVersion(Enum):
    """@brief Register description specification versions."""
    VERSION_0_1 = "0.1"

    @classmethod
    def from_text(cls, text: str) -> SpecVersion:
        for version in cls:
            if version.value == text:
                return version
        raise ValueError(f"unknown register description specification version '{text}'")

    def __str__(self) -> str:
        return self.value

class Extension(Enum):
    """@brief Addressing extensions.

    - `VGA`: split read/write addresses given as a template string, plus an optional slot index
      for each register.
    """
    VGA = "vga"

    @classmethod
    def from_text(cls, text: str) -> Extension:
        for extension in cls:
            if extension.value == text:
                return extension
        raise ValueError(f"unknown extension '{text}'")

    def __str__(self) -> str:
        return self.value

class LocationKind(Enum):
    """@brief Addressing mechanism of a register. Values are the document keys."""
    INDEX = "index"
    RELATIVE = "relative_address"
    ABSOLUTE = "absolute_address"

class Location(NamedTuple):
    """@brief Resolved register location."""
    kind: LocationKind
    value: int

    def __str__(self) -> str:
        if self.kind is LocationKind.INDEX:
            return f"index {self.value}"
        elif self.kind is LocationKind.RELATIVE:
            return f"relative address {self.value:#x}"
        else:
            return f"absolute address {self.value:#x}"

## Document value of `address_size` selecting the native pointer width.
NATIVE_ADDRESS_SIZE = "native"

@dataclass(frozen=True)
class RegisterDescription:
    """@brief Metadata and defaults from the `register_description` table."""
    name: str
    version: SpecVersion
    description: Optional[str] = None
    extension: Optional[Extension] = None
    default_register_size: Optional[RegisterSize] = None
    default_register_access: Optional[AccessMode] = None
    index_size: RegisterSize = RegisterSize.SIZE_64
    ## None selects the native pointer width.
    address_size: Optional[RegisterSize] = None

    @property
    def address_size_text(self) -> str:
        if self.address_size is None:
            return NATIVE_ADDRESS_SIZE
        return str(self.address_size)

@dataclass(frozen=True)
class BitField:
    """@brief Bit field of a register.

    A bit field without a name is reserved. Reserved bit fields never carry a description.
    """
    range: BitRange
    name: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def reserved(cls, range: BitRange) -> BitField:
        return cls(range)

    @property
    def is_reserved(self) -> bool:
        return self.name is None

@dataclass(frozen=True)
class EnumValue:
    value: int
    name: str
    description: Optional[str] = None

@dataclass
class RegisterEnum:
    """@brief Named values of a bit field.

    `is_complete` is filled in by the semantic checks once the enum has been matched to its bit
    field. It is true when every value representable in the range has a name.
    """
    name: str
    range: BitRange
    values: List[EnumValue] = field(default_factory=list)
    description: Optional[str] = None
    is_complete: bool = False

@dataclass(frozen=True)
class Register:
    """@brief A validated register.

    The read and write locations are the same except for registers whose address came from a
    split-address template.
    """
    name: str
    access_mode: AccessMode
    size: RegisterSize
    read_location: Location
    write_location: Location
    bit_fields: List[BitField] = field(default_factory=list)
    enums: List[RegisterEnum] = field(default_factory=list)
    description: Optional[str] = None
    ## Slot ordinal, only with extensions that define parallel hardware slots.
    index: Optional[int] = None

    @property
    def location(self) -> Location:
        return self.read_location

    @property
    def has_split_location(self) -> bool:
        return self.read_location != self.write_location

    @property
    def is_readable(self) -> bool:
        return self.access_mode.is_readable

    @property
    def is_writable(self) -> bool:
        return self.access_mode.is_writable

    @property
    def has_reserved_bit_fields(self) -> bool:
        return any(f.is_reserved for f in self.bit_fields)

    @property
    def normal_bit_fields(self) -> List[BitField]:
        return [f for f in self.bit_fields if not f.is_reserved]

    def enum_for(self, bit_field: BitField) -> Optional[RegisterEnum]:
        """@brief Return the enum describing @a bit_field, if there is one."""
        for e in self.enums:
            if e.range == bit_field.range:
                return e
        return None

@dataclass(frozen=True)
class RegisterList:
    """@brief Registers given as a flat array, forming one implicit group."""
    registers: List[Register]

    def iter_groups(self) -> Iterator[Tuple[Optional[str], List[Register]]]:
        yield None, self.registers

@dataclass(frozen=True)
class RegisterGroups:
    """@brief Registers given as a table of named groups, in document order."""
    groups: List[Tuple[str, List[Register]]]

    def iter_groups(self) -> Iterator[Tuple[Optional[str], List[Register]]]:
        yield from self.groups

Registers = Union[RegisterList, RegisterGroups]

@dataclass(frozen=True)
class ParsedFile:
    """@brief Result of successfully validating one register description document."""
    description: RegisterDescription
    registers: Optional[Registers] = None

    @property
    def is_grouped(self) -> bool:
        return isinstance(self.registers, RegisterGroups)

    def iter_groups(self) -> Iterator[Tuple[Optional[str], List[Register]]]:
        """@brief Iterate over `(group name, registers)` pairs.

        The group name is None for a flat register list. Nothing is yielded when the document has
        no registers.
        """
        if self.registers is not None:
            yield from self.registers.iter_groups()

    def iter_registers(self) -> Iterator[Register]:
        for _, registers in self.iter_groups():
            yield from registers
