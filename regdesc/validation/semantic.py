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

"""@brief Cross-field checks run on a register after its bit fields and enums are parsed."""

from __future__ import annotations

import logging
from typing import (Dict, Iterable, List, Optional, Sequence, Set)

from .diagnostics import (DiagnosticContext, TableKind)
from ..core.bit_range import BitRange
from ..core.model import (Register, RegisterEnum)
from ..utility.naming import (constant_case, snake_case)

LOG = logging.getLogger(__name__)

## Owner of bits covered by a dropped bit field.
_DROPPED = -1

def _undefined_ranges(owners: List[Optional[int]]) -> List[BitRange]:
    """@brief Maximal runs of unclaimed bits, from the lowest bit upwards."""
    ranges: List[BitRange] = []
    lsb: Optional[int] = None
    for bit, owner in enumerate(owners):
        if owner is None:
            if lsb is None:
                lsb = bit
        elif lsb is not None:
            ranges.append(BitRange(bit - 1, lsb))
            lsb = None
    if lsb is not None:
        ranges.append(BitRange(len(owners) - 1, lsb))
    return ranges

def check_bit_fields(
            register: Register,
            context: DiagnosticContext,
            dropped_ranges: Optional[Sequence[BitRange]] = ()
        ) -> None:
    """@brief Check that the bit fields of @a register partition its bits.

    Every bit is claimed by the first bit field covering it. A bit field reaching past the register
    width is reported once, as is each pair of overlapping bit fields. Bits left unclaimed are
    reported as a single diagnostic listing every unclaimed run.

    @param register The register to check.
    @param context Diagnostic sink. The register breadcrumb is expected to be active.
    @param dropped_ranges Ranges of bit fields that were dropped because of an earlier error.
        Their bits count as claimed, without overlap checks. None means some dropped bit field has
        no usable range, and unclaimed bits are not reported.
    """
    size = register.size.value
    owners: List[Optional[int]] = [None] * size

    for i, bit_field in enumerate(register.bit_fields):
        reported: Set[int] = set()
        for bit in bit_field.range.bits():
            if bit >= size:
                context.constraint_error(TableKind.REGISTER,
                        f"bit field range '{bit_field.range}' is not inside register bounds, "
                        f"register size: {size}")
                break
            owner = owners[bit]
            if owner is None:
                owners[bit] = i
            elif owner not in reported:
                reported.add(owner)
                context.constraint_error(TableKind.REGISTER,
                        f"bit field range '{bit_field.range}' overlaps with another bit field "
                        f"'{register.bit_fields[owner].range}'")

    if dropped_ranges is None:
        return
    for bit_range in dropped_ranges:
        for bit in bit_range.bits():
            if bit < size and owners[bit] is None:
                owners[bit] = _DROPPED

    undefined = _undefined_ranges(owners)
    if len(undefined) == 1:
        if undefined[0].is_single_bit:
            context.constraint_error(TableKind.REGISTER, f"register bit '{undefined[0]}' is undefined")
        else:
            context.constraint_error(TableKind.REGISTER, f"some register bits are undefined, '{undefined[0]}'")
    elif undefined:
        ranges = ", ".join(f"'{r}'" for r in undefined)
        context.constraint_error(TableKind.REGISTER, f"some register bits are undefined, {ranges}")

def check_bit_field_names(register: Register, context: DiagnosticContext) -> None:
    """@brief Bit field names must stay distinct once converted to identifiers."""
    seen: Dict[str, str] = {}
    for bit_field in register.normal_bit_fields:
        assert bit_field.name is not None
        key = snake_case(bit_field.name)
        if key in seen:
            context.constraint_error(TableKind.REGISTER,
                    f"bit fields '{seen[key]}' and '{bit_field.name}' have the same name")
        else:
            seen[key] = bit_field.name

def _check_enum_values(register_enum: RegisterEnum, max_value: int, context: DiagnosticContext) -> None:
    values: Dict[int, str] = {}
    names: Dict[str, str] = {}
    for enum_value in register_enum.values:
        if enum_value.value > max_value:
            context.constraint_error(TableKind.ENUM,
                    f"enum value '{enum_value.name}' with value '{enum_value.value}' for enum "
                    f"'{register_enum.name}' is larger than enum max value '{max_value}'")

        other = values.get(enum_value.value)
        if other is not None:
            context.constraint_error(TableKind.ENUM,
                    f"enum values '{enum_value.name}' and '{other}' have the same value "
                    f"'{enum_value.value}'")
        else:
            values[enum_value.value] = enum_value.name

        key = constant_case(enum_value.name)
        other = names.get(key)
        if other is not None:
            context.constraint_error(TableKind.ENUM,
                    f"enum values '{enum_value.name}' and '{other}' have the same name")
        else:
            names[key] = enum_value.name

def check_register_enums(
            register: Register,
            context: DiagnosticContext,
            dropped_ranges: Optional[Sequence[BitRange]] = ()
        ) -> None:
    """@brief Match enums to bit fields and check their values.

    Each enum must describe exactly one non-reserved bit field and no two enums may share a bit
    range. Values must fit the range and be unique. Sets `is_complete` on every enum that names
    every value its range can hold. An enum over the range of a dropped bit field is not reported
    as unmatched.
    """
    claimed: Dict[BitRange, str] = {}

    for register_enum in register.enums:
        with context.scope(f"enum '{register_enum.name}'"):
            matches = [f for f in register.bit_fields if f.range == register_enum.range]
            if not matches:
                if dropped_ranges is not None and register_enum.range not in dropped_ranges:
                    context.constraint_error(TableKind.ENUM,
                            f"no matching bit field range found for enum '{register_enum.name}'")
                continue

            if any(f.is_reserved for f in matches):
                context.constraint_error(TableKind.ENUM,
                        f"enum '{register_enum.name}' bit range is reserved")
                continue

            other = claimed.get(register_enum.range)
            if other is not None:
                context.constraint_error(TableKind.ENUM,
                        f"same bit range '{register_enum.range}' is defined for enums "
                        f"'{register_enum.name}' and '{other}'")
                continue
            claimed[register_enum.range] = register_enum.name

            try:
                max_value = register_enum.range.max_value
            except ValueError as err:
                context.constraint_error(TableKind.ENUM, f"enum '{register_enum.name}' {err}")
                continue

            _check_enum_values(register_enum, max_value, context)
            register_enum.is_complete = (len(register_enum.values) == max_value + 1)
            LOG.debug("enum '%s' has %d of %d values", register_enum.name,
                    len(register_enum.values), max_value + 1)

def check_register_names(registers: Iterable[Register], context: DiagnosticContext) -> None:
    """@brief Register names must stay distinct within a group once converted to identifiers."""
    seen: Dict[str, str] = {}
    for register in registers:
        key = snake_case(register.name)
        other = seen.get(key)
        if other is not None:
            context.constraint_error(TableKind.REGISTER,
                    f"registers '{other}' and '{register.name}' have the same name")
        else:
            seen[key] = register.name

def check_register(
            register: Register,
            context: DiagnosticContext,
            dropped_ranges: Optional[Sequence[BitRange]] = ()
        ) -> None:
    """@brief Run every per-register semantic check."""
    check_bit_fields(register, context, dropped_ranges)
    check_bit_field_names(register, context)
    check_register_enums(register, context, dropped_ranges)
