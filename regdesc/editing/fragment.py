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

"""@brief Render registers as TOML fragments and append them to a description document.

This is the non-interactive half of building a description file one register at a time: a register
is rendered as text, appended to the existing document, and the whole document is validated again
before the caller keeps the new text.
"""

from __future__ import annotations

import logging
from typing import (List, Optional, Tuple)

from ..core.model import (BitField, LocationKind, ParsedFile, Register, RegisterEnum)
from ..validation import loads
from ..validation.register import (SPLIT_ADDRESS_PLACEHOLDER, SPLIT_ADDRESS_READ, SPLIT_ADDRESS_WRITE)

LOG = logging.getLogger(__name__)

def toml_string(text: str) -> str:
    """@brief Quote @a text as a TOML basic string."""
    escaped = (text.replace("\\", "\\\\")
            .replace('"', '\\"')
            .replace("\n", "\\n")
            .replace("\t", "\\t"))
    return f'"{escaped}"'

def split_address_template(read: int, write: int) -> str:
    """@brief Reconstruct the split address template that expands to @a read and @a write.
    @exception ValueError The addresses differ in some other way than a single hex digit.
    """
    read_text = f"{read:x}"
    write_text = f"{write:x}"
    if len(read_text) == len(write_text):
        diff = [i for i, (r, w) in enumerate(zip(read_text, write_text)) if r != w]
        if (len(diff) == 1
                and read_text[diff[0]].upper() == SPLIT_ADDRESS_READ
                and write_text[diff[0]].upper() == SPLIT_ADDRESS_WRITE):
            i = diff[0]
            return "0x" + read_text[:i] + SPLIT_ADDRESS_PLACEHOLDER + read_text[i + 1:]
    raise ValueError(f"read address {read:#x} and write address {write:#x} can not be "
            "expressed as a split address template")

def _location_line(register: Register) -> str:
    read = register.read_location
    write = register.write_location
    key = read.kind.value
    if register.has_split_location:
        return f"{key} = {toml_string(split_address_template(read.value, write.value))}"
    elif read.kind is LocationKind.INDEX:
        return f"{key} = {read.value}"
    else:
        return f"{key} = {read.value:#x}"

def _bit_field_line(bit_field: BitField) -> str:
    parts = [f"bit = {toml_string(str(bit_field.range))}"]
    if bit_field.is_reserved:
        parts.append("reserved = true")
    else:
        assert bit_field.name is not None
        parts.append(f"name = {toml_string(bit_field.name)}")
        if bit_field.description:
            parts.append(f"description = {toml_string(bit_field.description)}")
    return "    { " + ", ".join(parts) + " },"

def _enum_lines(register_enum: RegisterEnum, header: str) -> List[str]:
    lines = ["", f"[[{header}.enum]]", f"name = {toml_string(register_enum.name)}"]
    if register_enum.description:
        lines.append(f"description = {toml_string(register_enum.description)}")
    lines.append(f"bit = {toml_string(str(register_enum.range))}")
    lines.append("values = [")
    for value in register_enum.values:
        parts = [f"value = {value.value}", f"name = {toml_string(value.name)}"]
        if value.description:
            parts.append(f"description = {toml_string(value.description)}")
        lines.append("    { " + ", ".join(parts) + " },")
    lines.append("]")
    return lines

def register_to_toml(register: Register, parsed_file: ParsedFile, group: Optional[str] = None) -> str:
    """@brief Render @a register as an array-of-tables fragment.

    The size and access mode are left out when they equal the description's defaults.

    @param register The register to render.
    @param parsed_file The document the fragment will be appended to.
    @param group Name of the register group. Required when the document uses register groups,
        ignored otherwise.
    @exception ValueError A group is required but missing.
    """
    rd = parsed_file.description
    if parsed_file.is_grouped:
        if group is None:
            raise ValueError("register group is required for a document with register groups")
        header = f"register.{group}"
    else:
        header = "register"

    lines = ["", f"[[{header}]]", f"name = {toml_string(register.name)}"]
    if register.description:
        lines.append(f"description = {toml_string(register.description)}")
    lines.append(_location_line(register))
    if register.index is not None:
        lines.append(f"index = {register.index}")
    if register.access_mode is not rd.default_register_access:
        lines.append(f"access = {toml_string(str(register.access_mode))}")
    if register.size is not rd.default_register_size:
        lines.append(f"size = {register.size.value}")

    lines.append("bit_fields = [")
    lines.extend(_bit_field_line(f) for f in register.bit_fields)
    lines.append("]")

    for register_enum in register.enums:
        lines.extend(_enum_lines(register_enum, header))

    return "\n".join(lines) + "\n"

def append_register(
            raw_text: str,
            register: Register,
            parsed_file: ParsedFile,
            group: Optional[str] = None
        ) -> Tuple[str, ParsedFile]:
    """@brief Append @a register to a description document and validate the result.

    @return Tuple of the new document text and its validated model.
    @exception DescriptionSyntaxError The combined text is not valid TOML.
    @exception ValidationFailed The combined document does not validate, for example because the
        register's name is already taken.
    """
    fragment = register_to_toml(register, parsed_file, group)
    if raw_text and not raw_text.endswith("\n"):
        raw_text += "\n"
    new_text = raw_text + fragment
    new_file = loads(new_text)
    LOG.debug("appended register '%s'", register.name)
    return new_text, new_file
