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
import os
import tomllib
from typing import (Any, List, Mapping, Optional, Union)

from .description import check_register_description
from .diagnostics import (DiagnosticContext, TableKind)
from .register import check_register
from .semantic import check_register_names
from .table_validator import (TableValidator, describe_value)
from ..core.exceptions import (DescriptionSyntaxError, EntityRejected, ValidationFailed)
from ..core.model import (
    ParsedFile,
    Register,
    RegisterDescription,
    RegisterGroups,
    RegisterList,
    Registers,
    )
from ..utility.naming import (is_identifier, pascal_case)

LOG = logging.getLogger(__name__)

REGISTER_DESCRIPTION_KEY = "register_description"
REGISTER_KEY = "register"
POSSIBLE_ROOT_KEYS = (REGISTER_DESCRIPTION_KEY, REGISTER_KEY)

def handle_register_array(array: List[Any], rd: RegisterDescription, context: DiagnosticContext) -> List[Register]:
    """@brief Validate every register table of an array, keeping the accepted registers."""
    registers: List[Register] = []
    for value in array:
        if not isinstance(value, Mapping):
            context.invalid_value(TableKind.ROOT_DESCRIPTION, REGISTER_KEY,
                    f"expected an array of tables, found: {describe_value(value)}")
            continue
        try:
            registers.append(check_register(value, rd, context))
        except EntityRejected:
            pass
    check_register_names(registers, context)
    return registers

def _handle_register_groups(groups: Mapping[str, Any], rd: RegisterDescription,
        context: DiagnosticContext) -> RegisterGroups:
    result = []
    seen = {}
    for group_name, value in groups.items():
        with context.scope(f"register group '{group_name}'"):
            if not isinstance(value, list):
                context.invalid_value(TableKind.ROOT_DESCRIPTION, REGISTER_KEY,
                        f"validating register group '{group_name}' failed: expected an array, "
                        f"found {describe_value(value)}")
                continue

            if not is_identifier(group_name):
                context.constraint_error(TableKind.ROOT_DESCRIPTION,
                        f"invalid register group name '{group_name}'")
            else:
                other = seen.get(pascal_case(group_name))
                if other is not None:
                    context.constraint_error(TableKind.ROOT_DESCRIPTION,
                            f"register groups '{other}' and '{group_name}' have the same name")
                else:
                    seen[pascal_case(group_name)] = group_name

            result.append((group_name, handle_register_array(value, rd, context)))
    return RegisterGroups(result)

def check_root_table(root: Mapping[str, Any]) -> ParsedFile:
    """@brief Validate a parsed register description document.

    @param root The document as nested dicts, lists and scalars, as produced by a TOML parser.
    @return The validated model.
    @exception ValidationFailed The document has problems. The exception holds every diagnostic
        found, in order. Validation stops early only when the register description table itself is
        unusable, since registers cannot be checked without its defaults.
    """
    context = DiagnosticContext()
    v = TableValidator(root, TableKind.ROOT_DESCRIPTION, context)
    v.check_unknown_keys(POSSIBLE_ROOT_KEYS)

    rd_table = v.require(REGISTER_DESCRIPTION_KEY, v.table(REGISTER_DESCRIPTION_KEY))
    rd = check_register_description(rd_table, context) if rd_table is not None else None
    if rd is None:
        raise ValidationFailed(context.diagnostics)

    registers: Optional[Registers] = None
    value = v.value(REGISTER_KEY)
    if isinstance(value, list):
        registers = RegisterList(handle_register_array(value, rd, context))
    elif isinstance(value, Mapping):
        registers = _handle_register_groups(value, rd, context)
    elif value is not None:
        v.invalid_value(REGISTER_KEY, f"expected a table or an array, found: {describe_value(value)}")

    if context.has_errors:
        raise ValidationFailed(context.diagnostics)

    parsed_file = ParsedFile(rd, registers)
    LOG.debug("validated register description '%s' with %d registers", rd.name,
            sum(1 for _ in parsed_file.iter_registers()))
    return parsed_file

def loads(text: str, source: Optional[str] = None) -> ParsedFile:
    """@brief Parse and validate register description text.
    @param text TOML document.
    @param source Optional file name used in error messages.
    @exception DescriptionSyntaxError The text is not valid TOML.
    @exception ValidationFailed The document failed validation.
    """
    try:
        root = tomllib.loads(text)
    except tomllib.TOMLDecodeError as err:
        raise DescriptionSyntaxError(str(err), source=source) from err
    return check_root_table(root)

def load_file(path: Union[str, "os.PathLike[str]"]) -> ParsedFile:
    """@brief Read, parse and validate a register description file.
    @exception DescriptionSyntaxError The file is not UTF-8 text or not valid TOML.
    @exception ValidationFailed The document failed validation.
    """
    LOG.debug("loading register description from %s", path)
    source = os.fspath(path)
    with open(path, encoding="utf-8") as f:
        try:
            text = f.read()
        except UnicodeDecodeError as err:
            raise DescriptionSyntaxError(f"file is not valid UTF-8 text: {err}", source=source) from err
    return loads(text, source=source)
