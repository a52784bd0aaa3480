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
from typing import (Any, Mapping, Optional)

from .diagnostics import (DiagnosticContext, TableKind)
from .table_validator import TableValidator
from ..core.model import (
    AccessMode,
    Extension,
    NATIVE_ADDRESS_SIZE,
    RegisterDescription,
    RegisterSize,
    SpecVersion,
    )

LOG = logging.getLogger(__name__)

NAME_KEY = "name"
VERSION_KEY = "version"
DESCRIPTION_KEY = "description"
EXTENSION_KEY = "extension"
DEFAULT_REGISTER_SIZE_KEY = "default_register_size"
DEFAULT_REGISTER_ACCESS_KEY = "default_register_access"
INDEX_SIZE_KEY = "index_size"
ADDRESS_SIZE_KEY = "address_size"

POSSIBLE_KEYS = (
    NAME_KEY,
    VERSION_KEY,
    DESCRIPTION_KEY,
    EXTENSION_KEY,
    DEFAULT_REGISTER_SIZE_KEY,
    DEFAULT_REGISTER_ACCESS_KEY,
    INDEX_SIZE_KEY,
    ADDRESS_SIZE_KEY,
    )

def _address_size(value: Any) -> Optional[RegisterSize]:
    if value == NATIVE_ADDRESS_SIZE:
        return None
    try:
        return RegisterSize.from_value(value)
    except ValueError:
        raise ValueError(f"unsupported address size {value!r}, supported values are "
                f"'{NATIVE_ADDRESS_SIZE}', 8, 16, 32 and 64") from None

def check_register_description(table: Mapping[str, Any], context: DiagnosticContext) -> Optional[RegisterDescription]:
    """@brief Validate the `register_description` table.

    The breadcrumb for the description stays pushed only while the table is being validated.

    @return The description, or None if any key was missing or invalid. All problems have been
        recorded in @a context in either case.
    """
    v = TableValidator(table, TableKind.ROOT_DESCRIPTION, context)
    v.check_unknown_keys(POSSIBLE_KEYS)

    name = v.require(NAME_KEY, v.name(NAME_KEY))
    crumb = f"register description '{name}'" if name is not None else None
    with v.scope(crumb):
        version = v.require(VERSION_KEY, v.convert_text(VERSION_KEY, SpecVersion.from_text))
        description = v.text(DESCRIPTION_KEY)
        extension = v.convert_text(EXTENSION_KEY, Extension.from_text)
        default_size = v.convert(DEFAULT_REGISTER_SIZE_KEY, RegisterSize.from_value)
        default_access = v.convert_text(DEFAULT_REGISTER_ACCESS_KEY, AccessMode.from_text)
        index_size = v.convert(INDEX_SIZE_KEY, RegisterSize.from_value)
        address_size = v.convert(ADDRESS_SIZE_KEY, _address_size)

        if v.failed:
            return None
        assert name is not None and version is not None

        rd = RegisterDescription(
            name=name,
            version=version,
            description=description,
            extension=extension,
            default_register_size=default_size,
            default_register_access=default_access,
            index_size=index_size if index_size is not None else RegisterSize.SIZE_64,
            address_size=address_size,
            )
        LOG.debug("register description '%s' version %s", name, version)
        return rd
