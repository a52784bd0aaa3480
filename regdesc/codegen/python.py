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
from typing import (List, Optional)

from .register import (NameScope, RegisterEmitter)
from .register_trait import (IMPORTS, PREAMBLE_NAMES, write_preamble)
from .writer import CodeWriter
from ..core.model import (ParsedFile, Register)
from ..utility.naming import (pascal_case, snake_case)

LOG = logging.getLogger(__name__)

## Default generated marker and container names for a flat register list.
DEFAULT_GROUP_CLASS = "DefaultGroup"
DEFAULT_CONTAINER_CLASS = "Registers"

_CONTAINER_METHODS = frozenset(["debug_registers"])

def _module_docstring(parsed_file: ParsedFile, module_name: str) -> str:
    rd = parsed_file.description
    lines = [f"{module_name}: register access API for {rd.name}."]
    if rd.description:
        lines += ["", rd.description]
    return "\n".join(lines)

class _GroupEmitter:
    """@brief Writes the marker, the registers and the container of one group."""

    def __init__(self, name: Optional[str], registers: List[Register], scope: NameScope) -> None:
        self.name = name
        if name is None:
            self.group_cls = scope.claim(DEFAULT_GROUP_CLASS)
            self.container_cls = scope.claim(DEFAULT_CONTAINER_CLASS)
            prefix = ""
        else:
            prefix = pascal_case(name)
            self.group_cls = scope.claim(prefix + "Group")
            self.container_cls = scope.claim(prefix + "Registers")
        self.registers = [RegisterEmitter(r, self.group_cls, prefix, scope) for r in registers]

    @property
    def title(self) -> str:
        if self.name is None:
            return "the register description"
        return f"register group {self.name}"

    def emit(self, w: CodeWriter) -> None:
        LOG.debug("generating %s with %d registers", self.title, len(self.registers))
        w.blank(2)
        with w.block(f"class {self.group_cls}(RegisterGroup):"):
            w.docstring(f"Marker of the registers of {self.title}.")

        for register in self.registers:
            register.emit(w)

        self._emit_container(w)

    def _emit_container(self, w: CodeWriter) -> None:
        w.blank(2)
        with w.block(f"class {self.container_cls}:"):
            w.docstring(f"Accessors for every register of {self.title}.")
            w.blank()
            w.line(f"GROUP = {self.group_cls}")
            capabilities = []
            for register in self.registers:
                for capability in register.capabilities():
                    if capability not in capabilities:
                        capabilities.append(capability)
            if capabilities:
                with w.block("CAPABILITIES: FrozenSet[Capability] = frozenset(["):
                    for capability in capabilities:
                        w.line(capability + ",")
                w.line("])")
            else:
                w.line("CAPABILITIES: FrozenSet[Capability] = frozenset()")
            w.blank()
            with w.block("def __init__(self, io: Any) -> None:"):
                w.line("self._io = io")

            getters = []
            for register in self.registers:
                getter = snake_case(register.register.name)
                while getter in _CONTAINER_METHODS:
                    getter += "_"
                getters.append((getter, register))
                w.blank()
                with w.block(f"def {getter}(self) -> {register.cls}:"):
                    w.line(f"return {register.cls}(self._io)")

            w.blank()
            with w.block("def debug_registers(self, f: Callable[[str], Any]) -> None:"):
                w.docstring("Read every readable register and pass its decoded value to f.")
                readable = [(g, r) for g, r in getters if r.register.is_readable]
                for getter, register in readable:
                    w.line(f"f(repr(self.{getter}().read()))")
                if not readable:
                    w.line("pass")

def generate(parsed_file: ParsedFile, module_name: str) -> str:
    """@brief Generate a Python register access module.

    The result is a deterministic function of @a parsed_file. The generated module depends only
    on the standard library.

    @param parsed_file A model returned by a successful validation.
    @param module_name Name of the module the caller will write the text to. It only appears in
        the module docstring.
    @return Source text of the module.
    @exception InternalError The model violates an invariant that validation guarantees.
    """
    rd = parsed_file.description
    LOG.info("generating module %s from register description '%s'", module_name, rd.name)

    w = CodeWriter()
    w.line(f"# Generated by regdesc from register description '{rd.name}'. Do not edit.")
    w.docstring(_module_docstring(parsed_file, module_name))
    w.blank()
    w.lines(IMPORTS)
    w.blank()
    w.line(f"DESCRIPTION_VERSION = {str(rd.version)!r}")
    w.line(f"INDEX_SIZE = {rd.index_size.value}")
    if rd.address_size is None:
        w.line("# Native pointer width.")
        w.line("ADDRESS_SIZE = None")
    else:
        w.line(f"ADDRESS_SIZE = {rd.address_size.value}")
    w.blank(2)
    write_preamble(w)

    scope = NameScope(PREAMBLE_NAMES)
    groups = [_GroupEmitter(name, registers, scope) for name, registers in parsed_file.iter_groups()]
    for group in groups:
        group.emit(w)
    return w.text()
