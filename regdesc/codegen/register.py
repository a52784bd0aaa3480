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
from typing import (Iterable, List, Optional, Set)

from .register_trait import (LOCATION_KIND_MEMBERS, LOCATION_TRAITS, READ, WRITE, LocationTrait)
from .writer import CodeWriter
from ..core.exceptions import InternalError
from ..core.model import (BitField, Location, LocationKind, Register, RegisterEnum)
from ..utility.naming import (constant_case, pascal_case, snake_case)

LOG = logging.getLogger(__name__)

## Method names of the value wrappers that bit field accessors must not shadow.
_WRAPPER_METHODS = frozenset(["raw_bits", "set_raw_bits"])

## Method names of the write proxies that value setters must not shadow.
_PROXY_METHODS = frozenset(["bits", "bit", "set_bit", "clear_bit", "variant"])

def _avoid(name: str, taken: Iterable[str]) -> str:
    while name in taken:
        name += "_"
    return name

class NameScope:
    """@brief Hands out unique top-level names of a generated module."""

    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self._used: Set[str] = set(reserved)

    def claim(self, name: str) -> str:
        """@brief Return @a name, or @a name with a numeric suffix if it is already taken."""
        candidate = name
        suffix = 2
        while candidate in self._used:
            candidate = f"{name}{suffix}"
            suffix += 1
        self._used.add(candidate)
        return candidate

def _format_location(location: Location) -> str:
    if location.kind is LocationKind.INDEX:
        return str(location.value)
    return f"{location.value:#x}"

def _comment(text: str) -> str:
    return "# " + " ".join(text.split())

def _range_doc(bit_field: BitField) -> str:
    r = bit_field.range
    head = f"Bit {r.msb}" if r.is_single_bit else f"Bits {r.msb}:{r.lsb}"
    if bit_field.description:
        return f"{head} - {bit_field.description}"
    return head

class _FieldNames:
    """@brief Generated names for one normal bit field."""

    def __init__(self, register: "RegisterEmitter", bit_field: BitField, scope: NameScope) -> None:
        assert bit_field.name is not None
        cls = register.cls
        self.bit_field = bit_field
        self.enum: Optional[RegisterEnum] = register.register.enum_for(bit_field)
        self.method = _avoid(snake_case(bit_field.name), _WRAPPER_METHODS)
        self.constant = scope.claim(f"_{constant_case(cls)}_{constant_case(bit_field.name)}")
        field_cls = cls + pascal_case(bit_field.name)
        if self.is_closed:
            self.read_type = scope.claim(field_cls)
        else:
            self.read_type = scope.claim(field_cls + "R")
        self.write_proxy = scope.claim(field_cls + "W")

    @property
    def is_closed(self) -> bool:
        return self.enum is not None and self.enum.is_complete

    @property
    def is_single_bit(self) -> bool:
        return self.bit_field.range.is_single_bit

class RegisterEmitter:
    """@brief Writes the classes generated for one register.

    For a register `CTRL` this produces, depending on its access mode:
    - one `Bitfield` constant and one read type per normal bit field,
    - `CtrlR`, the value returned by `Ctrl.read()`,
    - one write proxy per normal bit field and `CtrlW`, the value built by `Ctrl.write()` and
      `Ctrl.modify()`,
    - `CtrlIo`, the protocol a backend must implement,
    - `Ctrl`, the accessor bound to a backend.
    """

    def __init__(self, register: Register, group_cls: str, prefix: str, scope: NameScope) -> None:
        self.register = register
        self.group_cls = group_cls
        self.cls = scope.claim(prefix + pascal_case(register.name))
        self.read_cls = scope.claim(self.cls + "R")
        self.write_cls = scope.claim(self.cls + "W")
        self.io_cls = scope.claim(self.cls + "Io")
        self.fields = [_FieldNames(self, f, scope) for f in register.normal_bit_fields]

    @property
    def width(self) -> int:
        return self.register.size.value

    @property
    def has_write(self) -> bool:
        """@brief Whether `write()` is generated.

        A register with reserved bit fields gets no `write()`, since building a value from zero
        would have to pick a value for the reserved bits.
        """
        return self.register.is_writable and not self.register.has_reserved_bit_fields

    @property
    def has_modify(self) -> bool:
        return self.register.is_readable and self.register.is_writable

    @property
    def needs_write_value(self) -> bool:
        return self.has_write or self.has_modify

    def traits(self) -> List[LocationTrait]:
        """@brief Location traits of each direction the register supports."""
        traits = []
        if self.register.is_readable:
            traits.append(LOCATION_TRAITS[(self.register.read_location.kind, READ)])
        if self.register.is_writable:
            traits.append(LOCATION_TRAITS[(self.register.write_location.kind, WRITE)])
        return traits

    def capabilities(self) -> List[str]:
        """@brief Source text of the `Capability` values this register requires."""
        result = []
        if self.register.is_readable:
            result.append(self._capability(self.register.read_location.kind, "READ"))
        if self.register.is_writable:
            result.append(self._capability(self.register.write_location.kind, "WRITE"))
        return result

    def _capability(self, kind: LocationKind, direction: str) -> str:
        return (f"Capability({self.group_cls}, LocationKind.{LOCATION_KIND_MEMBERS[kind]}, "
                f"Direction.{direction}, {self.width})")

    def emit(self, w: CodeWriter) -> None:
        LOG.debug("generating register %s as %s", self.register.name, self.cls)
        if self.fields:
            w.blank(2)
        for f in self.fields:
            w.line(f"{f.constant} = Bitfield({f.bit_field.range.msb}, {f.bit_field.range.lsb}, "
                    f"{self.width})")
        for f in self.fields:
            if f.is_closed:
                self._emit_closed_enum(w, f)
            elif self.register.is_readable:
                self._emit_open_value(w, f)
        if self.register.is_readable:
            self._emit_read_value(w)
        if self.needs_write_value:
            for f in self.fields:
                self._emit_write_proxy(w, f)
            self._emit_write_value(w)
        self._emit_io_protocol(w)
        self._emit_accessor(w)

    # Read types.

    def _emit_bit_helpers(self, w: CodeWriter) -> None:
        w.blank()
        with w.block("def bit(self) -> bool:"):
            w.line("return self.to_raw() != 0")
        w.blank()
        with w.block("def bit_is_set(self) -> bool:"):
            w.line("return self.to_raw() != 0")
        w.blank()
        with w.block("def bit_is_clear(self) -> bool:"):
            w.line("return self.to_raw() == 0")

    def _emit_closed_enum(self, w: CodeWriter, f: _FieldNames) -> None:
        register_enum = f.enum
        assert register_enum is not None
        max_value = f.bit_field.range.max_value
        values = sorted(register_enum.values, key=lambda v: v.value)
        if [v.value for v in values] != list(range(max_value + 1)):
            raise InternalError(f"enum '{register_enum.name}' of register '{self.register.name}' "
                    "is marked complete but does not define every value")

        w.blank(2)
        with w.block(f"class {f.read_type}(enum.IntEnum):"):
            w.docstring(register_enum.description or f"Values of bit field {f.bit_field.name}.")
            w.blank()
            for value in register_enum.values:
                if value.description:
                    w.line(_comment(value.description))
                w.line(f"{constant_case(value.name)} = {value.value}")
            w.blank()
            w.line("@classmethod")
            with w.block(f"def from_raw(cls, value: int) -> {f.read_type}:"):
                w.line("return cls(value)")
            w.blank()
            with w.block("def to_raw(self) -> int:"):
                w.line("return int(self)")
            w.blank()
            with w.block("def bits(self) -> int:"):
                w.line("return int(self)")
            if f.is_single_bit:
                self._emit_bit_helpers(w)
            for value in register_enum.values:
                w.blank()
                with w.block(f"def is_{snake_case(value.name)}(self) -> bool:"):
                    w.line(f"return self is {f.read_type}.{constant_case(value.name)}")
            w.blank()
            with w.block("def __repr__(self) -> str:"):
                w.line('return f"{type(self).__name__}.{self.name}"')

    def _emit_open_value(self, w: CodeWriter, f: _FieldNames) -> None:
        names = {}
        if f.enum is not None:
            names = {v.value: constant_case(v.name) for v in f.enum.values}

        w.blank(2)
        with w.block(f"class {f.read_type}:"):
            if f.enum is not None:
                w.docstring(f.enum.description or f"Value of bit field {f.bit_field.name}.")
            else:
                w.docstring(f"Value of bit field {f.bit_field.name}.")
            w.blank()
            w.line('__slots__ = ("_value",)')
            if f.enum is not None:
                w.blank()
                for value in f.enum.values:
                    if value.description:
                        w.line(_comment(value.description))
                    w.line(f"{constant_case(value.name)} = {value.value}")
            w.blank()
            if f.is_single_bit:
                with w.block("def __init__(self, value: bool) -> None:"):
                    w.line("self._value = value")
            else:
                with w.block("def __init__(self, value: int) -> None:"):
                    w.line("self._value = value")
            w.blank()
            w.line("@classmethod")
            with w.block(f"def from_raw(cls, value: int) -> {f.read_type}:"):
                w.line("return cls(value != 0)" if f.is_single_bit else "return cls(value)")
            w.blank()
            with w.block("def to_raw(self) -> int:"):
                w.line("return int(self._value)")
            w.blank()
            with w.block("def bits(self) -> int:"):
                w.line("return int(self._value)")
            if f.is_single_bit:
                self._emit_bit_helpers(w)
            if f.enum is not None:
                for value in f.enum.values:
                    w.blank()
                    with w.block(f"def is_{snake_case(value.name)}(self) -> bool:"):
                        w.line(f"return self.to_raw() == {value.value}")
            w.blank()
            with w.block("def __eq__(self, other: object) -> bool:"):
                w.line(f"return isinstance(other, {f.read_type}) and other.to_raw() == self.to_raw()")
            w.blank()
            with w.block("def __hash__(self) -> int:"):
                w.line("return hash(self.to_raw())")
            w.blank()
            with w.block("def __repr__(self) -> str:"):
                if names:
                    w.line(f"names = {names!r}")
                    w.line("name = names.get(self.to_raw())")
                    with w.block("if name is not None:"):
                        w.line('return f"{type(self).__name__}.{name}"')
                w.line('return f"{type(self).__name__}({self.to_raw():#x})"')

    def _emit_read_value(self, w: CodeWriter) -> None:
        w.blank(2)
        with w.block(f"class {self.read_cls}:"):
            w.docstring(f"Value read from register {self.register.name}.")
            w.blank()
            w.line('__slots__ = ("_raw",)')
            w.blank()
            with w.block("def __init__(self, raw: int) -> None:"):
                w.line("self._raw = raw")
            w.blank()
            with w.block("def raw_bits(self) -> int:"):
                w.line("return self._raw")
            for f in self.fields:
                w.blank()
                with w.block(f"def {f.method}(self) -> {f.read_type}:"):
                    w.docstring(_range_doc(f.bit_field))
                    w.line(f"return {f.read_type}.from_raw({f.constant}.get(self._raw))")
            w.blank()
            with w.block("def __eq__(self, other: object) -> bool:"):
                w.line(f"return isinstance(other, {self.read_cls}) and other._raw == self._raw")
            w.blank()
            with w.block("def __hash__(self) -> int:"):
                w.line("return hash(self._raw)")
            w.blank()
            parts = ["raw={self._raw:#x}"] + ["%s={self.%s()!r}" % (f.method, f.method) for f in self.fields]
            with w.block("def __repr__(self) -> str:"):
                w.line('return f"%s(%s)"' % (self.register.name, ", ".join(parts)))

    # Write types.

    def _emit_write_proxy(self, w: CodeWriter, f: _FieldNames) -> None:
        w.blank(2)
        with w.block(f"class {f.write_proxy}:"):
            w.docstring(_range_doc(f.bit_field))
            w.blank()
            w.line('__slots__ = ("_w",)')
            w.blank()
            with w.block(f"def __init__(self, w: {self.write_cls}) -> None:"):
                w.line("self._w = w")
            w.blank()
            with w.block(f"def bits(self, value: int) -> {self.write_cls}:"):
                w.line(f"return self._w.set_raw_bits({f.constant}.set(self._w.raw_bits(), value))")
            if f.is_single_bit:
                w.blank()
                with w.block(f"def bit(self, value: bool) -> {self.write_cls}:"):
                    w.line("return self.bits(1 if value else 0)")
                w.blank()
                with w.block(f"def set_bit(self) -> {self.write_cls}:"):
                    w.line("return self.bits(1)")
                w.blank()
                with w.block(f"def clear_bit(self) -> {self.write_cls}:"):
                    w.line("return self.bits(0)")
            if f.is_closed:
                w.blank()
                with w.block(f"def variant(self, value: {f.read_type}) -> {self.write_cls}:"):
                    w.line("return self.bits(value.to_raw())")
            if f.enum is not None:
                for value in f.enum.values:
                    w.blank()
                    setter = _avoid(snake_case(value.name), _PROXY_METHODS)
                    with w.block(f"def {setter}(self) -> {self.write_cls}:"):
                        if value.description:
                            w.docstring(value.description)
                        w.line(f"return self.bits({value.value})")

    def _emit_write_value(self, w: CodeWriter) -> None:
        w.blank(2)
        with w.block(f"class {self.write_cls}:"):
            w.docstring(f"Value written to register {self.register.name}.")
            w.blank()
            w.line('__slots__ = ("_raw",)')
            w.blank()
            with w.block("def __init__(self, raw: int = 0) -> None:"):
                w.line("self._raw = raw")
            w.blank()
            with w.block("def raw_bits(self) -> int:"):
                w.line("return self._raw")
            w.blank()
            with w.block(f"def set_raw_bits(self, raw: int) -> {self.write_cls}:"):
                w.line(f"self._raw = raw & {self.register.size.max_value:#x}")
                w.line("return self")
            for f in self.fields:
                w.blank()
                with w.block(f"def {f.method}(self) -> {f.write_proxy}:"):
                    w.docstring(_range_doc(f.bit_field))
                    w.line(f"return {f.write_proxy}(self)")
            w.blank()
            with w.block("def __repr__(self) -> str:"):
                w.line('return f"%s(raw={self._raw:#x})"' % self.write_cls)

    # Accessor.

    def _emit_io_protocol(self, w: CodeWriter) -> None:
        bases = [f"{t.protocol}[{self.group_cls}]" for t in self.traits()]
        w.blank(2)
        with w.block(f"class {self.io_cls}({', '.join(bases + ['Protocol'])}):"):
            w.docstring(f"Backend able to access register {self.register.name}.")

    def _emit_accessor(self, w: CodeWriter) -> None:
        register = self.register
        traits = self.traits()
        bases = ", ".join(t.mixin for t in traits)
        w.blank(2)
        with w.block(f"class {self.cls}({bases}):"):
            doc = [register.description or f"Register {register.name}."]
            doc.append("")
            doc.append(f"Access: {register.access_mode}, width: {self.width} bits, "
                    f"{register.location}.")
            w.docstring("\n".join(doc))
            w.blank()
            w.line(f"NAME = {register.name!r}")
            w.line(f"GROUP = {self.group_cls}")
            w.line(f"WIDTH = {self.width}")
            if register.is_readable:
                trait = LOCATION_TRAITS[(register.read_location.kind, READ)]
                w.line(f"{trait.constant} = {_format_location(register.read_location)}")
            if register.is_writable:
                trait = LOCATION_TRAITS[(register.write_location.kind, WRITE)]
                w.line(f"{trait.constant} = {_format_location(register.write_location)}")
            if register.index is not None:
                w.line(f"SLOT_INDEX = {register.index}")
            w.line(f"CAPABILITIES = ({', '.join(self.capabilities())},)")
            w.blank()
            with w.block(f"def __init__(self, io: {self.io_cls}) -> None:"):
                w.line("require_capabilities(io, self.NAME, self.CAPABILITIES)")
                w.line("self._io = io")

            if register.is_readable:
                w.blank()
                with w.block(f"def read(self) -> {self.read_cls}:"):
                    w.line(f"return {self.read_cls}(self._read_raw())")
            if self.has_write:
                w.blank()
                with w.block(f"def write(self, f: Callable[[{self.write_cls}], Any]) -> None:"):
                    w.docstring("Write a value built by f, starting from zero.")
                    w.line(f"value = {self.write_cls}()")
                    w.line("f(value)")
                    w.line("self._write_raw(value.raw_bits())")
            if self.has_modify:
                w.blank()
                with w.block(f"def modify(self, f: Callable[[{self.write_cls}], Any]) -> None:"):
                    w.docstring("Read the register, let f change the value and write it back.")
                    w.line(f"value = {self.write_cls}(self._read_raw())")
                    w.line("f(value)")
                    w.line("self._write_raw(value.raw_bits())")