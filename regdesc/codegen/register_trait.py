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

"""@brief Capability types shared by every generated register module.

The preamble written at the top of each generated module defines the group marker base class, the
I/O protocols a backend implements for each combination of location kind and direction, and the
location mixins that forward register reads and writes to those protocols.
"""

from __future__ import annotations

from typing import (Dict, NamedTuple, Tuple)

from .writer import CodeWriter
from ..core.model import LocationKind

READ = "READ"
WRITE = "WRITE"

class LocationTrait(NamedTuple):
    """@brief Generated names for one location kind and direction."""
    ## I/O protocol a backend implements.
    protocol: str
    ## Mixin inherited by register accessors.
    mixin: str
    ## Class constant holding the location value.
    constant: str
    ## Backend method called by the mixin.
    method: str

LOCATION_TRAITS: Dict[Tuple[LocationKind, str], LocationTrait] = {
    (LocationKind.INDEX, READ): LocationTrait("RegisterIndexIoR", "LocationIndexR", "INDEX_R", "read_index"),
    (LocationKind.INDEX, WRITE): LocationTrait("RegisterIndexIoW", "LocationIndexW", "INDEX_W", "write_index"),
    (LocationKind.RELATIVE, READ): LocationTrait("RegisterRelIoR", "LocationRelR", "REL_ADDRESS_R", "read_rel"),
    (LocationKind.RELATIVE, WRITE): LocationTrait("RegisterRelIoW", "LocationRelW", "REL_ADDRESS_W", "write_rel"),
    (LocationKind.ABSOLUTE, READ): LocationTrait("RegisterAbsIoR", "LocationAbsR", "ABS_ADDRESS_R", "read_abs"),
    (LocationKind.ABSOLUTE, WRITE): LocationTrait("RegisterAbsIoW", "LocationAbsW", "ABS_ADDRESS_W", "write_abs"),
    }

## Generated enum member names of `LocationKind`.
LOCATION_KIND_MEMBERS = {
    LocationKind.INDEX: "INDEX",
    LocationKind.RELATIVE: "RELATIVE",
    LocationKind.ABSOLUTE: "ABSOLUTE",
    }

## Names the generated modules import from the standard library.
IMPORTS = """\
from __future__ import annotations

import enum
from typing import (
    Any,
    Callable,
    ClassVar,
    FrozenSet,
    Iterable,
    NamedTuple,
    Protocol,
    Type,
    TypeVar,
)
"""

_PREAMBLE_HEAD = '''\
class Bitfield:
    """Contiguous bit range of a register."""

    __slots__ = ("msb", "lsb", "register_width")

    def __init__(self, msb: int, lsb: int, register_width: int) -> None:
        self.msb = msb
        self.lsb = lsb
        self.register_width = register_width

    @property
    def width(self) -> int:
        return self.msb - self.lsb + 1

    @property
    def max_value(self) -> int:
        return (1 << self.width) - 1

    @property
    def mask(self) -> int:
        return self.max_value << self.lsb

    def get(self, raw: int) -> int:
        """Extract the field value from a raw register value."""
        return (raw & self.mask) >> self.lsb

    def set(self, raw: int, value: int) -> int:
        """Return raw with the field replaced by value."""
        register_mask = (1 << self.register_width) - 1
        return ((raw & ~self.mask) | ((value << self.lsb) & self.mask)) & register_mask

    def __repr__(self) -> str:
        if self.msb == self.lsb:
            return f"Bitfield({self.msb})"
        return f"Bitfield({self.msb}:{self.lsb})"


class RegisterGroup:
    """Base class of the group marker types.

    Every I/O call passes the marker of the register's group so that a backend wired for one
    group is never handed another group's registers.
    """


class LocationKind(enum.Enum):
    INDEX = "index"
    RELATIVE = "relative_address"
    ABSOLUTE = "absolute_address"


class Direction(enum.Enum):
    READ = "read"
    WRITE = "write"


class Capability(NamedTuple):
    """One access path a backend provides: group, location kind, direction and width."""

    group: Type[RegisterGroup]
    kind: LocationKind
    direction: Direction
    width: int

    def __str__(self) -> str:
        return f"{self.group.__name__} {self.kind.value} {self.direction.value} u{self.width}"


def require_capabilities(io: object, owner: str, required: Iterable[Capability]) -> None:
    """Check that io declares every capability in required.

    Backends declare what they support in a CAPABILITIES collection of Capability values.
    """
    provided = getattr(io, "CAPABILITIES", None)
    if provided is None:
        raise TypeError(f"{type(io).__name__} does not declare CAPABILITIES")
    missing = [c for c in required if c not in provided]
    if missing:
        names = ", ".join(str(c) for c in missing)
        raise TypeError(f"{type(io).__name__} cannot access {owner}, missing capabilities: {names}")


GroupT = TypeVar("GroupT", bound=RegisterGroup, contravariant=True)
'''

def _protocol(trait: LocationTrait, direction: str) -> str:
    if direction == READ:
        signature = f"def {trait.method}(self, group: Type[GroupT], location: int, width: int) -> int: ..."
    else:
        signature = (f"def {trait.method}(self, group: Type[GroupT], location: int, width: int, "
                "value: int) -> None: ...")
    return f"class {trait.protocol}(Protocol[GroupT]):\n    {signature}\n"

def _mixin(trait: LocationTrait, direction: str) -> str:
    lines = [
        f"class {trait.mixin}:",
        f"    GROUP: ClassVar[Type[RegisterGroup]]",
        f"    WIDTH: ClassVar[int]",
        f"    {trait.constant}: ClassVar[int]",
        f"    _io: Any",
        f"",
        ]
    if direction == READ:
        lines += [
            f"    def _read_raw(self) -> int:",
            f"        return self._io.{trait.method}(self.GROUP, self.{trait.constant}, self.WIDTH)",
            ]
    else:
        lines += [
            f"    def _write_raw(self, value: int) -> None:",
            f"        self._io.{trait.method}(self.GROUP, self.{trait.constant}, self.WIDTH, value)",
            ]
    return "\n".join(lines) + "\n"

def write_preamble(writer: CodeWriter) -> None:
    """@brief Write the shared capability types."""
    writer.lines(_PREAMBLE_HEAD)
    for (_, direction), trait in LOCATION_TRAITS.items():
        writer.blank(2)
        writer.lines(_protocol(trait, direction))
    for (_, direction), trait in LOCATION_TRAITS.items():
        writer.blank(2)
        writer.lines(_mixin(trait, direction))

## Top-level names defined by the preamble and the imports.
PREAMBLE_NAMES = frozenset([
    "annotations", "enum", "Any", "Callable", "ClassVar", "FrozenSet", "Iterable", "NamedTuple",
    "Protocol", "Type", "TypeVar",
    "Bitfield", "RegisterGroup", "LocationKind", "Direction", "Capability",
    "require_capabilities", "GroupT", "DESCRIPTION_VERSION", "INDEX_SIZE", "ADDRESS_SIZE",
    ] + [t.protocol for t in LOCATION_TRAITS.values()] + [t.mixin for t in LOCATION_TRAITS.values()])
