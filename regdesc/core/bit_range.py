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

import re
from functools import total_ordering
from typing import (Iterator, Optional)
from typing_extensions import Self

from ..utility.mask import (bitmask, bit_invert, max_unsigned)

## Largest bit number accepted in bit range text.
MAX_BIT_NUMBER = 0xffff

## Widest bit range that still has an unsigned 64-bit maximum value.
MAX_VALUE_BITS = 64

_BIT_NUMBER_RE = re.compile(r"^[0-9]+$")

def _parse_bit_number(text: str) -> int:
    if not _BIT_NUMBER_RE.match(text):
        raise ValueError(f"invalid bit number '{text}'")
    bit = int(text)
    if bit > MAX_BIT_NUMBER:
        raise ValueError(f"bit number '{text}' is too large")
    return bit

@total_ordering
class BitRange:
    """@brief Contiguous range of bits within a register.

    A bit range is written as either a single bit number, `"5"`, or as `"MSB:LSB"`, `"7:4"`. The
    invariant `msb >= lsb` always holds. Bit ranges compare and hash structurally so they can be
    used as dictionary keys when matching enums to bit fields.

    The `get()` and `set()` methods decode a field value out of a raw register value and encode a
    field value into one, using the pre-shifted `mask` and the `shift` (LSB) of the range.
    """
    __slots__ = ('_msb', '_lsb', '_mask')

    def __init__(self, msb: int, lsb: Optional[int] = None) -> None:
        """@brief Constructor.
        @param self
        @param msb Most significant bit.
        @param lsb Least significant bit. Defaults to @a msb for a single-bit range.
        @exception ValueError The bit numbers are negative or @a msb is smaller than @a lsb.
        """
        if lsb is None:
            lsb = msb
        if lsb < 0:
            raise ValueError(f"negative bit number {lsb}")
        if msb < lsb:
            raise ValueError(f"msb < lsb, msb: {msb}, lsb: {lsb}")
        self._msb = msb
        self._lsb = lsb
        self._mask = bitmask((msb, lsb))

    @classmethod
    def parse(cls, text: str, strict: bool = True) -> Self:
        """@brief Create a bit range from its textual form.
        @param text Bit range text.
        @param strict Reject the redundant `"N:N"` spelling of a single bit. Pass False to read it
            as bit N.
        @exception ValueError The text is not a valid bit range.
        """
        parts = text.split(":")
        if len(parts) == 1:
            bit = _parse_bit_number(parts[0])
            return cls(bit, bit)
        elif len(parts) == 2:
            msb = _parse_bit_number(parts[0])
            lsb = _parse_bit_number(parts[1])
            if msb < lsb:
                raise ValueError("most significant bit is smaller than least significant bit "
                        f"(msb < lsb), value: '{text}'")
            elif msb == lsb and strict:
                raise ValueError(f"unnecessary range syntax, change '{text}' to '{msb}'")
            return cls(msb, lsb)
        else:
            raise ValueError(f"invalid bit range '{text}'")

    @property
    def msb(self) -> int:
        """@brief Highest bit position of the range."""
        return self._msb

    @property
    def lsb(self) -> int:
        """@brief Lowest bit position of the range, same as `.shift`."""
        return self._lsb

    @property
    def shift(self) -> int:
        return self._lsb

    @property
    def bit_count(self) -> int:
        """@brief Number of bits in the range."""
        return self._msb - self._lsb + 1

    @property
    def mask(self) -> int:
        """@brief Pre-shifted mask of the range."""
        return self._mask

    @property
    def is_single_bit(self) -> bool:
        return self._msb == self._lsb

    @property
    def max_value(self) -> int:
        """@brief Largest field value that fits in the range.
        @exception ValueError The range is wider than 64 bits.
        """
        if self.bit_count > MAX_VALUE_BITS:
            raise ValueError(f"bit range '{self}' is larger than {MAX_VALUE_BITS} bits")
        return max_unsigned(self.bit_count)

    def bits(self) -> Iterator[int]:
        """@brief Iterate over bit positions from LSB to MSB."""
        return iter(range(self._lsb, self._msb + 1))

    def get(self, register_value: int) -> int:
        """@brief Extract the field value from a register value.
        @param self
        @param register_value Integer register value.
        @return Integer value of the field extracted from @a register_value.
        """
        return (register_value & self._mask) >> self._lsb

    def set(self, field_value: int, register_value: int, register_width: int = 64) -> int:
        """@brief Modify the field in a register value.
        @param self
        @param field_value New value for the field. Must _not_ be shifted into place already.
        @param register_value Integer register value.
        @param register_width Width of the register in bits.
        @return Integer register value with the field updated to @a field_value. Bits of
            @a field_value that don't fit in the range are dropped.
        """
        return ((register_value & bit_invert(self._mask, register_width))
                | ((field_value << self._lsb) & self._mask))

    def __eq__(self, o: object) -> bool:
        return isinstance(o, BitRange) and (self._msb == o._msb) and (self._lsb == o._lsb)

    def __lt__(self, o: object) -> bool:
        if not isinstance(o, BitRange):
            return NotImplemented
        return (self._lsb, self._msb) < (o._lsb, o._msb)

    def __hash__(self) -> int:
        return hash((self._msb, self._lsb))

    def __str__(self) -> str:
        if self._msb == self._lsb:
            return str(self._msb)
        return f"{self._msb}:{self._lsb}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"
