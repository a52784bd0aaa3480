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

import pytest

from regdesc.core.bit_range import BitRange
from regdesc.utility.mask import (bit_invert, bitmask, max_unsigned)

class TestBitmask:
    def test_range(self):
        assert bitmask((7, 4)) == 0xf0
        assert bitmask((23, 17), 1) == 0xfe0002

    def test_list(self):
        assert bitmask([4, 0, 2], (31, 24)) == 0xff000015

    def test_invert(self):
        assert bit_invert(0xf0, 8) == 0x0f
        assert bit_invert(0x1) == 0xfffffffe

    def test_max_unsigned(self):
        assert max_unsigned(1) == 1
        assert max_unsigned(64) == 0xffffffffffffffff

class TestBitRangeParse:
    def test_single_bit(self):
        r = BitRange.parse("5")
        assert r.msb == 5 and r.lsb == 5
        assert r.is_single_bit
        assert str(r) == "5"

    def test_range(self):
        r = BitRange.parse("7:4")
        assert r.msb == 7 and r.lsb == 4
        assert r.bit_count == 4
        assert str(r) == "7:4"
        assert repr(r) == "<BitRange 7:4>"

    def test_redundant_range(self):
        with pytest.raises(ValueError, match="unnecessary range syntax, change '3:3' to '3'"):
            BitRange.parse("3:3")

    def test_redundant_range_not_strict(self):
        assert BitRange.parse("3:3", strict=False) == BitRange(3)
        with pytest.raises(ValueError):
            BitRange.parse("4:7", strict=False)

    def test_reversed_range(self):
        with pytest.raises(ValueError, match=r"\(msb < lsb\), value: '4:7'"):
            BitRange.parse("4:7")

    @pytest.mark.parametrize("text", ["", "a", "-1", "1:", "0x3", " 3"])
    def test_invalid_bit_number(self, text):
        with pytest.raises(ValueError, match="invalid bit number"):
            BitRange.parse(text)

    def test_too_many_parts(self):
        with pytest.raises(ValueError, match="invalid bit range '7:4:0'"):
            BitRange.parse("7:4:0")

    def test_too_large(self):
        with pytest.raises(ValueError, match="too large"):
            BitRange.parse("65536")

class TestBitRange:
    def test_msb_less_than_lsb(self):
        with pytest.raises(ValueError):
            BitRange(3, 4)

    def test_mask_and_max(self):
        r = BitRange(7, 4)
        assert r.mask == 0xf0
        assert r.shift == 4
        assert r.max_value == 0xf

    def test_encode(self):
        r = BitRange(7, 4)
        assert r.set(0x3, 0) == 0x30
        # Other bits are left alone.
        assert r.set(0x3, 0xa5) == 0x35
        # Bits that don't fit are dropped.
        assert r.set(0x1f, 0, 8) == 0xf0

    def test_decode(self):
        r = BitRange(7, 4)
        assert r.get(0x35) == 0x3
        assert r.get(0xffff) == 0xf

    def test_64_bits(self):
        r = BitRange(63, 0)
        assert r.max_value == 0xffffffffffffffff
        assert r.set(0x1234, 0xffffffffffffffff, 64) == 0x1234

    def test_wider_than_64_bits(self):
        with pytest.raises(ValueError, match="larger than 64 bits"):
            BitRange(64, 0).max_value

    def test_bits(self):
        assert list(BitRange(3, 1).bits()) == [1, 2, 3]

    def test_equality_and_hash(self):
        assert BitRange.parse("7:4") == BitRange(7, 4)
        assert BitRange(2) == BitRange(2, 2)
        assert BitRange(7, 4) != BitRange(7, 3)
        assert {BitRange(7, 4): "a"}[BitRange.parse("7:4")] == "a"

    def test_ordering(self):
        ranges = [BitRange(7, 4), BitRange(0), BitRange(3, 1)]
        assert sorted(ranges) == [BitRange(0), BitRange(3, 1), BitRange(7, 4)]
