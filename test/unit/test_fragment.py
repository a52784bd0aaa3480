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
from regdesc.core.exceptions import ValidationFailed
from regdesc.core.model import (
    AccessMode,
    BitField,
    EnumValue,
    Location,
    LocationKind,
    Register,
    RegisterEnum,
    RegisterSize,
    )
from regdesc.editing import (append_register, register_to_toml)
from regdesc.editing.fragment import (split_address_template, toml_string)
from regdesc.validation import loads

def make_control(name="CONTROL", access=AccessMode.READ_WRITE, size=RegisterSize.SIZE_8):
    location = Location(LocationKind.ABSOLUTE, 0x20)
    return Register(
        name=name,
        access_mode=access,
        size=size,
        read_location=location,
        write_location=location,
        bit_fields=[
            BitField(BitRange(1, 0), "mode", 'Operating "mode"'),
            BitField.reserved(BitRange(7, 2)),
            ],
        enums=[
            RegisterEnum("Mode", BitRange(1, 0), [
                EnumValue(0, "idle"),
                EnumValue(1, "run", "Normal operation."),
                ]),
            ],
        description="Control register.",
        )

class TestTomlString:
    def test_escapes(self):
        assert toml_string('a "b" \\ c\nd') == '"a \\"b\\" \\\\ c\\nd"'

class TestSplitAddressTemplate:
    def test_template(self):
        assert split_address_template(0x3ca, 0x3da) == "0x3?a"

    def test_not_a_template(self):
        with pytest.raises(ValueError):
            split_address_template(0x3ca, 0x3ea)
        with pytest.raises(ValueError):
            split_address_template(0x10, 0x1000)

class TestRegisterToToml:
    def test_flat(self, status_toml):
        parsed = loads(status_toml)
        text = register_to_toml(make_control(), parsed)
        assert text.startswith("\n[[register]]\nname = \"CONTROL\"\n")
        assert 'description = "Control register."' in text
        assert "absolute_address = 0x20" in text
        # No defaults in the STATUS document.
        assert 'access = "rw"' in text
        assert "size = 8" in text
        assert '    { bit = "1:0", name = "mode", description = "Operating \\"mode\\"" },' in text
        assert '    { bit = "7:2", reserved = true },' in text
        assert "\n[[register.enum]]\nname = \"Mode\"\n" in text
        assert '    { value = 1, name = "run", description = "Normal operation." },' in text

    def test_defaults_omitted(self, header_toml):
        text = register_to_toml(make_control(), loads(header_toml))
        assert "access =" not in text
        assert "size =" not in text

    def test_non_default_kept(self, header_toml):
        text = register_to_toml(make_control(access=AccessMode.READ, size=RegisterSize.SIZE_16),
                loads(header_toml))
        assert 'access = "r"' in text
        assert "size = 16" in text

    def test_group_required(self, timer_toml):
        parsed = loads(timer_toml)
        with pytest.raises(ValueError):
            register_to_toml(make_control(), parsed)
        text = register_to_toml(make_control(size=RegisterSize.SIZE_32), parsed, "timer")
        assert "[[register.timer]]" in text
        assert "[[register.timer.enum]]" in text

    def test_split_address(self, vga_toml):
        parsed = loads(vga_toml)
        feature = next(parsed.iter_registers())
        text = register_to_toml(feature, parsed)
        assert 'absolute_address = "0x3?a"' in text
        assert "index = 2" in text

class TestAppendRegister:
    def test_append(self, status_toml):
        text, parsed = append_register(status_toml, make_control(), loads(status_toml))
        assert text.startswith(status_toml)
        assert [r.name for r in parsed.iter_registers()] == ["STATUS", "CONTROL"]
        added = list(parsed.iter_registers())[1]
        assert added == make_control()

    def test_append_to_group(self, timer_toml):
        control = make_control(size=RegisterSize.SIZE_8)
        text, parsed = append_register(timer_toml, control, loads(timer_toml), "irq")
        groups = dict(parsed.iter_groups())
        assert [r.name for r in groups["irq"]] == ["IRQ_CLEAR", "CONTROL"]

    def test_append_round_trips_existing(self, vga_toml):
        parsed = loads(vga_toml)
        feature = next(parsed.iter_registers())
        renamed = Register(
            name="FEATURE_CONTROL_2",
            access_mode=feature.access_mode,
            size=feature.size,
            read_location=feature.read_location,
            write_location=feature.write_location,
            bit_fields=feature.bit_fields,
            enums=feature.enums,
            index=3,
            )
        _, new = append_register(vga_toml, renamed, parsed)
        added = list(new.iter_registers())[-1]
        assert added == renamed

    def test_duplicate_name_rejected(self, status_toml):
        parsed = loads(status_toml)
        with pytest.raises(ValidationFailed) as excinfo:
            append_register(status_toml, make_control(name="STATUS"), parsed)
        assert [d.message for d in excinfo.value.diagnostics] == [
            "registers 'STATUS' and 'STATUS' have the same name",
            ]

    def test_missing_trailing_newline(self, status_toml):
        text, _ = append_register(status_toml.rstrip("\n"), make_control(), loads(status_toml))
        assert "]\n\n[[register]]\nname = \"CONTROL\"" in text
