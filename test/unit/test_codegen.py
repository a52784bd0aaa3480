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

import enum

import pytest
from unittest.mock import MagicMock

from regdesc.codegen import generate
from regdesc.codegen.register import NameScope
from regdesc.codegen.writer import CodeWriter
from regdesc.core.exceptions import InternalError
from regdesc.validation import loads

OPEN_ENUM_TOML = """\
[register_description]
name = "demo"
version = "0.1"
default_register_size = 8
default_register_access = "rw"

[[register]]
name = "POWER"
index = 7
bit_fields = [
    { bit = "1:0", name = "state" },
    { bit = "7:2", name = "level" },
]

[[register.enum]]
name = "State"
bit = "1:0"
values = [
    { value = 0, name = "off" },
    { value = 1, name = "on" },
]
"""

def backend(capabilities, read_value=0):
    io = MagicMock()
    io.CAPABILITIES = frozenset(capabilities)
    io.read_index.return_value = read_value
    io.read_rel.return_value = read_value
    io.read_abs.return_value = read_value
    return io

@pytest.fixture(scope='function')
def timer(generated, timer_toml):
    return generated(timer_toml, "timer_regs")

class TestCodeWriter:
    def test_indent(self):
        w = CodeWriter()
        with w.block("class A:"):
            w.docstring("Doc.")
            w.blank()
            with w.block("def f(self):"):
                w.line("return 1")
        assert w.text() == 'class A:\n    """Doc."""\n\n    def f(self):\n        return 1\n'

    def test_docstring_escapes(self):
        w = CodeWriter()
        w.docstring('Say """hi""" \\ "there"')
        ns = {}
        exec(compile("def f():\n" + "".join("    " + l + "\n" for l in w.text().splitlines())
                + "    pass\n", "<test>", "exec"), ns)
        assert ns["f"].__doc__ == 'Say """hi""" \\ "there"'

    def test_name_scope(self):
        scope = NameScope(["Bitfield"])
        assert scope.claim("Bitfield") == "Bitfield2"
        assert scope.claim("Ctrl") == "Ctrl"
        assert scope.claim("Ctrl") == "Ctrl2"

class TestGenerate:
    def test_deterministic(self, timer_toml):
        parsed = loads(timer_toml)
        assert generate(parsed, "timer_regs") == generate(parsed, "timer_regs")

    def test_header(self, timer_toml):
        text = generate(loads(timer_toml), "timer_regs")
        assert text.startswith("# Generated by regdesc from register description 'timer_block'.")
        assert "timer_regs: register access API for timer_block." in text
        assert "General purpose timer." in text

    def test_module_constants(self, timer):
        assert timer.DESCRIPTION_VERSION == "0.1"
        assert timer.INDEX_SIZE == 64
        assert timer.ADDRESS_SIZE is None

    def test_group_markers(self, timer):
        assert issubclass(timer.TimerGroup, timer.RegisterGroup)
        assert issubclass(timer.IrqGroup, timer.RegisterGroup)
        assert timer.TimerCtrl.GROUP is timer.TimerGroup
        assert timer.IrqIrqClear.GROUP is timer.IrqGroup

    def test_flat_names(self, generated, status_toml):
        mod = generated(status_toml)
        assert issubclass(mod.DefaultGroup, mod.RegisterGroup)
        assert mod.Status.GROUP is mod.DefaultGroup
        assert hasattr(mod, "Registers")

    def test_location_constants(self, timer):
        assert timer.TimerCtrl.REL_ADDRESS_R == 0
        assert timer.TimerCtrl.REL_ADDRESS_W == 0
        assert timer.TimerCount.REL_ADDRESS_R == 4
        assert not hasattr(timer.TimerCount, "REL_ADDRESS_W")
        assert timer.IrqIrqClear.INDEX_W == 3
        assert not hasattr(timer.IrqIrqClear, "INDEX_R")
        assert timer.TimerCtrl.WIDTH == 32
        assert timer.IrqIrqClear.WIDTH == 8

    def test_location_mixins(self, timer):
        assert issubclass(timer.TimerCtrl, timer.LocationRelR)
        assert issubclass(timer.TimerCtrl, timer.LocationRelW)
        assert not issubclass(timer.TimerCount, timer.LocationRelW)
        assert issubclass(timer.IrqIrqClear, timer.LocationIndexW)

    def test_split_location(self, generated, vga_toml):
        mod = generated(vga_toml)
        assert mod.FeatureControl.ABS_ADDRESS_R == 0x3ca
        assert mod.FeatureControl.ABS_ADDRESS_W == 0x3da
        assert mod.FeatureControl.SLOT_INDEX == 2
        assert not hasattr(mod.MiscOutput, "SLOT_INDEX")
        assert mod.ADDRESS_SIZE == 16

    def test_incomplete_enum_marked_complete(self, open_enum_parsed):
        open_enum_parsed.registers.registers[0].enums[0].is_complete = True
        with pytest.raises(InternalError):
            generate(open_enum_parsed, "broken")

@pytest.fixture(scope='function')
def open_enum_parsed():
    return loads(OPEN_ENUM_TOML)

class TestAccessors:
    def test_read(self, timer):
        io = backend(timer.TimerCtrl.CAPABILITIES, 0b00101)
        value = timer.TimerCtrl(io).read()
        io.read_rel.assert_called_once_with(timer.TimerGroup, 0, 32)
        assert value.raw_bits() == 0b00101
        assert value.enable().bit_is_set()
        assert value.enable().bit()
        assert not value.enable().bit_is_clear()
        assert value.mode() is timer.TimerCtrlMode.PWM
        assert value.mode().is_pwm()
        assert value.prescaler().is_div1()
        assert value.reload().bits() == 0

    def test_write(self, timer):
        io = backend(timer.TimerCtrl.CAPABILITIES)
        timer.TimerCtrl(io).write(lambda w: w.mode().capture().enable().set_bit())
        io.write_rel.assert_called_once_with(timer.TimerGroup, 0, 32, 0b111)
        io.read_rel.assert_not_called()

    def test_write_variant_and_bits(self, timer):
        io = backend(timer.TimerCtrl.CAPABILITIES)
        timer.TimerCtrl(io).write(lambda w: w.mode().variant(timer.TimerCtrlMode.PERIODIC)
                .reload().bits(0x7ffffff))
        io.write_rel.assert_called_once_with(timer.TimerGroup, 0, 32, 0xffffffe2)

    def test_modify(self, timer):
        io = backend(timer.TimerCtrl.CAPABILITIES, 0x12345601)
        timer.TimerCtrl(io).modify(lambda w: w.enable().clear_bit())
        io.write_rel.assert_called_once_with(timer.TimerGroup, 0, 32, 0x12345600)

    def test_read_only(self, timer):
        assert hasattr(timer.TimerCount, "read")
        assert not hasattr(timer.TimerCount, "write")
        assert not hasattr(timer.TimerCount, "modify")

    def test_write_only(self, timer):
        io = backend(timer.IrqIrqClear.CAPABILITIES)
        reg = timer.IrqIrqClear(io)
        assert not hasattr(reg, "read")
        assert not hasattr(reg, "modify")
        reg.write(lambda w: w.overflow().set_bit().channels().bits(0x7f))
        io.write_index.assert_called_once_with(timer.IrqGroup, 3, 8, 0xff)

    def test_write_omitted_with_reserved_fields(self, generated, status_toml):
        mod = generated(status_toml.replace('access = "r"', 'access = "rw"'))
        assert hasattr(mod.Status, "read")
        assert hasattr(mod.Status, "modify")
        assert not hasattr(mod.Status, "write")

    def test_modify_keeps_reserved_bits(self, generated, status_toml):
        mod = generated(status_toml.replace('access = "r"', 'access = "rw"'))
        io = backend(mod.Status.CAPABILITIES, 0xf0)
        mod.Status(io).modify(lambda w: w.ready().set_bit())
        io.write_abs.assert_called_once_with(mod.DefaultGroup, 0x10, 8, 0xf1)

    def test_split_address_directions(self, generated, vga_toml):
        mod = generated(vga_toml)
        io = backend(mod.FeatureControl.CAPABILITIES, 0x08)
        mod.FeatureControl(io).modify(lambda w: w.vsync_select().clear_bit())
        io.read_abs.assert_called_once_with(mod.DefaultGroup, 0x3ca, 8)
        io.write_abs.assert_called_once_with(mod.DefaultGroup, 0x3da, 8, 0)

class TestCapabilities:
    def test_required_set(self, timer):
        assert set(timer.TimerCtrl.CAPABILITIES) == {
            timer.Capability(timer.TimerGroup, timer.LocationKind.RELATIVE, timer.Direction.READ, 32),
            timer.Capability(timer.TimerGroup, timer.LocationKind.RELATIVE, timer.Direction.WRITE, 32),
            }

    def test_missing_capability(self, timer):
        io = backend([timer.Capability(timer.TimerGroup, timer.LocationKind.RELATIVE,
                timer.Direction.READ, 32)])
        with pytest.raises(TypeError, match="missing capabilities: TimerGroup relative_address write u32"):
            timer.TimerCtrl(io)

    def test_other_group_rejected(self, timer):
        io = backend(timer.TimerRegisters.CAPABILITIES)
        with pytest.raises(TypeError, match="cannot access IRQ_CLEAR"):
            timer.IrqIrqClear(io)

    def test_no_declaration(self, timer):
        class Backend:
            pass
        with pytest.raises(TypeError, match="does not declare CAPABILITIES"):
            timer.TimerCount(Backend())

    def test_protocol_implementation(self, timer):
        class Backend:
            CAPABILITIES = timer.TimerRegisters.CAPABILITIES

            def __init__(self):
                self.values = {0: 0, 4: 1234}

            def read_rel(self, group, location, width):
                assert group is timer.TimerGroup
                return self.values[location]

            def write_rel(self, group, location, width, value):
                self.values[location] = value

        b = Backend()
        regs = timer.TimerRegisters(b)
        regs.ctrl().write(lambda w: w.enable().set_bit())
        assert regs.ctrl().read().enable().bit_is_set()
        assert regs.count().read().value().bits() == 1234
        assert b.values[0] == 1

class TestFieldTypes:
    def test_closed_enum_round_trip(self, timer):
        assert issubclass(timer.TimerCtrlMode, enum.IntEnum)
        for variant in timer.TimerCtrlMode:
            assert timer.TimerCtrlMode.from_raw(variant.to_raw()) is variant
        assert [v.name for v in timer.TimerCtrlMode] == ["ONE_SHOT", "PERIODIC", "PWM", "CAPTURE"]
        assert timer.TimerCtrlMode.CAPTURE.is_capture()
        assert not timer.TimerCtrlMode.CAPTURE.is_pwm()

    def test_open_enum(self, generated):
        mod = generated(OPEN_ENUM_TOML)
        state = mod.PowerStateR
        assert not issubclass(state, enum.Enum)
        assert state.from_raw(0).is_off()
        assert state.from_raw(1).is_on()
        assert not state.from_raw(2).is_off() and not state.from_raw(2).is_on()
        assert state.from_raw(2).bits() == 2
        assert repr(state.from_raw(1)) == "PowerStateR.ON"
        assert repr(state.from_raw(3)) == "PowerStateR(0x3)"
        assert state.from_raw(1) == state.from_raw(1)

    def test_open_enum_setters(self, generated):
        mod = generated(OPEN_ENUM_TOML)
        io = backend(mod.Power.CAPABILITIES, 0xfc)
        mod.Power(io).modify(lambda w: w.state().on())
        io.write_index.assert_called_once_with(mod.DefaultGroup, 7, 8, 0xfd)
        assert not hasattr(mod.PowerStateW, "variant")

    def test_single_bit_value(self, timer):
        enable = timer.TimerCtrlEnableR
        assert enable.from_raw(1).bit() is True
        assert enable.from_raw(0).bit_is_clear()
        assert enable.from_raw(1).to_raw() == 1

    def test_read_value_repr(self, timer):
        value = timer.TimerCtrlR(0b00101)
        assert repr(value) == ("CTRL(raw=0x5, enable=TimerCtrlEnableR(0x1), mode=TimerCtrlMode.PWM, "
                "prescaler=TimerCtrlPrescalerR.DIV1, reload=TimerCtrlReloadR(0x0))")

    def test_write_value_masked(self, timer):
        w = timer.IrqIrqClearW()
        w.set_raw_bits(0x1ff)
        assert w.raw_bits() == 0xff

class TestDebugRegisters:
    def test_readable_registers_reported(self, timer):
        io = backend(timer.TimerRegisters.CAPABILITIES, 0x5)
        lines = []
        timer.TimerRegisters(io).debug_registers(lines.append)
        assert len(lines) == 2
        assert lines[0].startswith("CTRL(raw=0x5")
        assert lines[1].startswith("COUNT(raw=0x5")

    def test_write_only_group(self, timer):
        io = backend(timer.IrqRegisters.CAPABILITIES)
        lines = []
        timer.IrqRegisters(io).debug_registers(lines.append)
        assert lines == []
        io.read_index.assert_not_called()
