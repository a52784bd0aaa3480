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

import types

import pytest

from regdesc.codegen import generate
from regdesc.core.exceptions import ValidationFailed
from regdesc.validation import loads

STATUS_TOML = """\
[register_description]
name = "demo"
version = "0.1"

[[register]]
name = "STATUS"
size = 8
access = "r"
absolute_address = 0x10
bit_fields = [
    { bit = "0", name = "ready" },
    { bit = "7:1", reserved = true },
]
"""

TIMER_TOML = """\
[register_description]
name = "timer_block"
version = "0.1"
description = "General purpose timer."
default_register_size = 32
default_register_access = "rw"

[[register.timer]]
name = "CTRL"
relative_address = 0x0
bit_fields = [
    { bit = "0", name = "enable", description = "Start the counter." },
    { bit = "2:1", name = "mode" },
    { bit = "4:3", name = "prescaler" },
    { bit = "31:5", name = "reload" },
]

[[register.timer.enum]]
name = "Mode"
bit = "2:1"
values = [
    { value = 0, name = "one_shot" },
    { value = 1, name = "periodic" },
    { value = 2, name = "pwm" },
    { value = 3, name = "capture", description = "Latch the counter on an input edge." },
]

[[register.timer.enum]]
name = "Prescaler"
bit = "4:3"
values = [
    { value = 0, name = "div1" },
    { value = 1, name = "div8" },
]

[[register.timer]]
name = "COUNT"
access = "r"
relative_address = 0x4
bit_fields = [
    { bit = "31:0", name = "value" },
]

[[register.irq]]
name = "IRQ_CLEAR"
access = "w"
size = 8
index = 3
bit_fields = [
    { bit = "0", name = "overflow" },
    { bit = "7:1", name = "channels" },
]
"""

VGA_TOML = """\
[register_description]
name = "vga"
version = "0.1"
extension = "vga"
default_register_size = 8
default_register_access = "rw"
address_size = 16

[[register]]
name = "FEATURE_CONTROL"
absolute_address = "0x3?A"
index = 2
bit_fields = [
    { bit = "2:0", reserved = true },
    { bit = "3", name = "vsync_select" },
    { bit = "7:4", reserved = true },
]

[[register]]
name = "MISC_OUTPUT"
absolute_address = 0x3C2
bit_fields = [
    { bit = "0", name = "io_address_select" },
    { bit = "7:1", name = "other" },
]
"""

## Register description table used in front of test specific registers.
HEADER_TOML = """\
[register_description]
name = "demo"
version = "0.1"
default_register_size = 8
default_register_access = "rw"
"""

@pytest.fixture(scope='function')
def status_toml():
    return STATUS_TOML

@pytest.fixture(scope='function')
def timer_toml():
    return TIMER_TOML

@pytest.fixture(scope='function')
def vga_toml():
    return VGA_TOML

@pytest.fixture(scope='function')
def header_toml():
    return HEADER_TOML

@pytest.fixture(scope='function')
def diagnostics_of():
    """@brief Returns a function that validates text expected to fail and returns the diagnostics."""
    def _diagnostics_of(text):
        with pytest.raises(ValidationFailed) as excinfo:
            loads(text)
        return excinfo.value.diagnostics
    return _diagnostics_of

@pytest.fixture(scope='function')
def generated():
    """@brief Returns a function that generates and imports a module from description text."""
    def _generated(text, name="regs"):
        source = generate(loads(text), name)
        module = types.ModuleType(name)
        exec(compile(source, f"<{name}>", "exec"), module.__dict__)
        return module
    return _generated
