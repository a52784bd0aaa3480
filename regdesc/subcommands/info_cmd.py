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

import argparse
import logging
from typing import List

from .base import SubcommandBase

LOG = logging.getLogger(__name__)

class InfoSubcommand(SubcommandBase):
    """@brief `regdesc info` subcommand."""

    NAMES = ['info']
    HELP = "Show the registers of a register description file."
    DEFAULT_LOG_LEVEL = logging.WARNING

    @classmethod
    def get_args(cls) -> List[argparse.ArgumentParser]:
        """@brief Add this subcommand to the subparsers object."""
        parser = argparse.ArgumentParser(description=cls.HELP, add_help=False)

        group = parser.add_argument_group("info options")
        group.add_argument('-H', '--no-header', action='store_true',
            help="Don't print table headers.")
        group.add_argument('-f', '--fields', action='store_true',
            help="List bit fields of each register.")

        return [cls.CommonOptions.COMMON, cls.CommonOptions.DESCRIPTION, parser]

    def invoke(self) -> int:
        """@brief Handle 'info' subcommand."""
        parsed_file = self._load_description()
        rd = parsed_file.description

        print("Name:        ", rd.name)
        if rd.description:
            print("Description: ", rd.description)
        print("Version:     ", rd.version)
        print("Extension:   ", rd.extension or '-')
        print("Index size:  ", rd.index_size)
        print("Address size:", rd.address_size_text)
        print("Registers:")

        pt = self._get_pretty_table(["Group", "Register", "Location", "Access", "Size", "Fields"])
        for group, registers in parsed_file.iter_groups():
            for register in registers:
                location = str(register.read_location)
                if register.has_split_location:
                    location += f" / {register.write_location.value:#x}"
                pt.add_row([
                    group or '-',
                    register.name,
                    location,
                    register.access_mode,
                    register.size,
                    len(register.normal_bit_fields),
                    ])
        print(pt)

        if self._args.fields:
            for register in parsed_file.iter_registers():
                print(f"\n{register.name}:")
                pt = self._get_pretty_table(["Bits", "Name", "Enum", "Description"])
                for bit_field in sorted(register.bit_fields, key=lambda f: f.range, reverse=True):
                    register_enum = register.enum_for(bit_field)
                    pt.add_row([
                        bit_field.range,
                        bit_field.name or "(reserved)",
                        register_enum.name if register_enum is not None else '-',
                        bit_field.description or '',
                        ])
                print(pt)

        return 0
