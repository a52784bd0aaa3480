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
import os
import sys
from typing import List

from .base import SubcommandBase
from ..codegen import (LANGUAGES, generate)
from ..core.exceptions import CommandError
from ..utility.naming import (is_identifier, snake_case)

LOG = logging.getLogger(__name__)

class GenerateSubcommand(SubcommandBase):
    """@brief `regdesc generate` subcommand."""

    NAMES = ['generate', 'gen']
    HELP = "Generate register access code from a register description file."
    EPILOG = "The generated module only depends on the Python standard library."
    DEFAULT_LOG_LEVEL = logging.WARNING

    @classmethod
    def get_args(cls) -> List[argparse.ArgumentParser]:
        """@brief Add this subcommand to the subparsers object."""
        parser = argparse.ArgumentParser(description=cls.HELP, add_help=False)

        group = parser.add_argument_group("generate options")
        group.add_argument('-o', '--output', metavar="PATH",
            help="Output file. The generated code is written to stdout if not specified.")
        group.add_argument('-l', '--language', choices=LANGUAGES, default=LANGUAGES[0],
            help="Target language (default: %(default)s).")
        group.add_argument('--module', metavar="NAME",
            help="Name of the generated module. Defaults to the output file name, or the register "
                "description name when writing to stdout.")

        return [cls.CommonOptions.COMMON, cls.CommonOptions.DESCRIPTION, parser]

    def _module_name(self, description_name: str) -> str:
        if self._args.module is not None:
            name = self._args.module
        elif self._args.output is not None:
            name = os.path.splitext(os.path.basename(self._args.output))[0]
        else:
            name = snake_case(description_name)
        if not is_identifier(name):
            raise CommandError(f"invalid module name '{name}'")
        return name

    def invoke(self) -> int:
        """@brief Handle 'generate' subcommand."""
        parsed_file = self._load_description()
        module_name = self._module_name(parsed_file.description.name)
        text = generate(parsed_file, module_name)

        if self._args.output is None:
            sys.stdout.write(text)
        else:
            with open(self._args.output, "w", encoding="utf-8") as f:
                f.write(text)
            LOG.info("wrote %s", self._args.output)
        return 0
