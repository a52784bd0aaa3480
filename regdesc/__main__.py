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
import sys
from typing import (List, Optional)

from . import __version__
from .core import exceptions
from .subcommands.base import SubcommandBase
from .subcommands.generate_cmd import GenerateSubcommand
from .subcommands.info_cmd import InfoSubcommand
from .subcommands.validate_cmd import ValidateSubcommand

LOG = logging.getLogger("regdesc.tool")

## Default log format.
LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"

class RegdescTool(SubcommandBase):
    """@brief Command line tool entry point."""

    HELP = "Register description validator and code generator."

    SUBCOMMANDS = [
        ValidateSubcommand,
        GenerateSubcommand,
        InfoSubcommand,
        ]

    def __init__(self) -> None:
        self._parser = self.build_parser()

    @classmethod
    def build_parser(cls) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog="regdesc", description=cls.HELP)
        parser.add_argument('-V', '--version', action='version', version=__version__)
        cls.add_subcommands(parser)
        return parser

    def run(self, args: Optional[List[str]] = None) -> int:
        """@brief Parse @a args and run the selected subcommand.
        @return Process exit status.
        """
        self._args = self._parser.parse_args(args)
        if self._args.cmd is None:
            self._parser.print_help()
            return 1

        logging.basicConfig(format=LOG_FORMAT)
        try:
            cmd = self._args.cmd(self._args)
            return cmd.invoke()
        except exceptions.ValidationFailed as err:
            LOG.debug("%s", err)
            return 1
        except exceptions.Error as err:
            LOG.error("%s", err, exc_info=LOG.isEnabledFor(logging.DEBUG))
            return 1
        except OSError as err:
            LOG.error("%s", err)
            return 1
        except KeyboardInterrupt:
            return 1

def main() -> None:
    sys.exit(RegdescTool().run())

if __name__ == '__main__':
    main()
