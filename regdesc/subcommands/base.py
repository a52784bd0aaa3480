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
import prettytable
from typing import (List, Optional, Type)

from ..core.exceptions import ValidationFailed
from ..core.model import ParsedFile
from ..validation import (load_file, render_diagnostics)

LOG = logging.getLogger(__name__)

class SubcommandBase:
    """@brief Base class for regdesc command line subcommands."""

    ## List of command names. The first element is the primary name, the rest are aliases.
    NAMES: List[str] = []
    ## Short help for the subcommand list.
    HELP: str = ""
    ## Optional text shown after the argument help.
    EPILOG: Optional[str] = None
    ## Log level used when neither `-v` nor `-q` is given.
    DEFAULT_LOG_LEVEL = logging.WARNING

    ## Subcommand classes nested under this one.
    SUBCOMMANDS: List[Type["SubcommandBase"]] = []

    class CommonOptions:
        """@brief Parsers for options shared by every subcommand."""
        LOGGING = argparse.ArgumentParser(description='logging', add_help=False)
        LOGGING_GROUP = LOGGING.add_argument_group("logging")
        LOGGING_GROUP.add_argument('-v', '--verbose', action='count', default=0,
            help="More logging. Can be specified multiple times.")
        LOGGING_GROUP.add_argument('-q', '--quiet', action='count', default=0,
            help="Less logging. Can be specified multiple times.")

        COMMON = argparse.ArgumentParser(description='common', parents=[LOGGING], add_help=False)

        DESCRIPTION = argparse.ArgumentParser(description='description', add_help=False)
        DESCRIPTION.add_argument("file", metavar="FILE",
            help="Register description file.")

    @classmethod
    def get_args(cls) -> List[argparse.ArgumentParser]:
        """@brief Return the parsers making up this subcommand's arguments."""
        return []

    @classmethod
    def add_subcommands(cls, parser: argparse.ArgumentParser) -> None:
        """@brief Add the subcommands in SUBCOMMANDS to @a parser."""
        if not cls.SUBCOMMANDS:
            return
        subparsers = parser.add_subparsers(title="subcommands", metavar="", dest='cmd')
        for subcmd_class in cls.SUBCOMMANDS:
            parsers = subcmd_class.get_args()
            subparser = subparsers.add_parser(
                    subcmd_class.NAMES[0],
                    aliases=subcmd_class.NAMES[1:],
                    parents=parsers,
                    help=subcmd_class.HELP,
                    description=subcmd_class.HELP,
                    epilog=subcmd_class.EPILOG)
            subcmd_class.customize_subparser(subparser)

    @classmethod
    def customize_subparser(cls, subparser: argparse.ArgumentParser) -> None:
        """@brief Record the subcommand class so the tool can find it after parsing."""
        subparser.set_defaults(cmd=cls)

    def __init__(self, args: argparse.Namespace) -> None:
        self._args = args
        self._apply_logging()

    def _apply_logging(self) -> None:
        """@brief Set the root log level from the verbosity arguments."""
        verbosity = getattr(self._args, 'verbose', 0) - getattr(self._args, 'quiet', 0)
        level = max(logging.DEBUG, self.DEFAULT_LOG_LEVEL - (verbosity * 10))
        logging.getLogger().setLevel(level)

    def invoke(self) -> int:
        """@brief Run the subcommand.
        @return Process exit status.
        """
        return 0

    def _load_description(self) -> ParsedFile:
        """@brief Load and validate the file named on the command line.

        Diagnostics are printed before the exception propagates.
        """
        try:
            return load_file(self._args.file)
        except ValidationFailed as err:
            print(render_diagnostics(err.diagnostics))
            raise

    def _get_pretty_table(self, fields: List[str], header: Optional[bool] = None) -> prettytable.PrettyTable:
        """@brief Returns a PrettyTable object with formatting options set."""
        pt = prettytable.PrettyTable(fields)
        pt.align = 'l'
        if header is not None:
            pt.header = header
        elif hasattr(self._args, 'no_header'):
            pt.header = not self._args.no_header
        else:
            pt.header = True
        pt.border = True
        pt.hrules = prettytable.HEADER
        pt.vrules = prettytable.NONE
        return pt
