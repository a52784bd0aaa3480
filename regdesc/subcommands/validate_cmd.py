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

class ValidateSubcommand(SubcommandBase):
    """@brief `regdesc validate` subcommand."""

    NAMES = ['validate', 'check']
    HELP = "Validate a register description file."
    DEFAULT_LOG_LEVEL = logging.WARNING

    @classmethod
    def get_args(cls) -> List[argparse.ArgumentParser]:
        """@brief Add this subcommand to the subparsers object."""
        return [cls.CommonOptions.COMMON, cls.CommonOptions.DESCRIPTION]

    def invoke(self) -> int:
        """@brief Handle 'validate' subcommand."""
        parsed_file = self._load_description()
        count = sum(1 for _ in parsed_file.iter_registers())
        print(f"{self._args.file}: register description '{parsed_file.description.name}' is valid, "
                f"{count} register{'' if count == 1 else 's'}")
        return 0
