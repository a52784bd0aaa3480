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

import keyword
import re
from typing import List

## Names in register description files must look like identifiers.
IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Acronym followed by a capitalised word, lowercase runs, uppercase runs, digit runs.
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+[0-9]*|[A-Z]+[0-9]*|[0-9]+")

def is_identifier(name: str) -> bool:
    """@brief Whether @a name is acceptable as an entity name."""
    return IDENTIFIER_RE.match(name) is not None

def split_words(name: str) -> List[str]:
    """@brief Split an identifier into words at underscores and case changes.

    @code
      >>> split_words("TIMER_CTRL")
      ['TIMER', 'CTRL']
      >>> split_words("spiRxFIFOLevel")
      ['spi', 'Rx', 'FIFO', 'Level']
    @endcode
    """
    return _WORD_RE.findall(name)

def _safe(text: str) -> str:
    if text[:1].isdigit():
        text = "_" + text
    if keyword.iskeyword(text):
        return text + "_"
    return text

def snake_case(name: str) -> str:
    words = split_words(name)
    if not words:
        return _safe(name)
    return _safe("_".join(w.lower() for w in words))

def pascal_case(name: str) -> str:
    words = split_words(name)
    if not words:
        return _safe(name)
    return _safe("".join(w[0].upper() + w[1:].lower() for w in words))

def constant_case(name: str) -> str:
    words = split_words(name)
    if not words:
        return _safe(name)
    return _safe("_".join(w.upper() for w in words))
