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

from typing import (TYPE_CHECKING, Any, List, Optional, Sequence)

if TYPE_CHECKING:
    from ..validation.diagnostics import Diagnostic

class Error(RuntimeError):
    """@brief Parent of all errors regdesc can raise"""
    pass

class InternalError(Error):
    """@brief Internal consistency or logic error.

    This error indicates that something has happened that shouldn't be possible. The code
    generator raises it when handed a model that did not come out of a successful validation.
    """
    pass

class DescriptionSyntaxError(Error):
    """@brief The register description text is not a well-formed TOML document.

    The optional 'source' keyword argument records the file name, if known, and is included in the
    description of the exception when it is converted to a string.
    """
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args)
        self._source: Optional[str] = kwargs.get('source', None)

    @property
    def source(self) -> Optional[str]:
        return self._source

    def __str__(self) -> str:
        desc = super().__str__()
        if self._source is not None:
            desc = f"{self._source}: {desc}"
        return desc

class ValidationFailed(Error):
    """@brief Validation of a register description produced one or more diagnostics.

    The complete, ordered list of diagnostics is available from the `diagnostics` property. A
    failed validation never yields a partially built model.
    """
    def __init__(self, diagnostics: Sequence["Diagnostic"], *args: Any) -> None:
        super().__init__(*args)
        self._diagnostics: List["Diagnostic"] = list(diagnostics)

    @property
    def diagnostics(self) -> List["Diagnostic"]:
        return self._diagnostics

    def __str__(self) -> str:
        count = len(self._diagnostics)
        desc = f"validation failed with {count} error{'' if count == 1 else 's'}"
        if self.args:
            desc = f"{self.args[0]}: {desc}"
        return desc

class EntityRejected(Error):
    """@brief Raised to abandon validation of a single table.

    The diagnostic explaining the rejection has always been recorded before this is raised. The
    caller iterating over sibling tables catches it and continues with the next sibling.
    """
    pass

class CommandError(Error):
    """@brief Raised when a command encounters an error."""
    pass
