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

from .diagnostics import (
    ConstraintError,
    Diagnostic,
    DiagnosticContext,
    InvalidValue,
    MissingKey,
    TableKind,
    UnknownKey,
    render_diagnostics,
    )
from .root import (
    check_root_table,
    load_file,
    loads,
    )

__all__ = [
    "ConstraintError",
    "Diagnostic",
    "DiagnosticContext",
    "InvalidValue",
    "MissingKey",
    "TableKind",
    "UnknownKey",
    "check_root_table",
    "load_file",
    "loads",
    "render_diagnostics",
    ]
