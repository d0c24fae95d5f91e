#
# Copyright (C) 2023 The Android Open Source Project
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
"""Errors raised by build_clang, each carrying the exit status it maps to."""

from typing import Optional


class BuildClangError(Exception):
    """Base error. main() exits with exit_code after printing the message."""

    exit_code: int = 1


class UsageError(BuildClangError):
    """Bad or missing command line argument."""

    exit_code = 2


class PreconditionError(BuildClangError):
    """A required value is missing or cannot be resolved."""


class FilesystemError(BuildClangError):
    """A directory could not be created or removed."""


class ExternalToolFailure(BuildClangError):
    """An external command (git, wget, tar, cmake) failed."""

    def __init__(self, stage: str, cause: Optional[BaseException] = None) -> None:
        message = f'{stage} failed'
        if cause is not None:
            message += f': {cause}'
        super().__init__(message)
        self.stage = stage
        self.cause = cause
