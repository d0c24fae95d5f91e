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
"""A class to represent an LLVM release version."""

import re

import constants

_RC_PATTERN = re.compile(r'-rc(\d+)$')
_COMMIT_PATTERN = re.compile(r'[0-9a-f]{40}$')


def release_identifier(version: str) -> str:
    """Normalizes a version for use in release archive names.

    14.0.0-rc1 => 14.0.0rc1, anything else is returned unchanged.
    """
    if _RC_PATTERN.search(version):
        return version.replace('-rc', 'rc', 1)
    return version


def is_commit_hash(text: str) -> bool:
    """Returns whether text is a full 40 character git commit hash."""
    return bool(_COMMIT_PATTERN.match(text))


class Version():
    """Parse and save an LLVM release version."""

    def __init__(self, version: str) -> None:
        self.version = version
        self.identifier = release_identifier(version)

    @property
    def is_release_candidate(self) -> bool:
        return self.identifier != self.version

    @property
    def tag(self) -> str:
        """Returns the git tag of this release."""
        return f'llvmorg-{self.version}'

    @property
    def archive_name(self) -> str:
        return f'llvm-project-{self.identifier}.src.tar.xz'

    @property
    def archive_url(self) -> str:
        """Returns the download URL of the release source archive."""
        return '/'.join([constants.LLVM_RELEASE_BASE_URL, self.tag, self.archive_name])

    def __str__(self) -> str:
        return self.version
