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
"""Constants for the build."""

from typing import Tuple

# Upstream repository cloned in --repo mode.
LLVM_REPO_URL: str = 'https://github.com/llvm/llvm-project.git'

# Release archives live under <base>/llvmorg-<version>/.
LLVM_RELEASE_BASE_URL: str = 'https://github.com/llvm/llvm-project/releases/download'

# Projects that are always built.
BASE_PROJECTS: Tuple[str, ...] = (
    'clang',
    'clang-tools-extra',
    'compiler-rt',
    'lld',
    'polly',
)

DEFAULT_BUILD_TYPE: str = 'Release'
DEFAULT_GENERATOR: str = 'Unix Makefiles'

# Subdirectories of the temporary working tree.
SESSION_SUBDIRS: Tuple[str, ...] = ('archives', 'src', 'build', 'git')

# Name of the marker holding the commit an installed tree was built from.
VERSION_MARKER: str = '.version'

# Environment overrides.
ENV_TMPDIR: str = 'BUILD_CLANG_TMPDIR'
ENV_DEBUG_LEVEL: str = 'BUILD_CLANG_DEBUG_LEVEL'
ENV_INSTALL_STRIP: str = 'BUILD_CLANG_INSTALL_STRIP'
