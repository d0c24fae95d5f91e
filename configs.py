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
"""APIs for build configurations."""

import dataclasses
from pathlib import Path
from typing import Optional, Tuple

import constants
from version import Version


@dataclasses.dataclass(frozen=True)
class Config:
    """The resolved options of one invocation.

    Tri-state toggles are None when the corresponding flag was never given,
    in which case the cmake option is left to its own default.
    """

    version: str
    # Only None in --print-commit mode, which never installs.
    install_dir: Optional[Path] = None
    repo: bool = False
    repo_url: str = constants.LLVM_REPO_URL
    jobs: int = 1
    cleanup: bool = True
    debug_level: int = 0
    build_type: str = constants.DEFAULT_BUILD_TYPE
    generator: str = constants.DEFAULT_GENERATOR
    verbose_makefile: bool = False
    strip: bool = False
    print_commit: bool = False
    stop_after_fetch: bool = False
    gcc_dir: Optional[Path] = None
    static_libstdcxx: bool = False
    old_host_toolchain: bool = False
    targets: Tuple[str, ...] = ()

    # Projects.
    libc: bool = False
    libcxx: bool = False
    flang: bool = False
    lldb: bool = False
    openmp: bool = True
    libclc: bool = False
    test_suite: bool = False
    other_as_runtimes: bool = False

    # Tri-state toggles.
    rtti: Optional[bool] = None
    eh: Optional[bool] = None
    assertions: Optional[bool] = None
    abi_linker_script: Optional[bool] = None
    shared_libllvm: Optional[bool] = None

    @property
    def release(self) -> Version:
        return Version(self.version)

    @property
    def identifier(self) -> str:
        """The release identifier used in archive names."""
        return self.release.identifier

    @property
    def archive_url(self) -> str:
        return self.release.archive_url

    def __str__(self) -> str:
        source = f'repo {self.repo_url}@{self.version}' if self.repo else f'release {self.version}'
        return f'{source} -> {self.install_dir}'
