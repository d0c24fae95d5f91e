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
"""Selection of the LLVM projects, runtimes and targets to build."""

import dataclasses
from typing import Iterable, List, Tuple

import configs
import constants


def _append_unique(items: List[str], new_items: Iterable[str]) -> None:
    for item in new_items:
        if item not in items:
            items.append(item)


def join(items: Iterable[str]) -> str:
    """Joins a list the way cmake expects multi-value options."""
    return ';'.join(items)


@dataclasses.dataclass(frozen=True)
class ProjectSet:
    """Ordered, duplicate free lists for LLVM_ENABLE_PROJECTS,
    LLVM_ENABLE_RUNTIMES and LLVM_TARGETS_TO_BUILD."""

    projects: Tuple[str, ...] = ()
    runtimes: Tuple[str, ...] = ()
    targets: Tuple[str, ...] = ()

    @property
    def projects_str(self) -> str:
        return join(self.projects)

    @property
    def runtimes_str(self) -> str:
        return join(self.runtimes)

    @property
    def targets_str(self) -> str:
        return join(self.targets)

    @property
    def cmake_defines(self) -> List[Tuple[str, str]]:
        """The non-empty lists as cmake defines. Empty lists are omitted."""
        defines = [
            ('LLVM_ENABLE_PROJECTS', self.projects_str),
            ('LLVM_ENABLE_RUNTIMES', self.runtimes_str),
            ('LLVM_TARGETS_TO_BUILD', self.targets_str),
        ]
        return [(key, value) for key, value in defines if value]


def select_projects(config: configs.Config) -> ProjectSet:
    """Maps the feature toggles of config to a ProjectSet."""
    projects: List[str] = list(constants.BASE_PROJECTS)
    runtimes: List[str] = []
    other_projects: List[str] = []

    if config.flang:
        _append_unique(projects, ['flang', 'mlir'])
    if config.libc:
        _append_unique(other_projects, ['libc'])
    if config.openmp:
        _append_unique(other_projects, ['openmp'])
    if config.libclc:
        _append_unique(other_projects, ['libclc'])
    if config.libcxx:
        _append_unique(runtimes, ['libcxx', 'libcxxabi'])
    _append_unique(runtimes, ['libunwind'])
    if config.lldb:
        _append_unique(projects, ['lldb'])
    if config.test_suite:
        _append_unique(projects, ['test-suite'])

    if config.other_as_runtimes:
        _append_unique(runtimes, other_projects)
    else:
        _append_unique(projects, other_projects)

    targets: List[str] = []
    _append_unique(targets, config.targets)

    return ProjectSet(projects=tuple(projects),
                      runtimes=tuple(runtimes),
                      targets=tuple(targets))
