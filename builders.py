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
"""Drives the cmake configure, build and install steps for LLVM."""

import enum
import logging
from pathlib import Path
import subprocess
from typing import cast, Dict, List, Optional

import configs
import constants
from errors import ExternalToolFailure, FilesystemError
from projects import ProjectSet
from source_manager import SourceLocation
import timer
import utils


def logger():
    """Returns the module level logger."""
    return logging.getLogger(__name__)


def _on_off(value: bool) -> str:
    return 'ON' if value else 'OFF'


@enum.unique
class State(enum.Enum):
    """Progress of a ClangBuilder. Each step moves to the next state."""
    UNCONFIGURED = 'unconfigured'
    CONFIGURED = 'configured'
    BUILT = 'built'
    INSTALLED = 'installed'
    DONE = 'done'


class ClangBuilder:
    """Builder for the LLVM tree of one invocation."""

    cmake: str = 'cmake'

    def __init__(self,
                 config: configs.Config,
                 source: SourceLocation,
                 project_set: ProjectSet,
                 build_dir: Path,
                 reporter: Optional[timer.Reporter] = None) -> None:
        self._config = config
        self.source = source
        self.project_set = project_set
        self.build_dir = build_dir
        self.reporter = reporter
        self.state = State.UNCONFIGURED

    @property
    def install_dir(self) -> Path:
        return cast(Path, self._config.install_dir)

    @property
    def cmake_defines(self) -> Dict[str, str]:
        """CMake defines, in the order they are passed."""
        config = self._config
        defines: Dict[str, str] = {
            'CMAKE_INSTALL_PREFIX': str(self.install_dir),
            'CMAKE_BUILD_TYPE': config.build_type,
            'CMAKE_VERBOSE_MAKEFILE': _on_off(config.verbose_makefile),
        }
        defines.update(self.project_set.cmake_defines)

        if config.static_libstdcxx:
            defines['CMAKE_EXE_LINKER_FLAGS'] = '-static-libstdc++'
            defines['CMAKE_SHARED_LINKER_FLAGS'] = '-static-libstdc++'
        if config.old_host_toolchain:
            defines['LLVM_TEMPORARILY_ALLOW_OLD_TOOLCHAIN'] = 'ON'

        if config.abi_linker_script is not None:
            defines['LIBCXX_ENABLE_ABI_LINKER_SCRIPT'] = _on_off(config.abi_linker_script)
        if config.assertions is not None:
            defines['LLVM_ENABLE_ASSERTIONS'] = _on_off(config.assertions)
        if config.rtti is not None:
            defines['LLVM_ENABLE_RTTI'] = _on_off(config.rtti)
        if config.eh is not None:
            defines['LLVM_ENABLE_EH'] = _on_off(config.eh)

        if config.gcc_dir:
            defines['CMAKE_C_COMPILER'] = str(config.gcc_dir / 'bin' / 'gcc')
            defines['CMAKE_CXX_COMPILER'] = str(config.gcc_dir / 'bin' / 'g++')
            defines['GCC_INSTALL_PREFIX'] = str(config.gcc_dir)

        shared = bool(config.shared_libllvm)
        defines['LLVM_BUILD_LLVM_DYLIB'] = _on_off(shared)
        defines['LLVM_LINK_LLVM_DYLIB'] = _on_off(shared)
        return defines

    @property
    def configure_cmd(self) -> List[str]:
        cmd: List[str] = [self.cmake, '-G', self._config.generator]
        cmd.extend(f'-D{key}={val}' for key, val in self.cmake_defines.items())
        cmd.extend(['-S', str(self.source.llvm_dir), '-B', str(self.build_dir)])
        return cmd

    @property
    def build_cmd(self) -> List[str]:
        return [self.cmake, '--build', str(self.build_dir), '-j', str(self._config.jobs)]

    @property
    def install_target(self) -> str:
        return 'install/strip' if self._config.strip else 'install'

    @property
    def install_cmd(self) -> List[str]:
        return [self.cmake, '--build', str(self.build_dir), '--target', self.install_target]

    def _expect(self, state: State, step: str) -> None:
        if self.state != state:
            raise RuntimeError(f'cannot {step} in state {self.state.value}')

    def _run(self, stage: str, cmd: List[str]) -> None:
        if self.reporter:
            self.reporter.banner(stage)
            self.reporter.mark(stage)
        try:
            with timer.Timer(stage):
                utils.check_call(cmd)
        except (subprocess.CalledProcessError, OSError) as e:
            raise ExternalToolFailure(stage, e) from e

    def configure(self) -> None:
        self._expect(State.UNCONFIGURED, 'configure')
        cmd = self.configure_cmd
        try:
            self.build_dir.mkdir(parents=True, exist_ok=True)
            utils.create_script(self.build_dir / 'cmake_invocation.sh', cmd)
        except OSError as e:
            raise FilesystemError(f'cannot prepare {self.build_dir}: {e}') from e
        self._run('configure', cmd)
        self.state = State.CONFIGURED

    def compile(self) -> None:
        self._expect(State.CONFIGURED, 'build')
        self._run('build', self.build_cmd)
        self.state = State.BUILT

    def install(self) -> None:
        self._expect(State.BUILT, 'install')
        self._run('install', self.install_cmd)
        self.state = State.INSTALLED

    def write_version_marker(self) -> None:
        """Records the commit the installed tree was built from."""
        self._expect(State.INSTALLED, 'finish')
        if self.source.commit:
            marker = self.install_dir / constants.VERSION_MARKER
            try:
                marker.write_text(self.source.commit + '\n')
            except OSError as e:
                raise FilesystemError(f'cannot write {marker}: {e}') from e
            logger().info('Wrote %s', marker)
        self.state = State.DONE

    def build(self) -> None:
        """Configures, builds and installs."""
        logger().info('Building %s', self._config)
        self.configure()
        self.compile()
        self.install()
        self.write_version_marker()
