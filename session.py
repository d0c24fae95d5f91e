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
"""The temporary working tree of one build."""

import logging
import os
from pathlib import Path
import shutil
import tempfile
from typing import Mapping, Optional

import constants
from errors import FilesystemError


def logger():
    """Returns the module level logger."""
    return logging.getLogger(__name__)


class BuildSession:
    """Owns <tmp>/{archives,src,build,git}.

    Use as a context manager. The tree is removed on exit, whether the body
    raised or not, unless keep is set.
    """

    root: Path
    keep: bool

    def __init__(self, keep: bool = False, env: Optional[Mapping[str, str]] = None) -> None:
        if env is None:
            env = os.environ
        base_dir = env.get(constants.ENV_TMPDIR) or None
        try:
            self.root = Path(tempfile.mkdtemp(prefix='build_clang-', dir=base_dir))
        except OSError as e:
            raise FilesystemError(f'cannot create temporary directory: {e}') from e
        try:
            for name in constants.SESSION_SUBDIRS:
                (self.root / name).mkdir()
        except OSError as e:
            shutil.rmtree(self.root, ignore_errors=True)
            raise FilesystemError(f'cannot create temporary directory: {e}') from e
        self.keep = keep
        logger().info('Using temporary directory %s', self.root)

    @property
    def archive_dir(self) -> Path:
        return self.root / 'archives'

    @property
    def src_dir(self) -> Path:
        return self.root / 'src'

    @property
    def build_dir(self) -> Path:
        return self.root / 'build'

    @property
    def git_dir(self) -> Path:
        return self.root / 'git'

    def cleanup(self) -> None:
        """Removes the tree. Failures are reported but not raised."""
        if self.keep:
            logger().info('Keeping temporary directory %s', self.root)
            return
        try:
            shutil.rmtree(self.root)
        except OSError as e:
            logger().warning('Cannot remove temporary directory %s: %s', self.root, e)

    def __enter__(self) -> 'BuildSession':
        return self

    def __exit__(self, t, value, traceback) -> None:
        self.cleanup()
