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
"""Fetches the LLVM source tree, either a release archive or a git checkout."""

import dataclasses
import logging
from pathlib import Path
import subprocess
from typing import List, Optional

import configs
from errors import ExternalToolFailure, PreconditionError
from session import BuildSession
import utils
import version


def logger():
    """Returns the module level logger."""
    return logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SourceLocation:
    """Where the fetched source lives."""

    source_dir: Path
    git_dir: Optional[Path] = None
    archive: Optional[Path] = None
    commit: Optional[str] = None

    @property
    def llvm_dir(self) -> Path:
        """The directory passed to cmake as the source tree."""
        return self.source_dir / 'llvm'


def _run(stage: str, cmd: List, **kwargs) -> None:
    try:
        utils.check_call(cmd, **kwargs)
    except (subprocess.CalledProcessError, OSError) as e:
        raise ExternalToolFailure(stage, e) from e


def _output(stage: str, cmd: List, **kwargs) -> str:
    try:
        return utils.check_output(cmd, **kwargs)
    except (subprocess.CalledProcessError, OSError) as e:
        raise ExternalToolFailure(stage, e) from e


def download_release(config: configs.Config, session: BuildSession) -> SourceLocation:
    """Downloads the release archive and extracts it into the session's src dir."""
    release = config.release
    archive = session.archive_dir / release.archive_name
    logger().info('Downloading %s', release.archive_url)
    _run('download', ['wget', '-O', archive, release.archive_url])

    # Strip the llvm-project-<id>.src/ component so the tree lands in src/.
    logger().info('Extracting %s', archive)
    _run('extract', ['tar', '-x', '-f', archive, '-C', session.src_dir,
                     '--strip-components=1'])
    return SourceLocation(source_dir=session.src_dir, archive=archive)


def checkout_repo(config: configs.Config, session: BuildSession) -> SourceLocation:
    """Clones the repository and checks out config.version (branch, tag or commit)."""
    git_dir = session.git_dir
    logger().info('Cloning %s', config.repo_url)
    _run('git clone', ['git', 'clone', '--progress', config.repo_url, git_dir])
    _run('git checkout', ['git', 'checkout', config.version], cwd=git_dir)
    commit = _output('git rev-parse', ['git', 'rev-parse', 'HEAD'], cwd=git_dir).strip()
    summary = _output('git log', ['git', 'log', '-1', '--oneline'], cwd=git_dir).strip()
    print(f'Checked out {summary}')
    return SourceLocation(source_dir=git_dir, git_dir=git_dir, commit=commit)


def setup_sources(config: configs.Config, session: BuildSession) -> SourceLocation:
    """Fetches the source tree the way config asks for."""
    if not config.version:
        raise PreconditionError('no version specified')
    if config.install_dir is None:
        raise PreconditionError('no installation directory specified')
    if config.repo:
        return checkout_repo(config, session)
    return download_release(config, session)


def resolve_commit(config: configs.Config) -> str:
    """Asks the remote which commit config.version refers to.

    In release mode the version's release tag is looked up.
    """
    if config.repo:
        if version.is_commit_hash(config.version):
            return config.version
        ref = config.version
    else:
        ref = f'refs/tags/{config.release.tag}'

    output = _output('git ls-remote',
                     ['git', 'ls-remote', config.repo_url, ref, f'{ref}^{{}}'])
    refs = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) == 2 and version.is_commit_hash(fields[0]):
            refs.append((fields[0], fields[1]))
    if not refs:
        raise PreconditionError(f'{config.version} not found in {config.repo_url}')

    # Annotated tags point at a tag object, the peeled ^{} entry has the commit.
    for commit, name in refs:
        if name.endswith('^{}'):
            return commit
    return refs[0][0]
