#!/usr/bin/env python3
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
"""Builds and installs Clang/LLVM from a release archive or a git checkout."""

import logging
import os
import sys
from typing import Optional, Sequence

from builders import ClangBuilder
import configs
from errors import BuildClangError, UsageError
import options
import projects
from session import BuildSession
import source_manager
import timer


def logger():
    """Returns the module level logger."""
    return logging.getLogger(__name__)


def print_config(config: configs.Config, project_set: projects.ProjectSet) -> None:
    print(f'install directory: {config.install_dir}')
    print(f'version: {config.version}')
    if config.repo:
        print(f'repository: {config.repo_url}')
    else:
        candidate = ' (release candidate)' if config.release.is_release_candidate else ''
        print(f'release identifier: {config.identifier}{candidate}')
        print(f'archive: {config.archive_url}')
    print(f'build type: {config.build_type}')
    print(f'jobs: {config.jobs}')
    print(f'projects: {project_set.projects_str}')
    print(f'runtimes: {project_set.runtimes_str}')
    print(f'targets: {project_set.targets_str or "(all)"}')
    print(f'install target: {"install/strip" if config.strip else "install"}')


def build(config: configs.Config, reporter: timer.Reporter) -> None:
    """Runs the fetch, configure, build and install stages."""
    project_set = projects.select_projects(config)
    reporter.banner('configuration')
    print_config(config, project_set)

    with BuildSession(keep=not config.cleanup) as session:
        reporter.banner('download')
        reporter.mark('download')
        with timer.Timer('download'):
            source = source_manager.setup_sources(config, session)

        if config.stop_after_fetch:
            session.keep = True
            print(f'Stopping after fetch. Source is in {source.source_dir}')
            return

        builder = ClangBuilder(config, source, project_set,
                               build_dir=session.build_dir,
                               reporter=reporter)
        builder.build()
        reporter.summary()


def main(argv: Optional[Sequence[str]] = None) -> int:
    timer.Timer.reset()
    try:
        config = options.parse_args(argv)
    except UsageError:
        # Usage has already been printed.
        return UsageError.exit_code
    except BuildClangError as e:
        print(f'ERROR: {e}', file=sys.stderr)
        return e.exit_code

    logging.basicConfig(level=logging.DEBUG if config.debug_level > 0 else logging.INFO)

    try:
        if config.print_commit:
            print(source_manager.resolve_commit(config))
            return 0

        reporter = timer.Reporter()
        reporter.mark('start')
        reporter.banner(f'build_clang (pid {os.getpid()})')
        build(config, reporter)
    except BuildClangError as e:
        print(f'ERROR: {e}', file=sys.stderr)
        return e.exit_code
    return 0


if __name__ == '__main__':
    sys.exit(main())
