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
# pylint: disable=not-callable

import datetime
import logging
import os
from pathlib import Path
import shlex
import subprocess
from typing import List, Optional

from errors import PreconditionError


def logger():
    """Returns the module level logger."""
    return logging.getLogger(__name__)


def subprocess_run(cmd, *args, **kwargs):
    """subprocess.run with logging."""
    logger().debug('subprocess.run:%s %s',
                  datetime.datetime.now().strftime("%H:%M:%S"),
                  list2cmdline(cmd))
    return subprocess.run(cmd, *args, **kwargs, text=True)


def check_call(cmd, *args, **kwargs):
    """subprocess.check_call with logging."""
    return subprocess_run(cmd, *args, **kwargs, check=True)


def check_output(cmd, *args, **kwargs):
    """subprocess.check_output with logging."""
    return subprocess_run(cmd, *args, **kwargs, check=True, stdout=subprocess.PIPE).stdout


def list2cmdline(args: List[str]) -> str:
    """Joins arguments into a Bourne-shell cmdline.

    Like shlex.join, but is flexible about the argument type. Each argument
    can be a str, a bytes, or a path-like object. (subprocess.call is
    similarly flexible.)
    """
    return ' '.join([shlex.quote(os.fsdecode(arg)) for arg in args])


def create_script(script_path: Path, cmd: List[str]) -> None:
    """Writes cmd as a shell script so the invocation can be replayed."""
    with script_path.open('w') as outf:
        outf.write('#!/bin/sh\n')
        outf.write(list2cmdline(cmd) + ' "$@"\n')
    script_path.chmod(0o755)


def isabspath(path: str) -> bool:
    """Returns True iff path starts with '/'."""
    return path.startswith('/')


def absolute_path(path: str, cwd: Optional[str] = None) -> str:
    """Rewrites a relative path as <cwd>/<path>."""
    if isabspath(path):
        return path
    if cwd is None:
        try:
            cwd = os.getcwd()
        except OSError as e:
            raise PreconditionError(f'cannot resolve {path}: {e}') from e
    return cwd + '/' + path


def parse_bool(value: Optional[str], default: bool = False) -> bool:
    """Interprets an environment style boolean ('1', 'yes', 'true', 'on')."""
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in ('1', 'yes', 'true', 'on')
