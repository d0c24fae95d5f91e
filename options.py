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
"""Command line parsing for build_clang."""

import argparse
import logging
import multiprocessing
import os
from pathlib import Path
import sys
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

import configs
import constants
from errors import UsageError
import utils


def logger():
    """Returns the module level logger."""
    return logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """An ArgumentParser that reports errors on stdout and raises UsageError."""

    def error(self, message):
        self.print_usage(sys.stdout)
        print(f'{self.prog}: error: {message}', file=sys.stdout)
        raise UsageError(message)


# Features that are either built or not. (flag suffix, dest, help)
_PROJECT_TOGGLES = (
    ('libc', 'libc', 'the libc project'),
    ('libcxx', 'libcxx', 'the libc++ and libc++abi runtimes'),
    ('flang', 'flang', 'the flang and mlir projects'),
    ('lldb', 'lldb', 'the lldb project'),
    ('openmp', 'openmp', 'the openmp project (default: enabled)'),
    ('libclc', 'libclc', 'the libclc project'),
    ('test-suite', 'test_suite', 'the test-suite project'),
)

# Toggles whose cmake option is only passed when the flag is given.
_TRISTATE_TOGGLES = (
    ('rtti', 'rtti', 'LLVM_ENABLE_RTTI'),
    ('eh', 'eh', 'LLVM_ENABLE_EH'),
    ('assertions', 'assertions', 'LLVM_ENABLE_ASSERTIONS'),
    ('abi-linker-script', 'abi_linker_script', 'LIBCXX_ENABLE_ABI_LINKER_SCRIPT'),
    ('shared-libllvm', 'shared_libllvm', 'LLVM_BUILD_LLVM_DYLIB and LLVM_LINK_LLVM_DYLIB'),
)


def _positive_int(value: str) -> int:
    try:
        result = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'invalid integer: {value!r}') from None
    if result < 1:
        raise argparse.ArgumentTypeError(f'must be at least 1: {value!r}')
    return result


def _non_negative_int(value: str) -> int:
    try:
        result = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'invalid integer: {value!r}') from None
    if result < 0:
        raise argparse.ArgumentTypeError(f'must not be negative: {value!r}')
    return result


def create_parser(env: Mapping[str, str]) -> argparse.ArgumentParser:
    """Returns the parser. Defaults that come from the environment are read from env."""
    parser = _ArgumentParser(
        prog='build_clang',
        allow_abbrev=False,
        description='Build and install Clang/LLVM from a release tarball or a git checkout.')

    parser.add_argument(
        '--config',
        metavar='FILE',
        help='YAML file providing defaults for the long options below.')

    parser.add_argument(
        '-d', '--install-dir',
        metavar='DIR',
        help='Installation directory (required).')
    parser.add_argument(
        '-v', '--version',
        metavar='VERSION',
        help='Release version (e.g. 14.0.0 or 14.0.0-rc1), or a branch, tag or '
        'commit in --repo mode (required).')

    parser.add_argument(
        '-r', '--repo',
        action='store_true',
        default=False,
        help='Build from the git repository instead of a release archive.')
    parser.add_argument(
        '--no-repo',
        action='store_false',
        dest='repo',
        help='Build from a release archive (default).')
    parser.add_argument(
        '--repo-url',
        default=constants.LLVM_REPO_URL,
        help='Git repository to clone in --repo mode.')
    parser.add_argument(
        '--print-commit',
        action='store_true',
        default=False,
        help='Print the commit that the version resolves to and exit.')

    parser.add_argument(
        '-j', '--jobs',
        type=_positive_int,
        default=multiprocessing.cpu_count(),
        help='Number of parallel build jobs.')
    parser.add_argument(
        '-t', '--build-type',
        default=constants.DEFAULT_BUILD_TYPE,
        help='CMake build type.')
    parser.add_argument(
        '-G', '--generator',
        default=constants.DEFAULT_GENERATOR,
        help='CMake generator.')
    parser.add_argument(
        '--verbose-makefile',
        action='store_true',
        default=False,
        help='Generate verbose makefiles.')

    debug_default = env.get(constants.ENV_DEBUG_LEVEL, '0')
    try:
        debug_level = _non_negative_int(debug_default)
    except argparse.ArgumentTypeError as e:
        parser.error(f'{constants.ENV_DEBUG_LEVEL}: {e}')
    parser.add_argument(
        '-D', '--debug-level',
        type=_non_negative_int,
        default=debug_level,
        help=f'Debug level (default: ${constants.ENV_DEBUG_LEVEL} or 0).')

    parser.add_argument(
        '--cleanup',
        action='store_true',
        default=True,
        help='Remove the temporary directory on exit (default).')
    parser.add_argument(
        '-C', '--no-cleanup',
        action='store_false',
        dest='cleanup',
        help='Keep the temporary directory on exit.')
    parser.add_argument(
        '-s', '--stop-after-fetch',
        action='store_true',
        default=False,
        help='Stop after fetching the source and keep the temporary directory.')

    strip_default = utils.parse_bool(env.get(constants.ENV_INSTALL_STRIP))
    parser.add_argument(
        '--strip',
        action='store_true',
        default=strip_default,
        help=f'Install stripped binaries (default: ${constants.ENV_INSTALL_STRIP}).')
    parser.add_argument(
        '--no-strip',
        action='store_false',
        dest='strip',
        help='Install unstripped binaries.')

    parser.add_argument(
        '-g', '--gcc-dir',
        metavar='DIR',
        help='Build with the GCC installed under DIR.')
    parser.add_argument(
        '--static-libstdc++',
        dest='static_libstdcxx',
        action='store_true',
        default=False,
        help='Link the C++ standard library statically.')
    parser.add_argument(
        '--old-host-toolchain',
        action='store_true',
        default=False,
        help='Allow building with an old host toolchain.')
    parser.add_argument(
        '--target',
        dest='targets',
        action='append',
        default=None,
        metavar='ARCH',
        help='LLVM target to build (repeatable, default: all).')

    for flag, dest, what in _PROJECT_TOGGLES:
        parser.add_argument(
            f'--enable-{flag}',
            dest=dest,
            action='store_true',
            default=(dest == 'openmp'),
            help=f'Build {what}.')
        parser.add_argument(
            f'--disable-{flag}',
            dest=dest,
            action='store_false',
            help=f'Do not build {what}.')

    parser.add_argument(
        '--other-as-runtimes',
        action='store_true',
        default=False,
        help='Build libc, openmp and libclc as runtimes.')
    parser.add_argument(
        '--other-as-projects',
        action='store_false',
        dest='other_as_runtimes',
        help='Build libc, openmp and libclc as projects (default).')

    for flag, dest, option in _TRISTATE_TOGGLES:
        parser.add_argument(
            f'--enable-{flag}',
            dest=dest,
            action='store_const',
            const=True,
            default=None,
            help=f'Set {option}=ON.')
        parser.add_argument(
            f'--disable-{flag}',
            dest=dest,
            action='store_const',
            const=False,
            help=f'Set {option}=OFF.')

    return parser


def load_config_file(parser: argparse.ArgumentParser, config_file: str) -> Dict[str, Any]:
    """Reads a YAML file of long option names and returns argparse defaults."""
    try:
        with open(config_file) as infile:
            data = yaml.safe_load(infile)
    except OSError as e:
        parser.error(f'cannot read {config_file}: {e.strerror}')
    except yaml.YAMLError as e:
        parser.error(f'invalid YAML in {config_file}: {e}')

    if data is None:
        return {}
    if not isinstance(data, dict):
        parser.error(f'{config_file} must contain a mapping of option names')

    # pylint: disable=protected-access
    known = parser._option_string_actions
    defaults: Dict[str, Any] = {}
    for key, value in data.items():
        action = known.get(f'--{key}')
        if action is None or key in ('config', 'help'):
            parser.error(f'unknown option in {config_file}: {key}')
        if action.nargs == 0:
            # Flags: 'enable-lldb: false' means the opposite of the flag.
            defaults[action.dest] = action.const if value else not action.const
        elif isinstance(action, argparse._AppendAction):
            values = value if isinstance(value, list) else [value]
            defaults[action.dest] = [str(v) for v in values]
        else:
            value = str(value)
            if action.type is not None:
                try:
                    value = action.type(value)
                except argparse.ArgumentTypeError as e:
                    parser.error(f'{key} in {config_file}: {e}')
            defaults[action.dest] = value
    return defaults


def parse_args(argv: Optional[Sequence[str]] = None,
               env: Optional[Mapping[str, str]] = None,
               cwd: Optional[str] = None) -> configs.Config:
    """Parses argv into a Config.

    Raises UsageError (after printing usage) on unknown flags, missing values
    or missing required options.
    """
    if argv is None:
        argv = sys.argv[1:]
    if env is None:
        env = os.environ

    parser = create_parser(env)
    config_file = _find_config_file(parser, argv)
    file_targets: List[str] = []
    if config_file:
        defaults = load_config_file(parser, config_file)
        # argparse appends to a list default, so --target replaces the file's list here.
        file_targets = defaults.pop('targets', [])
        parser.set_defaults(**defaults)
    args = parser.parse_args(argv)

    if not args.version:
        parser.error('no version specified')
    if not args.print_commit and not args.install_dir:
        parser.error('no installation directory specified')

    install_dir = None
    if args.install_dir:
        install_dir = Path(utils.absolute_path(args.install_dir, cwd))
    gcc_dir = Path(utils.absolute_path(args.gcc_dir, cwd)) if args.gcc_dir else None

    targets: List[str] = []
    for target in args.targets if args.targets is not None else file_targets:
        if target not in targets:
            targets.append(target)

    config = configs.Config(
        version=args.version,
        install_dir=install_dir,
        repo=args.repo,
        repo_url=args.repo_url,
        jobs=args.jobs,
        cleanup=args.cleanup,
        debug_level=args.debug_level,
        build_type=args.build_type,
        generator=args.generator,
        verbose_makefile=args.verbose_makefile,
        strip=args.strip,
        print_commit=args.print_commit,
        stop_after_fetch=args.stop_after_fetch,
        gcc_dir=gcc_dir,
        static_libstdcxx=args.static_libstdcxx,
        old_host_toolchain=args.old_host_toolchain,
        targets=tuple(targets),
        libc=args.libc,
        libcxx=args.libcxx,
        flang=args.flang,
        lldb=args.lldb,
        openmp=args.openmp,
        libclc=args.libclc,
        test_suite=args.test_suite,
        other_as_runtimes=args.other_as_runtimes,
        rtti=args.rtti,
        eh=args.eh,
        assertions=args.assertions,
        abi_linker_script=args.abi_linker_script,
        shared_libllvm=args.shared_libllvm,
    )
    logger().debug('Parsed config: %r', config)
    return config


def _find_config_file(parser: argparse.ArgumentParser, argv: Sequence[str]) -> Optional[str]:
    """Finds --config before the full parse so the file can supply defaults."""
    config_parser = _ArgumentParser(add_help=False, allow_abbrev=False, prog=parser.prog)
    config_parser.add_argument('--config')
    known, _ = config_parser.parse_known_args(list(argv))
    return known.config
