from pathlib import Path

import configs
from projects import ProjectSet, join, select_projects


def make_config(**kwargs):
    return configs.Config(version='17.0.0', install_dir=Path('/opt/clang'), **kwargs)


def test_defaults():
    project_set = select_projects(make_config())
    assert project_set.projects == (
        'clang', 'clang-tools-extra', 'compiler-rt', 'lld', 'polly', 'openmp')
    assert project_set.runtimes == ('libunwind',)
    assert project_set.targets == ()


def test_libcxx_and_lldb():
    project_set = select_projects(make_config(libcxx=True, lldb=True))
    assert project_set.projects == (
        'clang', 'clang-tools-extra', 'compiler-rt', 'lld', 'polly', 'lldb', 'openmp')
    assert project_set.runtimes == ('libcxx', 'libcxxabi', 'libunwind')


def test_everything_as_runtimes():
    config = make_config(flang=True, libc=True, libclc=True, test_suite=True,
                         libcxx=True, lldb=True, other_as_runtimes=True)
    project_set = select_projects(config)
    assert project_set.projects == (
        'clang', 'clang-tools-extra', 'compiler-rt', 'lld', 'polly',
        'flang', 'mlir', 'lldb', 'test-suite')
    assert project_set.runtimes == (
        'libcxx', 'libcxxabi', 'libunwind', 'libc', 'openmp', 'libclc')


def test_no_openmp():
    project_set = select_projects(make_config(openmp=False))
    assert 'openmp' not in project_set.projects
    assert 'openmp' not in project_set.runtimes


def test_targets_are_deduplicated():
    project_set = select_projects(make_config(targets=('X86', 'AArch64', 'X86')))
    assert project_set.targets == ('X86', 'AArch64')
    assert project_set.targets_str == 'X86;AArch64'


def test_serialization():
    assert join([]) == ''
    assert join(['clang']) == 'clang'
    assert join(['clang', 'lld']) == 'clang;lld'


def test_empty_lists_are_omitted_from_cmake_defines():
    project_set = ProjectSet(projects=('clang', 'lld'), runtimes=(), targets=())
    assert project_set.cmake_defines == [('LLVM_ENABLE_PROJECTS', 'clang;lld')]

    project_set = select_projects(make_config(targets=('X86',)))
    assert [key for key, _ in project_set.cmake_defines] == [
        'LLVM_ENABLE_PROJECTS', 'LLVM_ENABLE_RUNTIMES', 'LLVM_TARGETS_TO_BUILD']


def test_no_duplicates():
    config = make_config(flang=True, libc=True, libclc=True, test_suite=True,
                         libcxx=True, lldb=True)
    project_set = select_projects(config)
    for items in (project_set.projects, project_set.runtimes):
        assert len(items) == len(set(items))
