import os

import pytest

import build_clang
from conftest import COMMIT


def session_dirs(tmp_base):
    return list(tmp_base.iterdir())


def test_release_build(fake_run, clean_env, tmp_path, capsys):
    install_dir = tmp_path / 'install'
    install_dir.mkdir()
    status = build_clang.main(['-d', str(install_dir), '-v', '14.0.0-rc1',
                               '--enable-libcxx', '-j', '2'])
    assert status == 0
    tools = [cmd[0] for cmd in fake_run.commands]
    assert tools == ['wget', 'tar', 'cmake', 'cmake', 'cmake']
    assert fake_run.commands[0][-1].endswith('/llvmorg-14.0.0-rc1/llvm-project-14.0.0rc1.src.tar.xz')
    assert '-DLLVM_ENABLE_RUNTIMES=libcxx;libcxxabi;libunwind' in fake_run.commands[2]
    assert fake_run.commands[3][-2:] == ['-j', '2']
    assert session_dirs(clean_env) == []
    assert not (install_dir / '.version').exists()

    out = capsys.readouterr().out
    for banner in ('CONFIGURATION', 'DOWNLOAD', 'CONFIGURE', 'BUILD', 'INSTALL', 'SUMMARY'):
        assert banner in out
    assert 'release identifier: 14.0.0rc1 (release candidate)' in out


def test_repo_build_writes_version_marker(fake_run, clean_env, tmp_path):
    install_dir = tmp_path / 'install'
    install_dir.mkdir()
    status = build_clang.main(['-d', str(install_dir), '-v', 'main', '--repo', '--strip'])
    assert status == 0
    assert [cmd[:2] for cmd in fake_run.commands[:4]] == [
        ['git', 'clone'], ['git', 'checkout'], ['git', 'rev-parse'], ['git', 'log']]
    assert fake_run.commands[-1][-1] == 'install/strip'
    assert (install_dir / '.version').read_text() == COMMIT + '\n'


def test_no_cleanup_keeps_the_skeleton(fake_run, clean_env, tmp_path):
    status = build_clang.main(['-d', str(tmp_path / 'install'), '-v', '17.0.0',
                               '--no-cleanup'])
    assert status == 0
    (root,) = session_dirs(clean_env)
    assert sorted(p.name for p in root.iterdir()) == ['archives', 'build', 'git', 'src']


def test_stop_after_fetch_keeps_the_source(fake_run, clean_env, tmp_path, capsys):
    status = build_clang.main(['-d', str(tmp_path / 'install'), '-v', '17.0.0', '-s'])
    assert status == 0
    assert [cmd[0] for cmd in fake_run.commands] == ['wget', 'tar']
    assert len(session_dirs(clean_env)) == 1
    assert 'Stopping after fetch' in capsys.readouterr().out


def test_failure_exits_1_and_cleans_up(fake_run, clean_env, tmp_path, capsys):
    fake_run.fail_when(lambda cmd: cmd[0] == 'cmake' and '-j' in cmd)
    status = build_clang.main(['-d', str(tmp_path / 'install'), '-v', '17.0.0'])
    assert status == 1
    assert 'ERROR: build failed' in capsys.readouterr().err
    assert session_dirs(clean_env) == []


def test_missing_version_exits_2(fake_run, clean_env, tmp_path, capsys):
    status = build_clang.main(['-d', str(tmp_path / 'install')])
    assert status == 2
    assert 'no version specified' in capsys.readouterr().out
    assert fake_run.commands == []
    assert session_dirs(clean_env) == []


def test_print_commit(fake_run, clean_env, capsys):
    fake_run.outputs['git ls-remote'] = f'{COMMIT}\trefs/heads/main\n'
    status = build_clang.main(['--print-commit', '--repo', '-v', 'main'])
    assert status == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [COMMIT]
    assert session_dirs(clean_env) == []


@pytest.mark.parametrize('argv', [['--bogus'], ['-d']])
def test_usage_errors_exit_2(fake_run, clean_env, argv):
    assert build_clang.main(argv) == 2


def test_unresolvable_working_directory_exits_1(fake_run, clean_env, monkeypatch, capsys):
    def getcwd():
        raise FileNotFoundError(2, 'No such file or directory')

    monkeypatch.setattr(os, 'getcwd', getcwd)
    assert build_clang.main(['-d', 'relative', '-v', '17.0.0']) == 1
    assert 'ERROR: cannot resolve relative' in capsys.readouterr().err
    assert fake_run.commands == []
