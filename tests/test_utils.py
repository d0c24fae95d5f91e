import os
from pathlib import Path

import pytest

from errors import PreconditionError
import utils


def test_isabspath():
    assert utils.isabspath('/opt/clang')
    assert not utils.isabspath('opt/clang')
    assert not utils.isabspath('./clang')
    assert not utils.isabspath('')


def test_absolute_path_rewrites_relative_paths():
    assert utils.absolute_path('install', cwd='/home/me') == '/home/me/install'
    assert utils.absolute_path('../x', cwd='/home/me') == '/home/me/../x'
    assert utils.absolute_path('/opt/clang', cwd='/home/me') == '/opt/clang'


def test_parse_bool():
    assert utils.parse_bool('1')
    assert utils.parse_bool(' Yes ')
    assert utils.parse_bool('true')
    assert not utils.parse_bool('0')
    assert not utils.parse_bool('no')
    assert not utils.parse_bool(None)
    assert utils.parse_bool('', default=True)


def test_list2cmdline_quotes_arguments():
    assert utils.list2cmdline(['cmake', Path('/a b'), '-DX=1;2']) == "cmake '/a b' '-DX=1;2'"


def test_create_script(tmp_path):
    script = tmp_path / 'run.sh'
    utils.create_script(script, ['cmake', '-G', 'Unix Makefiles'])
    assert script.read_text() == "#!/bin/sh\ncmake -G 'Unix Makefiles' \"$@\"\n"
    assert script.stat().st_mode & 0o111


def test_absolute_path_without_working_directory(monkeypatch):
    def getcwd():
        raise FileNotFoundError(2, 'No such file or directory')

    monkeypatch.setattr(os, 'getcwd', getcwd)
    with pytest.raises(PreconditionError):
        utils.absolute_path('x')
    assert utils.absolute_path('/x') == '/x'
