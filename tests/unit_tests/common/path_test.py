#!/usr/bin/env python
# -*- coding: utf-8 -*-

import logging
import os
from os.path import exists, isdir

from aplus.common import path
from aplus.common.path import _ensure_dir_exists

"""### TEST CASES ###
    _ensure_dir_exists, dir exists
    _ensure_dir_exists, dir does not exist, allow to create
    _ensure_dir_exists, path is a file
    get_config_dir, get_log_dir
"""


class TestEnsureDirExists(object):

    def test_dir_already_exists(self, tmpdir, caplog):
        with caplog.at_level(logging.DEBUG, logger='aplus'):
            _ensure_dir_exists(str(tmpdir))
        assert caplog.text == ''

    def test_dir_does_not_exist(self, tmpdir):
        new_dir = str(tmpdir.join('a', 'b'))
        _ensure_dir_exists(new_dir)
        assert isdir(new_dir)

    def test_path_is_a_file(self, tmpdir, caplog):
        file_path = tmpdir.join('file')
        file_path.write('content')

        _ensure_dir_exists(str(file_path))
        assert 'Unable to create the missing folder' in caplog.text


class TestDirectories(object):

    def test_config_and_log_dirs(self, tmpdir, monkeypatch):
        class FakeAppDirs(object):
            user_config_dir = str(tmpdir.join('config'))
            user_log_dir = str(tmpdir.join('log'))

        monkeypatch.setattr(path, '_appdirs', FakeAppDirs())

        assert path.get_config_dir() == FakeAppDirs.user_config_dir
        assert path.get_log_dir() == FakeAppDirs.user_log_dir
        assert exists(os.path.join(str(tmpdir), 'config'))
        assert exists(os.path.join(str(tmpdir), 'log'))
