# -*- coding: utf-8 -*-

import os

from pledge.common import path


class FakeAppDirs(object):
    def __init__(self, root):
        self.user_config_dir = os.path.join(root, 'config')
        self.user_log_dir = os.path.join(root, 'log')


class TestPath(object):

    def test_get_config_dir_create_folder(self, tmpdir, monkeypatch):
        monkeypatch.setattr(path, '_appdirs', FakeAppDirs(str(tmpdir)))

        config_dir = path.get_config_dir()
        assert config_dir == os.path.join(str(tmpdir), 'config')
        assert os.path.isdir(config_dir)

        # A second call with an existing folder works.
        assert path.get_config_dir() == config_dir

    def test_get_log_dir_create_folder(self, tmpdir, monkeypatch):
        monkeypatch.setattr(path, '_appdirs', FakeAppDirs(str(tmpdir)))

        log_dir = path.get_log_dir()
        assert log_dir == os.path.join(str(tmpdir), 'log')
        assert os.path.isdir(log_dir)

    def test_unable_to_create_folder(self, tmpdir, monkeypatch, caplog):
        blocking_file = tmpdir.join('file')
        blocking_file.write('')
        monkeypatch.setattr(path, '_appdirs',
                            FakeAppDirs(str(blocking_file)))

        path.get_log_dir()
        assert 'Unable to create the missing folder' in caplog.text
