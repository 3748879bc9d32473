# -*- coding: utf-8 -*-

"""Manages settings and config file.

Manages the settings of the library.
Settings are loaded from a configuration file. If they don't exists, default
values are provided.
When an option is set, the config file is updated.

Without call to ``load()``, all entries have their default value.
"""

import configparser
import logging
import os.path

from . import path as aplus_path

_logger = logging.getLogger(__name__)


# Default config dict. Values not present in this dict are not valid.
# Each entry contains the type expected, and the default value.
_default_config = {
    'debug_mode': {'type': bool, 'default': False},
    'log_levels': {'type': dict, 'default': {}},
    # Max number of callbacks executed by one call to Scheduler.run().
    # 0 means no limit.
    'scheduler_max_iterations': {'type': int, 'default': 0}
}

# Actual config parser
_config_parser = configparser.ConfigParser()
_config_parser.add_section('config')

_config_file_path = None


def _get_config_file_path():
    if _config_file_path:
        return _config_file_path
    return os.path.join(aplus_path.get_config_dir(), 'aplus.ini')


def load(file_path=None):
    """Find and load the config file.

    Args:
        file_path (str, optional): path of the config file. By default, the
            file 'aplus.ini' in the user config directory. The path is kept
            for later calls to ``set()``.
    """
    global _config_file_path

    if file_path:
        _config_file_path = file_path
    config_file_path = _get_config_file_path()

    if not _config_parser.read(config_file_path):
        _logger.warning('Unable to load config file: %s', config_file_path)


def get(key):
    """Find and return a configuration entry

    If the entry is not specified in the config file, a default value is
    returned.

    Args:
        key (string): the entry key.
    Returns:
        The corresponding value found.
    Raises:
        KeyError: if the config entry doesn't exists.
    """
    if key not in _default_config:
        raise KeyError(key)
    try:
        if _default_config[key]['type'] is bool:
            return _config_parser.getboolean('config', key)
        elif _default_config[key]['type'] is int:
            return _config_parser.getint('config', key)
        elif _default_config[key]['type'] is dict:
            # Dict entries are in the form 'key=value;key2=value2'
            dict_str = _config_parser.get('config', key)
            result = {}
            for pair in filter(None, dict_str.split(';')):
                try:
                    (k, v) = pair.split('=')
                    result[k.strip()] = v.strip()
                except ValueError:
                    _logger.warning('Unable to parse pair key=value: "%s"',
                                    pair)
            return result
        else:
            return _config_parser.get('config', key)
    except configparser.NoOptionError:
        return _default_config[key]['default']
    except ValueError:
        _logger.warning('Invalid value for config entry "%s". Default value '
                        'will be used.', key)
        return _default_config[key]['default']


def set(key, value):
    """Set a configuration entry.

    Args:
        key (string): the entry key.
        value: the new value to set. It will be converted to string. Dict
            values are converted in the form 'key=value;key2=value2'.
    Raises:
        KeyError: if the config entry is not valid.
    """
    if key not in _default_config:
        raise KeyError(key)
    if isinstance(value, dict):
        value = ';'.join('%s=%s' % item for item in sorted(value.items()))
    _config_parser.set('config', key, str(value))
    config_file_path = _get_config_file_path()
    try:
        with open(config_file_path, 'w') as config_file:
            _config_parser.write(config_file)
        _logger.debug('Config file modified.')
    except IOError:
        _logger.warning('Unable to write in the config file', exc_info=True)


def reset():
    """Forget all values set or loaded. Entries get back their defaults."""
    global _config_file_path

    _config_file_path = None
    _config_parser.remove_section('config')
    _config_parser.add_section('config')
