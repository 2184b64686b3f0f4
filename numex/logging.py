import logging
import os
from logging import getLogger

log = getLogger('numex')
logging.basicConfig(format='[numex] %(message)s')

LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


def has_env(varname, value='true', environ=None):
    """
    Check environment variable is set.
    """
    environ = os.environ if environ is None else environ
    return environ.get(varname, '').lower() == value


def level_from_env(environ=None) -> int:
    """
    Logging level selected by the DEBUG or NUMEX_LOG environment variables.

    Defaults to CRITICAL, which silences the package logger.
    """
    environ = os.environ if environ is None else environ
    if has_env('DEBUG', environ=environ):
        return logging.DEBUG
    name = environ.get('NUMEX_LOG', '').lower()
    return LEVELS.get(name, logging.CRITICAL)


log.setLevel(level_from_env())
