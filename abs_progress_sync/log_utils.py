"""
Tagged logging helpers.

Messages keep the "[TAG] message" shape used across the player add-ons and
are routed through the standard logging module so a host application can
attach its own handlers.
"""
import logging

LOGGER_NAME = 'abs_progress_sync'

LOGDEBUG = logging.DEBUG
LOGINFO = logging.INFO
LOGWARNING = logging.WARNING
LOGERROR = logging.ERROR

_logger = logging.getLogger(LOGGER_NAME)
_logger.addHandler(logging.NullHandler())


def log(msg, level=LOGDEBUG):
    """Write a message to the package logger"""
    _logger.log(level, msg)


def log_exception(msg):
    """Log an error together with the active traceback"""
    _logger.exception(msg)


def mask_token(token):
    """Shorten a bearer token so it can appear in logs"""
    if not token:
        return '<unset>'
    if len(token) <= 8:
        return '***'
    return f"{token[:4]}...{token[-4:]}"
