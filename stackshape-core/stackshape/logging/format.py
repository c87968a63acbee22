"""
Formatting of stackshape log records.

Engine modules attach the template location a message is about with ``extra={TEMPLATE_PATH_LOG_ATTRIBUTE: path}``.
``AddFormattedAttributes`` renders that location, so a log line ends with e.g. ``(at Resources.Topic)``.
"""

import logging
from functools import lru_cache

from stackshape.constants import TEMPLATE_PATH_LOG_ATTRIBUTE
from stackshape.engine.paths import format_path

MAX_NAME_LEN = 26

LOG_FORMAT = f"%(asctime)s.%(msecs)03d %(ss_level)5s %(ss_name)-{MAX_NAME_LEN}s : %(message)s%(ss_path)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

CUSTOM_LEVEL_NAMES = {
    logging.CRITICAL: "FATAL",
    logging.WARNING: "WARN",
}


class DefaultFormatter(logging.Formatter):
    def __init__(self, fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT):
        super().__init__(fmt=fmt, datefmt=datefmt)


class AddFormattedAttributes(logging.Filter):
    """
    Filter that adds the attributes ``LOG_FORMAT`` refers to:

    - ss_level: the level name, at most 5 characters long (``WARN``, ``FATAL``)
    - ss_name: the logger name compressed to ``max_name_len``, e.g. ``s.engine.graph``
    - ss_path: `` (at <path>)`` for records carrying a template path, otherwise empty
    """

    def __init__(self, max_name_len: int = None):
        super().__init__()
        self.max_name_len = max_name_len or MAX_NAME_LEN

    def filter(self, record):
        record.ss_level = CUSTOM_LEVEL_NAMES.get(record.levelno, record.levelname)
        record.ss_name = self._compress(record.name)
        path = getattr(record, TEMPLATE_PATH_LOG_ATTRIBUTE, None)
        record.ss_path = f" (at {format_path(path)})" if path is not None else ""
        return True

    @lru_cache(maxsize=256)
    def _compress(self, name):
        return compress_logger_name(name, self.max_name_len)


def compress_logger_name(name: str, length: int) -> str:
    """
    Shortens a dotted logger name to at most ``length`` characters where possible. All parts start out abbreviated
    to their first letter and are written out from the right for as long as they fit, so ``my.very.long.logger.name``
    with length 17 becomes ``m.v.l.logger.name``. If not even the last part fits, it is cut.
    """
    if len(name) <= length:
        return name

    parts = name.split(".")
    result = [part[0] for part in parts]
    used = 2 * len(parts) - 1

    for index in reversed(range(len(parts))):
        grown = used + len(parts[index]) - 1
        if grown > length:
            if index == len(parts) - 1:
                result[index] = parts[index][: max(length - used, 0) + 1]
            break
        result[index] = parts[index]
        used = grown

    return ".".join(result)
