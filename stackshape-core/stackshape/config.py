import logging
import os
from typing import Optional, Union

from stackshape.constants import FALSE_STRINGS, LOG_LEVELS, TRACE_LOG_LEVELS, TRUE_STRINGS


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Get the log type from environment variable"""
    log_type = os.environ.get(env_var_name, "").lower().strip()
    return log_type if log_type in LOG_LEVELS else False


def parse_boolean_env(env_var_name: str) -> Optional[bool]:
    """Parse the value of the given env variable and return True/False, or None if it is not a boolean value."""
    value = os.environ.get(env_var_name, "").lower().strip()
    if value in TRUE_STRINGS:
        return True
    if value in FALSE_STRINGS:
        return False
    return None


def is_env_true(env_var_name: str) -> bool:
    """Whether the given environment variable has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() in TRUE_STRINGS


def is_env_not_false(env_var_name: str) -> bool:
    """Whether the given environment variable is empty or has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() not in FALSE_STRINGS


# log level, e.g. "debug" or "trace"
STACKSHAPE_LOG = eval_log_type("STACKSHAPE_LOG")
DEBUG = is_env_true("DEBUG") or STACKSHAPE_LOG in TRACE_LOG_LEVELS

# whether ${Name} placeholders inside Fn::Sub strings count as references between elements
CFN_SCAN_SUB_REFERENCES = is_env_not_false("CFN_SCAN_SUB_REFERENCES")

# whether the DependsOn attribute of a resource adds edges to the dependency graph
CFN_DEPENDS_ON_EDGES = is_env_not_false("CFN_DEPENDS_ON_EDGES")


def is_trace_logging_enabled():
    if STACKSHAPE_LOG:
        log_level = str(STACKSHAPE_LOG).upper()
        return log_level.lower() in TRACE_LOG_LEVELS
    return False


# set log levels immediately, but will be overwritten later by setup_logging
if DEBUG:
    logging.getLogger("").setLevel(logging.DEBUG)
    logging.getLogger("stackshape").setLevel(logging.DEBUG)
