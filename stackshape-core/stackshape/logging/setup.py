import logging
import sys

from stackshape import config

from .format import AddFormattedAttributes, DefaultFormatter

# default levels of loggers that are too chatty on DEBUG
default_log_levels = {
    "stackshape.engine.nodes": logging.INFO,
    "stackshape.engine.parsing": logging.INFO,
}

trace_log_levels = {
    "stackshape.engine.nodes": logging.DEBUG,
    "stackshape.engine.parsing": logging.DEBUG,
}


def get_log_level_from_config():
    # overriding the log level if STACKSHAPE_LOG has been set
    if config.STACKSHAPE_LOG:
        log_level = str(config.STACKSHAPE_LOG).upper()
        if config.is_trace_logging_enabled():
            log_level = "DEBUG"
        if log_level == "WARN":
            log_level = "WARNING"
        return logging.getLevelName(log_level)

    return logging.DEBUG if config.DEBUG else logging.INFO


def setup_logging_from_config():
    """
    Configures logging from $STACKSHAPE_LOG and $DEBUG. Applications embedding stackshape call this once at startup,
    importing the library installs no handlers.
    """
    log_level = get_log_level_from_config()
    setup_logging(log_level)

    if config.is_trace_logging_enabled():
        for name, level in trace_log_levels.items():
            logging.getLogger(name).setLevel(level)


def create_default_handler(log_level: int):
    log_handler = logging.StreamHandler(stream=sys.stderr)
    log_handler.setLevel(log_level)
    log_handler.setFormatter(DefaultFormatter())
    log_handler.addFilter(AddFormattedAttributes())
    return log_handler


def setup_logging(log_level=logging.INFO) -> None:
    """
    Configures the python logging environment for stackshape.

    :param log_level: the optional log level.
    """
    # set create a default handler for the root logger (basically logging.basicConfig but explicit)
    log_handler = create_default_handler(log_level)

    # replace any existing handlers
    logging.basicConfig(level=log_level, handlers=[log_handler], force=True)

    # set log levels of loggers
    logging.root.setLevel(log_level)
    logging.getLogger("stackshape").setLevel(log_level)
    for logger, level in default_log_levels.items():
        logging.getLogger(logger).setLevel(max(level, log_level))
