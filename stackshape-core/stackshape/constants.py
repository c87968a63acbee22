import stackshape

# stackshape version
VERSION = stackshape.__version__

# strings to indicate truthy/falsy values
TRUE_STRINGS = ("1", "true", "True")
FALSE_STRINGS = ("0", "false", "False")
# strings with valid log levels for STACKSHAPE_LOG
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")

# trace log level, configurable via $STACKSHAPE_LOG
LOG_TRACE = "trace"
TRACE_LOG_LEVELS = [LOG_TRACE]

# top-level template sections
SECTION_PARAMETERS = "Parameters"
SECTION_RESOURCES = "Resources"
SECTION_OUTPUTS = "Outputs"
SECTION_MAPPINGS = "Mappings"
SECTION_CONDITIONS = "Conditions"

# pseudo section that built-in parameters (AWS::Region, AWS::StackName, ...) are bound to
SECTION_PSEUDO_PARAMETERS = "PseudoParameters"

# name prefix of the built-in pseudo parameters
PSEUDO_PARAMETER_PREFIX = "AWS::"

# log record attribute (set through ``extra``) holding the template path a message is about
TEMPLATE_PATH_LOG_ATTRIBUTE = "template_path"
