# default encoding used to convert strings to bytes
DEFAULT_ENCODING = "utf-8"

# strings representing boolean values in environment variables
TRUE_STRINGS = ("1", "true", "True")
FALSE_STRINGS = ("0", "false", "False")

# log levels accepted by SFN_LOG
SFN_LOG_TRACE = "trace"
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")
TRACE_LOG_LEVELS = [SFN_LOG_TRACE]

# AWS defaults used when no explicit account or region is given
AWS_REGION_US_EAST_1 = "us-east-1"
DEFAULT_AWS_ACCOUNT_ID = "000000000000"

# name of the emulated service, as used by botocore
SERVICE_NAME = "stepfunctions"

# identifiers of the available backends
BACKEND_MOCK = "mock"
BACKEND_LIVE = "live"
BACKENDS = (BACKEND_MOCK, BACKEND_LIVE)
