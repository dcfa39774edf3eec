"""
Process-wide configuration, read once from environment variables at import time.

The engine itself never consults the environment. Only the construction helpers in
``sfnmock.services.stepfunctions.factory`` and the logging setup read these values.
"""

import os
from typing import Union

from sfnmock.constants import (
    AWS_REGION_US_EAST_1,
    BACKEND_MOCK,
    BACKENDS,
    DEFAULT_AWS_ACCOUNT_ID,
    FALSE_STRINGS,
    LOG_LEVELS,
    TRACE_LOG_LEVELS,
    TRUE_STRINGS,
)


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Get the log type from environment variable"""
    sfn_log = os.environ.get(env_var_name, "").lower().strip()
    return sfn_log if sfn_log in LOG_LEVELS else False


def is_env_true(env_var_name: str) -> bool:
    """Whether the given environment variable has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() in TRUE_STRINGS


def is_env_not_false(env_var_name: str) -> bool:
    """Whether the given environment variable is empty or has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() not in FALSE_STRINGS


def eval_int(env_var_name: str, default: int) -> int:
    value = os.environ.get(env_var_name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {env_var_name} must be an integer, got '{value}'")


def eval_backend(env_var_name: str) -> str:
    backend = os.environ.get(env_var_name, "").lower().strip() or BACKEND_MOCK
    if backend not in BACKENDS:
        raise ValueError(
            f"Environment variable {env_var_name} must be one of {', '.join(BACKENDS)}, got '{backend}'"
        )
    return backend


# log level, one of LOG_LEVELS
SFN_LOG = eval_log_type("SFN_LOG")
DEBUG = is_env_true("DEBUG") or SFN_LOG in TRACE_LOG_LEVELS

# which backend serves the operations: "mock" (in-memory) or "live" (forwarded to AWS)
SFN_BACKEND = eval_backend("SFN_BACKEND")

# page size used by list operations when the caller omits maxResults
SFN_DEFAULT_PAGE_SIZE = eval_int("SFN_DEFAULT_PAGE_SIZE", 100)

# whether a page token is only accepted by the query that issued it
SFN_STRICT_PAGE_TOKENS = is_env_not_false("SFN_STRICT_PAGE_TOKENS")

# whether stores accept region names unknown to botocore
SFN_ALLOW_NONSTANDARD_REGIONS = is_env_true("SFN_ALLOW_NONSTANDARD_REGIONS")

# defaults for the request context
DEFAULT_REGION = os.environ.get("DEFAULT_REGION") or AWS_REGION_US_EAST_1
DEFAULT_ACCOUNT_ID = os.environ.get("DEFAULT_ACCOUNT_ID") or DEFAULT_AWS_ACCOUNT_ID

# endpoint the live backend talks to, defaults to the public AWS endpoint
AWS_ENDPOINT_URL = os.environ.get("AWS_ENDPOINT_URL") or None


def is_trace_logging_enabled():
    return bool(SFN_LOG) and SFN_LOG in TRACE_LOG_LEVELS
