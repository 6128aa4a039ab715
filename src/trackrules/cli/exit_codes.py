"""Process exit codes shared by every trackrules command.

Codes are grouped by decade: 1x for bad input or configuration, 4x for
failures while doing the work. Click's own usage errors keep exit code 2.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    INTERRUPTED = 130

    RULES_VALIDATION_ERROR = 10
    CONFIG_ERROR = 11
    INVALID_INPUT = 12

    OPERATION_FAILED = 40
    SERVER_ERROR = 41
