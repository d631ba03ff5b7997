"""
Class registry specific codes (7xxxx).
"""
from __future__ import annotations

from enum import IntEnum


class ClassCode(IntEnum):
    NOT_AUTHORIZED = 70100
    CLASS_NOT_FOUND = 70101
    INVALID_PRICE = 70102
    INVALID_DURATION = 70103
    INVALID_TITLE = 70104
    INVALID_START_TIME = 70105
    CLASS_INACTIVE = 70106
    MAX_CLASSES_EXCEEDED = 70107
    INVALID_CAPACITY = 70108
    INVALID_STATUS = 70111
    PAST_START_TIME = 70112
    NOT_INSTRUCTOR = 70113
    MAX_REGISTRATIONS = 70114
    INVALID_DESCRIPTION = 70115
    MAX_INSTRUCTOR_CLASSES_EXCEEDED = 70116
    INVALID_RECIPIENT = 70117
