from enum import Enum

class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    STORE_UNAVAILABLE = "store_unavailable"

    def __str__(self):
        return self.value


class TaskFilter(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    ALL = "all"

    def __str__(self):
        return self.value


class AlarmType(str, Enum):
    VIBRATION = "vibration"
    FLASH = "flash"
    BOTH = "both"

    def __str__(self):
        return self.value


class AlarmErrorCode(str, Enum):
    INVALID_ALARM_TYPE = "INVALID_ALARM_TYPE"
    INVALID_CONFIG = "INVALID_CONFIG"
    ALARM_ALREADY_ACTIVE = "ALARM_ALREADY_ACTIVE"
    PARTIAL_FAILURE = "PARTIAL_FAILURE"
    DEVICE_ERROR = "DEVICE_ERROR"

    def __str__(self):
        return self.value
