"""Native module - stdlib logging interception"""

from logbus.native.message_handler import (
    InterceptingHandler,
    LoggingInterceptor,
    OwnRecordFilter,
    level_from_stdlib,
)

__all__ = ["InterceptingHandler", "LoggingInterceptor", "OwnRecordFilter", "level_from_stdlib"]
