# src/tracelog/core/logging/
# ├─ __init__.py            # public API: initialize, get_logger, finalize, ContextLogger, AccessLogMiddleware
# ├─ levels.py              # LogLevel + should_emit()
# ├─ fields.py              # Field, encode_fields(), Cloud Logging payload helpers
# ├─ correlation.py         # trace/span/user/scope extraction (+ contextvar helpers)
# ├─ pipeline.py            # ContextLogger: leveled + structured calls, access-log entry point
# ├─ http.py                # HTTPRecord, format_duration()
# ├─ sink.py                # Sink protocol, LoggingSink over stdlib logging
# ├─ builder.py             # make_dict_config(config), initialize() / finalize()
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # FieldsFilter, RedactFilter
# ├─ handlers.py            # console / rotating-file handler factories
# ├─ middleware.py          # Starlette access-log middleware
# └─ shortcuts.py           # module-level info()/errorw()/... bound to get_logger()


from .levels import LogLevel, should_emit
from .fields import Field, encode_fields
from .correlation import (
    CorrelationContext,
    CorrelationExtractor,
    OtelTraceProvider,
    bind_correlation,
    get_scope,
    get_user_id,
    reset_scope,
    reset_user_id,
    set_scope,
    set_user_id,
)
from .http import HTTPRecord, format_duration
from .sink import LoggingSink, Sink
from .pipeline import ContextLogger
from .builder import finalize, get_logger, initialize, make_dict_config
from .middleware import AccessLogMiddleware

__all__ = [
    "LogLevel",
    "should_emit",
    "Field",
    "encode_fields",
    "CorrelationContext",
    "CorrelationExtractor",
    "OtelTraceProvider",
    "bind_correlation",
    "set_user_id",
    "reset_user_id",
    "get_user_id",
    "set_scope",
    "reset_scope",
    "get_scope",
    "HTTPRecord",
    "format_duration",
    "Sink",
    "LoggingSink",
    "ContextLogger",
    "initialize",
    "get_logger",
    "finalize",
    "make_dict_config",
    "AccessLogMiddleware",
]
