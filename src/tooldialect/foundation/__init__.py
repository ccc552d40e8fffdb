"""Foundation layer: errors, logging and configuration."""

from tooldialect.foundation.config import (
    DialectSettings,
    ToolDialectConfig,
    get_config,
    load_config,
    load_declarations,
    reset_config,
)
from tooldialect.foundation.errors import (
    CapabilityError,
    DispatchError,
    ErrorCode,
    ToolDialectError,
)
from tooldialect.foundation.logging import configure_logging

__all__ = [
    "CapabilityError",
    "DialectSettings",
    "DispatchError",
    "ErrorCode",
    "ToolDialectConfig",
    "ToolDialectError",
    "configure_logging",
    "get_config",
    "load_config",
    "load_declarations",
    "reset_config",
]
