"""Dialect parsers.

Callers pick a dialect explicitly, by class or by id:

    >>> dialect = get_dialect("tagged")
    >>> system = dialect.build_system_message(registry)
    >>> response = await dialect.parse(model_text, "hermes-3", registry)
"""

from tooldialect.dialects.base import DialectParser
from tooldialect.dialects.fenced import FencedJSONDialect
from tooldialect.dialects.structured import StructuredCallDialect
from tooldialect.dialects.tagged import TaggedBlockDialect
from tooldialect.foundation.config import DialectSettings, ToolDialectConfig, get_config
from tooldialect.foundation.errors import ErrorCode, config_error

DIALECTS: dict[str, type[DialectParser]] = {
    cls.dialect_id: cls
    for cls in (TaggedBlockDialect, FencedJSONDialect, StructuredCallDialect)
}


def get_dialect(dialect_id: str, settings: DialectSettings | None = None) -> DialectParser:
    """Instantiate a dialect by id.

    Raises:
        ToolDialectError: CONFIG_UNKNOWN_DIALECT for an unregistered id
    """
    cls = DIALECTS.get(dialect_id)
    if cls is None:
        raise config_error(
            ErrorCode.CONFIG_UNKNOWN_DIALECT,
            dialect=dialect_id,
            available=", ".join(DIALECTS),
        )
    return cls(settings)


def dialect_from_config(
    dialect_id: str | None = None,
    config: ToolDialectConfig | None = None,
) -> DialectParser:
    """Instantiate a dialect with its configured settings.

    Falls back to the configured ``default_dialect`` when no id is given.
    """
    config = config or get_config()
    dialect_id = dialect_id or config.default_dialect
    return get_dialect(dialect_id, config.settings_for(dialect_id))


__all__ = [
    "DIALECTS",
    "DialectParser",
    "FencedJSONDialect",
    "StructuredCallDialect",
    "TaggedBlockDialect",
    "dialect_from_config",
    "get_dialect",
]
