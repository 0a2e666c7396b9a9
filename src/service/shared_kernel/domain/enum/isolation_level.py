"""
Transaction isolation levels selectable per booking attempt.

Values match the form/JSON selector used by the demo page
('ReadUncommitted', 'ReadCommitted', ...). SQL spellings such as
'read committed' or 'REPEATABLE_READ' are accepted too.
"""

from enum import StrEnum

from src.platform.logging.loguru_io import Logger


class IsolationLevel(StrEnum):
    READ_UNCOMMITTED = 'ReadUncommitted'
    READ_COMMITTED = 'ReadCommitted'
    REPEATABLE_READ = 'RepeatableRead'
    SERIALIZABLE = 'Serializable'

    @property
    def sql_name(self) -> str:
        return _SQL_NAMES[self]

    @classmethod
    def default(cls) -> 'IsolationLevel':
        return cls.READ_COMMITTED

    @classmethod
    def from_sql_name(cls, sql_name: str) -> 'IsolationLevel':
        """Map a `SHOW transaction_isolation` value back to the enum."""
        for level, name in _SQL_NAMES.items():
            if name.lower() == sql_name.strip().lower():
                return level
        raise ValueError(f'Unknown SQL isolation level: {sql_name!r}')

    @classmethod
    def parse(cls, raw: 'str | IsolationLevel | None') -> 'IsolationLevel':
        """
        Unrecognized or missing input falls back to READ_COMMITTED.

        The fallback is logged as a warning so a typo in the selector never
        silently changes what the demo is showing.
        """
        if isinstance(raw, IsolationLevel):
            return raw
        key = _normalize(raw or '')
        level = _ALIASES.get(key)
        if level is None:
            Logger.base.warning(
                f'⚠️  Unrecognized isolation level {raw!r}, defaulting to {cls.default().value}'
            )
            return cls.default()
        return level


_SQL_NAMES: dict[IsolationLevel, str] = {
    IsolationLevel.READ_UNCOMMITTED: 'READ UNCOMMITTED',
    IsolationLevel.READ_COMMITTED: 'READ COMMITTED',
    IsolationLevel.REPEATABLE_READ: 'REPEATABLE READ',
    IsolationLevel.SERIALIZABLE: 'SERIALIZABLE',
}


def _normalize(raw: str) -> str:
    return ''.join(ch for ch in raw.lower() if ch.isalpha())


_ALIASES: dict[str, IsolationLevel] = {_normalize(level.value): level for level in IsolationLevel}
