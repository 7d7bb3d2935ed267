"""
勤務時間記録バックエンド
"""

from .records import (
    ShiftRecord,
    WorkHoursError,
    ShiftValidationError,
    RecordNotFoundError,
    RecordIndexError,
    PersistenceError,
)

__all__ = [
    'ShiftRecord',
    'WorkHoursError',
    'ShiftValidationError',
    'RecordNotFoundError',
    'RecordIndexError',
    'PersistenceError'
]
