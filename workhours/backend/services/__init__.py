"""
ビジネスロジックサービス
"""

from .file_handler import FileHandler
from .record_store import RecordStore
from .work_log import WorkLog

__all__ = ['FileHandler', 'RecordStore', 'WorkLog']
