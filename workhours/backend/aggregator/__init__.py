"""
集計ロジック（月の切り替え・勤務時間集計・Excel出力）
"""

from .month import MonthKey, next_month, previous_month
from .hours import HoursSummary, filter_by_month, sort_by_date, summarize, total_hours
from .excel_output import ExcelExporter

__all__ = [
    'MonthKey',
    'next_month',
    'previous_month',
    'HoursSummary',
    'filter_by_month',
    'sort_by_date',
    'summarize',
    'total_hours',
    'ExcelExporter'
]
