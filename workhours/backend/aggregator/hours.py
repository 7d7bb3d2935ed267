"""
勤務時間集計モジュール

記録リストに対する純粋関数のみ（副作用・キャッシュなし）
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Union
import logging

from ..records import ShiftRecord
from .month import MonthKey

logger = logging.getLogger(__name__)

ZERO_HOURS = Decimal("0.00")


@dataclass
class HoursSummary:
    """月次集計結果を格納するデータクラス"""
    month: MonthKey
    record_count: int = 0
    total_hours: Decimal = ZERO_HOURS
    records: List[ShiftRecord] = field(default_factory=list)

    def to_dict(self):
        """辞書形式に変換"""
        return {
            'month': str(self.month),
            'label': self.month.label,
            'record_count': self.record_count,
            'total_hours': f"{self.total_hours:.2f}"
        }


def sort_by_date(records: Iterable[ShiftRecord]) -> List[ShiftRecord]:
    """日付の昇順に並べ替え（同日の記録は元の順序を維持）"""
    return sorted(records, key=lambda r: r.date)


def filter_by_month(
    records: Iterable[ShiftRecord],
    month_key: Union[str, MonthKey]
) -> List[ShiftRecord]:
    """
    指定月の記録のみを抽出

    Args:
        records: 記録リスト
        month_key: 対象月

    Returns:
        List[ShiftRecord]: 対象月の記録（元の順序を維持）
    """
    month = MonthKey.parse(month_key)
    return [r for r in records if month.contains(r.date)]


def total_hours(records: Iterable[ShiftRecord]) -> Decimal:
    """勤務時間の合計（記録がなければ 0.00）"""
    return sum((r.duration for r in records), ZERO_HOURS)


def summarize(
    records: Iterable[ShiftRecord],
    month_key: Union[str, MonthKey]
) -> HoursSummary:
    """
    指定月の記録数・合計時間を集計

    Args:
        records: 記録リスト
        month_key: 対象月

    Returns:
        HoursSummary: 集計結果
    """
    month = MonthKey.parse(month_key)
    monthly = sort_by_date(filter_by_month(records, month))
    result = HoursSummary(
        month=month,
        record_count=len(monthly),
        total_hours=total_hours(monthly),
        records=monthly
    )
    logger.debug(f"{month.label}: {result.record_count}件 / {result.total_hours}時間")
    return result
