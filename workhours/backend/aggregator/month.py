"""
対象月（MonthKey）モジュール
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Union

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December"
]

_MONTH_KEY_PATTERN = re.compile(r"^\s*(\d{1,2})-(\d{4})\s*$")


@dataclass(frozen=True, order=True)
class MonthKey:
    """
    年月キー（記録ファイルの区切り単位）

    文字列表現は MM-yyyy（例: 03-2024）

    使用例:
        month = MonthKey.parse("12-2024")
        month.next()  # MonthKey(year=2025, month=1)
    """
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"月は1〜12で指定してください: {self.month}")

    @classmethod
    def parse(cls, value: Union[str, "MonthKey"]) -> "MonthKey":
        """MM-yyyy 文字列からMonthKeyを生成"""
        if isinstance(value, MonthKey):
            return value
        match = _MONTH_KEY_PATTERN.match(str(value))
        if not match:
            raise ValueError(f"対象月の形式が不正です（MM-yyyy）: {value!r}")
        return cls(year=int(match.group(2)), month=int(match.group(1)))

    @classmethod
    def from_date(cls, value: date) -> "MonthKey":
        return cls(year=value.year, month=value.month)

    def contains(self, value: date) -> bool:
        """日付がこの月に含まれるか"""
        return value.year == self.year and value.month == self.month

    def shift(self, months: int) -> "MonthKey":
        """指定月数だけ前後に移動（年をまたぐ場合も考慮）"""
        index = self.year * 12 + (self.month - 1) + months
        return MonthKey(year=index // 12, month=index % 12 + 1)

    def next(self) -> "MonthKey":
        return self.shift(1)

    def previous(self) -> "MonthKey":
        return self.shift(-1)

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def label(self) -> str:
        """表示用ラベル（例: March 2024）"""
        return f"{self.month_name} {self.year}"

    def __str__(self) -> str:
        return f"{self.month:02d}-{self.year:04d}"


def next_month(month_key: Union[str, MonthKey]) -> MonthKey:
    return MonthKey.parse(month_key).next()


def previous_month(month_key: Union[str, MonthKey]) -> MonthKey:
    return MonthKey.parse(month_key).previous()
