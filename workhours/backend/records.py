"""
勤務記録（ShiftRecord）モデルと例外定義
"""
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

# 永続化ファイルの書式
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

# 曜日名（ロケール非依存）
WEEKDAY_NAMES = [
    "Monday", "Tuesday", "Wednesday", "Thursday",
    "Friday", "Saturday", "Sunday"
]

HUNDREDTHS = Decimal("0.01")


class WorkHoursError(Exception):
    """勤務記録処理の基底例外"""


class ShiftValidationError(WorkHoursError, ValueError):
    """入力値が不正な場合の例外（記録は作成・保存されない）"""


class RecordNotFoundError(WorkHoursError, LookupError):
    """指定IDの記録が存在しない場合の例外"""
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"記録が見つかりません: {record_id}")


class RecordIndexError(WorkHoursError, IndexError):
    """位置指定が範囲外の場合の例外"""
    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"位置 {index} は範囲外です（記録数: {size}件）")


class PersistenceError(WorkHoursError):
    """記録ファイルの書き込みに失敗した場合の例外"""
    def __init__(self, path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"記録ファイルの保存に失敗しました: {path} ({cause})")


def parse_date(value: Union[str, date]) -> date:
    """yyyy-MM-dd 文字列（またはdate）をdateに変換"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError:
        raise ShiftValidationError(f"日付の形式が不正です（yyyy-MM-dd）: {value!r}")


def parse_time(value: Union[str, time]) -> time:
    """HH:mm 文字列（またはtime）をtimeに変換（秒以下は切り捨て）"""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    try:
        return datetime.strptime(str(value).strip(), TIME_FORMAT).time()
    except ValueError:
        raise ShiftValidationError(f"時刻の形式が不正です（HH:mm）: {value!r}")


def compute_duration(start_time: time, end_time: time) -> Decimal:
    """
    勤務時間（時間単位、小数2桁）を計算

    Args:
        start_time: 開始時刻
        end_time: 終了時刻

    Returns:
        Decimal: 勤務時間

    Raises:
        ShiftValidationError: 終了時刻が開始時刻以前の場合
    """
    start_minutes = start_time.hour * 60 + start_time.minute
    end_minutes = end_time.hour * 60 + end_time.minute
    if end_minutes <= start_minutes:
        raise ShiftValidationError(
            f"終了時刻は開始時刻より後である必要があります: "
            f"{start_time.strftime(TIME_FORMAT)} - {end_time.strftime(TIME_FORMAT)}"
        )
    hours = Decimal(end_minutes - start_minutes) / Decimal(60)
    return hours.quantize(HUNDREDTHS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ShiftRecord:
    """
    1日分の勤務記録

    編集時は新しいインスタンスで丸ごと置き換える。
    day は date から導出され、duration は作成時に計算した値をそのまま保持する。
    """
    date: date
    start_time: time
    end_time: time
    duration: Decimal
    record_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    day: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "day", WEEKDAY_NAMES[self.date.weekday()])

    @classmethod
    def create(
        cls,
        record_date: Union[str, date],
        start_time: Union[str, time],
        end_time: Union[str, time],
        record_id: Optional[str] = None
    ) -> "ShiftRecord":
        """
        入力値を検証して新しい記録を作成

        Args:
            record_date: 勤務日
            start_time: 開始時刻
            end_time: 終了時刻
            record_id: 既存記録の更新時に引き継ぐID

        Returns:
            ShiftRecord: 作成した記録

        Raises:
            ShiftValidationError: 入力値が不正な場合
        """
        record_date = parse_date(record_date)
        start = parse_time(start_time)
        end = parse_time(end_time)
        duration = compute_duration(start, end)
        if record_id:
            return cls(record_date, start, end, duration, record_id=record_id)
        return cls(record_date, start, end, duration)

    @property
    def hours(self) -> float:
        return float(self.duration)

    def to_dict(self) -> dict:
        """永続化用の辞書形式に変換"""
        return {
            "id": self.record_id,
            "day": self.day,
            "date": self.date.strftime(DATE_FORMAT),
            "startTime": self.start_time.strftime(TIME_FORMAT),
            "endTime": self.end_time.strftime(TIME_FORMAT),
            "duration": f"{self.duration:.2f}",
        }

    def to_row(self) -> list:
        """出力用の行（day, date, startTime, endTime, duration）"""
        data = self.to_dict()
        return [data["day"], data["date"], data["startTime"], data["endTime"], data["duration"]]

    @classmethod
    def from_dict(cls, data: dict) -> "ShiftRecord":
        """
        永続化された辞書から記録を復元

        duration は保存値をそのまま使い、時刻の前後関係は再検証しない。
        id を持たない旧形式のデータには新しいIDを割り当てる。
        """
        try:
            duration = Decimal(str(data["duration"]))
        except (ArithmeticError, ValueError) as e:
            raise ShiftValidationError(f"勤務時間の値が不正です: {data.get('duration')!r}") from e
        if not duration.is_finite():
            raise ShiftValidationError(f"勤務時間の値が不正です: {data.get('duration')!r}")
        duration = duration.quantize(HUNDREDTHS, rounding=ROUND_HALF_UP)
        record_date = parse_date(data["date"])
        start = parse_time(data["startTime"])
        end = parse_time(data["endTime"])
        record_id = data.get("id")
        if record_id:
            return cls(record_date, start, end, duration, record_id=str(record_id))
        return cls(record_date, start, end, duration)
