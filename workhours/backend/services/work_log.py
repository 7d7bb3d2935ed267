"""
勤務ログサービス
ユーザー単位で記録を月ごとのストアに振り分ける
"""
from datetime import date, time
from typing import List, Union
import logging

from ..aggregator import ExcelExporter, HoursSummary, MonthKey, summarize
from ..records import ShiftRecord
from .file_handler import FileHandler
from .record_store import RecordStore

logger = logging.getLogger(__name__)


class WorkLog:
    """
    勤務ログクラス

    記録は勤務日の月のファイル（{user}_{MM-yyyy}.json）に保存する。
    日付・対象月は常に引数で受け取り、現在日時は参照しない

    使用例:
        log = WorkLog("Ana", FileHandler(Path("data")))
        log.add("2024-03-05", "08:00", "16:30")
        log.summary("03-2024").total_hours  # Decimal('8.50')
    """

    def __init__(self, user_name: str, file_handler: FileHandler):
        """
        Args:
            user_name: ユーザー名
            file_handler: ファイル処理サービス
        """
        self.user_name = (user_name or "").strip()
        self.file_handler = file_handler

    def store(self, month: Union[str, MonthKey]) -> RecordStore:
        """対象月のストアを読み込んで返す"""
        store = RecordStore(self.file_handler, self.user_name, month)
        store.load()
        return store

    def records(self, month: Union[str, MonthKey]) -> List[ShiftRecord]:
        return self.store(month).records

    def add(
        self,
        record_date: Union[str, date],
        start_time: Union[str, time],
        end_time: Union[str, time]
    ) -> ShiftRecord:
        """
        記録を作成して勤務日の月のファイルに追加

        Returns:
            ShiftRecord: 作成した記録

        Raises:
            ShiftValidationError: 入力値が不正な場合（何も保存されない）
        """
        record = ShiftRecord.create(record_date, start_time, end_time)
        self.store(MonthKey.from_date(record.date)).append(record)
        return record

    def edit(
        self,
        month: Union[str, MonthKey],
        record_id: str,
        record_date: Union[str, date],
        start_time: Union[str, time],
        end_time: Union[str, time]
    ) -> ShiftRecord:
        """
        記録を編集

        勤務日が別の月に変わる場合は、元の月から削除して新しい月に追加する（IDは維持）

        Args:
            month: 記録が現在保存されている月
            record_id: 記録ID

        Returns:
            ShiftRecord: 編集後の記録

        Raises:
            ShiftValidationError: 入力値が不正な場合
            RecordNotFoundError: IDが存在しない場合
        """
        record = ShiftRecord.create(record_date, start_time, end_time, record_id=record_id)
        source = self.store(month)
        target_month = MonthKey.from_date(record.date)

        if target_month == source.month:
            source.update(record_id, record)
            return record

        source.get(record_id)
        self.store(target_month).append(record)
        source.delete(record_id)
        logger.info(f"記録を移動: {source.month} -> {target_month} ({record_id})")
        return record

    def remove(self, month: Union[str, MonthKey], record_id: str) -> List[ShiftRecord]:
        return self.store(month).delete(record_id)

    def summary(self, month: Union[str, MonthKey]) -> HoursSummary:
        month = MonthKey.parse(month)
        return summarize(self.records(month), month)

    def exporter(self, month: Union[str, MonthKey], **options) -> ExcelExporter:
        return ExcelExporter(self.records(month), self.user_name, month, **options)
