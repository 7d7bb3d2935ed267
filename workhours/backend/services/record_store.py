"""
記録ストアサービス
ユーザー・月ごとの勤務記録の読み込み・追加・更新・削除
"""
from typing import List, Union
import logging

from ..aggregator.month import MonthKey
from ..records import (
    ShiftRecord,
    ShiftValidationError,
    RecordIndexError,
    RecordNotFoundError,
)
from .file_handler import FileHandler

logger = logging.getLogger(__name__)

# ファイル名に使えないユーザー名の文字列（パス区切り・親ディレクトリ・NUL）
INVALID_NAME_TOKENS = ("/", "\\", "..", "\0")


def _sorted(records: List[ShiftRecord]) -> List[ShiftRecord]:
    return sorted(records, key=lambda r: r.date)


class RecordStore:
    """
    記録ストアクラス

    (user_name, month) ごとに1ファイル。メモリ上の記録リストを保持し、
    変更のたびに日付順へ並べ替えてファイル全体を上書き保存する

    使用例:
        store = RecordStore(file_handler, "Ana", "03-2024")
        store.load()
        store.append(ShiftRecord.create("2024-03-05", "08:00", "16:30"))
    """

    def __init__(
        self,
        file_handler: FileHandler,
        user_name: str,
        month: Union[str, MonthKey]
    ):
        """
        Args:
            file_handler: ファイル処理サービス
            user_name: ユーザー名
            month: 対象月
        """
        user_name = (user_name or "").strip()
        if not user_name:
            raise ShiftValidationError("ユーザー名を入力してください")
        if any(token in user_name for token in INVALID_NAME_TOKENS):
            raise ShiftValidationError(f"ユーザー名に使用できない文字が含まれています: {user_name!r}")

        self.file_handler = file_handler
        self.user_name = user_name
        self.month = MonthKey.parse(month)
        self.records: List[ShiftRecord] = []

    @property
    def file_name(self) -> str:
        return self.file_handler.record_file_name(self.user_name, self.month)

    def load(self) -> List[ShiftRecord]:
        """
        記録ファイルを読み込み

        ファイルがない・壊れている場合は空リスト。不正な記録は警告を出してスキップする

        Returns:
            List[ShiftRecord]: 日付順の記録リスト
        """
        entries = self.file_handler.read_entries(self.file_name)

        records = []
        skipped = []
        for idx, entry in enumerate(entries):
            try:
                records.append(ShiftRecord.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                skipped.append((idx, str(e)))

        if skipped:
            logger.warning(f"不正な記録を{len(skipped)}件スキップしました: {self.file_name}")
            for idx, error in skipped:
                logger.warning(f"  - 記録 {idx}: {error}")

        self.records = _sorted(records)
        return list(self.records)

    def append(self, record: ShiftRecord) -> List[ShiftRecord]:
        """
        記録を追加して保存

        Args:
            record: 追加する記録

        Returns:
            List[ShiftRecord]: 更新後の記録リスト
        """
        self._check_month(record)
        updated = _sorted(self.records + [record])
        self._save(updated)
        logger.info(f"記録追加: {self.user_name} {record.date} ({record.duration}時間)")
        return list(self.records)

    def update(self, record_id: str, record: ShiftRecord) -> List[ShiftRecord]:
        """
        指定IDの記録を置き換えて保存（IDは引き継ぐ）

        Args:
            record_id: 置き換える記録のID
            record: 新しい記録

        Returns:
            List[ShiftRecord]: 更新後の記録リスト

        Raises:
            RecordNotFoundError: IDが存在しない場合
        """
        return self.update_at(self.index_of(record_id), record)

    def update_at(self, index: int, record: ShiftRecord) -> List[ShiftRecord]:
        """
        指定位置（日付順の全記録内）の記録を置き換えて保存

        Raises:
            RecordIndexError: 位置が範囲外の場合
        """
        self._check_index(index)
        self._check_month(record)
        current = self.records[index]
        replacement = ShiftRecord(
            record.date, record.start_time, record.end_time, record.duration,
            record_id=current.record_id
        )
        updated = list(self.records)
        updated[index] = replacement
        self._save(_sorted(updated))
        logger.info(f"記録更新: {self.user_name} {current.date} -> {replacement.date}")
        return list(self.records)

    def delete(self, record_id: str) -> List[ShiftRecord]:
        """
        指定IDの記録を削除して保存

        Raises:
            RecordNotFoundError: IDが存在しない場合
        """
        return self.delete_at(self.index_of(record_id))

    def delete_at(self, index: int) -> List[ShiftRecord]:
        """
        指定位置（日付順の全記録内）の記録を削除して保存

        Raises:
            RecordIndexError: 位置が範囲外の場合
        """
        self._check_index(index)
        removed = self.records[index]
        updated = self.records[:index] + self.records[index + 1:]
        self._save(updated)
        logger.info(f"記録削除: {self.user_name} {removed.date}")
        return list(self.records)

    def get(self, record_id: str) -> ShiftRecord:
        return self.records[self.index_of(record_id)]

    def index_of(self, record_id: str) -> int:
        for idx, record in enumerate(self.records):
            if record.record_id == record_id:
                return idx
        raise RecordNotFoundError(record_id)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.records):
            raise RecordIndexError(index, len(self.records))

    def _check_month(self, record: ShiftRecord) -> None:
        # 記録は自身の日付の月のファイルに保存する
        if not self.month.contains(record.date):
            raise ShiftValidationError(
                f"記録の日付 {record.date} は対象月 {self.month} に含まれません"
            )

    def _save(self, updated: List[ShiftRecord]) -> None:
        # 書き込みに失敗した場合はメモリ上の記録を変更しない（PersistenceErrorを送出）
        self.file_handler.write_entries(self.file_name, [r.to_dict() for r in updated])
        self.records = updated
