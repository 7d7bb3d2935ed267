"""
ファイル処理サービス
"""
import json
import os
from pathlib import Path
from typing import List, Optional
import logging

from ..records import PersistenceError, ShiftValidationError

logger = logging.getLogger(__name__)


class FileHandler:
    """
    ファイル処理クラス

    ユーザー・月ごとの記録ファイル（JSON）の読み書きを担当
    ファイル名をキーとしたフラットな保存領域として扱う
    """

    # JSONエンコーディング
    JSON_ENCODING = "utf-8"

    def __init__(self, data_dir: Path, encoding: Optional[str] = None):
        """
        Args:
            data_dir: 記録ファイル保存ディレクトリ
            encoding: ファイルエンコーディング（デフォルト: utf-8）
        """
        self.data_dir = Path(data_dir)
        self.encoding = encoding or self.JSON_ENCODING

    @staticmethod
    def record_file_name(user_name: str, month_key) -> str:
        """
        記録ファイル名を生成

        Args:
            user_name: ユーザー名
            month_key: 対象月（MM-yyyy 形式に変換できる値）

        Returns:
            str: ファイル名（例: Ana_03-2024.json）
        """
        return f"{user_name}_{month_key}.json"

    def path_for(self, file_name: str) -> Path:
        """
        保存ディレクトリ内のファイルパスを取得

        Raises:
            ShiftValidationError: パスが保存ディレクトリの外を指す場合
        """
        filepath = self.data_dir / file_name
        if filepath.resolve().parent != self.data_dir.resolve():
            raise ShiftValidationError(f"保存ディレクトリ外のファイル名です: {file_name!r}")
        return filepath

    def read_entries(self, file_name: str) -> List[dict]:
        """
        記録ファイルを読み込み

        ファイルが存在しない・読めない・JSONとして不正な場合は空リストを返す

        Args:
            file_name: ファイル名

        Returns:
            List[dict]: 記録の辞書リスト
        """
        filepath = self.path_for(file_name)
        if not filepath.exists():
            logger.info(f"記録ファイルなし（新規）: {filepath}")
            return []

        try:
            with open(filepath, "r", encoding=self.encoding) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"記録ファイルを読み込めません。空として扱います: {filepath} ({e})")
            return []

        if not isinstance(data, list):
            logger.warning(
                f"記録ファイルの形式が不正です（list以外: {type(data).__name__}）: {filepath}"
            )
            return []

        logger.info(f"記録ファイル読み込み: {filepath} ({len(data)}件)")
        return data

    def write_entries(self, file_name: str, entries: List[dict]) -> Path:
        """
        記録ファイルを丸ごと上書き保存

        一時ファイルに書き込んでから置き換えるため、途中で失敗しても既存ファイルは壊れない

        Args:
            file_name: ファイル名
            entries: 記録の辞書リスト

        Returns:
            Path: 保存先パス

        Raises:
            PersistenceError: 書き込みに失敗した場合
        """
        filepath = self.path_for(file_name)
        tmp_path = filepath.with_name(filepath.name + ".tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding=self.encoding) as f:
                json.dump(entries, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, filepath)
        except OSError as e:
            logger.error(f"記録ファイル保存エラー: {filepath} ({e})")
            raise PersistenceError(filepath, e) from e

        logger.info(f"記録ファイル保存: {filepath} ({len(entries)}件)")
        return filepath
