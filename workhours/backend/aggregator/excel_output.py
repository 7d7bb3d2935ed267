"""
Excel出力モジュール
月ごとの勤務記録をxlsxに変換する
"""
import io
import zipfile
import pandas as pd
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union
import logging

from openpyxl.styles import Font
from openpyxl.xml.constants import ARC_CORE
from openpyxl.xml.functions import tostring

from ..records import ShiftRecord
from .hours import summarize
from .month import MonthKey

logger = logging.getLogger(__name__)

# 出力列（永続化ファイルのフィールド順）
REPORT_COLUMNS = ["day", "date", "startTime", "endTime", "duration"]

# ブックの作成・更新日時とzipエントリの日時（固定値）
FIXED_TIMESTAMP = datetime(1980, 1, 1)
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


class ExcelExporter:
    """
    Excel出力クラス

    対象月の記録を日付順に1行ずつ出力し、最終行に合計時間を追加する

    使用例:
        exporter = ExcelExporter(records, user_name="Ana", month="03-2024")
        data = exporter.build_report()
        filepath = exporter.export(output_dir=Path.home() / "Downloads")
    """

    SHEET_NAME = "Work hours"
    SUMMARY_LABEL = "Total hours"

    def __init__(
        self,
        records: Iterable[ShiftRecord],
        user_name: str,
        month: Union[str, MonthKey],
        sheet_name: Optional[str] = None,
        summary_label: Optional[str] = None,
        header: bool = False
    ):
        """
        Args:
            records: 勤務記録（対象月以外を含んでもよい）
            user_name: ユーザー名（ファイル名に使用）
            month: 対象月
            sheet_name: シート名（デフォルト: Work hours）
            summary_label: 合計行のラベル（デフォルト: Total hours）
            header: Trueの場合、先頭行に列名を出力
        """
        self.user_name = user_name
        self.month = MonthKey.parse(month)
        self.sheet_name = sheet_name or self.SHEET_NAME
        self.summary_label = summary_label or self.SUMMARY_LABEL
        self.header = header
        self.summary = summarize(list(records), self.month)

        # ファイル名生成
        self.filename = f"{user_name}_{self.month.month_name}.xlsx"

    def build_frame(self) -> pd.DataFrame:
        """
        出力用データフレームを作成

        Returns:
            pd.DataFrame: 記録行 + 合計行
        """
        rows = [record.to_row() for record in self.summary.records]
        rows.append(
            [self.summary_label, f"{self.summary.total_hours:.2f}"]
            + [None] * (len(REPORT_COLUMNS) - 2)
        )
        return pd.DataFrame(rows, columns=REPORT_COLUMNS)

    def build_report(self) -> bytes:
        """
        xlsxのバイト列を作成

        同じ記録・対象月からは常に同じバイト列になる（日時は固定値で埋め込む）

        Returns:
            bytes: xlsxファイルの内容
        """
        df = self.build_frame()
        buffer = io.BytesIO()

        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=self.sheet_name, index=False, header=self.header)
            self._apply_styles(writer.sheets[self.sheet_name], len(df))
            book = writer.book

        # 保存時に更新日時が現在時刻で上書きされるため、コアプロパティは書き直す
        book.properties.created = FIXED_TIMESTAMP
        book.properties.modified = FIXED_TIMESTAMP
        data = self._normalize_package(buffer.getvalue(), tostring(book.properties.to_tree()))

        logger.info(
            f"Excel作成完了: {self.filename} "
            f"({self.summary.record_count}件, 合計 {self.summary.total_hours:.2f}時間)"
        )
        return data

    def export(self, output_dir: Path) -> Path:
        """
        Excelファイルを出力

        Args:
            output_dir: 出力ディレクトリ

        Returns:
            Path: 出力ファイルパス
        """
        output_dir = Path(output_dir)
        filepath = output_dir / self.filename
        logger.info(f"Excel出力開始: {filepath}")

        # 出力ディレクトリ作成
        output_dir.mkdir(parents=True, exist_ok=True)
        filepath.write_bytes(self.build_report())

        logger.info(f"Excel出力完了: {filepath}")
        return filepath

    @staticmethod
    def _normalize_package(data: bytes, core_xml: bytes) -> bytes:
        """zipエントリの日時を固定し、コアプロパティ（docProps/core.xml）を差し替える"""
        output = io.BytesIO()
        with zipfile.ZipFile(io.BytesIO(data)) as source, \
                zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as target:
            for item in source.infolist():
                content = core_xml if item.filename == ARC_CORE else source.read(item.filename)
                info = zipfile.ZipInfo(item.filename, date_time=ZIP_TIMESTAMP)
                info.compress_type = zipfile.ZIP_DEFLATED
                target.writestr(info, content)
        return output.getvalue()

    def _apply_styles(self, ws, row_count: int) -> None:
        """見出し行・合計行を太字にし、列幅を調整"""
        offset = 1 if self.header else 0
        if self.header:
            for cell in ws[1]:
                cell.font = Font(bold=True)

        for cell in ws[row_count + offset]:
            cell.font = Font(bold=True)

        # 列幅の自動調整
        for column in ws.columns:
            max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)
