"""
アプリケーション起動スクリプト

使い方:
    # APIサーバー起動
    python -m workhours.run serve --port 8080

    # 記録追加・一覧・削除
    python -m workhours.run add --user Ana --date 2024-03-05 --start 08:00 --end 16:30
    python -m workhours.run list --user Ana --month 03-2024
    python -m workhours.run delete --user Ana --month 03-2024 <記録ID>

    # Excel出力
    python -m workhours.run export --user Ana --month 03-2024 --output ./exports
"""
import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path

from .backend.aggregator import MonthKey
from .backend.records import WorkHoursError
from .backend.services import FileHandler, WorkLog
from .config import get_config


def _month_type(value):
    try:
        return MonthKey.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def create_parser():
    """コマンドライン引数のパーサーを作成"""
    cfg = get_config()

    parser = argparse.ArgumentParser(
        prog='workhours',
        description='勤務時間記録システム'
    )
    parser.add_argument(
        '--data-dir',
        type=Path,
        default=Path(cfg.DATA_DIR),
        help=f'記録ファイル保存ディレクトリ（デフォルト: {cfg.DATA_DIR}）'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='詳細ログを出力'
    )
    subparsers = parser.add_subparsers(dest='command')

    serve = subparsers.add_parser('serve', help='APIサーバーを起動')
    serve.add_argument(
        '--port', '-p',
        type=int,
        default=int(os.getenv('PORT', 8080)),
        help='サーバーポート番号（デフォルト: 8080）'
    )
    serve.add_argument(
        '--host',
        type=str,
        default=os.getenv('HOST', '127.0.0.1'),
        help='ホストアドレス（デフォルト: 127.0.0.1）'
    )
    serve.add_argument(
        '--debug',
        action='store_true',
        help='デバッグモードで起動'
    )

    add = subparsers.add_parser('add', help='記録を追加')
    add.add_argument('--user', required=True, help='ユーザー名')
    add.add_argument('--date', required=True, help='勤務日（yyyy-MM-dd）')
    add.add_argument('--start', required=True, help='開始時刻（HH:mm）')
    add.add_argument('--end', required=True, help='終了時刻（HH:mm）')

    for name, help_text in (('list', '対象月の記録を表示'), ('export', '対象月をExcel出力')):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('--user', required=True, help='ユーザー名')
        sub.add_argument('--month', type=_month_type, help='対象月（MM-yyyy、デフォルト: 今月）')
        if name == 'export':
            sub.add_argument(
                '--output',
                type=Path,
                default=Path(cfg.OUTPUT_DIR),
                help=f'出力ディレクトリ（デフォルト: {cfg.OUTPUT_DIR}）'
            )
            sub.add_argument('--header', action='store_true', help='先頭行に列名を出力')

    delete = subparsers.add_parser('delete', help='記録を削除')
    delete.add_argument('--user', required=True, help='ユーザー名')
    delete.add_argument('--month', type=_month_type, help='対象月（MM-yyyy、デフォルト: 今月）')
    delete.add_argument('record_id', help='記録ID')

    return parser


def serve(args):
    """APIサーバー起動"""
    os.environ['PORT'] = str(args.port)
    os.environ['HOST'] = args.host
    if args.debug:
        os.environ['DEBUG'] = 'true'

    from .backend.api import create_app
    app = create_app()

    print(f"""
============================================================
  勤務時間記録システム
============================================================
  サーバー起動中...
  URL: http://{args.host}:{args.port}

  停止するには Ctrl+C を押してください
============================================================
    """)

    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


def print_records(work_log, month):
    summary = work_log.summary(month)
    print(f"\n{work_log.user_name} - {month.label}")
    print("-" * 60)
    for record in summary.records:
        data = record.to_dict()
        print(
            f"  {data['day']:<10} {data['date']}  {data['startTime']} - {data['endTime']}"
            f"  ({data['duration']} h)  [{record.record_id}]"
        )
    print("-" * 60)
    print(f"  合計: {summary.total_hours:.2f} h ({summary.record_count}件)\n")


def main(argv=None):
    """メイン関数"""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command is None:
        parser.print_help()
        return 1
    if args.command == 'serve':
        return serve(args)

    work_log = WorkLog(args.user, FileHandler(args.data_dir))
    month = getattr(args, 'month', None) or MonthKey.from_date(date.today())

    try:
        if args.command == 'add':
            record = work_log.add(args.date, args.start, args.end)
            print(f"記録を追加しました: {record.date} {record.duration} h [{record.record_id}]")
            print_records(work_log, MonthKey.from_date(record.date))
        elif args.command == 'list':
            print_records(work_log, month)
        elif args.command == 'delete':
            work_log.remove(month, args.record_id)
            print(f"記録を削除しました: {args.record_id}")
            print_records(work_log, month)
        elif args.command == 'export':
            exporter = work_log.exporter(month, header=args.header)
            filepath = exporter.export(args.output)
            print(f"Excelを出力しました: {filepath}")

    except WorkHoursError as e:
        print(f"エラー: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
