"""
Flask APIエンドポイント
"""
from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from pathlib import Path
import io
import logging
from datetime import date, datetime

from .aggregator import MonthKey
from .records import (
    PersistenceError,
    RecordIndexError,
    RecordNotFoundError,
    ShiftValidationError,
)
from .services import FileHandler, WorkLog

# ロギング設定
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def create_app(config=None):
    """
    Flaskアプリケーションファクトリ

    Args:
        config: 設定オブジェクト

    Returns:
        Flask: アプリケーションインスタンス
    """
    app = Flask(__name__)

    # CORS設定（フロントエンドからのアクセス許可）
    CORS(app, origins=["http://localhost:*", "http://127.0.0.1:*"])

    # 設定読み込み
    if config is None:
        from ..config import get_config
        config = get_config()
    app.config.from_object(config)

    # ディレクトリ設定
    app.config.setdefault('DATA_DIR', Path.home() / '.workhours')
    app.config.setdefault('OUTPUT_DIR', Path.home() / 'Downloads')
    app.config.setdefault('JSON_ENCODING', 'utf-8')
    app.config.setdefault('SHEET_NAME', 'Work hours')
    app.config.setdefault('SUMMARY_LABEL', 'Total hours')
    app.config.setdefault('EXPORT_HEADER', False)

    # サービス初期化
    file_handler = FileHandler(
        Path(app.config['DATA_DIR']),
        encoding=app.config['JSON_ENCODING']
    )

    def _work_log(user_name):
        return WorkLog(user_name, file_handler)

    def _month_arg(value):
        # 未指定の場合は今月
        if not value:
            return MonthKey.from_date(date.today())
        return MonthKey.parse(value)

    def _error(message, status):
        return jsonify({'status': 'error', 'message': message}), status

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """ヘルスチェック"""
        return jsonify({'status': 'ok', 'timestamp': datetime.now().isoformat()})

    @app.route('/api/config', methods=['GET'])
    def get_app_config():
        """設定情報取得"""
        current = MonthKey.from_date(date.today())
        return jsonify({
            'current_month': str(current),
            'current_label': current.label,
            'sheet_name': app.config['SHEET_NAME'],
            'summary_label': app.config['SUMMARY_LABEL']
        })

    @app.route('/api/months/<month>/navigate', methods=['GET'])
    def navigate_month(month):
        """前月・翌月の取得"""
        try:
            step = request.args.get('step', 1, type=int)
            target = MonthKey.parse(month).shift(step)
            return jsonify({
                'status': 'success',
                'month': str(target),
                'label': target.label
            })
        except ValueError as e:
            return _error(str(e), 400)

    @app.route('/api/records', methods=['GET'])
    def list_records():
        """対象月の記録一覧と合計時間"""
        try:
            month = _month_arg(request.args.get('month'))
            work_log = _work_log(request.args.get('user'))
            summary = work_log.summary(month)

            return jsonify({
                'status': 'success',
                'records': [r.to_dict() for r in summary.records],
                'summary': summary.to_dict()
            })

        except ValueError as e:
            logger.error(f"バリデーションエラー: {e}")
            return _error(str(e), 400)
        except Exception as e:
            logger.error(f"記録取得エラー: {e}")
            return _error(str(e), 500)

    @app.route('/api/records', methods=['POST'])
    def add_record():
        """記録追加"""
        try:
            data = request.get_json(silent=True) or {}
            work_log = _work_log(data.get('user'))
            record = work_log.add(
                data.get('date'),
                data.get('start_time'),
                data.get('end_time')
            )
            month = MonthKey.from_date(record.date)

            return jsonify({
                'status': 'success',
                'record': record.to_dict(),
                'summary': work_log.summary(month).to_dict()
            }), 201

        except ShiftValidationError as e:
            logger.error(f"バリデーションエラー: {e}")
            return _error(str(e), 400)
        except PersistenceError as e:
            logger.error(f"保存エラー: {e}")
            return _error(str(e), 500)
        except Exception as e:
            logger.error(f"記録追加エラー: {e}")
            return _error(str(e), 500)

    @app.route('/api/records/<record_id>', methods=['PUT'])
    def update_record(record_id):
        """記録更新"""
        try:
            data = request.get_json(silent=True) or {}
            work_log = _work_log(data.get('user'))
            record = work_log.edit(
                _month_arg(data.get('month')),
                record_id,
                data.get('date'),
                data.get('start_time'),
                data.get('end_time')
            )

            return jsonify({'status': 'success', 'record': record.to_dict()})

        except (RecordNotFoundError, RecordIndexError) as e:
            return _error(str(e), 404)
        except ValueError as e:
            logger.error(f"バリデーションエラー: {e}")
            return _error(str(e), 400)
        except PersistenceError as e:
            logger.error(f"保存エラー: {e}")
            return _error(str(e), 500)
        except Exception as e:
            logger.error(f"記録更新エラー: {e}")
            return _error(str(e), 500)

    @app.route('/api/records/<record_id>', methods=['DELETE'])
    def delete_record(record_id):
        """記録削除"""
        try:
            month = _month_arg(request.args.get('month'))
            work_log = _work_log(request.args.get('user'))
            work_log.remove(month, record_id)

            return jsonify({
                'status': 'success',
                'summary': work_log.summary(month).to_dict()
            })

        except (RecordNotFoundError, RecordIndexError) as e:
            return _error(str(e), 404)
        except ValueError as e:
            logger.error(f"バリデーションエラー: {e}")
            return _error(str(e), 400)
        except PersistenceError as e:
            logger.error(f"保存エラー: {e}")
            return _error(str(e), 500)
        except Exception as e:
            logger.error(f"記録削除エラー: {e}")
            return _error(str(e), 500)

    @app.route('/api/export', methods=['GET'])
    def export_records():
        """Excelファイルダウンロード"""
        try:
            month = _month_arg(request.args.get('month'))
            work_log = _work_log(request.args.get('user'))
            exporter = work_log.exporter(
                month,
                sheet_name=app.config['SHEET_NAME'],
                summary_label=app.config['SUMMARY_LABEL'],
                header=app.config['EXPORT_HEADER']
            )

            return send_file(
                io.BytesIO(exporter.build_report()),
                mimetype=XLSX_MIMETYPE,
                as_attachment=True,
                download_name=exporter.filename
            )

        except ValueError as e:
            logger.error(f"バリデーションエラー: {e}")
            return _error(str(e), 400)
        except Exception as e:
            logger.error(f"Excel出力エラー: {e}")
            return _error(str(e), 500)

    return app
