"""
アプリケーション設定
"""
import os
from pathlib import Path


class Config:
    """アプリケーション設定クラス"""

    # サーバー設定
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 8080))
    DEBUG = os.getenv('DEBUG', 'false').lower() == 'true'

    # パス設定
    DATA_DIR = Path(os.getenv('WORKHOURS_DATA_DIR', Path.home() / '.workhours'))
    OUTPUT_DIR = Path(os.getenv('WORKHOURS_OUTPUT_DIR', Path.home() / 'Downloads'))

    # ファイルエンコーディング
    JSON_ENCODING = 'utf-8'

    # Excel出力設定
    SHEET_NAME = 'Work hours'
    SUMMARY_LABEL = 'Total hours'
    EXPORT_HEADER = False


class DevelopmentConfig(Config):
    """開発環境設定"""
    DEBUG = True


class ProductionConfig(Config):
    """本番環境設定"""
    DEBUG = False


# 設定マッピング
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config():
    """現在の設定を取得"""
    env = os.getenv('FLASK_ENV', 'development')
    return config.get(env, config['default'])
