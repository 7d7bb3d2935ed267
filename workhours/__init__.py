"""
勤務時間記録システム
"""

__version__ = '1.0.0'
