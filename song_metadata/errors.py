"""
アプリケーション固有の例外定義モジュール。

CSV読み込み、設定読み込み、メタデータ出力などの処理で発生する例外を
分類して扱うために、基底例外および派生例外を定義する。
"""


class SongMetadataError(Exception):
    """メタデータ生成システム全体の基底例外。"""


class ConfigError(SongMetadataError):
    """設定ファイルの値が想定する型・形式を満たさない場合の例外。"""


class CsvFormatError(SongMetadataError):
    """CSVのヘッダに必須列(Collection/SongId)が存在しない場合の例外。"""


class CollectionNotFoundError(SongMetadataError):
    """処理対象として指定されたコレクションがCSVに存在しない場合の例外。"""


class OutputWriteError(SongMetadataError):
    """メタデータファイルの書き込みに失敗した場合の例外。"""
