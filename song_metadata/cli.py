"""
コマンドラインエントリポイント。

`python -m song_metadata` / `song-metadata` / リポジトリ直下の main.py から実行する。
"""

import logging
import os
import sys
import traceback

from dotenv import find_dotenv, load_dotenv

from song_metadata.config import Settings, apply_env_overrides, load_settings
from song_metadata.generator import generate_metadata

logger = logging.getLogger("song_metadata")


def configure_logging() -> None:
    """
    ルートロガーを設定する。

    ログレベルは環境変数 LOG_LEVEL で指定する(デフォルト: INFO)。
    """
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def resolve_settings() -> Settings:
    """
    設定ファイルと環境変数から Settings を組み立てる。

    SETTINGS_PATH(デフォルト: "settings.yaml")が存在しない場合は既定値を用いる。
    """
    settings_path = os.environ.get("SETTINGS_PATH", "settings.yaml")
    if os.path.exists(settings_path):
        settings = load_settings(settings_path)
    else:
        logger.info("%s not found; using default settings", settings_path)
        settings = Settings()
    return apply_env_overrides(settings, os.environ)


def main():
    """
    曲メタデータ生成のメイン処理。
    以下の処理を順序実行する:
    1. .env を読み込み環境変数へ反映
    2. 設定ファイル・環境変数から設定を解決
    3. 入力CSVを読み込み、曲ごとのメタデータと集約ファイルを出力
    環境変数:
    - SETTINGS_PATH: 設定ファイルパス(デフォルト: "settings.yaml")
    - INPUT_CSV_PATH: 入力CSVファイルパス(設定ファイルの値を上書き)
    - OUTPUT_DIR: 出力ディレクトリ(設定ファイルの値を上書き)
    - METADATA_COLLECTIONS: 処理対象コレクションID(カンマ区切り)
    - LOG_LEVEL: ログレベル(デフォルト: INFO)
    処理の成功時はSUCCESS、失敗時は例外を発生させる。
    Raises:
        Exception: 処理中に任意のエラーが発生した場合。
                   ファイル書き込み失敗を含め、プロセスは異常終了する。
    """
    load_dotenv(find_dotenv(usecwd=True))
    configure_logging()

    try:
        settings = resolve_settings()
        result = generate_metadata(settings)

        if result.parse_warnings:
            logger.warning("%d rows were skipped", len(result.parse_warnings))
        logger.info(
            "metadata generated: %d songs, aggregate=%s",
            len(result.documents),
            result.aggregate_path,
        )

        print("SUCCESS")

    except Exception:
        err = traceback.format_exc()
        print(err, file=sys.stderr)
        raise


if __name__ == "__main__":
    main()
