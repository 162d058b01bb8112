"""
設定ファイル(settings.yaml)の読み込み処理を提供するモジュール。

settings.yaml からメタデータ生成に必要な各種設定を読み込み、
アプリ内で扱いやすい dataclass に変換する。
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Tuple

import yaml

from song_metadata.errors import ConfigError
from song_metadata.metadata import DEFAULT_ATTRIBUTE_TRAITS


@dataclass(frozen=True)
class OutputConfig:
    """
    出力先設定。

    Attributes:
        dir: 出力ディレクトリ。
        file_extension: 曲ごとのメタデータファイルに付与する拡張子(例: ".json")。
        aggregate_file_name: パース結果全体を書き出すファイル名。
        json_indent: JSONのインデント幅。None の場合は1行で出力する。
    """

    dir: str = "metadata"
    file_extension: str = ""
    aggregate_file_name: str = "test.json"
    json_indent: Optional[int] = None


@dataclass(frozen=True)
class Settings:
    """
    アプリケーション全体設定。

    Attributes:
        input_csv_path: 入力CSVファイルパス。
        csv_encoding: 入力CSVの文字コード。
        csv_errors: デコードできないバイトの扱い(open() の errors 引数)。
        output: 出力先設定。
        collections: 処理対象のコレクションID。None の場合は全コレクション。
        attribute_traits: attributes に付与する列名(順序どおりに出力される)。
    """

    input_csv_path: str = "data/metadata.csv"
    csv_encoding: str = "utf-8-sig"
    csv_errors: str = "replace"
    output: OutputConfig = field(default_factory=OutputConfig)
    collections: Optional[Tuple[str, ...]] = None
    attribute_traits: Tuple[str, ...] = DEFAULT_ATTRIBUTE_TRAITS


def _str_tuple(value, key: str) -> Tuple[str, ...]:
    """YAMLのリスト値を文字列タプルに変換する。"""
    if not isinstance(value, list):
        raise ConfigError(f"{key} must be a list: {value!r}")
    return tuple(str(v).strip() for v in value)


def _parse_indent(value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"output.json_indent must be an integer or null: {value!r}")
    return value


def load_settings(path: str) -> Settings:
    """
    settings.yaml を読み込み Settings に変換する。

    省略されたキーは Settings の既定値を用いる。

    Args:
        path: settings.yaml のファイルパス。

    Returns:
        Settingsオブジェクト。

    Raises:
        FileNotFoundError: 設定ファイルが存在しない場合。
        yaml.YAMLError: YAMLのパースに失敗した場合。
        ConfigError: collections / attribute_traits がリストでない場合など、値の形式が不正な場合。
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"settings must be a mapping: {path}")

    defaults = Settings()
    output_data = data.get("output") or {}
    if not isinstance(output_data, dict):
        raise ConfigError(f"output must be a mapping: {output_data!r}")

    collections = data.get("collections")
    traits = data.get("attribute_traits")

    return Settings(
        input_csv_path=str(data.get("input_csv_path", defaults.input_csv_path)),
        csv_encoding=str(data.get("csv_encoding", defaults.csv_encoding)),
        csv_errors=str(data.get("csv_errors", defaults.csv_errors)),
        output=OutputConfig(
            dir=str(output_data.get("dir", defaults.output.dir)),
            file_extension=str(output_data.get("file_extension") or ""),
            aggregate_file_name=str(
                output_data.get("aggregate_file_name", defaults.output.aggregate_file_name)
            ),
            json_indent=_parse_indent(output_data.get("json_indent")),
        ),
        collections=None if collections is None else _str_tuple(collections, "collections"),
        attribute_traits=(
            defaults.attribute_traits if traits is None else _str_tuple(traits, "attribute_traits")
        ),
    )


def apply_env_overrides(settings: Settings, environ: Mapping[str, str]) -> Settings:
    """
    環境変数で設定値を上書きした Settings を返す。

    対応する環境変数:
    - INPUT_CSV_PATH: 入力CSVファイルパス
    - OUTPUT_DIR: 出力ディレクトリ
    - METADATA_COLLECTIONS: 処理対象コレクションID(カンマ区切り)

    Args:
        settings: 元の設定。
        environ: 環境変数(通常は os.environ)。

    Returns:
        上書き後の Settings。
    """
    input_csv_path = environ.get("INPUT_CSV_PATH")
    if input_csv_path:
        settings = replace(settings, input_csv_path=input_csv_path)

    output_dir = environ.get("OUTPUT_DIR")
    if output_dir:
        settings = replace(settings, output=replace(settings.output, dir=output_dir))

    collections = environ.get("METADATA_COLLECTIONS")
    if collections:
        ids = tuple(c.strip() for c in collections.split(",") if c.strip())
        settings = replace(settings, collections=ids or None)

    return settings
