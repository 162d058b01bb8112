"""
メタデータJSONのファイル出力処理。
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional

from song_metadata.errors import OutputWriteError


def song_output_path(output_dir: str, collection_id: str, song_id: str, extension: str = "") -> str:
    """
    曲ごとのメタデータ出力パス `<output_dir>/<collection_id>/<song_id><extension>` を返す。
    """
    return os.path.join(output_dir, collection_id, f"{song_id}{extension}")


def write_json(path: str, payload: Any, indent: Optional[int] = None) -> None:
    """
    payload をJSON文字列にシリアライズしてファイルへ書き込む。

    親ディレクトリが存在しない場合は作成する。

    Args:
        path: 出力ファイルパス。
        payload: JSONシリアライズ可能なオブジェクト。
        indent: JSONのインデント幅。None の場合は1行で出力する。

    Raises:
        OutputWriteError: ディレクトリ作成またはファイル書き込みに失敗した場合。
    """
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as file_obj:
            json.dump(payload, file_obj, ensure_ascii=False, indent=indent)
    except OSError as e:
        raise OutputWriteError(f"Failed to write {path} ({e})") from e
