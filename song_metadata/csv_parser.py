"""
CSVパーサ。

曲メタデータCSV(1行目がヘッダ)を読み込み、
Collection -> SongId -> 行データ の2階層辞書へ変換する責務を持つ。

想定仕様:
- ヘッダに Collection / SongId 列が必須
- 同一の (Collection, SongId) が複数回現れた場合は後の行で上書きする
- 列数がヘッダより少ない行は不足列を None として取り込む
- 行単位のエラーは警告として記録し、その行をスキップして処理を続行する
- デコードできないバイトは U+FFFD に置換する
- キーの並びは整数形式のIDを昇順で先頭に、それ以外を出現順で後ろに置く
"""

from __future__ import annotations

import csv
import logging
import re
from typing import Dict, List, Optional, TypeVar

from song_metadata.errors import CsvFormatError
from song_metadata.models import (
    COLUMN_COLLECTION,
    COLUMN_SONG_ID,
    ParsedIndex,
    ParseResult,
    RowWarning,
)

logger = logging.getLogger(__name__)

_INDEX_KEY_RE = re.compile(r"0|[1-9][0-9]*")
_MAX_INDEX_KEY = 2**32 - 2

V = TypeVar("V")


def _is_index_key(key: str) -> bool:
    """先頭ゼロの無い10進整数表記(例: 0, 12)で 2**32-2 以下のキーかを判定する。"""
    return bool(_INDEX_KEY_RE.fullmatch(key)) and int(key) <= _MAX_INDEX_KEY


def order_keys(mapping: Dict[str, V]) -> Dict[str, V]:
    """
    整数形式のキーを数値の昇順で先頭に、それ以外のキーを挿入順で後ろに並べ替えた辞書を返す。

    例: {"10": a, "x": b, "2": c} -> {"2": c, "10": a, "x": b}
    """
    index_keys: List[str] = sorted((k for k in mapping if _is_index_key(k)), key=int)
    other_keys = [k for k in mapping if not _is_index_key(k)]
    return {k: mapping[k] for k in index_keys + other_keys}


def _order_index(index: ParsedIndex) -> ParsedIndex:
    return {c: order_keys(songs) for c, songs in order_keys(index).items()}


def _row_error(record: Dict[Optional[str], object]) -> Optional[str]:
    """
    行データの不備を検査し、エラーメッセージを返す。

    csv.DictReader は列数が多い行の余剰値を None キーに格納する。
    列数が少ない行の不足値は None のまま取り込むため、エラーとしない。

    Args:
        record: csv.DictReader が返す1行分の辞書。

    Returns:
        エラーメッセージ。問題がなければ None。
    """
    if None in record:
        return "row has more fields than the header"

    if not (record.get(COLUMN_COLLECTION) or "").strip():
        return f"{COLUMN_COLLECTION} is empty"
    if not (record.get(COLUMN_SONG_ID) or "").strip():
        return f"{COLUMN_SONG_ID} is empty"

    return None


def _warn(result: ParseResult, line_number: int, message: str) -> None:
    logger.warning("Skipping row at line %d: %s", line_number, message)
    result.warnings.append(RowWarning(line_number=line_number, message=message))


def parse_csv(path: str, encoding: str = "utf-8-sig", errors: str = "replace") -> ParseResult:
    """
    CSVファイルを読み込み、コレクション・曲ID単位の2階層辞書を返す。

    ファイル全体を読み終えてから結果を返す。

    Args:
        path: 入力CSVファイルパス。
        encoding: CSVの文字コード。既定はBOM付きUTF-8にも対応する utf-8-sig。
        errors: デコードエラー時の扱い(open() の errors 引数)。既定は置換文字へ置き換える。

    Returns:
        ParseResult。index は collection -> song_id -> {列名: 値}。

    Raises:
        FileNotFoundError: CSVファイルが存在しない場合。
        CsvFormatError: ヘッダ行が無い、または Collection / SongId 列が無い場合。
    """
    result = ParseResult()

    with open(path, "r", encoding=encoding, errors=errors, newline="") as file_obj:
        reader = csv.DictReader(file_obj)
        try:
            fieldnames = reader.fieldnames
        except csv.Error as e:
            raise CsvFormatError(f"Failed to read CSV header: {path} ({e})") from e

        if not fieldnames:
            raise CsvFormatError(f"CSV has no header row: {path}")
        for required in (COLUMN_COLLECTION, COLUMN_SONG_ID):
            if required not in fieldnames:
                raise CsvFormatError(f"CSV header has no {required} column: {path}")

        rows = iter(reader)
        while True:
            try:
                record = next(rows)
            except StopIteration:
                break
            except csv.Error as e:
                result.row_count += 1
                _warn(result, reader.line_num, str(e))
                continue

            result.row_count += 1

            error = _row_error(record)
            if error:
                _warn(result, reader.line_num, error)
                continue

            collection = record[COLUMN_COLLECTION]
            song_id = record[COLUMN_SONG_ID]

            if collection in result.index:
                logger.debug("Setting existing collection %s song %s", collection, song_id)
                result.index[collection][song_id] = record
            else:
                logger.debug("Setting new collection %s song %s", collection, song_id)
                result.index[collection] = {song_id: record}

    result.index = _order_index(result.index)
    logger.info("Parsed %d rows", result.row_count)
    return result
