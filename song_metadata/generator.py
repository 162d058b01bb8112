"""
メタデータ生成のオーケストレーション。

処理の流れ:
1. 入力CSVを読み込み、Collection -> SongId の2階層辞書を得る
2. 処理対象コレクションを決定する(未指定なら全コレクション)
3. 曲ごとに attributes / メタデータを生成し、ファイルへ書き込む
4. パース結果全体を集約ファイルとして書き込む

書き込み失敗(OutputWriteError)は捕捉せず呼び出し元へ伝播する。
"""

from __future__ import annotations

import json
import logging
import os
from typing import Iterable, List, Optional

from song_metadata.config import Settings
from song_metadata.csv_parser import parse_csv
from song_metadata.errors import CollectionNotFoundError
from song_metadata.metadata import build_attributes, build_song_metadata
from song_metadata.models import GenerationResult, ParsedIndex, SongRow
from song_metadata.writer import song_output_path, write_json

logger = logging.getLogger(__name__)


def select_collections(index: ParsedIndex, requested: Optional[Iterable[str]]) -> List[str]:
    """
    処理対象のコレクションIDを決定する。

    Args:
        index: パース結果の2階層辞書。
        requested: 指定されたコレクションID。None の場合は全コレクション。

    Returns:
        コレクションIDのリスト。

    Raises:
        CollectionNotFoundError: 指定されたコレクションが index に存在しない場合。
    """
    if requested is None:
        return list(index.keys())

    selected = list(dict.fromkeys(requested))
    missing = [c for c in selected if c not in index]
    if missing:
        raise CollectionNotFoundError(f"Collection not found in CSV: {', '.join(missing)}")
    return selected


def generate_metadata(
    settings: Settings,
    collections: Optional[Iterable[str]] = None,
) -> GenerationResult:
    """
    入力CSVから曲ごとのメタデータファイルと集約ファイルを生成する。

    曲ごとの書き込みは順に完了させるため、戻った時点で全ファイルが出力済みとなる。

    Args:
        settings: アプリケーション設定。
        collections: 処理対象のコレクションID。None の場合は settings.collections、
            それも None の場合は全コレクションを処理する。

    Returns:
        GenerationResult。

    Raises:
        FileNotFoundError: 入力CSVが存在しない場合。
        CsvFormatError: CSVヘッダに必須列が無い場合。
        CollectionNotFoundError: 指定コレクションがCSVに存在しない場合。
        OutputWriteError: ファイル書き込みに失敗した場合。
    """
    parsed = parse_csv(
        settings.input_csv_path,
        encoding=settings.csv_encoding,
        errors=settings.csv_errors,
    )
    index = parsed.index
    output = settings.output

    if collections is None:
        collections = settings.collections
    collection_ids = select_collections(index, collections)
    logger.info("Processing collections: %s", ", ".join(collection_ids))

    result = GenerationResult(parse_warnings=list(parsed.warnings))

    for collection_id in collection_ids:
        songs = index[collection_id]
        logger.info("Collection %s has %d songs", collection_id, len(songs))

        for song_id, record in songs.items():
            logger.info("creating metadata for collection %s song %s", collection_id, song_id)

            row = SongRow.from_record(record)
            attributes = build_attributes(row, settings.attribute_traits)
            metadata = build_song_metadata(row, attributes)
            payload = metadata.to_dict()

            path = song_output_path(output.dir, collection_id, song_id, output.file_extension)
            write_json(path, payload, indent=output.json_indent)

            result.documents.append(metadata)
            result.written_paths.append(path)
            logger.debug("metadata: %s", json.dumps(payload, ensure_ascii=False))

    aggregate_path = os.path.join(output.dir, output.aggregate_file_name)
    write_json(aggregate_path, index, indent=output.json_indent)
    result.aggregate_path = aggregate_path
    logger.info("Wrote %d metadata files and %s", len(result.written_paths), aggregate_path)

    return result
