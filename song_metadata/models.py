"""
データモデル定義モジュール。

CSVの1行分の情報(SongRow)、出力メタデータ(SongMetadata)、
およびパース結果・生成結果を保持するモデルを定義する。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

# collection -> song_id -> {列名: 値}(列数が不足する行の不足列は None)
ParsedIndex = Dict[str, Dict[str, Dict[str, Optional[str]]]]

COLUMN_COLLECTION = "Collection"
COLUMN_SONG_ID = "SongId"


@dataclass(frozen=True)
class SongRow:
    """
    CSVの1行分の曲情報を保持するモデル。

    CSVの列は名前付きフィールドへ割り当てる。列が存在しない場合は None。
    元の行データは record に保持し、任意列は get() で参照する。
    """

    collection: Optional[str]
    song_id: Optional[str]
    song: Optional[str]
    description: Optional[str]
    animation: Optional[str]
    image: Optional[str]
    artist: Optional[str]
    genre: Optional[str]
    bpm: Optional[str]
    duration: Optional[str]
    release_date: Optional[str]

    record: Mapping[str, Optional[str]] = field(default_factory=dict, repr=False)

    @classmethod
    def from_record(cls, record: Mapping[str, Optional[str]]) -> "SongRow":
        """
        CSVの行データ(列名 -> 値)から SongRow を生成する。

        Args:
            record: csv.DictReader が返す1行分の辞書。

        Returns:
            SongRowオブジェクト。
        """
        return cls(
            collection=record.get(COLUMN_COLLECTION),
            song_id=record.get(COLUMN_SONG_ID),
            song=record.get("Song"),
            description=record.get("Description"),
            animation=record.get("Animation"),
            image=record.get("Image"),
            artist=record.get("Artist"),
            genre=record.get("Genre"),
            bpm=record.get("BPM"),
            duration=record.get("Duration"),
            release_date=record.get("Release Date"),
            record=dict(record),
        )

    def get(self, column: str) -> Optional[str]:
        """CSV列名で値を参照する。列が存在しない場合は None。"""
        return self.record.get(column)


@dataclass(frozen=True)
class Attribute:
    """メタデータに付与する trait_type / value の組。"""

    trait_type: str
    value: Optional[str]

    def to_dict(self) -> dict:
        return {"trait_type": self.trait_type, "value": self.value}


@dataclass(frozen=True)
class SongMetadata:
    """
    1曲分の出力メタデータ。

    to_dict() で出力JSONのキー名(trackNumber 等)に変換する。
    """

    name: Optional[str]
    description: Optional[str]
    animation_url: str
    image: str
    attributes: List[Attribute]
    artist: Optional[str]
    genre: Optional[str]
    track_number: Optional[str]
    original_release_date: Optional[str]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "animation_url": self.animation_url,
            "image": self.image,
            "attributes": [a.to_dict() for a in self.attributes],
            "artist": self.artist,
            "genre": self.genre,
            "trackNumber": self.track_number,
            "originalReleaseDate": self.original_release_date,
        }


@dataclass(frozen=True)
class RowWarning:
    """CSV読み込み時にスキップした行の情報。"""

    line_number: int
    message: str


@dataclass
class ParseResult:
    """
    CSVパース結果。

    Attributes:
        index: collection -> song_id -> 行データ の2階層辞書。
        row_count: 読み込んだデータ行数(スキップした行を含む)。
        warnings: スキップした行の一覧。
    """

    index: ParsedIndex = field(default_factory=dict)
    row_count: int = 0
    warnings: List[RowWarning] = field(default_factory=list)

    def collection_ids(self) -> List[str]:
        return list(self.index.keys())

    def song_count(self) -> int:
        return sum(len(songs) for songs in self.index.values())


@dataclass
class GenerationResult:
    """メタデータ生成処理の結果。"""

    documents: List[SongMetadata] = field(default_factory=list)
    written_paths: List[str] = field(default_factory=list)
    aggregate_path: Optional[str] = None
    parse_warnings: List[RowWarning] = field(default_factory=list)
