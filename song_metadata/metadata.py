"""
曲ごとのメタデータ生成処理。

SongRow から attributes を組み立て、出力用の SongMetadata を生成する。
列が存在しない場合はエラーにせず None のまま出力へ反映する。
"""

from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import quote

from song_metadata.models import Attribute, SongMetadata, SongRow

DEFAULT_ATTRIBUTE_TRAITS = ("Artist", "Genre", "BPM", "Duration")

# URI区切り文字と '#' はエンコードしない(英数字と "-_.~" は quote が常に保持する)
_URI_SAFE_CHARS = "!*'();,/?:@&=+$#"


def encode_uri(value: Optional[str]) -> str:
    """
    URL文字列をパーセントエンコードする。

    URIとして意味を持つ区切り文字(/ ? : # & = など)は保持し、
    空白や非ASCII文字などをUTF-8でエンコードする。

    Args:
        value: URL文字列。None の場合は空文字として扱う。

    Returns:
        エンコード済み文字列。
    """
    if value is None:
        return ""
    return quote(value, safe=_URI_SAFE_CHARS, encoding="utf-8")


def build_attributes(
    row: SongRow,
    traits: Iterable[str] = DEFAULT_ATTRIBUTE_TRAITS,
) -> List[Attribute]:
    """
    traits の順に列値を参照し、Attribute のリストを返す。

    列が存在しない場合も要素は省略せず、value=None として追加する。

    Args:
        row: 対象曲の行データ。
        traits: 参照する列名の並び。

    Returns:
        Attribute のリスト。
    """
    return [Attribute(trait_type=trait, value=row.get(trait)) for trait in traits]


def build_song_metadata(row: SongRow, attributes: List[Attribute]) -> SongMetadata:
    """
    行データと attributes から1曲分の SongMetadata を生成する。

    Args:
        row: 対象曲の行データ。
        attributes: build_attributes() で生成した Attribute のリスト。

    Returns:
        SongMetadataオブジェクト。
    """
    return SongMetadata(
        name=row.song,
        description=row.description,
        animation_url=encode_uri(row.animation),
        image=encode_uri(row.image),
        attributes=attributes,
        artist=row.artist,
        genre=row.genre,
        track_number=row.song_id,
        original_release_date=row.release_date,
    )
