"""ブートストラップファイルのローカルキャッシュ。"""

from __future__ import annotations

import json
import logging
import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rdapboot.enums import CacheStatus, TimestampSource
from rdapboot.errors import BootstrapError, BootstrapIOError, BootstrapParseError
from rdapboot.paths import CacheSlot

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CacheState:
    """鮮度判定結果。

    Attributes:
        slot: 対象スロット。
        status: 判定結果。
        created_at: エントリ作成時刻（UNIX秒）。不在時はNone。
        age_seconds: 判定時点でのエントリ経過秒。不在時はNone。
    """

    slot: CacheSlot
    status: CacheStatus
    created_at: float | None = None
    age_seconds: float | None = None


@dataclass(slots=True)
class CacheLookup:
    """キャッシュ参照結果。

    Attributes:
        state: 鮮度判定結果。
        hit: 有効なキャッシュを読めたか。
        document: hit時の解析済み文書。
        error: 鮮度期間内のエントリを読めなかった場合の例外。
    """

    state: CacheState
    hit: bool
    document: Any = None
    error: BootstrapError | None = None


def parse_document(
    data: str | bytes,
    *,
    origin: str,
    source_url: str | None = None,
    path: Path | None = None,
) -> Any:
    """JSON文書を解析する。

    Args:
        data: 本文。
        origin: 例外発生元（``cache`` または ``server_response``）。
        source_url: 取得元URL。
        path: 読み込み元パス。

    Returns:
        解析済み文書。
    """

    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        where = source_url if source_url is not None else path
        raise BootstrapParseError(
            f"JSONとして解析できません: {where}: {exc}",
            origin=origin,
            source_url=source_url,
            path=path,
        ) from exc


def entry_timestamp(st: os.stat_result, source: TimestampSource) -> float | None:
    """鮮度判定に使う時刻を返す。取得できない場合はNone。"""

    if source == TimestampSource.MODIFIED:
        return st.st_mtime
    birthtime = getattr(st, "st_birthtime", None)
    if birthtime is not None:
        return float(birthtime)
    if source == TimestampSource.CREATED:
        return None
    logger.debug("st_birthtime is unavailable; using st_mtime instead")
    return st.st_mtime


class BootstrapStore:
    """スロット単位のJSONファイルキャッシュ。

    最終パスは書き込み完了後の一時ファイルを ``os.replace`` で置き換えることで
    のみ更新される。読み込み側が書き込み途中の内容を観測することはない。
    """

    def __init__(
        self,
        *,
        root: Path,
        freshness_seconds: int,
        timestamp_source: TimestampSource = TimestampSource.AUTO,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._root = root
        self._freshness_seconds = freshness_seconds
        self._timestamp_source = timestamp_source
        self._clock = clock

    @property
    def root(self) -> Path:
        """キャッシュルート。"""

        return self._root

    def slot(self, filename: str) -> CacheSlot:
        """スロットを返す。"""

        return CacheSlot.for_filename(self._root, filename)

    def inspect(self, slot: CacheSlot) -> CacheState:
        """最終パスのメタデータから鮮度を判定する。

        メタデータ取得に失敗した場合は不在として扱う。経過時間は呼び出しごとに
        再計算される。

        Args:
            slot: 対象スロット。

        Returns:
            判定結果。
        """

        try:
            st = slot.final_path.stat()
        except OSError:
            return CacheState(slot=slot, status=CacheStatus.MISSING)

        created_at = entry_timestamp(st, self._timestamp_source)
        if created_at is None:
            logger.debug("creation time unavailable for %s", slot.final_path)
            return CacheState(slot=slot, status=CacheStatus.MISSING)

        age = self._clock() - created_at
        status = CacheStatus.STALE if age > self._freshness_seconds else CacheStatus.FRESH
        return CacheState(slot=slot, status=status, created_at=created_at, age_seconds=age)

    def read(self, slot: CacheSlot) -> Any:
        """最終パスを読み込んで解析する。

        Raises:
            BootstrapIOError: 読み込みに失敗した場合。
            BootstrapParseError: 内容がJSONでない場合。
        """

        try:
            data = slot.final_path.read_bytes()
        except OSError as exc:
            raise BootstrapIOError(
                f"キャッシュを読み込めません: {exc}",
                path=slot.final_path,
            ) from exc
        return parse_document(data, origin="cache", path=slot.final_path)

    def lookup(self, slot: CacheSlot) -> CacheLookup:
        """鮮度判定と読み込みを行い、再取得が必要かを返す。"""

        state = self.inspect(slot)
        if state.status != CacheStatus.FRESH:
            logger.debug("cache %s: %s", state.status.value, slot.final_path)
            return CacheLookup(state=state, hit=False)

        try:
            document = self.read(slot)
        except (BootstrapIOError, BootstrapParseError) as exc:
            logger.debug("cache unreadable: %s: %s", slot.final_path, exc)
            return CacheLookup(state=state, hit=False, error=exc)

        logger.debug("cache hit: %s (age=%.0fs)", slot.final_path, state.age_seconds)
        return CacheLookup(state=state, hit=True, document=document)

    def commit(self, slot: CacheSlot, text: str) -> None:
        """本文を一時ファイルへ書き込み、最終パスへ置き換える。

        置き換え前に失敗した場合、最終パスは変更されない。一時ファイルは
        残る場合があるが、次回の書き込みで上書きされる。

        Args:
            slot: 対象スロット。
            text: 取得した本文。

        Raises:
            BootstrapIOError: 書き込みまたは置き換えに失敗した場合。
        """

        try:
            slot.final_path.parent.mkdir(parents=True, exist_ok=True)
            with open(slot.tmp_path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
        except OSError as exc:
            raise BootstrapIOError(
                f"一時ファイルに書き込めません: {exc}",
                path=slot.tmp_path,
            ) from exc

        try:
            os.replace(slot.tmp_path, slot.final_path)
        except OSError as exc:
            raise BootstrapIOError(
                f"一時キャッシュファイルを置き換えられません: {exc}",
                path=slot.final_path,
            ) from exc
        logger.debug("cache committed: %s (%d chars)", slot.final_path, len(text))
