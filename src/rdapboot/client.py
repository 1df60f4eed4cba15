"""公開クライアント実装。"""

from __future__ import annotations

import logging
import time
import warnings
from collections.abc import Callable
from pathlib import Path
from typing import Any
from urllib.parse import urljoin

import httpx

from rdapboot.cache import BootstrapStore, CacheLookup, CacheState, parse_document
from rdapboot.config import (
    DEFAULT_APP_NAME,
    DEFAULT_FRESHNESS_SECONDS,
    DEFAULT_USER_AGENT,
    IANA_BOOTSTRAP_BASE_URL,
    CacheConfig,
    ClientConfig,
)
from rdapboot.enums import BootstrapRegistry, TimestampSource
from rdapboot.http import perform_async_fetch, perform_sync_fetch
from rdapboot.paths import CacheSlot, resolve_cache_root
from rdapboot.validation import (
    normalize_filename,
    normalize_registry,
    normalize_timestamp_source,
    validate_freshness_seconds,
    validate_timeout,
)

logger = logging.getLogger(__name__)


def _build_config(
    *,
    cache_dir: str | Path | None,
    app_name: str,
    freshness_seconds: int,
    timestamp_source: TimestampSource | str,
    timeout: float | None,
    user_agent: str,
    follow_redirects: bool,
    base_url: str,
) -> ClientConfig:
    """引数を検証して設定を組み立てる。"""

    root = Path(cache_dir) if cache_dir is not None else resolve_cache_root(app_name)
    cache_conf = CacheConfig(
        dir=root,
        freshness_seconds=validate_freshness_seconds(freshness_seconds),
        timestamp_source=normalize_timestamp_source(timestamp_source),
    )
    return ClientConfig(
        cache=cache_conf,
        timeout=validate_timeout(timeout),
        user_agent=user_agent,
        follow_redirects=follow_redirects,
        base_url=base_url,
    )


def _warn_repair(lookup: CacheLookup) -> None:
    """壊れたキャッシュを再取得で修復することを通知する。"""

    warnings.warn(
        "キャッシュを読み込めないため再取得します: "
        f"path={lookup.state.slot.final_path}, error={type(lookup.error).__name__}",
        stacklevel=3,
    )


class BootstrapClient:
    """RDAPブートストラップファイルの同期キャッシュクライアント。"""

    def __init__(
        self,
        *,
        cache_dir: str | Path | None = None,
        app_name: str = DEFAULT_APP_NAME,
        freshness_seconds: int = DEFAULT_FRESHNESS_SECONDS,
        timestamp_source: TimestampSource | str = TimestampSource.AUTO,
        timeout: float | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        follow_redirects: bool = True,
        base_url: str = IANA_BOOTSTRAP_BASE_URL,
        http_client: httpx.Client | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """クライアントを初期化する。

        Args:
            cache_dir: キャッシュルート。省略時はユーザーキャッシュディレクトリ。
            app_name: キャッシュルート解決に使うアプリケーション名。
            freshness_seconds: 鮮度期間秒。
            timestamp_source: 鮮度判定に使うファイル時刻。
            timeout: HTTPタイムアウト秒。Noneは無制限。
            user_agent: User-Agent。
            follow_redirects: リダイレクト追従。
            base_url: レジストリ取得時のベースURL。
            http_client: 外部httpx.Client。
            clock: 現在時刻（UNIX秒）を返す関数。

        Raises:
            DirectoryResolutionError: キャッシュルートを決定できない場合。
            BootstrapValidationError: 引数が不正な場合。
        """

        self._config = _build_config(
            cache_dir=cache_dir,
            app_name=app_name,
            freshness_seconds=freshness_seconds,
            timestamp_source=timestamp_source,
            timeout=timeout,
            user_agent=user_agent,
            follow_redirects=follow_redirects,
            base_url=base_url,
        )

        self._owns_client = http_client is None
        if http_client is None:
            self._http_client = httpx.Client(
                timeout=self._config.timeout,
                follow_redirects=self._config.follow_redirects,
            )
        else:
            self._http_client = http_client

        self._store = BootstrapStore(
            root=self._config.cache.dir,
            freshness_seconds=self._config.cache.freshness_seconds,
            timestamp_source=self._config.cache.timestamp_source,
            clock=clock or time.time,
        )

    @property
    def cache_dir(self) -> Path:
        """キャッシュルート。"""

        return self._store.root

    def slot(self, filename: str | BootstrapRegistry) -> CacheSlot:
        """スロット名に対応するパスを返す。"""

        return self._store.slot(normalize_filename(filename))

    def inspect(self, filename: str | BootstrapRegistry) -> CacheState:
        """通信せずにスロットの鮮度を判定する。"""

        return self._store.inspect(self.slot(filename))

    def fetch_bootstrap(self, filename: str | BootstrapRegistry, source_url: str) -> Any:
        """キャッシュまたはネットワークからブートストラップ文書を取得する。

        鮮度期間内で解析可能なキャッシュがあればそれを返す。不在・失効時、
        またはキャッシュが読めない場合は一度だけ取得し直してキャッシュを置き換える。

        Args:
            filename: キャッシュスロット名。
            source_url: 取得元URL。

        Returns:
            解析済み文書。

        Raises:
            BootstrapNetworkError: 取得に失敗した場合。
            BootstrapParseError: 取得本文がJSONでない場合。
            BootstrapIOError: キャッシュの書き込みに失敗した場合。
        """

        slot = self.slot(filename)
        lookup = self._store.lookup(slot)
        if lookup.hit:
            return lookup.document
        if lookup.error is not None:
            _warn_repair(lookup)
        return self._refresh(slot, source_url)

    def get(self, registry: BootstrapRegistry | str) -> Any:
        """IANAレジストリのブートストラップ文書を取得する。"""

        registry_norm = normalize_registry(registry)
        source_url = urljoin(self._config.base_url, registry_norm.value)
        return self.fetch_bootstrap(registry_norm, source_url)

    def _refresh(self, slot: CacheSlot, source_url: str) -> Any:
        text = perform_sync_fetch(
            client=self._http_client,
            source_url=source_url,
            user_agent=self._config.user_agent,
        )
        document = parse_document(text, origin="server_response", source_url=source_url)
        self._store.commit(slot, text)
        logger.debug("refreshed %s from %s", slot.filename, source_url)
        return document

    def close(self) -> None:
        """内部Clientをクローズする。"""

        if self._owns_client:
            self._http_client.close()

    def __enter__(self) -> "BootstrapClient":
        """コンテキスト開始。"""

        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        """コンテキスト終了。"""

        self.close()


class AsyncBootstrapClient:
    """RDAPブートストラップファイルの非同期キャッシュクライアント。"""

    def __init__(
        self,
        *,
        cache_dir: str | Path | None = None,
        app_name: str = DEFAULT_APP_NAME,
        freshness_seconds: int = DEFAULT_FRESHNESS_SECONDS,
        timestamp_source: TimestampSource | str = TimestampSource.AUTO,
        timeout: float | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        follow_redirects: bool = True,
        base_url: str = IANA_BOOTSTRAP_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """非同期クライアントを初期化する。"""

        self._config = _build_config(
            cache_dir=cache_dir,
            app_name=app_name,
            freshness_seconds=freshness_seconds,
            timestamp_source=timestamp_source,
            timeout=timeout,
            user_agent=user_agent,
            follow_redirects=follow_redirects,
            base_url=base_url,
        )

        self._owns_client = http_client is None
        if http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._config.timeout,
                follow_redirects=self._config.follow_redirects,
            )
        else:
            self._http_client = http_client

        self._store = BootstrapStore(
            root=self._config.cache.dir,
            freshness_seconds=self._config.cache.freshness_seconds,
            timestamp_source=self._config.cache.timestamp_source,
            clock=clock or time.time,
        )

    @property
    def cache_dir(self) -> Path:
        """キャッシュルート。"""

        return self._store.root

    def slot(self, filename: str | BootstrapRegistry) -> CacheSlot:
        """スロット名に対応するパスを返す。"""

        return self._store.slot(normalize_filename(filename))

    def inspect(self, filename: str | BootstrapRegistry) -> CacheState:
        """通信せずにスロットの鮮度を判定する。"""

        return self._store.inspect(self.slot(filename))

    async def fetch_bootstrap(self, filename: str | BootstrapRegistry, source_url: str) -> Any:
        """キャッシュまたはネットワークからブートストラップ文書を取得する。"""

        slot = self.slot(filename)
        lookup = self._store.lookup(slot)
        if lookup.hit:
            return lookup.document
        if lookup.error is not None:
            _warn_repair(lookup)
        return await self._refresh(slot, source_url)

    async def get(self, registry: BootstrapRegistry | str) -> Any:
        """IANAレジストリのブートストラップ文書を取得する。"""

        registry_norm = normalize_registry(registry)
        source_url = urljoin(self._config.base_url, registry_norm.value)
        return await self.fetch_bootstrap(registry_norm, source_url)

    async def _refresh(self, slot: CacheSlot, source_url: str) -> Any:
        text = await perform_async_fetch(
            client=self._http_client,
            source_url=source_url,
            user_agent=self._config.user_agent,
        )
        document = parse_document(text, origin="server_response", source_url=source_url)
        self._store.commit(slot, text)
        logger.debug("refreshed %s from %s", slot.filename, source_url)
        return document

    async def aclose(self) -> None:
        """内部Clientをクローズする。"""

        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "AsyncBootstrapClient":
        """非同期コンテキスト開始。"""

        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        """非同期コンテキスト終了。"""

        await self.aclose()


def fetch_bootstrap(
    filename: str | BootstrapRegistry,
    source_url: str,
    *,
    cache_dir: str | Path | None = None,
) -> Any:
    """一時的なクライアントでブートストラップ文書を取得する。"""

    with BootstrapClient(cache_dir=cache_dir) as client:
        return client.fetch_bootstrap(filename, source_url)


async def afetch_bootstrap(
    filename: str | BootstrapRegistry,
    source_url: str,
    *,
    cache_dir: str | Path | None = None,
) -> Any:
    """一時的な非同期クライアントでブートストラップ文書を取得する。"""

    async with AsyncBootstrapClient(cache_dir=cache_dir) as client:
        return await client.fetch_bootstrap(filename, source_url)
