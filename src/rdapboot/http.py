"""HTTP実行補助。"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from rdapboot.errors import BootstrapNetworkError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


def build_request_headers(user_agent: str) -> Mapping[str, str]:
    """標準ヘッダを構築する。"""

    return {
        "Accept": "application/json",
        "Accept-Encoding": "gzip",
        "User-Agent": user_agent,
    }


def response_text(response: httpx.Response, *, source_url: str) -> str:
    """成功応答の本文を返す。非成功ステータスは通信失敗として扱う。"""

    if not response.is_success:
        raise BootstrapNetworkError(
            f"取得に失敗しました: HTTP {response.status_code}: {source_url}",
            source_url=source_url,
            status_code=response.status_code,
        )
    return response.text


def perform_sync_fetch(
    *,
    client: httpx.Client,
    source_url: str,
    user_agent: str,
) -> str:
    """同期GET要求を1回だけ実行し本文を返す。

    Args:
        client: HTTPクライアント。
        source_url: 取得元URL。
        user_agent: User-Agent。

    Returns:
        応答本文。

    Raises:
        BootstrapNetworkError: 通信失敗または非成功ステータス。
    """

    headers = dict(build_request_headers(user_agent))
    logger.debug("GET %s", source_url)
    try:
        response = client.get(source_url, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise BootstrapNetworkError(str(exc), source_url=source_url) from exc
    return response_text(response, source_url=source_url)


async def perform_async_fetch(
    *,
    client: httpx.AsyncClient,
    source_url: str,
    user_agent: str,
) -> str:
    """非同期GET要求を1回だけ実行し本文を返す。"""

    headers = dict(build_request_headers(user_agent))
    logger.debug("GET %s", source_url)
    try:
        response = await client.get(source_url, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise BootstrapNetworkError(str(exc), source_url=source_url) from exc
    return response_text(response, source_url=source_url)
