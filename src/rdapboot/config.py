"""設定値定義。"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rdapboot.enums import TimestampSource

DEFAULT_APP_NAME = "rdapboot"
DEFAULT_USER_AGENT = "rdapboot/0.1.0"
IANA_BOOTSTRAP_BASE_URL = "https://data.iana.org/rdap/"

DEFAULT_FRESHNESS_SECONDS = 7 * 24 * 60 * 60
TMP_SUFFIX = ".tmp"


@dataclass(slots=True)
class CacheConfig:
    """キャッシュ設定。

    Attributes:
        dir: キャッシュルートディレクトリ。
        freshness_seconds: 鮮度期間秒。作成時刻からこの秒数を超えたエントリは失効扱い。
        timestamp_source: 鮮度判定に用いるファイル時刻。
    """

    dir: Path
    freshness_seconds: int = DEFAULT_FRESHNESS_SECONDS
    timestamp_source: TimestampSource = TimestampSource.AUTO


@dataclass(slots=True)
class ClientConfig:
    """クライアント共通設定。

    Attributes:
        timeout: HTTPタイムアウト秒。Noneは無制限。
        user_agent: User-Agent。
        follow_redirects: リダイレクト追従。
        base_url: レジストリ名から取得元URLを組み立てる際のベースURL。
        cache: キャッシュ設定。
    """

    cache: CacheConfig
    timeout: float | None = None
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True
    base_url: str = IANA_BOOTSTRAP_BASE_URL
