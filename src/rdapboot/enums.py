"""列挙型定義。"""

from __future__ import annotations

from enum import StrEnum


class BootstrapRegistry(StrEnum):
    """IANAが公開するRDAPブートストラップファイル。

    値はキャッシュスロットのファイル名であり、IANAベースURLからの相対パスでもある。

    Attributes:
        DNS: ドメイン名の委任情報。
        IPV4: IPv4アドレス範囲の委任情報。
        IPV6: IPv6アドレス範囲の委任情報。
        ASN: AS番号範囲の委任情報。
        OBJECT_TAGS: オブジェクトタグの委任情報。
    """

    DNS = "dns.json"
    IPV4 = "ipv4.json"
    IPV6 = "ipv6.json"
    ASN = "asn.json"
    OBJECT_TAGS = "object-tags.json"


class CacheStatus(StrEnum):
    """キャッシュスロットの鮮度判定結果。

    Attributes:
        MISSING: 最終パスが存在しない、または作成時刻を取得できない。
        STALE: 鮮度期間を超過している。
        FRESH: 鮮度期間内である。
    """

    MISSING = "missing"
    STALE = "stale"
    FRESH = "fresh"


class TimestampSource(StrEnum):
    """鮮度判定に使うファイル時刻。

    Attributes:
        AUTO: 作成時刻が取得できればそれを、できなければ更新時刻を使う。
        CREATED: 作成時刻のみを使う。取得できない環境ではスロット不在として扱う。
        MODIFIED: 更新時刻を使う。
    """

    AUTO = "auto"
    CREATED = "created"
    MODIFIED = "modified"
