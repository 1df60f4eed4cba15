"""例外定義。"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class BootstrapErrorContext:
    """例外に付随する共通コンテキスト。

    Attributes:
        source_url: 取得元URL。
        path: 対象ファイルパス。
    """

    source_url: str | None = None
    path: Path | None = None


class BootstrapError(Exception):
    """ライブラリ例外の基底クラス。

    Attributes:
        origin: 例外発生元。
        context: 追加コンテキスト。
    """

    def __init__(
        self,
        message: str,
        *,
        origin: str,
        context: BootstrapErrorContext | None = None,
    ) -> None:
        super().__init__(message)
        self.origin = origin
        self.context = context or BootstrapErrorContext()


class DirectoryResolutionError(BootstrapError):
    """キャッシュディレクトリを決定できない。"""

    def __init__(self, message: str, *, app_name: str) -> None:
        super().__init__(message, origin="environment")
        self.app_name = app_name


class BootstrapNetworkError(BootstrapError):
    """HTTP通信層の例外。

    Attributes:
        status_code: 非成功ステータスを受信した場合のHTTPステータス。
    """

    def __init__(
        self,
        message: str,
        *,
        source_url: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            message,
            origin="transport",
            context=BootstrapErrorContext(source_url=source_url),
        )
        self.status_code = status_code


class BootstrapParseError(BootstrapError):
    """取得本文またはキャッシュ内容がJSONとして解析できない。"""

    def __init__(
        self,
        message: str,
        *,
        origin: str,
        source_url: str | None = None,
        path: Path | None = None,
    ) -> None:
        super().__init__(
            message,
            origin=origin,
            context=BootstrapErrorContext(source_url=source_url, path=path),
        )


class BootstrapIOError(BootstrapError):
    """キャッシュファイルの参照・読込・作成・置換の失敗。"""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(
            message,
            origin="cache",
            context=BootstrapErrorContext(path=path),
        )


class BootstrapValidationError(BootstrapError):
    """I/O前のバリデーションエラー。"""

    def __init__(self, message: str, *, validation_code: str) -> None:
        super().__init__(message, origin="client_validation")
        self.validation_code = validation_code
