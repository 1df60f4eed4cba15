"""キャッシュスロットとキャッシュルートの解決。"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_cache_path

from rdapboot.config import DEFAULT_APP_NAME, TMP_SUFFIX
from rdapboot.errors import DirectoryResolutionError


@dataclass(frozen=True, slots=True)
class CacheSlot:
    """キャッシュスロット。

    Attributes:
        filename: 論理キー。
        final_path: 確定済みキャッシュのパス。
        tmp_path: 書き込み中のみ使う一時ファイルのパス。
    """

    filename: str
    final_path: Path
    tmp_path: Path

    @classmethod
    def for_filename(cls, root: Path, filename: str) -> "CacheSlot":
        """ルートとスロット名からパスを組み立てる。"""

        return cls(
            filename=filename,
            final_path=root / filename,
            tmp_path=root / f"{filename}{TMP_SUFFIX}",
        )


def resolve_cache_root(app_name: str = DEFAULT_APP_NAME) -> Path:
    """実行環境のユーザーキャッシュディレクトリを返す。

    Args:
        app_name: アプリケーション名。

    Returns:
        キャッシュルートの絶対パス。

    Raises:
        DirectoryResolutionError: ホームディレクトリ等が決定できない場合。
    """

    try:
        path = user_cache_path(app_name, appauthor=False)
    except (OSError, KeyError, RuntimeError) as exc:
        raise DirectoryResolutionError(
            f"キャッシュディレクトリを決定できません: {exc}",
            app_name=app_name,
        ) from exc
    if not path.is_absolute():
        raise DirectoryResolutionError(
            f"キャッシュディレクトリを決定できません: {path}",
            app_name=app_name,
        )
    return path
