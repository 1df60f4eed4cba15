"""入力バリデーション。"""

from __future__ import annotations

from rdapboot.config import TMP_SUFFIX
from rdapboot.enums import BootstrapRegistry, TimestampSource
from rdapboot.errors import BootstrapValidationError


def normalize_filename(value: str | BootstrapRegistry) -> str:
    """キャッシュスロット名を検証して返す。

    スロット名はキャッシュルート直下の単一パス要素でなければならない。
    一時ファイルとの衝突を避けるため、一時ファイル接尾辞で終わる名前は拒否する。

    Args:
        value: スロット名。

    Returns:
        検証済みスロット名。
    """

    name = value.value if isinstance(value, BootstrapRegistry) else value
    if not name or not name.strip():
        raise BootstrapValidationError(
            "filename が指定されていません。",
            validation_code="missing_filename",
        )
    if "/" in name or "\\" in name or "\x00" in name:
        raise BootstrapValidationError(
            f"filename はパス区切りを含められません: {name!r}",
            validation_code="invalid_filename",
        )
    if name in {".", ".."}:
        raise BootstrapValidationError(
            f"filename に相対参照は指定できません: {name!r}",
            validation_code="invalid_filename",
        )
    if name.endswith(TMP_SUFFIX):
        raise BootstrapValidationError(
            f"filename は {TMP_SUFFIX} で終わってはいけません: {name!r}",
            validation_code="reserved_suffix",
        )
    return name


def normalize_timestamp_source(value: TimestampSource | str) -> TimestampSource:
    """時刻種別を正規化する。"""

    if isinstance(value, TimestampSource):
        return value
    try:
        return TimestampSource(value.strip().lower())
    except ValueError as exc:
        raise BootstrapValidationError(
            f"timestamp_source が不正です: {value!r}",
            validation_code="invalid_timestamp_source",
        ) from exc


def validate_freshness_seconds(value: int) -> int:
    """鮮度期間秒を検証する。"""

    if value < 0:
        raise BootstrapValidationError(
            "freshness_seconds は0以上を指定してください。",
            validation_code="invalid_freshness",
        )
    return value


def validate_timeout(value: float | None) -> float | None:
    """HTTPタイムアウト秒を検証する。"""

    if value is not None and value <= 0:
        raise BootstrapValidationError(
            "timeout は0より大きい値かNoneを指定してください。",
            validation_code="invalid_timeout",
        )
    return value


def normalize_registry(value: BootstrapRegistry | str) -> BootstrapRegistry:
    """レジストリ指定を正規化する。"""

    if isinstance(value, BootstrapRegistry):
        return value
    text = value.strip().lower()
    for member in BootstrapRegistry:
        if text in {member.value, member.value.removesuffix(".json"), member.name.lower()}:
            return member
    raise BootstrapValidationError(
        f"未知のレジストリです: {value!r}",
        validation_code="invalid_registry",
    )
