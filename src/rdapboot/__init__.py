"""rdapboot 公開API。"""

from rdapboot.cache import CacheState
from rdapboot.client import (
    AsyncBootstrapClient,
    BootstrapClient,
    afetch_bootstrap,
    fetch_bootstrap,
)
from rdapboot.enums import BootstrapRegistry, CacheStatus, TimestampSource
from rdapboot.errors import (
    BootstrapError,
    BootstrapIOError,
    BootstrapNetworkError,
    BootstrapParseError,
    BootstrapValidationError,
    DirectoryResolutionError,
)
from rdapboot.paths import CacheSlot, resolve_cache_root

__all__ = [
    "AsyncBootstrapClient",
    "BootstrapClient",
    "BootstrapError",
    "BootstrapIOError",
    "BootstrapNetworkError",
    "BootstrapParseError",
    "BootstrapRegistry",
    "BootstrapValidationError",
    "CacheSlot",
    "CacheState",
    "CacheStatus",
    "DirectoryResolutionError",
    "TimestampSource",
    "afetch_bootstrap",
    "fetch_bootstrap",
    "resolve_cache_root",
]
