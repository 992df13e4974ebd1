"""Backend runtime control utility

Builds the cache, backend client, rate limiter and storage facade from the
configuration, and provides startup, stop and status queries shared by the
HTTP app and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from config.loader import ConfigLoader, get_config
from core.cache import CacheStore
from core.logger import get_logger
from core.rate_limit import RateLimiter
from core.remote import RemoteBackend
from core.storage import Storage

logger = get_logger(__name__)


@dataclass
class Runtime:
    config: ConfigLoader
    cache: CacheStore
    backend: RemoteBackend
    rate_limiter: RateLimiter
    storage: Storage


_runtime: Optional[Runtime] = None


def build_runtime(config: ConfigLoader, backend: Optional[RemoteBackend] = None) -> Runtime:
    """Wire every component from one configuration; backend may be injected by tests"""
    cache = CacheStore(config.get("storage.cache_path") or None)

    if backend is None:
        backend = RemoteBackend(
            url=config.get("backend.url", ""),
            anon_key=config.get("backend.anon_key", ""),
            timeout=float(config.get("backend.timeout", 15.0)),
        )

    rate_limiter = RateLimiter(
        max_requests=int(config.get("rate_limit.max_requests", 100)),
        window_seconds=float(config.get("rate_limit.window_seconds", 60)),
    )
    storage = Storage(
        cache,
        backend,
        rate_limiter,
        legacy_schema_fallback=bool(config.get("storage.legacy_schema_fallback", True)),
    )
    return Runtime(
        config=config,
        cache=cache,
        backend=backend,
        rate_limiter=rate_limiter,
        storage=storage,
    )


def install_runtime(runtime: Runtime) -> Runtime:
    """Make runtime the process-wide instance"""
    global _runtime
    _runtime = runtime
    return runtime


async def start_runtime(config_file: Optional[str] = None, sync: bool = True) -> Runtime:
    """Build the runtime once and refresh every collection from the backend"""
    global _runtime
    if _runtime is not None:
        logger.info("Runtime already started, reusing it")
        return _runtime

    config_loader = get_config(config_file)
    logger.info(f"✓ Configuration file: {config_loader.config_file}")

    runtime = install_runtime(build_runtime(config_loader))

    if not runtime.backend.is_configured:
        logger.warning("Backend URL or key missing, running in local-only mode")
    elif sync:
        await runtime.storage.sync_all()

    return runtime


async def stop_runtime(*, quiet: bool = False) -> None:
    """Release the process-wide runtime"""
    global _runtime
    if _runtime is None:
        if not quiet:
            logger.info("Runtime is not running")
        return

    _runtime = None
    if not quiet:
        logger.info("Runtime stopped")


def get_runtime() -> Runtime:
    if _runtime is None:
        raise RuntimeError("Runtime not started")
    return _runtime


def get_storage() -> Storage:
    return get_runtime().storage


def get_runtime_stats() -> Dict[str, Any]:
    """Connection mode, rate-limit headroom, cached collection sizes and cache write times"""
    runtime = get_runtime()
    storage = runtime.storage
    return {
        "mode": "remote" if runtime.backend.is_configured else "local-only",
        "rateLimitRemaining": runtime.rate_limiter.remaining,
        "cachePath": runtime.cache.db_path,
        "cached": {
            "dailyEntries": len(storage.get_daily_entries()),
            "ideas": len(storage.get_ideas()),
            "weeklyOutcomes": len(storage.get_weekly_outcomes()),
            "todos": len(storage.get_todos()),
            "decisions": len(storage.get_decisions()),
            "contacts": len(storage.get_contacts()),
            "discoveries": len(storage.get_discoveries()),
            "expenses": len(storage.get_expenses()),
        },
        "lastWritten": {key: runtime.cache.updated_at(key) for key in runtime.cache.keys()},
    }
