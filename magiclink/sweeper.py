import asyncio
from typing import Awaitable, Callable

from .registry import LinkRegistry

# Registry sweep cadence in seconds.
DEFAULT_INTERVAL = 600


def sweep_once(registry: LinkRegistry) -> int:
    """Run a single sweep pass and log how many links were removed."""
    removed = registry.sweep()
    if removed:
        print(f"[Sweep] Removed {removed} expired link(s)")
    return removed


async def sweep_expired(
    registry: LinkRegistry,
    interval: float = DEFAULT_INTERVAL,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
):
    """
    Background task that periodically evicts expired links from the
    registry, so abandoned links don't accumulate in memory.

    Lookups enforce expiry on their own; this loop only reclaims memory.

    Runs every ``interval`` seconds (default: 10 minutes) until cancelled.
    """
    while True:
        try:
            await sleep(interval)
            sweep_once(registry)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            print(f"[Sweep] Error in sweep task: {e}")
            continue
