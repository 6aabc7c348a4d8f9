"""Cache invalidation and resource reclaim."""

from envelope.memory.cleanup import CleanupCoordinator
from envelope.memory.stats import log_memory_stats, memory_stats

__all__ = ["CleanupCoordinator", "log_memory_stats", "memory_stats"]
