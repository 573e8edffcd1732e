"""Metrics collected while a parse session runs."""

from dataclasses import dataclass


@dataclass
class SessionMetrics:
    """Counters for a single parse session."""

    chunks_fed: int = 0
    bytes_fed: int = 0
    start_events: int = 0
    end_events: int = 0
    data_events: int = 0
    default_events: int = 0
    entity_substitutions: int = 0
    name_cache_hits: int = 0
    name_cache_misses: int = 0
    processing_time_ms: float = 0.0

    @property
    def total_events(self) -> int:
        """Total number of tokenizer events handled."""
        return (
            self.start_events
            + self.end_events
            + self.data_events
            + self.default_events
        )

    @property
    def cache_hit_rate(self) -> float:
        """Calculate qualified-name cache hit rate."""
        total_accesses = self.name_cache_hits + self.name_cache_misses
        if total_accesses == 0:
            return 0.0
        return self.name_cache_hits / total_accesses

    @property
    def bytes_per_second(self) -> float:
        """Calculate input bytes processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_fed * 1000.0) / self.processing_time_ms
