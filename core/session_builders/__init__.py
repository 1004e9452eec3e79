"""Session builder modules for practice queues."""

from core.session_builders.pool_types import DeckPools, QueueMode
from core.session_builders.pool_utils import count_due, partition_deck
from core.session_builders.queue_builder import build_queue, effective_queue

__all__ = [
    "DeckPools",
    "QueueMode",
    "build_queue",
    "count_due",
    "effective_queue",
    "partition_deck",
]
