"""
캐시 일관성을 보장하는 엔티티 저장소 계층
"""

from .base import EntityRepository, EntitySpec, ListFilter, ListScope, new_id, utcnow
from .invalidation import InvalidationPlan, InvalidationPolicy, WriteEvent

__all__ = [
    "EntityRepository",
    "EntitySpec",
    "ListFilter",
    "ListScope",
    "new_id",
    "utcnow",
    "InvalidationPlan",
    "InvalidationPolicy",
    "WriteEvent",
]
