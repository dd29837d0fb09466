"""Domain services.

Services implement the store's behavior: evaluating queries, applying
collection mutations, and replaying the journal on commit.
"""

from docstore.domain.services import query_engine
from docstore.domain.services.collection import Collection
from docstore.domain.services.replay_service import ReplayService

__all__ = [
    "Collection",
    "ReplayService",
    "query_engine",
]
