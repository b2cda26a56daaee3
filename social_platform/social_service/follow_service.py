"""
Read-side aggregation over the follow relation store.
"""
import logging
from typing import Dict, List, Optional

from .follow_store import FollowStore, FollowStoreError
from .models import Follow

logger = logging.getLogger(__name__)

# Returned by resolve_relationships when the store fails. The relationship
# sets only annotate responses, so a failure must never fail the request.
RELATIONSHIPS_FALLBACK: Dict[str, List[int]] = {}


class FollowService:
    def __init__(self, store: FollowStore):
        self.store = store

    def resolve_relationships(self, actor_id: int) -> Dict[str, List[int]]:
        """
        Ids of the accounts ``actor_id`` follows and of the accounts following it.

        Returns:
            ``{"following": [...], "followers": [...]}``, or
            ``RELATIONSHIPS_FALLBACK`` if the store could not be read.
        """
        try:
            following = [edge.followed_id for edge in self.store.query_by_follower(actor_id)]
            followers = [edge.follower_id for edge in self.store.query_by_followed(actor_id)]
        except FollowStoreError as e:
            logger.warning("Could not resolve relationships for user_id=%s: %s", actor_id, e)
            return dict(RELATIONSHIPS_FALLBACK)

        return {"following": following, "followers": followers}

    def mutual_status(self, actor_id: int, other_id: int) -> Dict[str, Optional[Follow]]:
        """
        Whether the actor follows ``other_id`` and whether ``other_id`` follows the actor.
        """
        return {
            "following": self.store.find(actor_id, other_id),
            "follower": self.store.find(other_id, actor_id),
        }
