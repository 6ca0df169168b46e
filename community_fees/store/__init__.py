"""In-memory data stores for maintaining entity relationships."""

from community_fees.store.community import CommunityDataStore

__all__ = ["CommunityDataStore"]
