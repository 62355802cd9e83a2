"""Service layer for convoscope.

Turn grouping, conversation indexing, stable identity assignment and
lexical/hybrid retrieval over parsed messages.
"""

from convoscope.services.conversation_index import ConversationIndexBuilder
from convoscope.services.hybrid import (
    HybridRanker,
    cosine_similarity,
    generate_document_embeddings,
    normalize_weights,
    vector_search,
)
from convoscope.services.identity import IdentityService, dedupe_messages
from convoscope.services.lexical import (
    FIELD_WEIGHTS,
    LexicalScorer,
    conversation_to_document,
    message_to_document,
    ranked_search,
    tokenize_query,
)
from convoscope.services.query_matcher import highlight_text, matches
from convoscope.services.turn_grouper import DEFAULT_TURN_GAP_MS, TurnGrouper, bucket_by_day

__all__ = [
    "DEFAULT_TURN_GAP_MS",
    "FIELD_WEIGHTS",
    "ConversationIndexBuilder",
    "HybridRanker",
    "IdentityService",
    "LexicalScorer",
    "TurnGrouper",
    "bucket_by_day",
    "conversation_to_document",
    "cosine_similarity",
    "dedupe_messages",
    "generate_document_embeddings",
    "highlight_text",
    "matches",
    "message_to_document",
    "normalize_weights",
    "ranked_search",
    "tokenize_query",
    "vector_search",
]
