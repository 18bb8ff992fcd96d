"""Context assembly for a single completion request.

Builds the ordered turns sent to the model: optional document framing,
a bounded window of prior turns and finally the new user turn.
"""

from collections.abc import Sequence

from docchat.agent.prompts import (
    DOCUMENT_CONTEXT_ACK,
    DOCUMENT_CONTEXT_HEADER,
    NEW_DOCUMENT_ACK_TEMPLATE,
    NEW_DOCUMENT_TEMPLATE,
    TRUNCATION_MARKER,
)
from docchat.models.schemas import ConversationTurn, DocumentContext

DEFAULT_HISTORY_WINDOW = 20
DEFAULT_EXCERPT_CHARS = 8000


def approximate_word_count(text: str) -> int:
    """Rough word count used in the upload acknowledgment."""
    return round(len(text) / 5)


def document_excerpt(text: str, limit: int = DEFAULT_EXCERPT_CHARS) -> str:
    """Return the first ``limit`` characters, marked when truncated."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def document_turns(
    document: DocumentContext,
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
) -> list[ConversationTurn]:
    """Build the (announcement, acknowledgment) pair for a document.

    A fresh upload is sent in full; a previously announced document is
    resent as an excerpt.
    """
    if not document.full_text:
        return []

    if document.is_new_upload:
        return [
            ConversationTurn.user(NEW_DOCUMENT_TEMPLATE.format(text=document.full_text)),
            ConversationTurn.model(
                NEW_DOCUMENT_ACK_TEMPLATE.format(
                    words=approximate_word_count(document.full_text)
                )
            ),
        ]

    excerpt = document_excerpt(document.full_text, excerpt_chars)
    return [
        ConversationTurn.user(f"{DOCUMENT_CONTEXT_HEADER}\n{excerpt}"),
        ConversationTurn.model(DOCUMENT_CONTEXT_ACK),
    ]


def assemble_context(
    prior_turns: Sequence[ConversationTurn],
    active_document: DocumentContext | None,
    new_user_text: str,
    *,
    window: int = DEFAULT_HISTORY_WINDOW,
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
) -> list[ConversationTurn]:
    """Assemble the turns for one model call.

    Older history beyond ``window`` is dropped, not summarized. The result
    is a pure function of the arguments.

    Args:
        prior_turns: Earlier turns, most recent last.
        active_document: Document context, if any.
        new_user_text: Text of the new user turn.
        window: Maximum number of prior turns to keep.
        excerpt_chars: Characters of a known document to resend.

    Returns:
        Ordered turns ending with the new user turn.
    """
    turns: list[ConversationTurn] = []

    if active_document is not None:
        turns.extend(document_turns(active_document, excerpt_chars))

    # TODO: replace the fixed turn window with token-aware trimming
    if window > 0:
        turns.extend(prior_turns[-window:])

    turns.append(ConversationTurn.user(new_user_text))
    return turns
