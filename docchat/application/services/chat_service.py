"""
Chat service for grounded Q&A.

Flow: retrieve fragments -> number sources and build context -> prompt the
model -> rewrite [#N] markers into links.

Dependencies: docchat.core.retrieval, docchat.core.chat, docchat.core.ports
System role: Chat orchestration layer
"""

import logging

from docchat.core.chat.chat_prompt import EMPTY_ANSWER_FALLBACK, NO_CONTEXT_ANSWER, build_messages
from docchat.core.exceptions import NoContextError
from docchat.core.ports import CompletionProvider
from docchat.core.retrieval import CitationAssembler, RetrievalOrchestrator, linkify
from docchat.models.chat import ChatResponse, TopFragment
from docchat.models.citation import RetrievedFragment

logger = logging.getLogger(__name__)

TOP_PREVIEW_LENGTH = 160


class ChatService:
    """Answer questions from indexed documents with numbered citations."""

    def __init__(
        self,
        retriever: RetrievalOrchestrator,
        assembler: CitationAssembler,
        completion: CompletionProvider,
        max_context_chunks: int = 12,
    ) -> None:
        """
        Initialize chat service.

        Args:
            retriever: Multi-tier retrieval
            assembler: Context and citation builder
            completion: Chat model gateway
            max_context_chunks: Fragments requested per question
        """
        self.retriever = retriever
        self.assembler = assembler
        self.completion = completion
        self.max_context_chunks = max_context_chunks

    async def answer(self, question: str) -> ChatResponse:
        """
        Answer a question.

        Args:
            question: Non-empty user question

        Returns:
            ChatResponse: Answer, linked answer, citations and top fragments

        Raises:
            EmbeddingError: If the question cannot be embedded
            CompletionError: If the model call fails
        """
        fragments = await self.retriever.retrieve(question, self.max_context_chunks)
        try:
            context = await self.assembler.assemble(fragments)
        except NoContextError:
            logger.info("No context found for question")
            return ChatResponse(answer=NO_CONTEXT_ANSWER, answer_linked=NO_CONTEXT_ANSWER)

        messages = build_messages(question, context.context_block)
        answer = await self.completion.complete(messages)
        if not answer:
            logger.warning("Model returned an empty answer", extra={"fragments": len(fragments)})
            answer = EMPTY_ANSWER_FALLBACK

        logger.info(
            "Chat answered",
            extra={
                "fragments": len(fragments),
                "fragments_used": context.fragments_used,
                "citations": len(context.citations),
            },
        )
        return ChatResponse(
            answer=answer,
            answer_linked=linkify(answer, context.citations),
            citations=context.citations,
            top=[_top_view(fragment, context.citation_numbers) for fragment in fragments],
        )


def _top_view(fragment: RetrievedFragment, numbers: dict) -> TopFragment:
    return TopFragment(
        n=numbers.get(fragment.document_id),
        doc_id=fragment.document_id,
        chunk_index=fragment.chunk_index,
        similarity=fragment.similarity,
        preview=fragment.content[:TOP_PREVIEW_LENGTH],
    )
