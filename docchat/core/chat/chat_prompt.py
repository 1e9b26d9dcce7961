"""
Grounded chat prompt.

System prompt and human template for answering from retrieved document
fragments with `[#N]` source markers, plus the fixed answers used when
retrieval or the model comes back empty.

Dependencies: langchain_core.prompts
System role: Prompt template for the chat endpoint
"""

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

SYSTEM_PROMPT = """You are an assistant that answers strictly from the provided context (fragments of the user's documents).

## Instructions
1. Use ONLY the provided context to answer
2. If the answer does not follow directly from the context, say what is missing and suggest clarifying the question or uploading the relevant document
3. Cite every fact you use with a source marker in the form [#N], where N is the source number shown before the fragment
4. Never invent source numbers"""

CHAT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", """Question:
{question}

Context (document fragments):
{context}

Instructions:
- Answer to the point and briefly.
- Put [#N] citations right where each fact is used.
- If useful, finish with short next steps or tips."""),
])

NO_CONTEXT_ANSWER = (
    "I could not find any fragments in your documents that answer this question. "
    "Try rephrasing the question or upload a relevant file."
)

EMPTY_ANSWER_FALLBACK = (
    "I could not put together an answer from the fragments found. "
    "Try making the question more specific."
)


def build_messages(question: str, context: str) -> list[BaseMessage]:
    """
    Render the chat prompt.

    Args:
        question: User question
        context: Context block with [#N]-tagged fragments

    Returns:
        list[BaseMessage]: System and human messages
    """
    return CHAT_PROMPT.format_messages(question=question, context=context)
