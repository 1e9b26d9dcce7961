"""
PostgreSQL search functions.

DDL for the pgvector extension and the two ranked-search functions the
hybrid and vector retrieval tiers call. Both only return chunks whose
generation matches their document's current generation.

Dependencies: None (SQL text)
System role: Database-side search definitions
"""

CREATE_VECTOR_EXTENSION = "CREATE EXTENSION IF NOT EXISTS vector"

CREATE_MATCH_CHUNKS = """
CREATE OR REPLACE FUNCTION match_chunks(query_embedding vector, match_count int)
RETURNS TABLE (document_id uuid, chunk_index int, content text, similarity float)
LANGUAGE sql STABLE
AS $$
    SELECT c.document_id,
           c.chunk_index,
           c.content,
           (1 - (c.embedding <=> query_embedding))::float AS similarity
    FROM chunks c
    JOIN documents d ON d.id = c.document_id AND d.generation = c.generation
    WHERE c.embedding IS NOT NULL
    ORDER BY c.embedding <=> query_embedding
    LIMIT match_count
$$
"""

# Reciprocal rank fusion of full-text and vector rankings.
CREATE_HYBRID_MATCH_CHUNKS = """
CREATE OR REPLACE FUNCTION hybrid_match_chunks(
    query_text text,
    query_embedding vector,
    match_count int,
    rrf_k int DEFAULT 60
)
RETURNS TABLE (document_id uuid, chunk_index int, content text, similarity float, rank float)
LANGUAGE sql STABLE
AS $$
    WITH current_chunks AS (
        SELECT c.id, c.content, c.embedding
        FROM chunks c
        JOIN documents d ON d.id = c.document_id AND d.generation = c.generation
        WHERE c.embedding IS NOT NULL
    ),
    semantic AS (
        SELECT id,
               row_number() OVER (ORDER BY embedding <=> query_embedding) AS rank_ix,
               (1 - (embedding <=> query_embedding))::float AS similarity
        FROM current_chunks
        ORDER BY embedding <=> query_embedding
        LIMIT match_count * 2
    ),
    keyword AS (
        SELECT id,
               row_number() OVER (
                   ORDER BY ts_rank_cd(to_tsvector('simple', content),
                                       websearch_to_tsquery('simple', query_text)) DESC
               ) AS rank_ix
        FROM current_chunks
        WHERE to_tsvector('simple', content) @@ websearch_to_tsquery('simple', query_text)
        ORDER BY rank_ix
        LIMIT match_count * 2
    )
    SELECT c.document_id,
           c.chunk_index,
           c.content,
           s.similarity,
           (COALESCE(1.0 / (rrf_k + s.rank_ix), 0.0)
            + COALESCE(1.0 / (rrf_k + k.rank_ix), 0.0))::float AS rank
    FROM semantic s
    FULL OUTER JOIN keyword k ON s.id = k.id
    JOIN chunks c ON c.id = COALESCE(s.id, k.id)
    ORDER BY 5 DESC
    LIMIT match_count
$$
"""
