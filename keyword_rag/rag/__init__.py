"""Knowledge base and question answering."""

from keyword_rag.rag.knowledge_base import KnowledgeBase
from keyword_rag.rag.models import RAGAnswer, RAGQuery, SourceAttribution
from keyword_rag.rag.pipeline import RAGPipeline

__all__ = [
    "KnowledgeBase",
    "RAGAnswer",
    "RAGPipeline",
    "RAGQuery",
    "SourceAttribution",
]
