"""Read-only knowledge sources consulted by the handlers."""

from .catalog import CourseCatalog, CourseEntry, CourseRequestFacts, mentions_courses
from .embeddings import Embedder, OpenAIEmbedder, SemanticIndex
from .faq import DialogExample, DialogExampleStore, TopicSectionStore

__all__ = [
    "CourseCatalog",
    "CourseEntry",
    "CourseRequestFacts",
    "DialogExample",
    "DialogExampleStore",
    "Embedder",
    "OpenAIEmbedder",
    "SemanticIndex",
    "TopicSectionStore",
    "mentions_courses",
]
