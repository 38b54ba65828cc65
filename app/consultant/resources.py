"""Shared read-only collaborators injected into every invocation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .knowledge import CourseCatalog, DialogExampleStore, Embedder, TopicSectionStore
from .tools import ContractDirectory, HandoffClient, LoggingHandoffClient


@dataclass
class ConsultantResources:
    """Knowledge sources and action backends used by the handlers."""

    dialog_examples: DialogExampleStore
    topic_sections: TopicSectionStore
    catalog: CourseCatalog
    contracts: ContractDirectory
    handoff: HandoffClient = field(default_factory=LoggingHandoffClient)

    @classmethod
    def from_paths(
        cls,
        dialog_path: Path,
        sections_path: Path,
        retraining_path: Path,
        upskilling_path: Path,
        contract_info_json: str = "",
        handoff: HandoffClient | None = None,
        embedder: Optional[Embedder] = None,
        min_similarity: float = 0.6,
    ) -> "ConsultantResources":
        """Load every knowledge file; `embedder` turns on semantic example search.

        Raises:
            ConfigurationError: If a file is missing or malformed
        """
        return cls(
            dialog_examples=DialogExampleStore.from_file(
                dialog_path, embedder=embedder, min_similarity=min_similarity
            ),
            topic_sections=TopicSectionStore.from_file(sections_path),
            catalog=CourseCatalog.from_files(retraining_path, upskilling_path),
            contracts=ContractDirectory(contract_info_json),
            handoff=handoff or LoggingHandoffClient(),
        )
