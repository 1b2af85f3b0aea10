from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict


@dataclass
class EmbeddedFile:
    file_id: str
    file_name: str
    embedding: Optional[List[float]]
    content: Optional[str] = None
    folder_path: Optional[str] = None
    mime_type: Optional[str] = None

    @property
    def has_embedding(self) -> bool:
        return self.embedding is not None and len(self.embedding) > 0


@dataclass(frozen=True)
class Theme:
    name: str
    description: str
    folder_name: str
    category: str
    keywords: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ClusterMember:
    file_id: str
    file_name: str
    confidence: float
    keywords: List[str] = field(default_factory=list)


@dataclass
class Cluster:
    id: str
    centroid: Optional[List[float]]
    members: List[ClusterMember]
    theme: Theme
    color: str
    selected: bool = True

    @property
    def member_file_ids(self) -> List[str]:
        return [m.file_id for m in self.members]

    @property
    def name(self) -> str:
        return self.theme.name

    @property
    def category(self) -> str:
        return self.theme.category

    @property
    def suggested_folder_name(self) -> str:
        return self.theme.folder_name


@dataclass(frozen=True)
class OrganizationSummary:
    total_files: int
    clusters_created: int
    estimated_savings: int
    confidence: float


@dataclass
class OrganizationSuggestion:
    clusters: List[Cluster]
    summary: OrganizationSummary
    unassigned_file_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FileRecord:
    """File metadata as listed by the remote store."""
    file_id: str
    name: str
    mime_type: str
    size_bytes: Optional[int] = None
    modified_time: Optional[datetime] = None
    folder_path: Optional[str] = None


@dataclass(frozen=True)
class CleanableFile:
    file_id: str
    file_name: str
    mime_type: str
    size_bytes: int
    modified_time: Optional[datetime]
    category: str
    reason: str
    confidence: str
    ai_summary: Optional[str] = None
    duplicate_of: Optional[str] = None


@dataclass(frozen=True)
class AgeAnnotation:
    file_id: str
    category: str
    reason: str
    confidence: float


@dataclass
class ScanResult:
    files: List[CleanableFile]
    total_scanned: int
    annotations: Dict[str, AgeAnnotation] = field(default_factory=dict)


@dataclass(frozen=True)
class CleanupRecommendation:
    action: str
    confidence: float
    reasoning: str
    tags: List[str] = field(default_factory=list)


@dataclass
class BatchSuggestion:
    auto_delete: List[CleanableFile]
    review: List[CleanableFile]
    keep: List[CleanableFile]
    summary: str
