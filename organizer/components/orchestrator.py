import math
import logging
from collections import OrderedDict
from dataclasses import replace
from typing import List
from ..core.errors import InvalidInputError
from ..core.records import Cluster, ClusterMember, OrganizationSuggestion, OrganizationSummary
from ..config.settings import (
    CLUSTER_COLORS,
    DEFAULT_MAX_CLUSTERS,
    MIN_CLUSTER_SIZE,
    MIN_FILES_FOR_ORGANIZATION,
    KMEANS_MEMBER_CONFIDENCE,
    FOLDER_MEMBER_CONFIDENCE,
    MOVE_CONFIDENCE_THRESHOLD,
)
from .clustering import kmeans
from .themes import label_cluster
from .lexicon import capitalize_words

ORGANIZATION_METHODS = ("folders", "clustering", "hybrid")


def cluster_color(index):
    return CLUSTER_COLORS[index % len(CLUSTER_COLORS)]


def usable_files(files):
    """Files with a non-empty embedding; the rest are logged and left out."""
    usable = [f for f in files if f.has_embedding]
    skipped = len(files) - len(usable)
    if skipped:
        logging.warning(f"⚠️ Skipping {skipped} file(s) without embeddings")
    return usable


def cluster_files(files, k, rng=None) -> List[Cluster]:
    """
    Runs k-means over the files' embeddings and labels every non-empty cluster.

    Every usable file lands in exactly one returned cluster.
    """
    files = usable_files(files)
    result = kmeans([f.embedding for f in files], k, rng=rng)

    clusters = []
    for i in range(k):
        members = [f for f, a in zip(files, result.assignments) if a == i]
        if not members:
            continue

        theme = label_cluster(members)
        clusters.append(Cluster(
            id=f"cluster_{i}",
            centroid=result.centroids[i].tolist(),
            members=[
                ClusterMember(
                    file_id=f.file_id,
                    file_name=f.file_name,
                    confidence=KMEANS_MEMBER_CONFIDENCE,
                    keywords=list(theme.keywords),
                )
                for f in members
            ],
            theme=theme,
            color=cluster_color(i),
        ))

    return clusters


def improve_folder_name(folder_path, theme):
    if folder_path == "Root":
        return theme.folder_name
    parts = [p for p in folder_path.split("/") if p]
    return f"{parts[-1]} - Organized"


def organize_by_folders(files) -> List[Cluster]:
    """Groups files by their current folder; single-file folders are skipped."""
    logging.info("📁 Analyzing existing folder structure")

    groups = OrderedDict()
    for f in files:
        groups.setdefault(f.folder_path or "Root", []).append(f)

    clusters = []
    index = 0
    for folder_path, members in groups.items():
        if len(members) < 2:
            continue

        theme = label_cluster(members)
        clusters.append(Cluster(
            id=f"folder_{index}",
            centroid=None,
            members=[
                ClusterMember(
                    file_id=f.file_id,
                    file_name=f.file_name,
                    confidence=FOLDER_MEMBER_CONFIDENCE,
                    keywords=list(theme.keywords),
                )
                for f in members
            ],
            theme=replace(
                theme,
                name=f"{folder_path} Organization",
                description=f"Files from {folder_path} folder",
                folder_name=improve_folder_name(folder_path, theme),
            ),
            color=cluster_color(index),
        ))
        index += 1

    logging.info(f"✅ Created {len(clusters)} folder-based clusters")
    return clusters


def organize_by_kmeans(files, k, min_cluster_size, rng=None) -> List[Cluster]:
    logging.info(f"🧮 Running K-means clustering with k={k}")
    kept = []
    for c in cluster_files(files, k, rng=rng):
        if len(c.members) < min_cluster_size:
            logging.info(f"⚠️ {c.id} too small ({len(c.members)} files), leaving its files unassigned")
            continue
        kept.append(c)

    logging.info(f"✅ Created {len(kept)} content-based clusters")
    return kept


def calculate_metrics(total_files, clusters) -> OrganizationSummary:
    organized = sum(len(c.members) for c in clusters)
    if clusters:
        confidence = sum(
            sum(m.confidence for m in c.members) / len(c.members) for c in clusters
        ) / len(clusters)
    else:
        confidence = 0.0

    return OrganizationSummary(
        total_files=total_files,
        clusters_created=len(clusters),
        estimated_savings=math.floor(organized / total_files * 2) if total_files else 0,
        confidence=confidence,
    )


def organize_files(
    files,
    method="hybrid",
    max_clusters=DEFAULT_MAX_CLUSTERS,
    min_cluster_size=MIN_CLUSTER_SIZE,
    rng=None,
    enhancer=None,
) -> OrganizationSuggestion:
    """
    Builds an organization suggestion for a user's embedded files.

    method = "folders"     -> group by current folder
    method = "clustering"  -> k-means over embeddings
    method = "hybrid"      -> folder groups plus k-means for the remaining budget
    """
    if method not in ORGANIZATION_METHODS:
        raise InvalidInputError(f"Unknown organization method: {method}")

    files = usable_files(files)
    if len(files) < MIN_FILES_FOR_ORGANIZATION:
        raise InvalidInputError(
            f"Need at least {MIN_FILES_FOR_ORGANIZATION} files for meaningful organization, got {len(files)}"
        )

    logging.info(f"🎯 Starting {method} organization analysis for {len(files)} files")

    if method == "folders":
        clusters = organize_by_folders(files)
    elif method == "clustering":
        clusters = organize_by_kmeans(files, min(max_clusters, len(files)), min_cluster_size, rng=rng)
    else:
        clusters = organize_by_folders(files)
        k = min(max_clusters - len(clusters), len(files))
        if k >= 1:
            clusters = clusters + organize_by_kmeans(files, k, min_cluster_size, rng=rng)
        else:
            logging.info("⏭️ Folder groups used the whole cluster budget, skipping K-means")

    if enhancer is not None:
        clusters = enhancer.enhance(clusters)

    assigned = {fid for c in clusters for fid in c.member_file_ids}
    unassigned = [f.file_id for f in files if f.file_id not in assigned]

    return OrganizationSuggestion(
        clusters=clusters,
        summary=calculate_metrics(len(files), clusters),
        unassigned_file_ids=unassigned,
    )


def plan_folder_moves(suggestion):
    """
    Target folder and movable files for every selected cluster.

    Only members above the move confidence threshold are listed.
    """
    plan = []
    for c in suggestion.clusters:
        if not c.selected:
            logging.info(f"⏭️ Skipping unselected cluster: {c.name}")
            continue

        plan.append({
            "cluster_id": c.id,
            "target_path": f"{capitalize_words(c.category)}/{c.suggested_folder_name}",
            "file_ids": [m.file_id for m in c.members if m.confidence > MOVE_CONFIDENCE_THRESHOLD],
        })
    return plan
