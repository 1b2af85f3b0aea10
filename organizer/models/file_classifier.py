import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, List
from sklearn.metrics.pairwise import cosine_similarity
from ..core.vectors import to_matrix
from ..core.records import CleanableFile, AgeAnnotation, ScanResult, BatchSuggestion, FileRecord
from ..config.settings import (
    EMPTY_FILE_THRESHOLD,
    TINY_FILE_THRESHOLD,
    SMALL_FILE_THRESHOLD,
    LARGE_FILE_THRESHOLD,
    OLD_FILE_MONTHS,
    OLD_CLEANUP_YEARS,
    MAX_SCAN_FILES,
    MAX_ANALYZABLE_SIZE,
    ANALYZABLE_MIME_TYPES,
    FOLDER_MIME_TYPE,
    DUPLICATE_NAME_MARKERS,
    SYSTEM_FILE_NAMES,
    SYSTEM_FILE_PREFIXES,
    CACHE_NAME_MARKERS,
    DUPLICATE_SIMILARITY_THRESHOLD,
    HIGH_SIMILARITY_THRESHOLD,
    MIN_DUPLICATE_CONTENT_LENGTH,
)

CONFIDENCE_WEIGHTS = {"high": 30, "medium": 20, "low": 10}
CATEGORY_WEIGHTS = {
    "system": 25, "empty": 20, "duplicate": 15,
    "tiny": 10, "low_quality": 8, "small": 5, "old": 3,
}


def format_file_size(size_bytes):
    if size_bytes == 0:
        return "0 B"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def is_folder(file: FileRecord) -> bool:
    return file.mime_type == FOLDER_MIME_TYPE


def is_system_file(name: str) -> bool:
    return name in SYSTEM_FILE_NAMES or any(name.startswith(p) for p in SYSTEM_FILE_PREFIXES)


def is_potential_duplicate(name: str) -> bool:
    return any(marker in name for marker in DUPLICATE_NAME_MARKERS)


def _size_tier(file: FileRecord):
    """(category, reason, confidence) from the size thresholds, or None."""
    size = file.size_bytes
    mime = (file.mime_type or "").lower()

    if size is None or size < 0:
        return None
    if size == 0:
        return "empty", "Empty file (0 bytes)", "high"
    if size <= EMPTY_FILE_THRESHOLD:
        return "empty", f"Nearly empty file ({size} bytes)", "high"
    if size <= TINY_FILE_THRESHOLD:
        # Special cases for tiny files
        if is_system_file(file.name):
            return "tiny", "System file (can be safely deleted)", "high"
        if any(marker in file.name for marker in CACHE_NAME_MARKERS):
            return "tiny", "Thumbnail or cache file", "medium"
        return "tiny", f"Very small file ({format_file_size(size)})", "medium"
    if size <= SMALL_FILE_THRESHOLD:
        if "zip" in mime or "archive" in mime:
            return "small", "Small archive file (possibly empty)", "low"
        if "document" in mime or "presentation" in mime:
            return "small", "Small document (possibly template or empty)", "low"
        return "small", f"Suspiciously small file ({format_file_size(size)})", "low"
    return None


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _age_in_days(moment: datetime, now: datetime) -> float:
    return (_as_utc(now) - _as_utc(moment)).total_seconds() / (60 * 60 * 24)


def classify_file(file: FileRecord, now: Optional[datetime] = None) -> Optional[CleanableFile]:
    """
    Size-tier cleanup classification.

    Folders are never classified. The duplicate-name check runs after the
    size tier and overrides whatever it decided. A file no other rule
    flagged is marked old (low confidence) once it is more than
    OLD_CLEANUP_YEARS years old. Returns None when no rule fires.
    """
    if is_folder(file):
        return None

    decision = _size_tier(file)

    if is_potential_duplicate(file.name):
        decision = "duplicate", "Potential duplicate file", "medium"

    if decision is None and file.modified_time is not None:
        age_days = _age_in_days(file.modified_time, now or datetime.now(timezone.utc))
        if age_days > 365 * OLD_CLEANUP_YEARS:
            decision = "old", f"Very old file ({int(age_days // 365)} years old)", "low"

    if decision is None:
        return None

    category, reason, confidence = decision
    size = file.size_bytes if file.size_bytes and file.size_bytes > 0 else 0
    return CleanableFile(
        file_id=file.file_id,
        file_name=file.name,
        mime_type=file.mime_type,
        size_bytes=size,
        modified_time=file.modified_time,
        category=category,
        reason=reason,
        confidence=confidence,
    )


def months_since(moment: datetime, now: datetime) -> float:
    """Elapsed months, counted as 30-day blocks."""
    return _age_in_days(moment, now) / 30


def classify_by_age(file: FileRecord, now: Optional[datetime] = None) -> Optional[AgeAnnotation]:
    """
    Size/type/age annotations used by the assisted scan.

    Rules run in order large -> type -> age; when several fire the later
    one wins. Returns None when none fire.
    """
    now = now or datetime.now(timezone.utc)
    decision = None

    if file.size_bytes is not None and file.size_bytes > LARGE_FILE_THRESHOLD:
        decision = "large_files", "File is larger than 100MB", 0.8

    mime = file.mime_type or ""
    if "image/" in mime:
        decision = "images", "Image file", 0.9
    elif "video/" in mime:
        decision = "videos", "Video file", 0.9
    elif "application/pdf" in mime:
        decision = "documents", "PDF document", 0.9

    if file.modified_time is not None:
        months = months_since(file.modified_time, now)
        if months > OLD_FILE_MONTHS:
            decision = "old_files", f"File hasn't been modified in {int(months)} months", 0.7

    if decision is None:
        return None

    category, reason, confidence = decision
    return AgeAnnotation(file_id=file.file_id, category=category, reason=reason, confidence=confidence)


def scan_files(records, max_files=MAX_SCAN_FILES, include_age_rules=False, now=None) -> ScanResult:
    """
    Classifies a listing of files and returns the flagged ones, largest first.

    Records without id/name/mime type and folders are skipped. At most
    max_files records are examined.
    """
    flagged: List[CleanableFile] = []
    annotations = {}
    total_scanned = 0

    for record in records:
        if total_scanned >= max_files:
            logging.info(f"🛑 Stopping scan at {max_files} files")
            break
        total_scanned += 1

        if not record.file_id or not record.name or not record.mime_type or is_folder(record):
            continue

        result = classify_file(record, now=now)
        if result is not None:
            flagged.append(result)

        if include_age_rules:
            annotation = classify_by_age(record, now=now)
            if annotation is not None:
                annotations[record.file_id] = annotation

    flagged.sort(key=lambda f: f.size_bytes, reverse=True)
    logging.info(f"✅ Scan complete: Found {len(flagged)} cleanable files out of {total_scanned} total files")
    return ScanResult(files=flagged, total_scanned=total_scanned, annotations=annotations)


def should_analyze_content(mime_type, size_bytes):
    return mime_type in ANALYZABLE_MIME_TYPES and (size_bytes or 0) < MAX_ANALYZABLE_SIZE


def text_similarity(a, b):
    """Jaccard similarity of whitespace-separated word sets."""
    words_a = set(a.lower().split())
    words_b = set(b.lower().split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def _is_newer_or_smaller(a: CleanableFile, b: CleanableFile) -> bool:
    """True when a should be marked the duplicate of b."""
    if a.modified_time and b.modified_time and _as_utc(a.modified_time) != _as_utc(b.modified_time):
        return _as_utc(a.modified_time) > _as_utc(b.modified_time)
    return a.size_bytes < b.size_bytes


def _has_vector(vector) -> bool:
    return vector is not None and len(vector) > 0


def find_content_duplicates(files, embeddings=None, contents=None, threshold=DUPLICATE_SIMILARITY_THRESHOLD):
    """
    Marks near-identical flagged files as duplicates.

    Pairs where both files have an embedding are compared by cosine
    similarity. Otherwise, when both have enough fetched text, the word
    overlap from text_similarity is used instead.

    Args:
        files: flagged CleanableFile records
        embeddings: dict of file_id -> vector
        contents: dict of file_id -> fetched text
        threshold: similarity above which two files are considered copies

    Returns:
        A new list; of each similar pair the newer (or smaller) file becomes
        the duplicate of the other.
    """
    result = list(files)
    embeddings = embeddings or {}
    contents = contents or {}

    with_vectors = [i for i, f in enumerate(result) if _has_vector(embeddings.get(f.file_id))]
    with_text = {
        i for i, f in enumerate(result)
        if len(contents.get(f.file_id) or "") > MIN_DUPLICATE_CONTENT_LENGTH
    }
    candidates = sorted(set(with_vectors) | with_text)
    if len(candidates) < 2:
        return result

    logging.info("🔍 Finding duplicates using content similarity...")
    positions = {}
    if len(with_vectors) >= 2:
        similarities = cosine_similarity(to_matrix([embeddings[result[i].file_id] for i in with_vectors]))
        positions = {idx: pos for pos, idx in enumerate(with_vectors)}

    for n, a in enumerate(candidates):
        for b in candidates[n + 1:]:
            file_a, file_b = result[a], result[b]
            if file_a.category == "duplicate" or file_b.category == "duplicate":
                continue

            if a in positions and b in positions:
                similarity = float(similarities[positions[a], positions[b]])
            elif a in with_text and b in with_text:
                similarity = text_similarity(contents[file_a.file_id], contents[file_b.file_id])
            else:
                continue

            if similarity <= threshold:
                continue

            if _is_newer_or_smaller(file_a, file_b):
                dup_idx, original = a, file_b
            else:
                dup_idx, original = b, file_a

            result[dup_idx] = replace(
                result[dup_idx],
                category="duplicate",
                reason=f'{similarity * 100:.1f}% similar to "{original.file_name}"',
                confidence="high" if similarity > HIGH_SIMILARITY_THRESHOLD else "medium",
                duplicate_of=original.file_id,
            )

    return result


def batch_cleanup_suggestion(files) -> BatchSuggestion:
    auto_delete = [
        f for f in files
        if f.confidence == "high" and f.category in ("empty", "system", "duplicate")
    ]
    review = [
        f for f in files
        if f not in auto_delete and (f.confidence == "medium" or f.category in ("small", "old"))
    ]
    keep = [f for f in files if f not in auto_delete and f not in review]

    freed = sum(f.size_bytes for f in auto_delete)
    summary = (
        f"Found {len(files)} cleanable files:\n"
        f"• {len(auto_delete)} safe to auto-delete ({format_file_size(freed)} freed)\n"
        f"• {len(review)} need your review\n"
        f"• {len(keep)} recommended to keep"
    )
    return BatchSuggestion(auto_delete=auto_delete, review=review, keep=keep, summary=summary)


def sort_score(file: CleanableFile) -> float:
    score = CONFIDENCE_WEIGHTS.get(file.confidence, 10)
    score += CATEGORY_WEIGHTS.get(file.category, 0)
    # Size factor capped at 10KB
    score += min(file.size_bytes / 1024, 10)
    return score


def sort_for_review(files):
    return sorted(files, key=sort_score, reverse=True)
