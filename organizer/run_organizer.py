import logging
from .components.orchestrator import organize_files
from .components.report import save_cluster_report, cleanup_summary
from .core.database import load_embedded_files, save_cleanup_results
from .config.settings import DEFAULT_MAX_CLUSTERS, MIN_CLUSTER_SIZE, MAX_CONTENT_LENGTH, MAX_SCAN_FILES
from .models.file_classifier import (
    scan_files,
    should_analyze_content,
    find_content_duplicates,
    batch_cleanup_suggestion,
    sort_for_review,
)


def _fetch_contents(store, files):
    contents = {}
    for f in files:
        if not should_analyze_content(f.mime_type, f.size_bytes):
            continue
        try:
            contents[f.file_id] = store.get_content(f.file_id)[:MAX_CONTENT_LENGTH]
        except Exception as e:
            logging.warning(f"⚠️ Could not get content for {f.file_name}: {e}")
    return contents


def run_cleanup(store, include_age_rules=False, advisor=None, session=None, user_id=None, max_files=MAX_SCAN_FILES):
    """
    Scans the store for cleanable files.

    With an advisor, text files small enough to read get a second opinion.
    Flagged files with near-identical content are then marked as duplicates,
    using indexed embeddings when a session is given and the fetched text
    otherwise. With a session, results are persisted for user_id.
    """
    logging.info("🧹 Starting cleaner scan...")

    # 1️⃣ List & classify
    result = scan_files(store.list_files(), max_files=max_files, include_age_rules=include_age_rules)
    files = result.files
    contents = _fetch_contents(store, files)

    # 2️⃣ Optional AI review
    if advisor is not None:
        files = [advisor.review(f, contents[f.file_id]) if contents.get(f.file_id) else f for f in files]

    # 3️⃣ Content duplicates
    embeddings = {}
    if session is not None and user_id is not None:
        embeddings = {f.file_id: f.embedding for f in load_embedded_files(session, user_id)}
    files = find_content_duplicates(files, embeddings, contents)

    if advisor is not None:
        files = sort_for_review(files)
    result.files = files

    # 4️⃣ Persist
    if session is not None and user_id is not None:
        save_cleanup_results(session, user_id, files)

    suggestion = batch_cleanup_suggestion(files)
    logging.info(suggestion.summary)
    logging.info(f"📊 Cleanup summary: {cleanup_summary(files)}")
    return result, suggestion


def run_organization(
    session,
    user_id,
    method="hybrid",
    max_clusters=DEFAULT_MAX_CLUSTERS,
    min_cluster_size=MIN_CLUSTER_SIZE,
    seed=None,
    enhancer=None,
    report_path=None,
):
    logging.info(f"🚀 Organizing indexed files for user {user_id}")

    files = load_embedded_files(session, user_id)
    logging.info(f"📊 Loaded {len(files)} files with embeddings")

    suggestion = organize_files(
        files,
        method=method,
        max_clusters=max_clusters,
        min_cluster_size=min_cluster_size,
        rng=seed,
        enhancer=enhancer,
    )

    for c in suggestion.clusters:
        logging.info(f"   👉 {c.name} [{c.category}] -> {c.suggested_folder_name}/ ({len(c.members)} files)")

    if report_path:
        save_cluster_report(suggestion.clusters, report_path)

    return suggestion
