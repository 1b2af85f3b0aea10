import os
import logging
import argparse

from organizer.config.settings import (
    setup_directories,
    setup_logging,
    REPORT_DIR,
    DEFAULT_MAX_CLUSTERS,
    MIN_CLUSTER_SIZE,
)
from organizer.core.database import SessionLocal, init_db
from organizer.core.file_store import LocalFileStore
from organizer.models.llm import setup_llm
from organizer.models.cluster_enhancer import ClusterEnhancer
from organizer.models.cleanup_advisor import CleanupAdvisor
from organizer.run_organizer import run_cleanup, run_organization


def run_pipeline(
    mode="organize",
    user_id="local",
    directory=None,
    method="hybrid",
    max_clusters=DEFAULT_MAX_CLUSTERS,
    min_cluster_size=MIN_CLUSTER_SIZE,
    seed=None,
    use_ai=False,
    include_age_rules=False,
):
    """
    mode = "organize" -> cluster indexed embeddings into suggested folders
    mode = "clean"    -> scan a directory for cleanable files
    """

    # 1️⃣ Setup
    setup_directories()
    setup_logging()
    init_db()
    logging.info(f"🚀 Pipeline started in '{mode}' mode")

    llm = setup_llm() if use_ai else None
    session = SessionLocal()

    try:
        if mode == "organize":
            report_path = os.path.join(REPORT_DIR, f"clusters_{user_id}.csv")
            run_organization(
                session,
                user_id,
                method=method,
                max_clusters=max_clusters,
                min_cluster_size=min_cluster_size,
                seed=seed,
                enhancer=ClusterEnhancer(llm) if llm else None,
                report_path=report_path,
            )
        elif mode == "clean":
            if not directory:
                logging.error("❌ Clean mode needs a directory to scan.")
                return
            run_cleanup(
                LocalFileStore(directory),
                include_age_rules=include_age_rules,
                advisor=CleanupAdvisor(llm) if llm else None,
                session=session,
                user_id=user_id,
            )
        else:
            logging.error(f"❌ Unknown mode: {mode}")
            return
    finally:
        session.close()

    logging.info("🏁 Pipeline completed successfully")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Organize and clean up indexed files")
    parser.add_argument("mode", choices=["organize", "clean"])
    parser.add_argument("--user", default="local")
    parser.add_argument("--dir", dest="directory")
    parser.add_argument("--method", default="hybrid", choices=["folders", "clustering", "hybrid"])
    parser.add_argument("--max-clusters", type=int, default=DEFAULT_MAX_CLUSTERS)
    parser.add_argument("--min-cluster-size", type=int, default=MIN_CLUSTER_SIZE)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--ai", action="store_true")
    parser.add_argument("--age-rules", action="store_true")
    args = parser.parse_args()

    run_pipeline(
        mode=args.mode,
        user_id=args.user,
        directory=args.directory,
        method=args.method,
        max_clusters=args.max_clusters,
        min_cluster_size=args.min_cluster_size,
        seed=args.seed,
        use_ai=args.ai,
        include_age_rules=args.age_rules,
    )
