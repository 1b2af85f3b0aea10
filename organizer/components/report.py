import os
import logging
import pandas as pd

CLUSTER_REPORT_COLUMNS = [
    "file_id", "file_name", "cluster_id", "cluster_name",
    "category", "suggested_folder", "confidence",
]


def clusters_to_frame(clusters) -> pd.DataFrame:
    """One row per cluster member."""
    rows = [
        {
            "file_id": m.file_id,
            "file_name": m.file_name,
            "cluster_id": c.id,
            "cluster_name": c.name,
            "category": c.category,
            "suggested_folder": c.suggested_folder_name,
            "confidence": m.confidence,
        }
        for c in clusters
        for m in c.members
    ]
    return pd.DataFrame(rows, columns=CLUSTER_REPORT_COLUMNS)


def save_cluster_report(clusters, output_path):
    df = clusters_to_frame(clusters)
    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)
    df.to_csv(output_path, index=False)
    logging.info(f"✅ Cluster Report Saved: {output_path}")
    return df


def cleanup_summary(files):
    """Counts flagged files per category and confidence, plus their total size."""
    if not files:
        return {"total_found": 0, "total_bytes": 0, "categories": {}, "confidence": {}}

    df = pd.DataFrame(
        [{"category": f.category, "confidence": f.confidence, "size": f.size_bytes} for f in files]
    )
    return {
        "total_found": len(df),
        "total_bytes": int(df["size"].sum()),
        "categories": {k: int(v) for k, v in df["category"].value_counts().items()},
        "confidence": {k: int(v) for k, v in df["confidence"].value_counts().items()},
    }
