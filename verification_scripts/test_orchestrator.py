import pandas as pd
import pytest

from organizer.core.errors import InvalidInputError
from organizer.core.records import EmbeddedFile
from organizer.components.orchestrator import (
    cluster_files,
    organize_files,
    organize_by_folders,
    plan_folder_moves,
)
from organizer.components.report import clusters_to_frame, save_cluster_report, cleanup_summary


def make_files(invoice_folder=None, photo_folder=None):
    files = []
    for i in range(5):
        files.append(EmbeddedFile(
            file_id=f"inv{i}",
            file_name=f"invoice march {i}.pdf",
            embedding=[100.0 + i],
            folder_path=invoice_folder,
        ))
    for i in range(5):
        files.append(EmbeddedFile(
            file_id=f"pic{i}",
            file_name=f"vacation photo {i}.jpg",
            embedding=[-100.0 - i],
            folder_path=photo_folder,
        ))
    return files


def find_cluster(clusters, file_id):
    return next(c for c in clusters if file_id in c.member_file_ids)


def test_cluster_files_covers_every_file():
    clusters = cluster_files(make_files(), 2, rng=7)
    member_ids = [fid for c in clusters for fid in c.member_file_ids]
    assert sorted(member_ids) == sorted(f.file_id for f in make_files())
    assert len(member_ids) == len(set(member_ids))


def test_cluster_files_labels_clusters():
    clusters = cluster_files(make_files(), 2, rng=7)
    invoices = find_cluster(clusters, "inv0")
    photos = find_cluster(clusters, "pic0")

    assert invoices.name == "Invoice Collection"
    assert invoices.suggested_folder_name == "Invoice"
    assert invoices.category == "documents"
    assert photos.name == "Vacation Collection"
    assert invoices.id.startswith("cluster_")
    assert all(m.confidence == 0.8 for m in invoices.members)
    assert invoices.members[0].keywords == ["invoice", "march"]
    assert len(invoices.centroid) == 1


def test_cluster_files_skips_missing_embeddings():
    files = make_files() + [EmbeddedFile(file_id="blank", file_name="blank.txt", embedding=[])]
    clusters = cluster_files(files, 2, rng=7)
    assert "blank" not in [fid for c in clusters for fid in c.member_file_ids]


def test_organize_needs_ten_files():
    with pytest.raises(InvalidInputError):
        organize_files(make_files()[:9], method="clustering")


def test_organize_rejects_unknown_method():
    with pytest.raises(InvalidInputError):
        organize_files(make_files(), method="alphabetical")


def test_organize_by_clustering():
    suggestion = organize_files(make_files(), method="clustering", max_clusters=2, rng=7)
    assert len(suggestion.clusters) == 2
    assert suggestion.unassigned_file_ids == []
    assert suggestion.summary.total_files == 10
    assert suggestion.summary.clusters_created == 2
    assert suggestion.summary.estimated_savings == 2
    assert suggestion.summary.confidence == pytest.approx(0.8)


def test_small_clusters_leave_files_unassigned():
    suggestion = organize_files(make_files(), method="clustering", max_clusters=2, min_cluster_size=6, rng=7)
    assert suggestion.clusters == []
    assert len(suggestion.unassigned_file_ids) == 10
    assert suggestion.summary.confidence == 0.0
    assert suggestion.summary.estimated_savings == 0


def test_organize_by_folders():
    files = make_files(invoice_folder="Finance/Invoices")
    files[-1].folder_path = "Misc"
    clusters = organize_by_folders(files)

    assert [c.id for c in clusters] == ["folder_0", "folder_1"]
    assert clusters[0].name == "Finance/Invoices Organization"
    assert clusters[0].theme.description == "Files from Finance/Invoices folder"
    assert clusters[0].suggested_folder_name == "Invoices - Organized"
    assert clusters[1].name == "Root Organization"
    assert clusters[1].suggested_folder_name == "Vacation"
    assert all(m.confidence == 0.9 for m in clusters[0].members)


def test_folder_method_reports_skipped_single_files():
    files = make_files(invoice_folder="Finance/Invoices")
    files[-1].folder_path = "Misc"
    suggestion = organize_files(files, method="folders")
    assert suggestion.unassigned_file_ids == ["pic4"]


def test_hybrid_adds_kmeans_clusters_within_budget():
    files = make_files(invoice_folder="Finance")
    suggestion = organize_files(files, method="hybrid", max_clusters=4, rng=7)
    ids = [c.id for c in suggestion.clusters]
    assert ids[:2] == ["folder_0", "folder_1"]
    assert len([i for i in ids if i.startswith("cluster_")]) == 2


def test_hybrid_skips_kmeans_when_folders_fill_budget():
    files = make_files(invoice_folder="Finance")
    suggestion = organize_files(files, method="hybrid", max_clusters=2, rng=7)
    assert [c.id for c in suggestion.clusters] == ["folder_0", "folder_1"]


def test_plan_folder_moves_skips_unselected():
    suggestion = organize_files(make_files(), method="clustering", max_clusters=2, rng=7)
    photos = find_cluster(suggestion.clusters, "pic0")
    photos.selected = False

    plan = plan_folder_moves(suggestion)
    assert len(plan) == 1
    assert plan[0]["target_path"] == "Documents/Invoice"
    assert sorted(plan[0]["file_ids"]) == [f"inv{i}" for i in range(5)]


def test_cluster_report_has_row_per_member(tmp_path):
    clusters = cluster_files(make_files(), 2, rng=7)
    df = clusters_to_frame(clusters)
    assert len(df) == 10
    assert set(df["file_id"]) == {f.file_id for f in make_files()}

    out = tmp_path / "reports" / "clusters.csv"
    save_cluster_report(clusters, str(out))
    assert len(pd.read_csv(out)) == 10


def test_cleanup_summary_empty():
    assert cleanup_summary([])["total_found"] == 0
