import pandas as pd
import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from organizer.core.database import init_db, upsert_embedding, load_cleanup_results
from organizer.core.file_store import LocalFileStore, delete_files
from organizer.models.cleanup_advisor import CleanupAdvisor
from organizer.run_organizer import run_cleanup, run_organization


@pytest.fixture
def drive(tmp_path):
    (tmp_path / "empty.txt").write_bytes(b"")
    (tmp_path / "notes - Copy.txt").write_text("meeting notes " * 7300)
    (tmp_path / "big.txt").write_bytes(b"x" * 20 * 1024)
    (tmp_path / "subdir").mkdir()
    (tmp_path / "subdir" / ".DS_Store").write_bytes(b"\0" * 1000)
    return tmp_path


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    init_db(engine)
    s = sessionmaker(bind=engine)()
    yield s
    s.close()


def test_local_store_lists_folders_and_files(drive):
    records = {r.file_id: r for r in LocalFileStore(drive).list_files()}
    assert records["subdir"].mime_type == "application/vnd.google-apps.folder"
    assert records["subdir/.DS_Store"].folder_path == "subdir"
    assert records["empty.txt"].folder_path == "Root"
    assert records["big.txt"].size_bytes == 20 * 1024


def test_store_rejects_paths_outside_root(drive):
    with pytest.raises(ValueError):
        LocalFileStore(drive).get_content("../secret.txt")


def test_run_cleanup_flags_expected_files(drive):
    result, suggestion = run_cleanup(LocalFileStore(drive))

    assert result.total_scanned == 5
    assert [f.file_id for f in result.files] == ["notes - Copy.txt", "subdir/.DS_Store", "empty.txt"]
    assert result.files[0].category == "duplicate"
    assert result.files[1].reason == "System file (can be safely deleted)"
    assert [f.file_id for f in suggestion.auto_delete] == ["empty.txt"]


def test_run_cleanup_reviews_readable_files_and_persists(drive, session):
    llm = FakeListChatModel(responses=["ACTION: KEEP\nCONFIDENCE: 0.1\nREASONING: Useful notes\nTAGS: work"])
    result, _ = run_cleanup(LocalFileStore(drive), advisor=CleanupAdvisor(llm), session=session, user_id="u1")

    notes = next(f for f in result.files if f.file_id == "notes - Copy.txt")
    assert notes.ai_summary == "Useful notes"
    assert notes.confidence == "low"
    assert all(f.ai_summary is None for f in result.files if f is not notes)

    saved = load_cleanup_results(session, "u1")
    assert sorted(r.file_id for r in saved) == sorted(f.file_id for f in result.files)


def test_delete_files_collects_failures(drive):
    outcome = delete_files(LocalFileStore(drive), ["empty.txt", "missing.txt"])
    assert outcome == {"deleted": ["empty.txt"], "failed": ["missing.txt"]}
    assert not (drive / "empty.txt").exists()


def test_run_organization_from_database(session, tmp_path):
    for i in range(5):
        upsert_embedding(session, "u1", f"inv{i}", f"invoice {i}.pdf", [100.0 + i])
        upsert_embedding(session, "u1", f"pic{i}", f"photo {i}.jpg", [-100.0 - i])

    report = tmp_path / "clusters.csv"
    suggestion = run_organization(session, "u1", method="clustering", max_clusters=2, seed=7,
                                  report_path=str(report))

    assert len(suggestion.clusters) == 2
    assert suggestion.summary.total_files == 10
    assert len(pd.read_csv(report)) == 10


def test_run_cleanup_marks_identical_text_files(tmp_path):
    text = ("Minutes of the weekly planning meeting. " * 14)[:550]
    (tmp_path / "a.txt").write_text(text)
    (tmp_path / "b.txt").write_text(text)

    result, _ = run_cleanup(LocalFileStore(tmp_path))

    categories = {f.file_id: f.category for f in result.files}
    assert sorted(categories.values()) == ["duplicate", "tiny"]
    duplicate = next(f for f in result.files if f.category == "duplicate")
    assert duplicate.duplicate_of == ({"a.txt", "b.txt"} - {duplicate.file_id}).pop()
    assert duplicate.confidence == "high"


def test_run_cleanup_uses_indexed_embeddings(tmp_path, session):
    (tmp_path / "draft.txt").write_text("first idea")
    (tmp_path / "draft2.txt").write_text("totally different words")
    upsert_embedding(session, "u1", "draft.txt", "draft.txt", [1.0, 0.0])
    upsert_embedding(session, "u1", "draft2.txt", "draft2.txt", [1.0, 0.001])

    result, _ = run_cleanup(LocalFileStore(tmp_path), session=session, user_id="u1")

    assert sorted(f.category for f in result.files) == ["duplicate", "empty"]
