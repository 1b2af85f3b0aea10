from organizer.core.records import EmbeddedFile
from organizer.components.themes import label_cluster
from organizer.components.lexicon import (
    tokenize,
    capitalize_words,
    extract_common_words,
    score_categories,
    best_category,
)


def make_file(name, content=None, mime_type=None):
    return EmbeddedFile(file_id=name, file_name=name, embedding=[0.0], content=content, mime_type=mime_type)


def test_tokenize_keeps_long_words_only():
    assert tokenize("My_File-name.TXT") == ["my_file", "name"]
    assert tokenize(None) == []


def test_capitalize_words():
    assert capitalize_words("hello WORLD") == "Hello World"


def test_common_words_need_enough_filenames():
    names = [f"holiday plan {i}.txt" for i in range(5)] + [f"scan {i}.png" for i in range(5)]
    assert extract_common_words(names)[:2] == ["holiday", "plan"]

    names = ["invoice one.txt", "invoice two.txt"] + [f"random{i}.txt" for i in range(8)]
    assert "invoice" not in extract_common_words(names)


def test_common_words_count_once_per_filename():
    names = ["alpha alpha alpha.txt", "beta.txt", "gamma.txt"]
    assert extract_common_words(names) == []


def test_filename_hits_weigh_double():
    scores = score_categories(["report.pdf"], "")
    assert scores["documents"] == 4
    assert scores["work"] == 2
    assert best_category(scores) == "documents"


def test_zero_scores_fall_back_to_mixed():
    assert best_category(score_categories(["zzz.bin"], "")) == "mixed"


def test_theme_fallback_uses_category():
    theme = label_cluster([make_file("alpha.txt"), make_file("beta.txt"), make_file("gamma.txt")])
    assert theme.name == "Mixed Files"
    assert theme.folder_name == "Mixed"
    assert theme.category == "mixed"
    assert theme.description == "Collection of mixed files"
    assert theme.keywords == []


def test_theme_named_after_common_word():
    files = [
        make_file("project-alpha-notes.txt"),
        make_file("project-beta-plan.txt"),
        make_file("project-gamma.txt"),
    ]
    theme = label_cluster(files)
    assert theme.name == "Project Collection"
    assert theme.folder_name == "Project"
    assert theme.keywords == ["project"]
    assert theme.category == "work"


def test_content_sample_drives_category():
    files = [
        make_file("a1.bin", content="family vacation photo from the lake"),
        make_file("a2.bin", content="more pictures"),
    ]
    theme = label_cluster(files)
    assert theme.category == "personal"
    assert theme.name == "Personal Files"


def test_content_beyond_sample_is_ignored():
    files = [make_file("a1.bin", content="x" * 250 + " budget meeting project")]
    assert label_cluster(files).category == "mixed"


def test_stopwords_are_not_names():
    files = [make_file("Untitled document 1"), make_file("Untitled document 2")]
    theme = label_cluster(files)
    assert theme.name == "Documents Files"


def test_mime_types_score_media():
    files = [make_file("x1.bin", mime_type="image/jpeg"), make_file("x2.bin", mime_type="video/mp4")]
    assert label_cluster(files).category == "media"
