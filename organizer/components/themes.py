from ..core.records import Theme
from ..config.settings import CONTENT_SAMPLE_CHARS
from .lexicon import extract_common_words, score_categories, best_category, capitalize_words


def label_cluster(files) -> Theme:
    """
    Derives a name, folder name and category for a group of files.

    Categories are scored from filenames and the first characters of each
    file's content. Words shared by enough filenames name the group
    ("<Word> Collection"); otherwise the category does ("<Category> Files").
    """
    file_names = [f.file_name.lower() for f in files]
    content_text = " ".join((f.content or "")[:CONTENT_SAMPLE_CHARS] for f in files).lower()
    mime_types = [f.mime_type for f in files if getattr(f, "mime_type", None)]

    category = best_category(score_categories(file_names, content_text, mime_types))
    keywords = extract_common_words(file_names)

    if keywords:
        primary = capitalize_words(keywords[0])
        name = f"{primary} Collection"
        folder_name = primary
    else:
        name = f"{capitalize_words(category)} Files"
        folder_name = capitalize_words(category)

    return Theme(
        name=name,
        description=f"Collection of {category} files",
        folder_name=folder_name,
        category=category,
        keywords=keywords,
    )
