import re
import math
from collections import Counter
from ..config.settings import (
    CATEGORIES,
    CATEGORY_PATTERNS,
    FALLBACK_CATEGORY,
    NAME_STOPWORDS,
    MIN_TOKEN_LENGTH,
    COMMON_WORD_RATIO,
    MIN_COMMON_WORD_COUNT,
    MAX_COMMON_WORDS,
)

_NON_WORD = re.compile(r"\W+")


def tokenize(text, min_length=MIN_TOKEN_LENGTH):
    """Lowercase word tokens longer than min_length."""
    if not text:
        return []
    return [t for t in _NON_WORD.split(str(text).lower()) if len(t) > min_length]


def capitalize_words(text):
    return " ".join(word[:1].upper() + word[1:].lower() for word in str(text).split(" "))


def common_word_threshold(file_count):
    return max(MIN_COMMON_WORD_COUNT, math.ceil(COMMON_WORD_RATIO * file_count))


def extract_common_words(file_names, limit=MAX_COMMON_WORDS):
    """
    Words shared by enough filenames to name a group.

    A word counts once per filename. Words must appear in at least
    max(2, ceil(0.3 * len(file_names))) names; the most frequent come first.
    """
    counts = Counter()
    for name in file_names:
        words = dict.fromkeys(w for w in tokenize(name) if w not in NAME_STOPWORDS)
        counts.update(words.keys())

    threshold = common_word_threshold(len(file_names))

    # sorted() is stable, so ties keep first-seen order
    ordered = sorted(
        ((word, count) for word, count in counts.items() if count >= threshold),
        key=lambda item: item[1],
        reverse=True,
    )
    return [word for word, _ in ordered[:limit]]


def score_categories(file_names, content_text, mime_types=None):
    """
    Scores each category by keyword hits.

    A keyword found in the content sample adds 1, one found in any filename
    adds 2. Media/document mime types add 2 per file.
    """
    names = [str(n).lower() for n in file_names]
    text = (content_text or "").lower()
    scores = {category: 0 for category in CATEGORIES}

    for mime in mime_types or []:
        mime = (mime or "").lower()
        if "image" in mime or "video" in mime or "audio" in mime:
            scores["media"] += 2
        elif "document" in mime or "pdf" in mime or "text" in mime:
            scores["documents"] += 2

    for category, keywords in CATEGORY_PATTERNS.items():
        for keyword in keywords:
            if keyword in text:
                scores[category] += 1
            if any(keyword in name for name in names):
                scores[category] += 2

    return scores


def best_category(scores):
    best = FALLBACK_CATEGORY
    highest = 0
    for category in CATEGORIES:
        if scores.get(category, 0) > highest:
            highest = scores[category]
            best = category
    return best
