import logging
from dataclasses import replace
from datetime import datetime, timezone
from langchain_core.prompts import PromptTemplate
from ..core.records import CleanupRecommendation
from .file_classifier import format_file_size, _as_utc
from .llm import parse_labeled_lines

RECOMMENDATION_PROMPT = PromptTemplate.from_template(
    """Analyze this file for cleanup recommendation:

Filename: {name}
Size: {size}
Type: {mime_type}
Age: {age}
Content preview: {preview}

Task: Determine if this file should be KEPT, DELETED, or needs REVIEW.

Consider:
- Is the content meaningful/useful?
- Is it a template, draft, or test file?
- Does it contain sensitive/important information?
- Is the quality poor (corrupted, blank, incomplete)?
- Could it be a duplicate or old version?

Respond in this format:
ACTION: [KEEP|DELETE|REVIEW]
CONFIDENCE: [0.0-1.0]
REASONING: [brief explanation]
TAGS: [comma-separated tags like: empty, template, important, personal, work, etc.]"""
)

ACTIONS = ("keep", "delete", "review")
BASIC_CONFIDENCE_SCORES = {"high": 0.8, "medium": 0.5, "low": 0.2}


def describe_age(modified_time, now=None):
    if modified_time is None:
        return "Unknown"
    now = now or datetime.now(timezone.utc)
    days = int((_as_utc(now) - _as_utc(modified_time)).total_seconds() // 86400)

    if days < 1:
        return "Today"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    if days < 365:
        return f"{days // 30} months ago"
    return f"{days // 365} years ago"


def parse_recommendation(text) -> CleanupRecommendation:
    fields = parse_labeled_lines(text)

    action = fields.get("ACTION", "").lower()
    if action not in ACTIONS:
        action = "review"

    try:
        confidence = float(fields.get("CONFIDENCE", ""))
    except ValueError:
        confidence = 0.5
    confidence = max(0.0, min(1.0, confidence))

    tags = [t.strip().lower() for t in fields.get("TAGS", "").split(",") if t.strip()]

    return CleanupRecommendation(
        action=action,
        confidence=confidence,
        reasoning=fields.get("REASONING") or "AI analysis completed",
        tags=tags,
    )


def combine_confidence(basic, score):
    combined = (BASIC_CONFIDENCE_SCORES.get(basic, 0.2) + score) / 2
    if combined > 0.7:
        return "high"
    if combined > 0.4:
        return "medium"
    return "low"


def ai_category(tags):
    if "empty" in tags or "blank" in tags:
        return "empty"
    if "template" in tags or "test" in tags:
        return "low_quality"
    if "duplicate" in tags or "copy" in tags:
        return "duplicate"
    return "small"


class CleanupAdvisor:
    """Second opinion from a chat model on files the rules already flagged."""

    def __init__(self, llm):
        self.llm = llm

    def recommend(self, file, content) -> CleanupRecommendation:
        if not content:
            return CleanupRecommendation("review", 0.3, "No content available for analysis", ["no-content"])
        if not self.llm:
            return CleanupRecommendation("review", 0.2, "AI analysis unavailable", ["ai-error"])

        try:
            chain = RECOMMENDATION_PROMPT | self.llm
            response = chain.invoke({
                "name": file.file_name,
                "size": format_file_size(file.size_bytes),
                "mime_type": file.mime_type,
                "age": describe_age(file.modified_time),
                "preview": content[:500],
            })
            return parse_recommendation(response.content)
        except Exception as e:
            logging.error(f"❌ AI recommendation failed for {file.file_name}: {e}")
            return CleanupRecommendation("review", 0.2, "AI analysis unavailable", ["ai-error"])

    def review(self, file, content):
        """Returns the file with AI confidence and summary merged in."""
        recommendation = self.recommend(file, content)
        updated = replace(
            file,
            confidence=combine_confidence(file.confidence, recommendation.confidence),
            ai_summary=recommendation.reasoning,
        )
        if recommendation.action == "delete" and recommendation.confidence > 0.8:
            updated = replace(updated, category=ai_category(recommendation.tags))
        return updated
