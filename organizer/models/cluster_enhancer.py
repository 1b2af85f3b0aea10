import re
import logging
from dataclasses import replace
from langchain_core.prompts import PromptTemplate
from ..config.settings import CATEGORIES
from .llm import parse_labeled_lines

ENHANCEMENT_PROMPT = PromptTemplate.from_template(
    """Analyze this group of files and suggest better organization:

Files: {file_names}
Current name: {name}
Current folder: {folder}

Please suggest:
1. A better cluster name (max 30 chars)
2. A better folder name (max 25 chars, no special chars)
3. Category (work/personal/media/documents/archive/mixed)
4. 3-5 relevant keywords
5. Brief description

Format your response as:
NAME: [improved name]
FOLDER: [better folder name]
CATEGORY: [category]
KEYWORDS: [keyword1, keyword2, keyword3]
DESCRIPTION: [brief description]"""
)


def parse_enhancement(text):
    """
    Reads the model's NAME/FOLDER/CATEGORY/KEYWORDS/DESCRIPTION lines.
    Unknown categories and empty values are dropped.
    """
    fields = parse_labeled_lines(text)
    result = {"additional_keywords": []}

    if fields.get("NAME"):
        result["name"] = fields["NAME"]
    folder = re.sub(r"[^a-zA-Z0-9\s\-_]", "", fields.get("FOLDER", "")).strip()
    if folder:
        result["folder_name"] = folder
    category = fields.get("CATEGORY", "").lower()
    if category in CATEGORIES:
        result["category"] = category
    if fields.get("KEYWORDS"):
        result["additional_keywords"] = [
            k.strip().lower() for k in fields["KEYWORDS"].split(",") if k.strip()
        ]
    if fields.get("DESCRIPTION"):
        result["description"] = fields["DESCRIPTION"]

    return result


def apply_enhancement(cluster, enhancement):
    theme = replace(
        cluster.theme,
        name=enhancement.get("name", cluster.theme.name),
        description=enhancement.get("description", cluster.theme.description),
        folder_name=enhancement.get("folder_name", cluster.theme.folder_name),
        category=enhancement.get("category", cluster.theme.category),
    )
    extra = enhancement.get("additional_keywords", [])
    members = [replace(m, keywords=list(m.keywords) + extra) for m in cluster.members]
    return replace(cluster, theme=theme, members=members)


class ClusterEnhancer:
    """Asks a chat model for better cluster names; failures keep the original labels."""

    def __init__(self, llm):
        self.llm = llm

    def suggest(self, cluster):
        chain = ENHANCEMENT_PROMPT | self.llm
        response = chain.invoke({
            "file_names": ", ".join(m.file_name for m in cluster.members),
            "name": cluster.name,
            "folder": cluster.suggested_folder_name,
        })
        return parse_enhancement(response.content)

    def enhance(self, clusters):
        if not self.llm:
            return list(clusters)

        logging.info("🤖 Enhancing clusters with AI analysis")
        enhanced = []
        for cluster in clusters:
            try:
                enhanced.append(apply_enhancement(cluster, self.suggest(cluster)))
            except Exception as e:
                logging.warning(f"⚠️ AI enhancement failed for cluster {cluster.id}: {e}")
                enhanced.append(cluster)
        return enhanced
