import os
import logging
from dotenv import load_dotenv

load_dotenv()
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI
from ..config.settings import LLM_PROVIDER, LLM_MODEL


def setup_llm(provider=LLM_PROVIDER, model_name=LLM_MODEL, temperature=0.3):
    """
    Builds the chat model used for cluster naming and cleanup advice.
    Returns None when the provider's API key is missing.
    """
    try:
        if provider == "google":
            if not os.getenv("GOOGLE_API_KEY"):
                logging.warning("⚠️ GOOGLE_API_KEY not found. AI suggestions will be skipped.")
                return None
            return ChatGoogleGenerativeAI(model=model_name, temperature=temperature)
        elif provider == "openai":
            if not os.getenv("OPENAI_API_KEY"):
                logging.warning("⚠️ OPENAI_API_KEY not found. AI suggestions will be skipped.")
                return None
            return ChatOpenAI(model=model_name, temperature=temperature)
        else:
            logging.warning(f"⚠️ Unknown LLM provider '{provider}'. AI suggestions will be skipped.")
            return None
    except Exception as e:
        logging.error(f"❌ Failed to initialize LLM: {e}")
        return None


def parse_labeled_lines(text):
    """Splits 'KEY: value' lines into a dict keyed by upper-cased KEY."""
    fields = {}
    for line in (text or "").split("\n"):
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        fields[key.strip().upper()] = value.strip()
    return fields
