import asyncio
from typing import Optional

from config import Settings, get_settings
from logger import logger
from models import CaseRecord
from prompts import build_rewrite_prompt


# ─── Errors ────────────────────────────────────────────────────────────────────

class RewriteError(Exception):
    """Failure surfaced to the rewrite caller. `message` is safe to show to the user."""

    message = "Failed to generate report"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class MissingCredentialError(RewriteError):
    message = "API Key missing"


class ProviderError(RewriteError):
    message = "Failed to generate report"


# ─── Unified LLM Caller ───────────────────────────────────────────────────────

def call_llm(prompt: str, provider: str, model_id: str, api_key: str) -> str:
    """
    Route a prompt to the correct LLM provider and return the response text.
    Raises ValueError for unsupported providers.
    """
    provider = provider.lower().strip()

    if provider == "gemini":
        import google.generativeai as genai
        genai.configure(api_key=api_key)
        model = genai.GenerativeModel(model_id)
        response = model.generate_content(prompt)
        return response.text.strip()

    elif provider == "openai":
        from openai import OpenAI
        client = OpenAI(api_key=api_key)
        response = client.chat.completions.create(
            model=model_id,
            messages=[{"role": "user", "content": prompt}]
        )
        return response.choices[0].message.content.strip()

    elif provider == "claude":
        import anthropic
        client = anthropic.Anthropic(api_key=api_key)
        response = client.messages.create(
            model=model_id,
            max_tokens=4096,
            messages=[{"role": "user", "content": prompt}]
        )
        return response.content[0].text.strip()

    else:
        raise ValueError(f"Unsupported provider: '{provider}'. Choose from: gemini, openai, claude")


# ─── Rewrite Gateway ───────────────────────────────────────────────────────────

async def rewrite_notes(notes: str, patient_name: str,
                        settings: Optional[Settings] = None) -> str:
    """
    Turn rough clinical notes into a formal French report paragraph.

    Exactly one provider call per invocation, no retry. The credential is
    checked before anything goes out. Configuration and provider failures are
    logged here with their detail and re-raised as ProviderError carrying a
    fixed message.
    """
    if settings is None:
        try:
            settings = get_settings()
        except Exception:
            logger.exception("Could not read rewrite settings")
            raise ProviderError()

    if not settings.api_key:
        logger.error(f"No API key configured for provider '{settings.provider}'")
        raise MissingCredentialError()

    prompt = build_rewrite_prompt(notes, patient_name)
    pending = asyncio.get_event_loop().run_in_executor(
        None,
        lambda: call_llm(prompt, settings.provider, settings.model_id, settings.api_key)
    )

    try:
        if settings.timeout:
            text = await asyncio.wait_for(pending, timeout=settings.timeout)
        else:
            text = await pending
    except Exception:
        logger.exception(f"Rewrite failed ({settings.provider}/{settings.model_id})")
        raise ProviderError()

    logger.info(f"Rewrote {len(notes)} chars of notes into {len(text)} chars")
    return text


async def improve_notes(record: CaseRecord, settings: Optional[Settings] = None) -> CaseRecord:
    """Return a copy of the record whose notes are replaced by the rewritten text."""
    output = await rewrite_notes(record.clinical_notes, record.patient_name, settings)
    return record.with_field("clinical_notes", output)
