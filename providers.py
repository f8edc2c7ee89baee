import os

import openai
import requests
from openai import OpenAI

from errors import SummaryError

# ---------------- CONFIG ----------------
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
# "auto" lists the models available to the key and uses the first one
# that supports generateContent.
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")

# Values people leave in place of a real key.
PLACEHOLDER_API_KEYS = {
    k.strip()
    for k in os.getenv("PLACEHOLDER_API_KEYS", "YOUR_OPENAI_API_KEY,YOUR_GEMINI_API_KEY").split(",")
    if k.strip()
}

# ---------------- PROMPTS ----------------
SYSTEM_PROMPT = "You summarize articles clearly and concisely."
USER_PROMPT = (
    "Summarize the following article in 5 short bullet points in simple English. "
    "Focus on the main ideas.\n\n"
)
TEMPERATURE = 0.3

NO_SUMMARY = "No summary produced."


def build_user_prompt(text: str) -> str:
    return USER_PROMPT + (text or "")


def is_placeholder_key(api_key: str | None) -> bool:
    key = (api_key or "").strip()
    return not key or key in PLACEHOLDER_API_KEYS


# ---------------- OPENAI ----------------
def summarize_with_openai(text: str, api_key: str, model: str | None = None,
                          timeout: float | None = None, client=None) -> str:
    """
    Chat completion with a system + user message.
    `client` lets callers pass a preconfigured (or fake) OpenAI client.
    """
    if client is None:
        kwargs = {"api_key": api_key, "max_retries": 0}
        if timeout is not None:
            kwargs["timeout"] = timeout
        client = OpenAI(**kwargs)

    model = model or OPENAI_MODEL
    print(f"[openai] model={model} chars={len(text or '')}")

    try:
        resp = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(text)},
            ],
            temperature=TEMPERATURE,
        )
    except openai.APIStatusError as e:
        body = e.response.text if e.response is not None else str(e)
        print(f"[openai] API error {e.status_code}: {body}")
        raise SummaryError(f"OpenAI API Error: {e.status_code} - {body}", detail=body) from e
    except openai.APIConnectionError as e:
        print(f"[openai] connection error: {e}")
        raise SummaryError("Could not reach OpenAI. Check your connection and try again.") from e

    return extract_openai_text(resp)


def extract_openai_text(resp) -> str:
    choices = getattr(resp, "choices", None) or []
    if not choices:
        return NO_SUMMARY
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None) or ""
    return content if content.strip() else NO_SUMMARY


# ---------------- GEMINI ----------------
def discover_gemini_model(api_key: str, timeout: float | None = None) -> str:
    """
    Returns the first model name (e.g. "models/gemini-1.5-flash") that
    supports generateContent for this key.
    """
    try:
        r = requests.get(f"{GEMINI_API_BASE}/models", params={"key": api_key}, timeout=timeout)
    except requests.RequestException as e:
        print(f"[gemini] list models failed: {e}")
        raise SummaryError("Could not reach Gemini. Check your connection and try again.") from e

    if not r.ok:
        print(f"[gemini] list models status {r.status_code}: {r.text}")
        raise SummaryError(f"Failed to list models: {r.status_code}", detail=r.text)

    try:
        models = r.json().get("models") or []
        for m in models:
            if "generateContent" in (m.get("supportedGenerationMethods") or []):
                print(f"[gemini] using model: {m['name']}")
                return m["name"]
    except (ValueError, TypeError, AttributeError, KeyError) as e:
        raise SummaryError("Gemini returned an unreadable model list.", detail=r.text) from e

    raise SummaryError("No available models found for your API key")


def _gemini_model_path(model: str) -> str:
    return model if model.startswith("models/") else f"models/{model}"


def summarize_with_gemini(text: str, api_key: str, model: str | None = None,
                          timeout: float | None = None) -> str:
    model = model or GEMINI_MODEL
    if model == "auto":
        model = discover_gemini_model(api_key, timeout=timeout)

    endpoint = f"{GEMINI_API_BASE}/{_gemini_model_path(model)}:generateContent"
    print(f"[gemini] model={model} chars={len(text or '')}")

    payload = {
        "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
        "contents": [{"role": "user", "parts": [{"text": build_user_prompt(text)}]}],
        "generationConfig": {"temperature": TEMPERATURE},
    }

    try:
        r = requests.post(endpoint, params={"key": api_key}, json=payload, timeout=timeout)
    except requests.RequestException as e:
        print(f"[gemini] request failed: {e}")
        raise SummaryError("Could not reach Gemini. Check your connection and try again.") from e

    if not r.ok:
        error_data = r.text
        print(f"[gemini] API error {r.status_code}: {error_data}")
        raise SummaryError(f"Gemini API Error: {r.status_code} - {error_data}", detail=error_data)

    try:
        data = r.json()
    except ValueError as e:
        print(f"[gemini] non-JSON response: {r.text[:200]}")
        raise SummaryError("Gemini returned an unreadable response.", detail=r.text) from e

    try:
        return extract_gemini_text(data)
    except (TypeError, AttributeError, KeyError, IndexError) as e:
        print(f"[gemini] unexpected response shape ({e!r}): {r.text[:200]}")
        raise SummaryError("Gemini returned an unexpected response.", detail=r.text) from e


def extract_gemini_text(data) -> str:
    """
    candidates[0].content.parts[0].text, returned as-is.

    Missing or empty pieces give NO_SUMMARY. Pieces of the wrong type raise
    TypeError, AttributeError, KeyError or IndexError.
    """
    candidates = data.get("candidates") or []
    if not candidates:
        return NO_SUMMARY
    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts:
        return NO_SUMMARY
    text = parts[0].get("text")
    if text is None:
        return NO_SUMMARY
    if not isinstance(text, str):
        raise TypeError(f"expected text to be str, got {type(text).__name__}")
    return text if text.strip() else NO_SUMMARY


# ---------------- REGISTRY ----------------
PROVIDERS = {
    "openai": {
        "label": "OpenAI",
        "env": "OPENAI_API_KEY",
        "summarize": summarize_with_openai,
    },
    "gemini": {
        "label": "Gemini",
        "env": "GEMINI_API_KEY",
        "summarize": summarize_with_gemini,
    },
}


def _provider(name: str) -> dict:
    key = (name or "").strip().lower()
    if key not in PROVIDERS:
        raise ValueError(f"Unknown summary provider: {name!r} (expected one of {', '.join(PROVIDERS)})")
    return PROVIDERS[key]


def get_summarizer(name: str):
    return _provider(name)["summarize"]


def provider_label(name: str) -> str:
    return _provider(name)["label"]


def provider_env_var(name: str) -> str:
    return _provider(name)["env"]


def provider_api_key(name: str) -> str:
    if _provider(name) is PROVIDERS["openai"]:
        return OPENAI_API_KEY
    return GEMINI_API_KEY


def provider_model(name: str) -> str:
    if _provider(name) is PROVIDERS["openai"]:
        return OPENAI_MODEL
    return GEMINI_MODEL
