"""
Session state and the fetch -> summarize pipeline.

A Session holds what the page shows: the URL the user typed, the extracted
article text, the summary, a status line, an error line and a busy flag.
run_summary() moves it through the stages:

    IDLE -> VALIDATING -> RETRIEVING -> SUMMARIZING -> DONE
                 \______________\______________\____> FAILED

Every failure lands in `error`; nothing is retried.
"""
import traceback
from dataclasses import asdict, dataclass
from enum import Enum

from errors import GENERIC_ERROR_MESSAGE, SummarizerError, ValidationError
from providers import (
    get_summarizer,
    is_placeholder_key,
    provider_api_key,
    provider_env_var,
    provider_label,
)
from reader import fetch_article_content, limit_article_text

SUMMARY_PLACEHOLDER = "Summary will appear here..."

STATUS_FETCHING = "Fetching article content..."
STATUS_SUMMARIZING = "Summarizing with AI..."
STATUS_DONE = "Done ✅"


class Stage(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    RETRIEVING = "retrieving"
    SUMMARIZING = "summarizing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class Session:
    url: str = ""
    article_text: str = ""
    summary: str = SUMMARY_PLACEHOLDER
    status: str = ""
    error: str = ""
    busy: bool = False
    stage: Stage = Stage.IDLE
    # stage the last run failed in, "" unless FAILED
    failed_at: str = ""

    def to_dict(self) -> dict:
        d = asdict(self)
        d["stage"] = self.stage.value
        return d


def transition(session: Session, stage: Stage, **fields) -> Session:
    """Move `session` to `stage`, applying that stage's field updates."""
    if stage == Stage.VALIDATING:
        session.failed_at = ""
    elif stage == Stage.RETRIEVING:
        session.article_text = ""
        session.summary = SUMMARY_PLACEHOLDER
        session.error = ""
        session.busy = True
        session.status = STATUS_FETCHING
    elif stage == Stage.SUMMARIZING:
        session.status = STATUS_SUMMARIZING
    elif stage == Stage.DONE:
        session.busy = False
        session.status = STATUS_DONE
        session.error = ""
    elif stage == Stage.FAILED:
        session.busy = False
        session.status = ""

    for name, value in fields.items():
        setattr(session, name, value)
    session.stage = stage
    return session


def validate_request(url: str, api_key: str | None, provider: str) -> None:
    if not (url or "").strip():
        raise ValidationError("Paste an article URL first.")
    if is_placeholder_key(api_key):
        raise ValidationError(
            f"Add your {provider_label(provider)} API key (set {provider_env_var(provider)})."
        )


def run_summary(session: Session, url: str | None = None, *, provider: str = "openai",
                api_key: str | None = None, retrieve=None, summarize=None,
                timeout: float | None = None) -> Session:
    """
    Run one fetch -> summarize pass and return the updated session.

    `retrieve(url, timeout=...)` and `summarize(text, api_key, timeout=...)`
    default to the reader proxy and the configured provider. Errors never
    escape: they end up in `session.error` with the stage set to FAILED.
    """
    if url is not None:
        session.url = url

    transition(session, Stage.VALIDATING)
    try:
        if api_key is None:
            api_key = provider_api_key(provider)
        if summarize is None:
            summarize = get_summarizer(provider)
        validate_request(session.url, api_key, provider)
    except ValueError as e:
        return _fail(session, ValidationError(str(e)))
    except ValidationError as e:
        return _fail(session, e)

    retrieve = retrieve or fetch_article_content
    print(f"[summarize] run started: {session.url.strip()} (provider={provider})")

    try:
        transition(session, Stage.RETRIEVING)
        content = retrieve(session.url, timeout=timeout)
        limited = limit_article_text(content)

        transition(session, Stage.SUMMARIZING, article_text=limited)
        summary_text = summarize(limited, api_key, timeout=timeout)

        transition(session, Stage.DONE, summary=summary_text)
        print(f"[summarize] done ({len(limited)} chars in, {len(summary_text)} chars out)")
    except SummarizerError as e:
        return _fail(session, e)
    except Exception as e:
        traceback.print_exc()
        return _fail(session, e)

    return session


def _fail(session: Session, err: Exception) -> Session:
    failed_in = session.stage.value
    message = str(err).strip() or GENERIC_ERROR_MESSAGE
    detail = getattr(err, "detail", "")
    print(f"[summarize] {type(err).__name__} while {failed_in}: {message}")
    if detail and detail not in message:
        print(f"[summarize] detail: {detail}")
    return transition(session, Stage.FAILED, error=message, failed_at=failed_in)
