import os
import sys

from session import Session, Stage, run_summary

SUMMARY_PROVIDER = os.getenv("SUMMARY_PROVIDER", "openai").strip().lower()
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "60"))


def main() -> int:
    url = input("Paste an article URL, then press Enter: ").strip()

    session = run_summary(Session(), url, provider=SUMMARY_PROVIDER, timeout=HTTP_TIMEOUT)

    if session.stage != Stage.DONE:
        print(f"\nError: {session.error}")
        return 1

    print(f"\n--- ARTICLE ({len(session.article_text)} chars) ---\n")
    print(session.article_text[:500] + ("..." if len(session.article_text) > 500 else ""))
    print("\n--- SUMMARY ---\n")
    print(session.summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
