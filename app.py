import os
import threading
from datetime import datetime

from flask import Flask, jsonify, render_template_string, request, url_for

from providers import provider_label, provider_model
from session import Session, Stage, run_summary

app = Flask(__name__)

SUMMARY_PROVIDER = os.getenv("SUMMARY_PROVIDER", "openai").strip().lower()
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "60"))

# One session per process, like the single page it backs.
SESSION = Session()

BUSY_MESSAGE = "A summary is already running. Please wait for it to finish."

# Held for a whole run. SESSION.busy is only set once fetching starts.
_run_lock = threading.Lock()


def summarize_into_session(url: str) -> Session:
    return run_summary(SESSION, url, provider=SUMMARY_PROVIDER, timeout=HTTP_TIMEOUT)


def try_summarize(url: str) -> bool:
    """Run into SESSION unless another run holds it. Returns False when busy."""
    if SESSION.busy or not _run_lock.acquire(blocking=False):
        return False
    try:
        summarize_into_session(url)
    finally:
        _run_lock.release()
    return True


def http_status_for(session: Session) -> int:
    if session.stage == Stage.DONE:
        return 200
    if session.failed_at == Stage.VALIDATING.value:
        return 400
    return 502


def provider_footer() -> str:
    try:
        return f"Using {provider_label(SUMMARY_PROVIDER)} ({provider_model(SUMMARY_PROVIDER)})"
    except ValueError:
        return f"Unknown provider: {SUMMARY_PROVIDER}"


# ---------------- Fast health endpoint (no provider calls) ----------------
@app.get("/health")
def health():
    return "ok", 200


# ---------------- JSON API ----------------
@app.get("/api/session")
def api_session():
    return jsonify(SESSION.to_dict())


@app.post("/api/summarize")
def api_summarize():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    url = data.get("url")
    if url is None:
        url = request.form.get("url", "")

    if not try_summarize(str(url)):
        return jsonify({**SESSION.to_dict(), "error": BUSY_MESSAGE}), 409

    return jsonify(SESSION.to_dict()), http_status_for(SESSION)


BASE_HTML = r"""
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width,initial-scale=1" />
  <title>AI Article Summarizer</title>
  <style>
    :root{
      --bg:#0a0f16;
      --text:#e7eef7;
      --muted:#9fb0c5;
      --red:#ff2a2a;
      --red2:#d91f1f;
      --ok:#7ee0a1;
      --shadow: 0 12px 40px rgba(0,0,0,.55);
    }

    *{box-sizing:border-box}
    body{
      margin:0;
      font-family:system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,"Helvetica Neue",Arial;
      color:var(--text);
      background:
        radial-gradient(1100px 600px at 20% -10%, rgba(255,42,42,.12), transparent 60%),
        radial-gradient(900px 520px at 80% 0%, rgba(138,180,255,.10), transparent 55%),
        linear-gradient(180deg, var(--bg), #070b10 60%);
      line-height:1.45;
    }

    .wrap{max-width:1100px;margin:0 auto;padding:16px}
    .title{font-size:28px;font-weight:900;margin:0;letter-spacing:.2px}
    .sub{margin:6px 0 0;color:var(--muted);font-size:13px}

    .card{
      border:1px solid rgba(255,255,255,.10);
      border-radius:22px;
      padding:16px;
      background: linear-gradient(180deg, rgba(13,22,33,.82), rgba(10,16,24,.72));
      box-shadow: var(--shadow);
      margin:14px 0;
    }
    .card h3{margin:0 0 10px;font-size:18px}

    .urlbar{display:flex;gap:10px;align-items:center;flex-wrap:wrap}
    .urlbar input{
      flex:1;
      min-width:min(520px, 78vw);
      padding:12px 14px;
      border-radius:14px;
      border:1px solid rgba(255,255,255,.14);
      background: rgba(7,11,16,.75);
      color:var(--text);
      outline:none;
    }
    .urlbar input:focus{
      border-color: rgba(138,180,255,.35);
      box-shadow: 0 0 0 3px rgba(138,180,255,.12);
    }
    .urlbar button{
      padding:12px 16px;
      border-radius:14px;
      border:1px solid rgba(255,42,42,.55);
      background:linear-gradient(180deg,var(--red),var(--red2));
      color:white;
      font-weight:900;
      cursor:pointer;
    }
    .urlbar button:disabled{opacity:.6;cursor:wait}

    .status{margin-top:10px;color:var(--ok);font-size:13px}
    .error{margin-top:10px;color:#ff8a8a;font-size:13px;white-space:pre-wrap}

    .grid{display:grid;grid-template-columns:1fr 1fr;gap:14px}
    @media (max-width: 800px){ .grid{grid-template-columns:1fr} }
    textarea{
      width:100%;
      min-height:360px;
      border-radius:14px;
      border:1px solid rgba(255,255,255,.10);
      background: rgba(7,11,16,.75);
      color:var(--text);
      padding:12px;
      resize:vertical;
    }
    pre{white-space:pre-wrap;margin:0;font-family:inherit;color:#d7e2f1}

    footer{margin:26px 0 10px;color:var(--muted);font-size:12px;text-align:center}
  </style>
</head>
<body>
  <div class="wrap">
    <div class="card">
      <h1 class="title">AI Article Summarizer</h1>
      <div class="sub">Paste any news/article link &amp; get a 5-point summary.</div>

      <form id="summarizeForm" class="urlbar" method="post" action="{{ form_action }}" style="margin-top:12px">
        <input id="url" type="text" inputmode="url" autocomplete="url" name="url" placeholder="https://example.com/article" value="{{ s.url }}" />
        <button id="go" type="submit" {% if s.busy %}disabled{% endif %}>
          {% if s.busy %}Summarizing...{% else %}⚡ Summarize Article{% endif %}
        </button>
      </form>

      <div id="status" class="status" {% if not s.status %}hidden{% endif %}>{{ s.status }}</div>
      <div id="error" class="error" {% if not s.error %}hidden{% endif %}>{{ s.error }}</div>
    </div>

    <div class="grid">
      <div class="card">
        <h3>Extracted Article</h3>
        <textarea id="articleText" readonly>{{ s.article_text }}</textarea>
      </div>
      <div class="card">
        <h3>AI Summary</h3>
        <pre id="summary">{{ s.summary }}</pre>
      </div>
    </div>

    <footer>{{ footer }} • © {{ now_year }}</footer>
  </div>

<script>
(function(){
  const form = document.getElementById('summarizeForm');
  const btn = document.getElementById('go');
  const input = document.getElementById('url');
  const statusEl = document.getElementById('status');
  const errorEl = document.getElementById('error');
  const articleEl = document.getElementById('articleText');
  const summaryEl = document.getElementById('summary');

  function show(el, text){
    el.textContent = text || '';
    el.hidden = !text;
  }

  function render(s){
    show(statusEl, s.status);
    show(errorEl, s.error);
    articleEl.value = s.article_text || '';
    summaryEl.textContent = s.summary || '';
    btn.disabled = !!s.busy;
    btn.textContent = s.busy ? 'Summarizing...' : '⚡ Summarize Article';
  }

  async function poll(){
    try{
      const res = await fetch('{{ session_url }}', { headers: { 'Accept':'application/json' }});
      const s = await res.json();
      if(s.busy){ show(statusEl, s.status); }
    }catch(e){
      console.log(e);
    }
  }

  form.addEventListener('submit', async function(ev){
    ev.preventDefault();
    btn.disabled = true;
    btn.textContent = 'Summarizing...';
    show(errorEl, '');
    show(statusEl, 'Fetching article content...');

    const timer = setInterval(poll, 700);
    try{
      const res = await fetch('{{ api_url }}', {
        method: 'POST',
        headers: { 'Content-Type':'application/json', 'Accept':'application/json' },
        body: JSON.stringify({ url: input.value })
      });
      render(await res.json());
    }catch(e){
      console.log(e);
      show(statusEl, '');
      show(errorEl, 'Could not reach the server. Try again.');
      btn.disabled = false;
      btn.textContent = '⚡ Summarize Article';
    }finally{
      clearInterval(timer);
    }
  });
})();
</script>
</body>
</html>
"""


def render_page():
    return render_template_string(
        BASE_HTML,
        s=SESSION,
        form_action=url_for("home"),
        api_url=url_for("api_summarize"),
        session_url=url_for("api_session"),
        footer=provider_footer(),
        now_year=datetime.now().year,
    )


# ---------------- Routes ----------------
@app.route("/", methods=["GET", "POST"])
def home():
    # Plain form post (no JS): run, then show the result on the same page.
    if request.method == "POST":
        try_summarize(request.form.get("url", ""))
    return render_page()


# ---------------- Entrypoint ----------------
if __name__ == "__main__":
    print(f"Summarizer provider: {provider_footer()}")
    app.run(debug=True, port=int(os.getenv("PORT", "5000")))
