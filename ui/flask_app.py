"""
Flask-based Wikipedia Random Fact page.

The page keeps the selected category in the URL fragment and asks the JSON
endpoints for facts. Entropy mode records pointer/touch moves in the
browser for the collection window, then posts them for resolution.
"""

import logging

import httpx
from dotenv import load_dotenv
from flask import Flask, jsonify, render_template_string, request, session

# Config reads the environment at import time
load_dotenv()

from wikifact.categories import (  # noqa: E402
    PREDEFINED_CATEGORIES,
    EntropyMode,
    display_name,
    parse_fragment,
    to_fragment,
)
from wikifact.categories.selector import CustomCategory  # noqa: E402
from wikifact.config import (  # noqa: E402
    ENTROPY_TICK_MS,
    ENTROPY_WINDOW_MS,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
    LOG_LEVEL,
    SECRET_KEY,
)
from wikifact.errors import (  # noqa: E402
    FAILURE_TITLE,
    EmptyCategoryError,
    WikifactError,
    failure_message,
)
from wikifact.facts import FactEngine, FactState  # noqa: E402
from wikifact.wikipedia import Article  # noqa: E402

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = SECRET_KEY

PAGE_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Random Wikipedia Fact</title>
    <link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.5.1/css/all.min.css">
    <style>
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body { font-family: Georgia, serif; background: #FDF6E3; color: #333; min-height: 100vh; }
        .container { max-width: 760px; margin: 0 auto; padding: 30px 20px; }
        .category-links { display: flex; flex-wrap: wrap; gap: 10px; margin-bottom: 15px; }
        .category-links a { color: #586e75; text-decoration: none; padding: 6px 12px; border-radius: 6px; }
        .category-links a.active { background: #268bd2; color: white; }
        .search { position: relative; margin-bottom: 20px; }
        .search input { width: 100%; padding: 10px 14px; border: 2px solid #ddd; border-radius: 8px; font-size: 15px; }
        #category-search-results { display: none; position: absolute; width: 100%; background: white; border: 1px solid #ddd; border-radius: 8px; z-index: 10; }
        .search-result-item { padding: 8px 14px; cursor: pointer; }
        .search-result-item:hover { background: #eee8d5; }
        #current-category { color: #93a1a1; margin-bottom: 10px; }
        .card { background: white; border-radius: 12px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); padding: 30px; }
        #fact-title { margin-bottom: 15px; }
        #fact-text { line-height: 1.7; }
        #fact-link { display: inline-block; margin-top: 15px; color: #268bd2; }
        button { background: #268bd2; color: white; border: none; padding: 10px 24px; border-radius: 8px; font-size: 15px; cursor: pointer; margin-top: 20px; }
        #loading { display: none; color: #93a1a1; }
        .footer { margin-top: 30px; text-align: center; color: #93a1a1; cursor: pointer; }
        #entropy-overlay { display: none; position: fixed; inset: 0; background: rgba(0,43,54,0.92); color: white; text-align: center; padding-top: 25vh; }
        .entropy-progress { width: 60%; height: 10px; margin: 20px auto; background: #073642; border-radius: 5px; }
        #entropy-bar { height: 100%; width: 0; background: #2aa198; border-radius: 5px; }
        #entropy-timer { font-size: 2rem; }
    </style>
</head>
<body>
<div class="container">
    <div class="category-links" id="category-links">
        <a href="#" data-fragment=""><i class="fa-solid fa-layer-group"></i> All</a>
        {% for category in categories %}
        <a href="#{{ category.key }}" data-fragment="#{{ category.key }}"><i class="{{ category.icon }}"></i> {{ category.display_name }}</a>
        {% endfor %}
    </div>
    <div class="search">
        <input type="text" id="category-search-input" placeholder="Search categories..." autocomplete="off">
        <div id="category-search-results"></div>
    </div>
    <div id="current-category">All Categories</div>
    <div id="loading">Loading...</div>
    <div class="card" id="fact-container">
        <h2 id="fact-title"></h2>
        <p id="fact-text"></p>
        <a id="fact-link" href="#" target="_blank" rel="noopener">Read more on Wikipedia</a>
    </div>
    <button id="reload-btn"><i class="fa-solid fa-rotate"></i> Another fact</button>
    <div class="footer" id="entropy-footer"><i class="fa-solid fa-shuffle"></i> Feeling lucky? Try entropy mode</div>
</div>
<div id="entropy-overlay">
    <h2>Generating Entropy</h2>
    <p>Move your cursor or touch the screen randomly</p>
    <div class="entropy-progress"><div id="entropy-bar"></div></div>
    <div id="entropy-timer"></div>
</div>
<script>
const WINDOW_MS = {{ window_ms }};
const TICK_MS = {{ tick_ms }};
let requestSeq = 0;

function showFact(data) {
    document.getElementById('loading').style.display = 'none';
    document.getElementById('fact-container').style.display = 'block';
    document.getElementById('fact-title').textContent = data.title;
    document.getElementById('fact-text').textContent = data.extract || data.message;
    const link = document.getElementById('fact-link');
    link.style.display = data.url ? 'inline-block' : 'none';
    if (data.url) link.href = data.url;
    if (data.category !== undefined) {
        document.getElementById('current-category').textContent = data.category;
    }
}

function markActive() {
    const fragment = window.location.hash;
    document.querySelectorAll('#category-links a').forEach(link => {
        link.classList.toggle('active', link.dataset.fragment === fragment);
    });
}

async function settle(seq, response) {
    const data = await response.json();
    if (seq !== requestSeq) return;  // a newer request owns the display
    showFact(data);
}

function loadFact() {
    markActive();
    const seq = ++requestSeq;
    if (window.location.hash === '#~entropy') {
        collectEntropy(seq);
        return;
    }
    document.getElementById('fact-container').style.display = 'none';
    document.getElementById('loading').style.display = 'block';
    fetch('/api/fact?fragment=' + encodeURIComponent(window.location.hash))
        .then(response => settle(seq, response))
        .catch(() => { if (seq === requestSeq) showFact({title: 'Oops!', message: 'Failed to load a random fact. Please try again!'}); });
}

function collectEntropy(seq) {
    const samples = [];
    const overlay = document.getElementById('entropy-overlay');
    const started = Date.now();
    document.getElementById('current-category').textContent = 'Entropy mode active';
    overlay.style.display = 'block';
    const onMouse = e => samples.push([Math.round(e.clientX), Math.round(e.clientY), Date.now()]);
    const onTouch = e => {
        if (!e.touches || e.touches.length === 0) return;
        samples.push([Math.round(e.touches[0].clientX), Math.round(e.touches[0].clientY), Date.now()]);
    };
    document.addEventListener('mousemove', onMouse);
    document.addEventListener('touchmove', onTouch);
    const ticker = setInterval(() => {
        const elapsed = Date.now() - started;
        document.getElementById('entropy-bar').style.width = Math.min(elapsed / WINDOW_MS * 100, 100) + '%';
        document.getElementById('entropy-timer').textContent = Math.max(Math.floor((WINDOW_MS - elapsed) / 1000), 0);
    }, TICK_MS);
    setTimeout(() => {
        clearInterval(ticker);
        document.removeEventListener('mousemove', onMouse);
        document.removeEventListener('touchmove', onTouch);
        overlay.style.display = 'none';
        document.getElementById('loading').style.display = 'block';
        fetch('/api/entropy', {
            method: 'POST',
            headers: {'Content-Type': 'application/json'},
            body: JSON.stringify({samples: samples}),
        })
            .then(response => settle(seq, response))
            .catch(() => { if (seq === requestSeq) showFact({title: 'Oops!', message: 'Failed to load a random fact. Please try again!'}); });
    }, WINDOW_MS);
}

let searchTimer = null;
document.getElementById('category-search-input').addEventListener('input', event => {
    clearTimeout(searchTimer);
    const term = event.target.value.trim();
    const box = document.getElementById('category-search-results');
    if (!term) { box.style.display = 'none'; return; }
    searchTimer = setTimeout(async () => {
        const response = await fetch('/api/categories?q=' + encodeURIComponent(term));
        const data = await response.json();
        box.innerHTML = '';
        data.results.forEach(result => {
            const item = document.createElement('div');
            item.className = 'search-result-item';
            item.textContent = result.display_name;
            item.onclick = () => {
                box.style.display = 'none';
                event.target.value = '';
                window.location.hash = result.fragment;
            };
            box.appendChild(item);
        });
        box.style.display = data.results.length ? 'block' : 'none';
    }, 300);
});

document.getElementById('reload-btn').onclick = loadFact;
document.getElementById('entropy-footer').onclick = () => { window.location.hash = '#~entropy'; };
window.addEventListener('hashchange', loadFact);
loadFact();
</script>
</body>
</html>
"""


def _session_state() -> FactState:
    """Rebuild the session context from the signed cookie."""
    return FactState(selector=parse_fragment(session.get("fragment", "")))


def _store_state(state: FactState) -> None:
    session["fragment"] = state.fragment
    # Title only: the signed cookie is size-limited
    if state.current_title is not None:
        session["title"] = state.current_title


def _category_label(selector) -> str:
    if isinstance(selector, EntropyMode):
        return "Entropy mode active"
    name = display_name(selector)
    return f"Category: {name}" if name else "All Categories"


def _fact_response(article: Article, selector):
    return jsonify(
        title=article.title,
        extract=article.extract,
        url=article.url,
        category=_category_label(selector),
        fragment=to_fragment(selector),
    )


def _error_response(error: Exception, selector):
    status = 404 if isinstance(error, EmptyCategoryError) else 502
    return (
        jsonify(
            title=FAILURE_TITLE,
            message=failure_message(error),
            category=_category_label(selector),
            fragment=to_fragment(selector),
        ),
        status,
    )


@app.route("/")
def home():
    """The widget page."""
    return render_template_string(
        PAGE_TEMPLATE,
        categories=PREDEFINED_CATEGORIES,
        window_ms=ENTROPY_WINDOW_MS,
        tick_ms=ENTROPY_TICK_MS,
    )


@app.route("/api/fact")
async def api_fact():
    """Load a fact for the selector encoded in ``fragment``."""
    selector = parse_fragment(request.args.get("fragment", ""))
    if isinstance(selector, EntropyMode):
        return jsonify(error="Entropy mode needs pointer samples, POST them to /api/entropy"), 400

    state = _session_state()
    try:
        async with FactEngine(state=state) as engine:
            article = await engine.load_fact(selector)
    except (WikifactError, httpx.HTTPError) as e:
        logger.error(f"Fact request failed for '{to_fragment(selector) or '#'}': {e}")
        session["fragment"] = to_fragment(selector)
        return _error_response(e, selector)

    _store_state(state)
    return _fact_response(article, selector)


@app.route("/api/entropy", methods=["POST"])
async def api_entropy():
    """Resolve pointer samples collected by the page into a fact."""
    payload = request.get_json(silent=True) or {}
    raw_samples = payload.get("samples", [])
    if not isinstance(raw_samples, list):
        return jsonify(error="samples must be a list of [x, y, timestamp_ms]"), 400

    try:
        samples = [(int(x), int(y), int(t)) for x, y, t in raw_samples]
    except (TypeError, ValueError):
        return jsonify(error="samples must be a list of [x, y, timestamp_ms]"), 400

    selector = EntropyMode()
    state = _session_state()
    try:
        async with FactEngine(state=state) as engine:
            article = await engine.resolve_entropy(samples, previous_title=session.get("title"))
    except (WikifactError, httpx.HTTPError) as e:
        logger.error(f"Entropy request failed: {e}")
        session["fragment"] = to_fragment(selector)
        return _error_response(e, selector)

    _store_state(state)
    return _fact_response(article, selector)


@app.route("/api/categories")
async def api_categories():
    """Category suggestions for the search box."""
    term = request.args.get("q", "")
    try:
        async with FactEngine() as engine:
            results = await engine.search_categories(term)
    except (WikifactError, httpx.HTTPError) as e:
        logger.warning(f"Category search for '{term}' failed: {e}")
        results = []

    return jsonify(
        results=[
            {
                "title": result.title,
                "display_name": result.display_name,
                "fragment": to_fragment(CustomCategory(result.title, result.display_name)),
            }
            for result in results
        ]
    )


@app.route("/health")
def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    print("\n=== Random Wikipedia Fact ===")
    print("Open http://localhost:5000 in your browser\n")
    app.run(debug=True, port=5000)
