"""Editor page: live typography preview, generated output and CSS import."""

from html import escape

from .errors import InvalidModelError
from .generator import generate_model
from .model import TypographyModel

HEADING_NAMES = ("h1", "h2", "h3", "h4", "h5", "h6")
SAMPLE_PARAGRAPH = "The quick brown fox jumps over the lazy dog. Pack my box with five dozen liquor jugs."


def css() -> str:
    return """
*, *::before, *::after { box-sizing: border-box; }
body {
    font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
    background: #0B1120;
    color: #F1F5F9;
    margin: 0;
}
.container { max-width: 1200px; margin: 0 auto; padding: 2rem; }
.section {
    background: #111827;
    border: 1px solid #1E293B;
    border-radius: 8px;
    padding: 1rem 1.5rem;
    margin-bottom: 1.5rem;
}
.section h2 { font-size: 1rem; margin: 0 0 1rem; color: #94A3B8; text-transform: uppercase; }
.muted { color: #64748B; font-size: 0.875rem; }
.preview-row { display: flex; align-items: baseline; gap: 1rem; margin-bottom: 0.75rem; }
.preview-row .muted { width: 120px; flex-shrink: 0; }
.preview-row .sample { flex: 1; margin: 0; }
pre {
    background: #0D1117;
    border: 1px solid #1E293B;
    border-radius: 8px;
    padding: 1rem;
    overflow-x: auto;
    font-family: 'JetBrains Mono', 'Consolas', monospace;
    font-size: 0.8125rem;
    tab-size: 4;
}
textarea {
    width: 100%;
    min-height: 200px;
    background: #0D1117;
    color: #F1F5F9;
    border: 1px solid #334155;
    border-radius: 8px;
    padding: 0.75rem;
    font-family: 'JetBrains Mono', 'Consolas', monospace;
}
.btn {
    margin-top: 0.75rem;
    padding: 0.5rem 1rem;
    border-radius: 6px;
    border: none;
    background: #3B82F6;
    color: white;
    cursor: pointer;
}
.import-status.error { color: #F87171; }
"""


def js() -> str:
    return """
document.addEventListener('DOMContentLoaded', function() {
    const button = document.getElementById('import-button');
    const status = document.getElementById('import-status');
    if (!button) return;
    button.addEventListener('click', async function() {
        const css = document.getElementById('import-css').value;
        const response = await fetch('/api/import', {
            method: 'POST',
            headers: {'Content-Type': 'application/json'},
            body: JSON.stringify({css: css, apply: true})
        });
        if (response.ok) {
            location.reload();
        } else {
            const body = await response.json();
            status.textContent = body.detail;
            status.classList.add('error');
        }
    });
});
"""


def head(title: str, properties_css: str) -> str:
    safe_css = properties_css.replace("</style", "<\\/style")
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>
{css()}
    </style>
    <style id="generated-properties">
{safe_css}
    </style>
</head>
"""


def preview_html(model: TypographyModel) -> str:
    """One sample element per token, styled through its custom properties."""
    if not model.tokens:
        return '<p class="muted">No tokens yet.</p>'
    rows = []
    for token in model.tokens:
        name = escape(token.name)
        lower = token.name.lower()
        tag = lower if lower in HEADING_NAMES else "p"
        text = f"Heading {lower.upper()}" if tag != "p" else SAMPLE_PARAGRAPH
        style = f"font-size: var(--{name}); line-height: var(--{name}-lh);"
        rows.append(
            f'<div class="preview-row">'
            f'<div class="muted">{name}</div>'
            f'<{tag} class="sample" data-token="{name}" style="{style}">{escape(text)}</{tag}>'
            f"</div>"
        )
    return "\n".join(rows)


def html(model: TypographyModel, properties: str, mixins: str, error: str = "") -> str:
    ordered = model.sorted_breakpoints()
    bp_summary = ", ".join(f"{escape(bp.id)} ({bp.value:g}px)" for bp in ordered)
    notice = f'<p class="muted">{escape(error)}</p>' if error else ""
    return f"""<div class="container">
    <div class="section" aria-label="Typography preview">
        <h2>Preview</h2>
        <p class="muted">base: {model.base_rem_px:g}px, breakpoints: {bp_summary}</p>
        {notice}
        {preview_html(model)}
    </div>
    <div class="section" aria-label="Custom properties">
        <h2>Custom properties</h2>
        <pre id="properties-output">{escape(properties)}</pre>
    </div>
    <div class="section" aria-label="Mixins">
        <h2>Mixins</h2>
        <pre id="mixins-output">{escape(mixins)}</pre>
    </div>
    <div class="section" aria-label="Import CSS">
        <h2>Import CSS</h2>
        <textarea id="import-css" aria-label="css-import" placeholder=":root {{ --token: 1rem; --token-lh: 1.25; }}"></textarea>
        <button id="import-button" class="btn">Import CSS</button>
        <p id="import-status" class="import-status muted"></p>
    </div>
</div>
"""


def render(model: TypographyModel) -> str:
    """Render the full editor page for a model."""
    try:
        properties, mixins = generate_model(model)
        error = ""
    except InvalidModelError as e:
        properties, mixins, error = "", "", str(e)

    return (
        head("fluidtype", properties)
        + "<body>\n"
        + html(model, properties, mixins, error)
        + f"\n<script>{js()}</script>\n"
        + "</body>\n</html>"
    )
