"""Minimal web view of the screener.

Every request runs a fresh scan; nothing is kept between requests.
The page reloads itself after the configured refresh period.
"""

import logging
from typing import Callable, Optional

from flask import Flask, jsonify, render_template_string

from candlescan.config import ScreenerConfig
from candlescan.display import format_price, format_ratio, report_to_dict
from candlescan.models import ScanReport
from candlescan.scanner import run_scan
from candlescan.sources.base import BaseCandleSource


logger = logging.getLogger(__name__)


PAGE_HTML = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Candle Screener {{ report.interval }}</title>
<style>
  body { background: #0f1115; color: #d8dee9; font-family: -apple-system, Segoe UI, Roboto, sans-serif; margin: 2rem; }
  h1 { font-size: 1.4rem; margin-bottom: .2rem; }
  .meta { color: #7b8394; font-size: .9rem; margin-bottom: 1.2rem; }
  table { border-collapse: collapse; min-width: 560px; }
  th, td { padding: .45rem .9rem; text-align: right; border-bottom: 1px solid #222733; }
  th { color: #88c0d0; font-weight: 600; }
  td.sym, th.sym { text-align: left; font-weight: 600; }
  tr:hover td { background: #181c24; }
  .up { color: #a3be8c; }
  .hot { color: #ebcb8b; }
  .empty { color: #7b8394; padding: 1rem 0; }
  .failures { margin-top: 1.5rem; color: #bf616a; font-size: .85rem; }
</style>
</head>
<body>
<h1>Bullish candles &ge; {{ "%.2f"|format(report.threshold) }}% ({{ report.interval }})</h1>
<div class="meta">
  Scanned {{ report.evaluated|length + report.failures|length }} pairs at
  {{ report.scanned_at.strftime("%Y-%m-%d %H:%M:%S UTC") }}
  &middot; next refresh in <span id="countdown">{{ refresh }}</span>s
</div>
{% if report.ranked %}
<table>
  <thead>
    <tr><th>#</th><th class="sym">Symbol</th><th>Close</th><th>Body %</th><th>Volume ratio</th></tr>
  </thead>
  <tbody>
  {% for r in report.ranked %}
    <tr>
      <td>{{ loop.index }}</td>
      <td class="sym">{{ r.symbol }}</td>
      <td>{{ price(r.close) }}</td>
      <td class="up">{{ "%.2f"|format(r.body_percent) }}%</td>
      <td class="{{ 'hot' if r.volume_ratio >= 2 else '' }}">{{ ratio(r.volume_ratio) }}</td>
    </tr>
  {% endfor %}
  </tbody>
</table>
{% else %}
<div class="empty">No pairs passed the filter.</div>
{% endif %}
{% if report.failures %}
<div class="failures">
  Failed to evaluate:
  {% for f in report.failures %}<span title="{{ f.message }}">{{ f.symbol }} ({{ f.reason }})</span>{% if not loop.last %}, {% endif %}{% endfor %}
</div>
{% endif %}
<script>
  let remaining = {{ refresh }};
  const el = document.getElementById("countdown");
  setInterval(() => {
    remaining -= 1;
    if (remaining <= 0) { window.location.reload(); return; }
    el.textContent = remaining;
  }, 1000);
</script>
</body>
</html>
"""


def create_app(
    config: ScreenerConfig,
    source: Optional[BaseCandleSource] = None,
    scan: Callable[..., ScanReport] = run_scan,
) -> Flask:
    """Build the Flask app.
    
    Args:
        config: Screener configuration used for every scan.
        source: Optional candle source; a new one is built per scan otherwise.
        scan: Scan function, replaceable for testing.
    """
    app = Flask(__name__)

    @app.route("/", methods=["GET"])
    def index():
        report = scan(config, source=source)
        return render_template_string(
            PAGE_HTML,
            report=report,
            refresh=config.refresh_seconds,
            price=format_price,
            ratio=format_ratio,
        )

    @app.route("/api/results", methods=["GET"])
    def results():
        report = scan(config, source=source)
        return jsonify(report_to_dict(report))

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    return app
