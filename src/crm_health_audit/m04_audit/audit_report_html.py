"""
🌐 Module: audit_report_html.py

Single-file HTML rendering of one CRM health audit.

Layout, top to bottom:
- a score card coloured by overall severity, with the primary risk driver
- the seven signals, one row each, with a severity badge and a missing-% bar
- the primary and secondary action plans
- embedded PNG plots (base64), when any were drawn
- run metadata

Every piece of text taken from the audit is HTML-escaped.
"""

import base64
import html
from pathlib import Path

from crm_health_audit.m00_utils.audit_models import ActionRecommendation, AuditResult

SEVERITY_COLORS = {"low": "#2e7d32", "medium": "#ef6c00", "high": "#c62828"}

_STYLE = """
<style>
  body { font-family: "Segoe UI", Helvetica, Arial, sans-serif; background: #f4f6f9; color: #222; margin: 0; }
  main { max-width: 1000px; margin: 0 auto; padding: 24px; }
  .card { background: #fff; border-radius: 8px; padding: 16px 20px; margin-bottom: 16px;
          box-shadow: 0 1px 2px rgba(0,0,0,0.08); }
  .score { font-size: 2.6em; font-weight: 700; }
  .badge { color: #fff; border-radius: 10px; padding: 1px 9px; font-size: 0.8em; text-transform: uppercase; }
  .bar { background: #e9edf2; border-radius: 3px; width: 160px; height: 10px; display: inline-block; }
  .bar span { display: block; height: 10px; border-radius: 3px; }
  table { width: 100%; border-collapse: collapse; font-size: 0.88em; }
  th { text-align: left; color: #555; border-bottom: 2px solid #dde2ea; padding: 6px; }
  td { border-bottom: 1px solid #eef1f5; padding: 6px; vertical-align: top; }
  .muted { color: #888; font-size: 0.85em; }
  img { max-width: 100%; }
</style>
"""


def _e(value) -> str:
    return html.escape(str(value))


def _badge(severity: str) -> str:
    color = SEVERITY_COLORS.get(severity, "#555")
    return f"<span class='badge' style='background:{color}'>{_e(severity)}</span>"


def _score_card(result: AuditResult) -> str:
    health = result.overall_health
    color = SEVERITY_COLORS[health.severity.value]
    return (
        f"<section class='card' style='border-left:6px solid {color}'>"
        f"<div class='score' style='color:{color}'>{health.score}<span class='muted'>/100</span></div>"
        f"<div>Overall severity {_badge(health.severity.value)}</div>"
        f"<p><strong>Primary risk driver:</strong> {_e(health.primary_risk_driver)}</p>"
        "</section>"
    )


def _signals_section(result: AuditResult) -> str:
    rows = []
    for signal in result.signals:
        color = SEVERITY_COLORS[signal.severity.value]
        width = min(max(signal.value, 0.0), 100.0)
        rows.append(
            "<tr>"
            f"<td>{_e(signal.label)}<div class='muted'>{_e(signal.key)}</div></td>"
            f"<td>{_e(signal.criticality.value)}</td>"
            f"<td>{signal.value:.1f}% <span class='bar'><span style='width:{width:.1f}%;background:{color}'></span></span></td>"
            f"<td>{_badge(signal.severity.value)}</td>"
            f"<td>{_e(signal.impacts[0]) if signal.impacts else ''}</td>"
            "</tr>"
        )
    return (
        "<section class='card'><h2>Signals</h2><table>"
        "<tr><th>Signal</th><th>Criticality</th><th>Missing</th><th>Severity</th><th>Top impact</th></tr>"
        + "".join(rows)
        + "</table></section>"
    )


def _actions_section(title: str, actions: list[ActionRecommendation]) -> str:
    if not actions:
        return ""
    rows = "".join(
        "<tr>"
        f"<td>#{a.priority}</td>"
        f"<td><strong>{_e(a.action)}</strong><div class='muted'>{_e(a.why)}</div></td>"
        f"<td>{_e(a.owner_role)}</td>"
        f"<td>{_e(a.effort)}</td>"
        f"<td>{a.time_to_value_days} days</td>"
        f"<td>{_badge(a.severity.value)}</td>"
        "</tr>"
        for a in actions
    )
    return (
        f"<section class='card'><h2>{_e(title)}</h2><table>"
        "<tr><th></th><th>Action</th><th>Owner</th><th>Effort</th><th>Time to value</th><th>Severity</th></tr>"
        f"{rows}</table></section>"
    )


def _plots_section(plot_paths: dict | None) -> str:
    images = []
    for name, plot_path in (plot_paths or {}).items():
        if not plot_path or not Path(plot_path).exists():
            continue
        encoded = base64.b64encode(Path(plot_path).read_bytes()).decode("ascii")
        images.append(f"<img alt='{_e(name)}' src='data:image/png;base64,{encoded}'>")
    if not images:
        return ""
    return "<section class='card'><h2>Plots</h2>" + "".join(images) + "</section>"


def render_audit_report(result: AuditResult, run_id: str, plot_paths: dict | None = None) -> str:
    """
    Renders an AuditResult as a self-contained HTML page.

    Args:
        result (AuditResult): The finished audit.
        run_id (str): Run identifier shown in the page title.
        plot_paths (dict, optional): Plot name to PNG path; missing files are skipped.

    Returns:
        str: The complete HTML document.
    """
    primary = [a for a in result.prioritized_actions if a.tier == "primary"]
    secondary = [a for a in result.prioritized_actions if a.tier == "secondary"]
    meta = result.metadata
    if result.prioritized_actions:
        plans = _actions_section("Primary Actions", primary) + _actions_section("Secondary Actions", secondary)
    else:
        plans = "<section class='card'><h2>Actions</h2><p class='muted'>No actionable signals.</p></section>"

    return "\n".join(
        [
            "<!DOCTYPE html><html><head><meta charset='utf-8'>",
            f"<title>CRM Health Audit - {_e(run_id)}</title>",
            _STYLE,
            "</head><body><main>",
            f"<h1>CRM Health Audit</h1><p class='muted'>Run {_e(run_id)} | generated {_e(meta.generated_at)}</p>",
            _score_card(result),
            _signals_section(result),
            plans,
            _plots_section(plot_paths),
            (
                "<p class='muted'>"
                f"Audited {meta.contacts_count} contacts, {meta.companies_count} companies, "
                f"{meta.deals_count} deals.</p>"
            ),
            "</main></body></html>",
        ]
    )
