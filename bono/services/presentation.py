"""
Presentation helpers: HTML pages for the dashboard and the individual
report, plus the .xlsx export in the sheet column order.
"""
import html
import logging
from io import BytesIO
from typing import List
from urllib.parse import quote

from bono.schemas.bonus import BonusRecord, KpiSummary, ReportResult
from bono.stores.base import record_to_row
from bono.stores.sheet_store import new_workbook

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

METRIC_LABELS = {
    "sales": "Sales",
    "quality": "Quality",
    "absenteeism": "Absenteeism",
}

_STYLE = """
        body { font-family: Arial, sans-serif; margin: 40px; color: #333; }
        h1 { color: #2563eb; }
        .kpis { display: grid; grid-template-columns: repeat(3, 1fr); gap: 20px; margin-bottom: 30px; }
        .kpi { background: #f8fafc; padding: 15px; border-radius: 8px; }
        .kpi h3 { margin: 0 0 10px 0; color: #1e40af; font-size: 14px; }
        .kpi p { margin: 0; font-size: 22px; font-weight: bold; }
        table { width: 100%; border-collapse: collapse; margin: 20px 0; }
        th, td { padding: 10px; text-align: left; border-bottom: 1px solid #e2e8f0; }
        th { background: #f1f5f9; color: #1e40af; font-weight: 600; }
        td.num { text-align: right; }
        .pass { color: #15803d; font-weight: bold; }
        .fail { color: #b91c1c; font-weight: bold; }
        .total-row { background: #2563eb; color: white; font-weight: bold; }
        form input { margin: 4px; padding: 6px; }
"""


def _e(value) -> str:
    return html.escape(str(value), quote=True)


def format_money(amount: float) -> str:
    return f"${amount:,.2f}"


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8"/>
    <title>{_e(title)}</title>
    <style>{_STYLE}</style>
</head>
<body>
{body}
</body>
</html>
"""


def render_dashboard_html(records: List[BonusRecord], kpis: KpiSummary, api_prefix: str = "/api") -> str:
    rows_html = ""
    for r in records:
        report_url = _e(f"/dashboard/report/{quote(r.agent_id, safe='')}")
        rows_html += (
            "<tr>"
            f"<td><a href='{report_url}'>{_e(r.agent_id)}</a></td>"
            f"<td>{_e(r.name)}</td>"
            f"<td>{_e(r.email)}</td>"
            f"<td class='num'>{r.sales:g}</td>"
            f"<td class='num'>{r.quality:g}</td>"
            f"<td class='num'>{r.absenteeism:g}</td>"
            f"<td class='num'>{format_money(r.total_bono)}</td>"
            f"<td>{_e(r.timestamp)}</td>"
            "</tr>"
        )
    if not rows_html:
        rows_html = "<tr><td colspan='8'>No records yet.</td></tr>"

    body = f"""
    <h1>Bono Dashboard</h1>
    <div class="kpis">
        <div class="kpi"><h3>AGENTS</h3><p>{kpis.distinct_agents}</p></div>
        <div class="kpi"><h3>AVERAGE BONO</h3><p>{format_money(kpis.avg_bonus)}</p></div>
        <div class="kpi"><h3>AVERAGE QUALITY</h3><p>{kpis.avg_quality:.2f}</p></div>
    </div>

    <h2>New record</h2>
    <form id="bono-form">
        <input name="agent_id" placeholder="Agent ID" required/>
        <input name="name" placeholder="Name"/>
        <input name="email" placeholder="Email"/>
        <input name="sales" type="number" step="any" placeholder="Sales"/>
        <input name="quality" type="number" step="any" placeholder="Quality"/>
        <input name="absenteeism" type="number" step="any" placeholder="Absenteeism"/>
        <button type="submit">Save</button>
    </form>

    <table>
        <thead>
            <tr><th>ID</th><th>Name</th><th>Email</th><th>Sales</th><th>Quality</th>
            <th>Absenteeism</th><th>Total Bono</th><th>Timestamp</th></tr>
        </thead>
        <tbody>
            {rows_html}
        </tbody>
    </table>
    <script>
    document.getElementById("bono-form").addEventListener("submit", async (event) => {{
        event.preventDefault();
        const payload = Object.fromEntries(new FormData(event.target).entries());
        const response = await fetch("{_e(api_prefix)}/bonos", {{
            method: "POST",
            headers: {{"Content-Type": "application/json"}},
            body: JSON.stringify(payload)
        }});
        if (response.ok) {{ window.location.reload(); }}
        else {{ alert((await response.json()).errors.map(e => e.msg).join("\\n")); }}
    }});
    </script>
"""
    return _page("Bono Dashboard", body)


def render_report_html(report: ReportResult) -> str:
    period = "All records"
    if report.start_date or report.end_date:
        period = f"{report.start_date or '…'} to {report.end_date or '…'}"

    metrics_html = ""
    for m in report.metrics:
        comparator = "≤" if m.lower_is_better else "≥"
        status_class = "pass" if m.passed else "fail"
        status_text = "PASS" if m.passed else "FAIL"
        metrics_html += (
            "<tr>"
            f"<td>{_e(METRIC_LABELS.get(m.metric, m.metric))}</td>"
            f"<td class='num'>{m.average:.2f}</td>"
            f"<td class='num'>{comparator} {m.target:g}</td>"
            f"<td class='{status_class}'>{status_text}</td>"
            "</tr>"
        )

    records_html = ""
    for r in report.records:
        records_html += (
            "<tr>"
            f"<td>{_e(r.timestamp)}</td>"
            f"<td class='num'>{r.sales:g}</td>"
            f"<td class='num'>{r.quality:g}</td>"
            f"<td class='num'>{r.absenteeism:g}</td>"
            f"<td class='num'>{format_money(r.total_bono)}</td>"
            "</tr>"
        )

    verdict = "Bonus earned" if report.bonus_earned else "Bonus not earned"
    body = f"""
    <h1>Performance Report</h1>
    <p><strong>Agent:</strong> {_e(report.name or report.agent_id)} ({_e(report.agent_id)})</p>
    <p><strong>Email:</strong> {_e(report.email)}</p>
    <p><strong>Period:</strong> {_e(period)} &middot; {report.record_count} records</p>

    <table>
        <thead><tr><th>Metric</th><th>Average</th><th>Target</th><th>Result</th></tr></thead>
        <tbody>
            {metrics_html}
            <tr class="total-row"><td colspan="3">{_e(verdict)}</td><td class='num'>{format_money(report.awarded_amount)}</td></tr>
        </tbody>
    </table>
    <p>Average bono per record: {format_money(report.average_total_bono)}</p>

    <h2>Records</h2>
    <table>
        <thead><tr><th>Timestamp</th><th>Sales</th><th>Quality</th><th>Absenteeism</th><th>Total Bono</th></tr></thead>
        <tbody>
            {records_html}
        </tbody>
    </table>
    <p><a href="/dashboard">Back to dashboard</a></p>
"""
    return _page(f"Report - {report.agent_id}", body)


def export_workbook(records: List[BonusRecord]) -> BytesIO:
    """All records as an .xlsx workbook, header row first, in sheet column order."""
    wb = new_workbook()
    ws = wb.active
    for record in records:
        ws.append(record_to_row(record))

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    logger.info(f"Exported {len(records)} bonus records to workbook")
    return output
