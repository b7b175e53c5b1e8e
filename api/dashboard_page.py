import json
from html import escape
from models.dashboard import DashboardData
from models.log_entry import LogEntry

PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Site Restore Monitor</title>
  <meta charset="utf-8">
  <meta http-equiv="refresh" content="30">
  <script src="https://cdn.jsdelivr.net/npm/chart.js"></script>
  <style>
    body {{ font-family: Arial, sans-serif; background:#f4f6f9; padding:30px; }}
    .card {{ background:white; padding:20px; border-radius:10px; max-width:900px; margin:auto; }}
    .stats {{ display:flex; gap:15px; margin:15px 0; }}
    .stat {{ flex:1; background:#fafafa; border-radius:8px; padding:12px; text-align:center; }}
    .stat b {{ display:block; font-size:22px; }}
    table {{ width:100%; border-collapse:collapse; }}
    th, td {{ padding:10px; text-align:left; }}
    th {{ background:#eee; }}
    tr:nth-child(even) {{ background:#fafafa; }}
    .btn {{ padding:8px 15px; background:#3498db; color:white; text-decoration:none; border-radius:5px; margin-right:10px; }}
    .badge {{ padding:4px 10px; border-radius:12px; color:white; font-weight:bold; }}
    .up {{ background:#27ae60; }}
    .down {{ background:#e74c3c; }}
    .unknown {{ background:#95a5a6; }}
    .error {{ color:red; font-weight:bold; }}
    .success {{ color:green; font-weight:bold; }}
  </style>
</head>
<body>
  <div class="card">
    <h2>Site Restore &amp; Cache System <span class="badge {badge_class}">{badge}</span></h2>
    <p>Restore: every {restore_every} | Cache: every {cache_every} | Last check: {last_checked}</p>
    <a href="/run-now" class="btn">Run Restore Now</a>
    <a href="/clear-cache" class="btn">Clear Cache Now</a>
    <div class="stats">
      <div class="stat"><b>{uptime}%</b>Uptime</div>
      <div class="stat"><b>{success}</b>Success</div>
      <div class="stat"><b>{errors}</b>Errors</div>
    </div>
    <canvas id="activity" height="80"></canvas>
    <h3>Recent Activity</h3>
    <table>
      <tr><th>Time</th><th>Action</th><th>Status</th><th>Latency</th><th>Detail</th></tr>
      {rows}
    </table>
  </div>
  <script>
    const points = {activity};
    new Chart(document.getElementById("activity"), {{
      type: "line",
      data: {{
        labels: points.map(p => p.label),
        datasets: [{{ label: "Success", data: points.map(p => p.value), stepped: true, borderColor: "#27ae60" }}]
      }},
      options: {{ scales: {{ y: {{ min: 0, max: 1, ticks: {{ stepSize: 1 }} }} }} }}
    }});
  </script>
</body>
</html>
"""


def format_interval(seconds: float) -> str:
    if seconds >= 3600 and seconds % 3600 == 0:
        hours = int(seconds // 3600)
        return "1 hour" if hours == 1 else f"{hours} hours"
    if seconds >= 60 and seconds % 60 == 0:
        return f"{int(seconds // 60)} mins"
    return f"{seconds:g} secs"


def _row(entry: LogEntry) -> str:
    css = "success" if entry.is_success else "error"
    latency = f"{entry.latency_ms} ms" if entry.latency_ms is not None else "-"
    detail = entry.detail or (str(entry.http_status) if entry.http_status is not None else "")
    return (
        "<tr>"
        f"<td>{escape(entry.timestamp.astimezone().strftime('%Y-%m-%d %H:%M:%S'))}</td>"
        f"<td>{escape(entry.action.value)}</td>"
        f'<td class="{css}">{escape(entry.status.value)}</td>'
        f"<td>{latency}</td>"
        f"<td>{escape(detail)}</td>"
        "</tr>"
    )


def render_dashboard(data: DashboardData) -> str:
    if data.currently_down is None:
        badge, badge_class = "UNKNOWN", "unknown"
    elif data.currently_down:
        badge, badge_class = "DOWN", "down"
    else:
        badge, badge_class = "UP", "up"

    last_checked = (
        data.last_checked_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        if data.last_checked_at else "never"
    )
    if data.last_latency_ms is not None:
        last_checked = f"{last_checked} ({data.last_latency_ms} ms)"
    activity = json.dumps([point.model_dump() for point in data.activity]).replace("</", "<\\/")

    return PAGE.format(
        badge=badge,
        badge_class=badge_class,
        restore_every=format_interval(data.restore_interval_s),
        cache_every=format_interval(data.cache_interval_s),
        last_checked=escape(last_checked),
        uptime=data.uptime_ratio,
        success=data.success_count,
        errors=data.error_count,
        rows="".join(_row(entry) for entry in data.entries),
        activity=activity,
    )
