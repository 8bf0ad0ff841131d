"""Minimal HTML shell shared by the landing page and the admin dashboard."""

from html import escape

STYLE = """
:root { --bg:#0b0f17; --fg:#e6edf3; --muted:#98a2b3; --card:#111827; --accent:#4f46e5; }
*{box-sizing:border-box} body{margin:0;font-family:system-ui,-apple-system,sans-serif;background:var(--bg);color:var(--fg)}
.container{max-width:980px;margin:40px auto;padding:0 20px}
.card{background:var(--card);border:1px solid #1f2937;border-radius:14px;padding:20px;margin-bottom:18px}
h1{font-size:28px;margin:0 0 10px} h2{font-size:18px;margin:0 0 10px;color:var(--muted)}
input,button{background:#0b1220;color:var(--fg);border:1px solid #263041;border-radius:10px;padding:10px}
label{display:block;margin:8px 0 4px;color:#cbd5e1}
table{width:100%;border-collapse:collapse}
th,td{border-bottom:1px solid #1f2937;padding:10px;text-align:left}
.btn{background:var(--accent);border:none;padding:10px 14px;border-radius:10px;font-weight:600;cursor:pointer;color:var(--fg)}
.grid{display:grid;grid-template-columns:1fr 1fr;gap:18px}
.muted{color:var(--muted)}
code{background:#0e1422;border:1px solid #1f2937;padding:2px 6px;border-radius:6px}
a{color:#38bdf8;text-decoration:none}
"""


def esc(value) -> str:
    return "" if value is None else escape(str(value))


def percent(rate: float | None) -> str:
    return "" if rate is None else f"{rate * 100:.2f}%"


def money(amount: float | None) -> str:
    return "" if amount is None else f"${amount:,.2f}"


def page(site_name: str, body: str) -> str:
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{esc(site_name)} Tracker</title>
  <style>{STYLE}</style>
</head>
<body>
  <div class="container">{body}</div>
</body>
</html>"""
