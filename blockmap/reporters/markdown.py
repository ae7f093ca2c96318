"""
Markdown report generator.
"""
from datetime import datetime, timezone
from typing import List

from jinja2 import Environment

from blockmap import __version__
from blockmap.engine import Outcome

_SEVERITY_ICON = {
    "ERROR": "🔴",
    "WARNING": "🟡",
}

_SEVERITY_ASCII = {
    "ERROR": "[ERROR]",
    "WARNING": "[WARNING]",
}

_TEMPLATE = """\
# Configuration Read Report

**Generated:** {{ generated }}
**Source:** {{ source }}
**Tool:** blockmap v{{ version }}

---

## Summary

Read **{{ read_count }} of {{ outcomes | length }} blocks**; {{ error_count }} error(s), {{ warning_count }} warning(s).

| # | Address | ID | Status |
|---|---------|----|--------|
{% for o in outcomes %}| {{ loop.index }} | `{{ o.resource.address }}` | {{ "`" ~ o.id ~ "`" if o.id else "-" }} | {{ "ok" if o.ok else "failed" }} |
{% endfor %}
{% if diagnostics %}
---

## Diagnostics

{% for d in diagnostics %}- {{ sev_icon[d.severity.value] }} **{{ d.severity.value }}** `{{ d.address }}`: {{ d.summary }}
{% endfor %}{% endif %}
{% for o in outcomes if o.state.get("json") %}
---

## `{{ o.resource.address }}`

```json
{{ o.state["json"] }}
```
{% endfor %}"""


def build_report(outcomes: List[Outcome], source_path: str, ascii_mode: bool = False) -> str:
    diagnostics = [d for o in outcomes for d in o.diagnostics]

    env = Environment(autoescape=False)
    template = env.from_string(_TEMPLATE)

    return template.render(
        generated=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        source=source_path,
        version=__version__,
        outcomes=outcomes,
        read_count=sum(1 for o in outcomes if o.id),
        error_count=sum(1 for d in diagnostics if d.severity.value == "ERROR"),
        warning_count=sum(1 for d in diagnostics if d.severity.value == "WARNING"),
        diagnostics=diagnostics,
        sev_icon=_SEVERITY_ASCII if ascii_mode else _SEVERITY_ICON,
    )
