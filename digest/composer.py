"""
Daily digest HTML.

Renders the open-task table sent by the morning email. Rows keep the order
they are given in; the caller sorts them.
"""

import html
from typing import Iterable

from models import Task

_CELL_STYLE = "padding:8px 12px;border:1px solid #e4e9f1;"
_HEAD_STYLE = "padding:9px 12px;border:1px solid #e4e9f1;"

EMPTY_ROW = (
    '<tr><td colspan="3" style="text-align:center;padding:18px;color:#7b879b;">'
    "No active tasks.</td></tr>"
)


def _cell(value, escape: bool) -> str:
    text = "" if value is None else str(value)
    if escape:
        text = html.escape(text)
    return f'<td style="{_CELL_STYLE}">{text}</td>'


def render_row(task: Task, escape: bool = False) -> str:
    deadline = task.deadline.isoformat() if task.deadline else ""
    cells = "".join(_cell(value, escape) for value in (task.name, task.priority, deadline))
    return f"<tr>{cells}</tr>"


def compose_digest(tasks: Iterable[Task], app_url: str, *, escape: bool = False) -> str:
    """
    Build the digest email body

    Args:
        tasks: Open tasks, already ordered
        app_url: Target of the "Open app" button
        escape: HTML-escape task fields. Off by default, so task names are
            inserted into the markup verbatim.

    Returns:
        HTML document fragment
    """
    rows = [render_row(task, escape) for task in tasks]
    body = "\n".join(rows) if rows else EMPTY_ROW

    return f"""
<h2 style="font-family:Montserrat,Arial,sans-serif;color:#1b2b48;">Daily Summary of Active Tasks</h2>
<table style="border-collapse:collapse;width:98%;margin-bottom:18px;font-family:Inter,Arial,sans-serif;">
  <thead>
    <tr style="background:#f0f4fa;">
      <th style="{_HEAD_STYLE}">Name</th>
      <th style="{_HEAD_STYLE}">Priority</th>
      <th style="{_HEAD_STYLE}">Deadline</th>
    </tr>
  </thead>
  <tbody>
{body}
  </tbody>
</table>
<a href="{app_url}" target="_blank"
  style="display:inline-block;padding:12px 32px;background:#2b6be3;color:#fff;border-radius:8px;font-weight:bold;text-decoration:none;font-family:Montserrat,sans-serif;letter-spacing:.03em;margin-top:10px;">
  Open app
</a>
<br/><br/>
<div style="font-size:13px;color:#8f99ae;">This is an automated email sent by Tasks.</div>
"""
