"""HTML fragments swapped into the editor page by htmx."""

from __future__ import annotations

from html import escape
import json
from typing import Sequence

from editor_gateway.models.scm import PullRequestInfo, RepoEntry


def render_file_list(entries: Sequence[RepoEntry]) -> str:
    parts = ["<h3>Repository Files</h3>"]
    for entry in entries:
        if entry.is_dir:
            parts.append(f'<div style="margin:5px;">\U0001F4C1 {escape(entry.name)}/</div>')
            continue
        onclick = escape(f"loadFile({json.dumps(entry.path)}); return false;", quote=True)
        parts.append(
            f'<div style="margin:5px;"><a href="#" onclick="{onclick}">'
            f"\U0001F4C4 {escape(entry.name)}</a></div>"
        )
    return "".join(parts)


def render_pull_requests(pulls: Sequence[PullRequestInfo]) -> str:
    if not pulls:
        return "<p>No open PRs</p>"
    parts = ["<h3>Open PRs</h3>"]
    for pr in pulls:
        parts.append(
            '<div style="border:1px solid #ccc; margin:10px; padding:10px;">'
            f"<h4>PR #{pr.number}: {escape(pr.title)}</h4>"
            '<form hx-post="/merge-pr" hx-target="#status" hx-swap="innerHTML">'
            f'<input type="hidden" name="prNumber" value="{pr.number}">'
            '<button type="submit">merge pr</button>'
            "</form></div>"
        )
    return "".join(parts)


def render_message(message: str) -> str:
    return f"<p>{escape(message)}</p>"
