"""버그 트래커 HTML 페이지 — 목록/필터/통계, 등록·수정 폼, 삭제.

Bug tracker HTML pages — list with filters and stats, create/edit forms and
delete. Pages talk to the API through the injected ``BugClient`` only.
Forms run the shared sanitize/validate pipeline for immediate feedback; the
API re-checks everything and its error list is mapped back onto the form.
"""

from html import escape
from typing import Annotated, Any
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from bugtracker.api.deps import get_bug_client
from bugtracker.client.bug_client import BugApiError, BugClient, BugClientError, BugConnectionError
from bugtracker.utils.validation import (
    PRIORITIES,
    SEVERITIES,
    STATUSES,
    sanitize_bug_data,
    validate_bug_data,
)

router: APIRouter = APIRouter()

SAVE_FAILED_MESSAGE: str = "Failed to save bug. Please try again."

PAGE_HTML = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{TITLE}} - Bug Tracker</title>
<style>
body{font-family:system-ui,sans-serif;background:#f5f6f8;color:#222;margin:0}
header{background:#1a1a2e;color:#fff;padding:16px 32px;display:flex;justify-content:space-between;align-items:center}
header a{color:#fff;text-decoration:none}
main{max-width:960px;margin:24px auto;padding:0 16px}
.stats{display:grid;grid-template-columns:repeat(6,1fr);gap:12px;margin-bottom:24px}
.stat{background:#fff;border:1px solid #ddd;border-radius:10px;padding:12px}
.stat b{display:block;font-size:22px}
.card{background:#fff;border:1px solid #ddd;border-radius:10px;padding:16px;margin-bottom:12px}
.badge{display:inline-block;padding:2px 8px;border-radius:10px;font-size:12px;background:#eee;margin-right:4px}
.sev-critical{background:#fdd}.sev-high{background:#fed7aa}.sev-low{background:#dcfce7}
label{display:block;font-size:13px;color:#555;margin:12px 0 4px}
input,textarea,select{width:100%;padding:8px;border:1px solid #ccc;border-radius:6px;box-sizing:border-box}
.filters{display:flex;gap:8px;align-items:end;margin-bottom:16px}
.filters select{width:auto}
button,.btn{padding:8px 14px;border:none;border-radius:6px;background:#6c5ce7;color:#fff;cursor:pointer;text-decoration:none;font-size:14px}
.danger{background:#d63031}
.err{color:#d63031;font-size:13px;margin-top:4px}
.msg{padding:10px;border-radius:6px;margin-bottom:16px;background:#ff6b6b22;color:#c0392b}
</style>
</head>
<body>
<header><a href="/"><strong>Bug Tracker</strong></a><a class="btn" href="/bugs/new">Report Bug</a></header>
<main>
{{BODY}}
</main>
</body>
</html>"""

# 폼 필드 정의 — (wire name, label, kind, required)
_FORM_FIELDS: tuple[tuple[str, str, str, bool], ...] = (
    ("title", "Bug Title", "text", True),
    ("description", "Description", "textarea", True),
    ("severity", "Severity", "severity", False),
    ("priority", "Priority", "priority", False),
    ("status", "Status", "status", False),
    ("reportedBy", "Reported By", "text", True),
    ("assignedTo", "Assigned To", "text", False),
    ("environment", "Environment", "text", False),
    ("stepsToReproduce", "Steps to Reproduce", "textarea", False),
)

_CHOICES: dict[str, tuple[str, ...]] = {
    "severity": SEVERITIES,
    "priority": PRIORITIES,
    "status": STATUSES,
}

_EMPTY_FORM: dict[str, str] = {
    "title": "",
    "description": "",
    "severity": "medium",
    "status": "open",
    "priority": "medium",
    "reportedBy": "",
    "assignedTo": "",
    "environment": "",
    "stepsToReproduce": "",
}


def map_errors_to_fields(errors: list[str]) -> dict[str, str]:
    """오류 메시지를 폼 필드에 배정 — title/description/reportedBy, else general."""
    fields: dict[str, str] = {}
    for error in errors:
        lowered = error.lower()
        if "title" in lowered:
            name = "title"
        elif "description" in lowered:
            name = "description"
        elif "reporter" in lowered:
            name = "reportedBy"
        else:
            name = "general"
        fields[name] = error
    return fields


def form_errors(form_data: dict[str, str]) -> dict[str, str]:
    """API와 동일한 정제·검증 파이프라인으로 폼을 검사합니다."""
    result = validate_bug_data(sanitize_bug_data(form_data))
    return map_errors_to_fields(result.errors)


def _render(title: str, body: str, status_code: int = 200) -> HTMLResponse:
    html = PAGE_HTML.replace("{{TITLE}}", escape(title)).replace("{{BODY}}", body)
    return HTMLResponse(html, status_code=status_code)


def _message(text: str) -> str:
    return f'<div class="msg">{escape(text)}</div>'


def _options(choices: tuple[str, ...], selected: str, blank: str | None = None) -> str:
    parts: list[str] = []
    if blank is not None:
        parts.append(f'<option value="">{escape(blank)}</option>')
    for choice in choices:
        flag = " selected" if choice == selected else ""
        parts.append(f'<option value="{escape(choice)}"{flag}>{escape(choice)}</option>')
    return "".join(parts)


def _form_body(heading: str, action: str, values: dict[str, str], errors: dict[str, str]) -> str:
    parts: list[str] = [f"<h2>{escape(heading)}</h2>"]
    if "general" in errors:
        parts.append(_message(errors["general"]))
    parts.append(f'<form class="card" method="post" action="{escape(action)}">')
    for name, label, kind, required in _FORM_FIELDS:
        value = values.get(name) or ""
        marker = " *" if required else ""
        parts.append(f'<label for="{name}">{escape(label)}{marker}</label>')
        if kind == "textarea":
            parts.append(f'<textarea id="{name}" name="{name}" rows="4">{escape(value)}</textarea>')
        elif kind in _CHOICES:
            parts.append(f'<select id="{name}" name="{name}">{_options(_CHOICES[kind], value)}</select>')
        else:
            parts.append(f'<input type="text" id="{name}" name="{name}" value="{escape(value)}">')
        if name in errors:
            parts.append(f'<p class="err">{escape(errors[name])}</p>')
    parts.append('<p><button type="submit">Save</button> <a href="/">Cancel</a></p></form>')
    return "".join(parts)


def _stats_body(stats: dict[str, int]) -> str:
    cards = (
        ("Total Bugs", stats.get("total", 0)),
        ("Open", stats.get("open", 0)),
        ("In Progress", stats.get("inProgress", 0)),
        ("Resolved", stats.get("resolved", 0)),
        ("Closed", stats.get("closed", 0)),
        ("Critical", stats.get("critical", 0)),
    )
    inner = "".join(f'<div class="stat">{label}<b>{value}</b></div>' for label, value in cards)
    return f'<div class="stats">{inner}</div>'


def _filters_body(filters: dict[str, str]) -> str:
    return (
        '<form class="filters" method="get" action="/">'
        f'<div><label>Status</label><select name="status">{_options(STATUSES, filters["status"], "All")}</select></div>'
        f'<div><label>Severity</label><select name="severity">{_options(SEVERITIES, filters["severity"], "All")}</select></div>'
        f'<div><label>Priority</label><select name="priority">{_options(PRIORITIES, filters["priority"], "All")}</select></div>'
        '<button type="submit">Filter</button></form>'
    )


def _bug_card(bug: dict[str, Any]) -> str:
    bug_id = escape(str(bug.get("_id", "")))
    assignee = bug.get("assignedTo")
    assigned = f" &middot; Assigned to {escape(assignee)}" if assignee else ""
    return (
        '<div class="card">'
        f'<h3>{escape(bug.get("title") or "")}</h3>'
        f'<p>{escape(bug.get("description") or "")}</p>'
        f'<span class="badge sev-{escape(bug.get("severity") or "")}">{escape(bug.get("severity") or "")}</span>'
        f'<span class="badge">{escape((bug.get("status") or "").replace("-", " "))}</span>'
        f'<span class="badge">{escape(bug.get("priority") or "")} priority</span>'
        f'<p>Reported by {escape(bug.get("reportedBy") or "")}{assigned}</p>'
        f'<a class="btn" href="/bugs/{bug_id}/edit">Edit</a> '
        f'<form style="display:inline" method="post" action="/bugs/{bug_id}/delete">'
        '<button class="danger" type="submit">Delete</button></form>'
        "</div>"
    )


def _page_href(page: int, filters: dict[str, str]) -> str:
    query = urlencode({"page": page, **{k: v for k, v in filters.items() if v}})
    return escape(f"/?{query}")


def _pager(filters: dict[str, str], pagination: dict[str, int]) -> str:
    page, pages = pagination.get("page", 1), pagination.get("pages", 1)
    if pages <= 1:
        return ""
    links: list[str] = []
    if page > 1:
        links.append(f'<a href="{_page_href(page - 1, filters)}">&laquo; Prev</a>')
    links.append(f"Page {page} of {pages}")
    if page < pages:
        links.append(f'<a href="{_page_href(page + 1, filters)}">Next &raquo;</a>')
    return "<p>" + " | ".join(links) + "</p>"


def _collect_form(**fields: str) -> dict[str, str]:
    return {name: fields[name] for name in _EMPTY_FORM}


@router.get("/", response_class=HTMLResponse)
async def bug_list_page(
    client: Annotated[BugClient, Depends(get_bug_client)],
    status: str = "",
    severity: str = "",
    priority: str = "",
    page: str = "",
) -> HTMLResponse:
    """버그 목록 페이지 — 통계, 필터, 목록."""
    filters = {"status": status, "severity": severity, "priority": priority}
    try:
        listing = await client.get_bugs({**filters, "page": page})
        stats = await client.get_stats()
    except BugClientError as exc:
        return _render("Bugs", _filters_body(filters) + _message(exc.message), status_code=502)

    bugs: list[dict[str, Any]] = listing.get("data", [])
    body = [_stats_body(stats.get("data", {})), _filters_body(filters)]
    if not bugs:
        body.append('<div class="card"><h3>No bugs found</h3>'
                    "<p>No bugs match your current search and filter criteria.</p></div>")
    body.extend(_bug_card(b) for b in bugs)
    body.append(_pager(filters, listing.get("pagination", {})))
    return _render("Bugs", "".join(body))


@router.get("/bugs/new", response_class=HTMLResponse)
async def new_bug_page() -> HTMLResponse:
    return _render("Report New Bug", _form_body("Report New Bug", "/bugs/new", _EMPTY_FORM, {}))


async def _save(
    client: BugClient,
    heading: str,
    action: str,
    form_data: dict[str, str],
    bug_id: str | None = None,
) -> HTMLResponse | RedirectResponse:
    errors = form_errors(form_data)
    if not errors:
        try:
            if bug_id is None:
                await client.create_bug(form_data)
            else:
                await client.update_bug(bug_id, form_data)
            return RedirectResponse("/", status_code=303)
        except BugApiError as exc:
            if exc.errors:
                errors = map_errors_to_fields(exc.errors)
            elif exc.status_code < 500:
                errors = {"general": exc.message}
            else:
                errors = {"general": SAVE_FAILED_MESSAGE}
        except BugConnectionError as exc:
            errors = {"general": exc.message}
    return _render(heading, _form_body(heading, action, form_data, errors), status_code=400)


@router.post("/bugs/new", response_class=HTMLResponse)
async def create_bug_submit(
    client: Annotated[BugClient, Depends(get_bug_client)],
    title: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    severity: Annotated[str, Form()] = "medium",
    status: Annotated[str, Form()] = "open",
    priority: Annotated[str, Form()] = "medium",
    reportedBy: Annotated[str, Form()] = "",
    assignedTo: Annotated[str, Form()] = "",
    environment: Annotated[str, Form()] = "",
    stepsToReproduce: Annotated[str, Form()] = "",
):
    form_data = _collect_form(
        title=title, description=description, severity=severity, status=status,
        priority=priority, reportedBy=reportedBy, assignedTo=assignedTo,
        environment=environment, stepsToReproduce=stepsToReproduce,
    )
    return await _save(client, "Report New Bug", "/bugs/new", form_data)


@router.get("/bugs/{bug_id}/edit", response_class=HTMLResponse)
async def edit_bug_page(
    bug_id: str,
    client: Annotated[BugClient, Depends(get_bug_client)],
) -> HTMLResponse:
    try:
        bug = (await client.get_bug(bug_id))["data"]
    except BugApiError as exc:
        return _render("Edit Bug", _message(exc.message), status_code=exc.status_code)
    except BugConnectionError as exc:
        return _render("Edit Bug", _message(exc.message), status_code=502)
    values = {name: bug.get(name) or default for name, default in _EMPTY_FORM.items()}
    return _render("Edit Bug", _form_body("Edit Bug", f"/bugs/{bug_id}/edit", values, {}))


@router.post("/bugs/{bug_id}/edit", response_class=HTMLResponse)
async def edit_bug_submit(
    bug_id: str,
    client: Annotated[BugClient, Depends(get_bug_client)],
    title: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    severity: Annotated[str, Form()] = "medium",
    status: Annotated[str, Form()] = "open",
    priority: Annotated[str, Form()] = "medium",
    reportedBy: Annotated[str, Form()] = "",
    assignedTo: Annotated[str, Form()] = "",
    environment: Annotated[str, Form()] = "",
    stepsToReproduce: Annotated[str, Form()] = "",
):
    form_data = _collect_form(
        title=title, description=description, severity=severity, status=status,
        priority=priority, reportedBy=reportedBy, assignedTo=assignedTo,
        environment=environment, stepsToReproduce=stepsToReproduce,
    )
    return await _save(client, "Edit Bug", f"/bugs/{bug_id}/edit", form_data, bug_id)


@router.post("/bugs/{bug_id}/delete", response_class=HTMLResponse)
async def delete_bug_submit(
    bug_id: str,
    client: Annotated[BugClient, Depends(get_bug_client)],
):
    try:
        await client.delete_bug(bug_id)
    except BugApiError as exc:
        return _render("Delete Bug", _message(exc.message), status_code=exc.status_code)
    except BugConnectionError as exc:
        return _render("Delete Bug", _message(exc.message), status_code=502)
    return RedirectResponse("/", status_code=303)
