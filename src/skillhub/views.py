"""Terminal renderings of the two views.

* listing (``home``) -- a table of name, description and version;
* detail (``skill-detail``) -- metadata, the file tree and the rendered
  ``SKILL.md``.

In JSON mode both views print the backend payload as-is (fields the
models do not declare included), so ``skillhub list --json`` can be piped
into other tools.
"""

from __future__ import annotations

from skillhub.models import SkillDetail, SkillSummary
from skillhub.navigation import Page
from skillhub.output import OutputFormat, get_output
from skillhub.router import HOME, SKILL_DETAIL


def render_listing(skills: list[SkillSummary], query: str | None = None) -> None:
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_response([s.model_dump(mode="json") for s in skills])
        return

    title = f"Skills matching '{query}'" if query else "Skills"
    rows = [[s.name, s.description, s.version or ""] for s in skills]
    output.print_table(["Name", "Description", "Version"], rows, title=title)
    output.info(f"{len(skills)} skill(s)")


def render_detail(detail: SkillDetail) -> None:
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_response(detail.model_dump(mode="json"))
        return

    meta: list[list[str]] = [["Name", detail.name]]
    if detail.description:
        meta.append(["Description", detail.description])
    if detail.version:
        meta.append(["Version", detail.version])
    if detail.author:
        meta.append(["Author", detail.author])
    if detail.tags:
        meta.append(["Tags", ", ".join(detail.tags)])
    if detail.path:
        meta.append(["Path", detail.path])
    if detail.updated_at:
        meta.append(["Updated", detail.updated_at.isoformat()])
    output.print_table(["Field", "Value"], meta, title=detail.name)

    if detail.file_tree:
        output.print_markdown(f"## File Structure\n\n```\n{detail.file_tree.rstrip()}\n```\n")
    if detail.readme:
        output.print_markdown(detail.readme)


def render_page(page: Page) -> None:
    """Render a page loaded by the :class:`~skillhub.navigation.Navigator`."""
    if page.route_name == HOME:
        render_listing(page.data or [])
    elif page.route_name == SKILL_DETAIL:
        render_detail(page.data)
    else:
        get_output().format_response({"route": page.route_name, "params": page.params})
