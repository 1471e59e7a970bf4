"""Jinja2 page templates."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

# View model fields that already hold rendered HTML
HTML_FIELDS = frozenset({"head", "pkg_templates", "readme_html", "content_html"})


class ViewRenderer:
    """Renders a named template with a view model."""

    def __init__(self, environment: Environment | None = None, site_name: str = "tinyhttp"):
        self.environment = environment or Environment(
            loader=PackageLoader("docsite", "templates"),
            autoescape=select_autoescape(["html"]),
        )
        self.site_name = site_name

    def render(self, template: str, view_model: Mapping[str, Any]) -> str:
        context = dict(view_model)
        for key in HTML_FIELDS & context.keys():
            if context[key] is not None:
                context[key] = Markup(context[key])
        context.setdefault("site_name", self.site_name)
        return self.environment.get_template(template).render(context)
