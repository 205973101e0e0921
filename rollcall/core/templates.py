"""
Email templates.

Each escalation level has a JSON template in the repository, e.g.
`_emails/rollcall-message-1.json` = {"subject": "...", "body": "..."}, with
`{{ placeholder }}` markers filled in per journal club.
"""

import json
import re
from typing import Any, Dict

from .errors import StorageError, TemplateError
from .github import RecordStore


def template_path(level: int, template_dir: str = "_emails") -> str:
    return f"{template_dir}/rollcall-message-{int(level)}.json"


def fetch_template(store: RecordStore, level: int, template_dir: str = "_emails") -> Dict[str, Any]:
    """
    Fetch and parse the template for an escalation level.

    Raises:
        TemplateError: the template is missing, unreachable, or not a JSON object
    """
    path = template_path(level, template_dir)
    try:
        template = json.loads(store.get_file(path))
    except (StorageError, ValueError) as e:
        raise TemplateError(f"Could not load template {path}: {e}") from e

    if not isinstance(template, dict):
        raise TemplateError(f"Template {path} is not a JSON object")
    return template


def substitute_handlebars(template: Dict[str, Any], subs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Replace `{{ key }}` with subs[key] in every string field of template.

    Returns a new dict; non-string fields and unknown placeholders are kept.
    """
    rendered = {}
    for field, value in template.items():
        if isinstance(value, str):
            for key, replacement in subs.items():
                value = re.sub(
                    r"{{ *" + re.escape(key) + r" *}}",
                    lambda _m, r=replacement: "" if r is None else str(r),
                    value,
                )
        rendered[field] = value
    return rendered
