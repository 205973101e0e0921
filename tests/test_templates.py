"""
Tests for template loading and placeholder substitution.
"""

import pytest

from rollcall.core.errors import StorageError, TemplateError
from rollcall.core.templates import fetch_template, substitute_handlebars, template_path


class TestSubstituteHandlebars:

    def test_placeholders_replaced_in_string_fields(self):
        template = {"subject": "{{ jcTitle }} update", "body": "<b>{{jcTitle}}</b> and {{  jcTitle }}"}
        rendered = substitute_handlebars(template, {"jcTitle": "Oxford"})
        assert rendered == {"subject": "Oxford update", "body": "<b>Oxford</b> and Oxford"}

    def test_unknown_placeholders_left_verbatim(self):
        rendered = substitute_handlebars({"body": "Hi {{ ownerName }}"}, {"jcTitle": "Oxford"})
        assert rendered["body"] == "Hi {{ ownerName }}"

    def test_non_string_fields_untouched(self):
        template = {"subject": "{{ jcTitle }}", "priority": 3, "tags": ["{{ jcTitle }}"]}
        rendered = substitute_handlebars(template, {"jcTitle": "X"})
        assert rendered["priority"] == 3
        assert rendered["tags"] == ["{{ jcTitle }}"]

    def test_template_not_mutated(self):
        template = {"subject": "{{ jcTitle }}"}
        substitute_handlebars(template, {"jcTitle": "X"})
        assert template == {"subject": "{{ jcTitle }}"}

    def test_replacement_is_literal(self):
        """Backslashes and group references in titles are not regex syntax."""
        rendered = substitute_handlebars({"s": "{{ jcTitle }}"}, {"jcTitle": r"A\1 & B\n"})
        assert rendered["s"] == r"A\1 & B\n"

    def test_missing_title_renders_empty(self):
        assert substitute_handlebars({"s": "[{{ jcTitle }}]"}, {"jcTitle": None})["s"] == "[]"


class TestFetchTemplate:

    def test_path(self):
        assert template_path(3) == "_emails/rollcall-message-3.json"
        assert template_path(1, "mail") == "mail/rollcall-message-1.json"

    def test_fetch(self, store):
        store.add_templates()
        template = fetch_template(store, 2)
        assert template["subject"] == "Reminder: {{ jcTitle }}"
        assert ("get_file", "_emails/rollcall-message-2.json") in store.calls

    def test_missing_template_raises(self, store):
        with pytest.raises(TemplateError, match="rollcall-message-1.json"):
            fetch_template(store, 1)

    def test_unreachable_store_raises(self, store):
        store.fail_on["get_file"] = StorageError("Bad Gateway (502)", 502)
        with pytest.raises(TemplateError):
            fetch_template(store, 1)

    def test_invalid_json_raises(self, store):
        store.add("_emails/rollcall-message-1.json", "{not json")
        with pytest.raises(TemplateError):
            fetch_template(store, 1)

    def test_non_object_raises(self, store):
        store.add("_emails/rollcall-message-1.json", '["subject"]')
        with pytest.raises(TemplateError, match="not a JSON object"):
            fetch_template(store, 1)
