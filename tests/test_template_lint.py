# tests/test_template_lint.py
"""
Tests for template lint and normalization.
"""

from concierge.template_lint import lint_directory, lint_template, normalize_template

CLEAN = "<!-- SUBJECT: Hello -->\n<p>Hi {{client_name}}</p>\n"


class TestNormalizeTemplate:
    def test_clean_text_is_unchanged(self):
        assert normalize_template(CLEAN) == CLEAN

    def test_fixes_line_endings_whitespace_and_spacing(self):
        messy = "<!-- SUBJECT: Hello -->  \r\n<p>Hi {{ client_name }}</p>\t\r\n\r\n"
        assert normalize_template(messy) == CLEAN

    def test_idempotent(self):
        messy = "<p>{{  a }}</p>   \r\n\n\n"
        once = normalize_template(messy)
        assert normalize_template(once) == once


class TestLintTemplate:
    def test_clean_template(self):
        assert lint_template("clean", CLEAN) == []

    def test_missing_subject(self):
        issues = lint_template("t", "<p>{{name}}</p>\n")
        assert [i.message for i in issues] == ["missing <!-- SUBJECT: ... --> comment"]

    def test_spaced_placeholder(self):
        issues = lint_template("t", "<!-- SUBJECT: x -->\n<p>{{ name }}</p>\n")
        messages = [i.message for i in issues]
        assert any("surrounding spaces" in m for m in messages)
        assert "not normalized (run with --fix)" in messages

    def test_camel_case_placeholder(self):
        issues = lint_template("t", "<!-- SUBJECT: x -->\n\n<p>{{clientName}}</p>\n")
        assert len(issues) == 1
        assert "snake_case" in issues[0].message
        assert issues[0].line == 3
        assert str(issues[0]) == "t:3: placeholder is not snake_case: {{clientName}}"

    def test_unbalanced_braces(self):
        issues = lint_template("t", "<!-- SUBJECT: x -->\n<p>{{name</p>\n")
        assert any("unbalanced" in i.message for i in issues)


class TestLintDirectory:
    def test_shipped_templates_are_clean(self):
        assert lint_directory() == []

    def test_fix_rewrites_files(self, tmp_path):
        path = tmp_path / "welcome.html"
        path.write_text("<!-- SUBJECT: Hi -->\r\n<p>{{ client_name }}</p>  \r\n", encoding="utf-8")

        assert lint_directory(tmp_path) != []
        assert lint_directory(tmp_path, fix=True) == []
        assert path.read_text(encoding="utf-8") == "<!-- SUBJECT: Hi -->\n<p>{{client_name}}</p>\n"
