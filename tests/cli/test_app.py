from typer.testing import CliRunner

from folio.cli.app import app

runner = CliRunner()


def test_check_passes_on_valid_site(site_root):
    result = runner.invoke(app, ["check", str(site_root)])

    assert result.exit_code == 0, result.output
    assert "All content is valid" in result.output


def test_check_lists_posts(site_root):
    result = runner.invoke(app, ["check", str(site_root), "--list"])

    assert result.exit_code == 0, result.output
    assert "hello-world" in result.output


def test_check_reports_dangling_author(site_root):
    (site_root / "src" / "content" / "authors" / "jane-doe.md").unlink()

    result = runner.invoke(app, ["check", str(site_root)])

    assert result.exit_code == 1
    assert "DanglingAuthorReference" in result.output
    assert "jane-doe" in result.output


def test_check_reports_bad_configuration(site_root):
    (site_root / ".folio.toml").write_text("[validation]\nwords_per_minute = -1\n")

    result = runner.invoke(app, ["check", str(site_root)])

    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_check_reports_malformed_config_file(site_root):
    (site_root / ".folio.toml").write_text("[validation\nwords_per_minute = 250\n")

    result = runner.invoke(app, ["check", str(site_root)])

    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_read_time_ignores_front_matter(tmp_path):
    header = "".join(f"tag{index}: some descriptive words here\n" for index in range(150))
    post = tmp_path / "post.md"
    post.write_text(f"---\n{header}---\n" + "word " * 150, encoding="utf-8")

    result = runner.invoke(app, ["read-time", str(post)])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "1"


def test_read_time_reports_unreadable_front_matter(tmp_path):
    post = tmp_path / "post.md"
    post.write_text("---\n- not\n- a mapping\n---\nbody", encoding="utf-8")

    result = runner.invoke(app, ["read-time", str(post)])

    assert result.exit_code == 2


def test_read_time_for_text_and_html(tmp_path):
    text_file = tmp_path / "post.md"
    text_file.write_text("word " * 401, encoding="utf-8")
    html_file = tmp_path / "post.html"
    html_file.write_text("<p>one two</p><p>three</p>", encoding="utf-8")

    text_result = runner.invoke(app, ["read-time", str(text_file)])
    html_result = runner.invoke(app, ["read-time", str(html_file), "--html"])

    assert text_result.exit_code == 0
    assert text_result.output.strip() == "3"
    assert html_result.exit_code == 0
    assert html_result.output.strip() == "1"


def test_read_time_respects_reading_speed(tmp_path):
    text_file = tmp_path / "post.md"
    text_file.write_text("word " * 100, encoding="utf-8")

    result = runner.invoke(app, ["read-time", str(text_file), "--wpm", "40"])

    assert result.output.strip() == "3"


def test_manifest_built_in_is_in_sync():
    result = runner.invoke(app, ["manifest"])

    assert result.exit_code == 0
    assert "Manifest in sync" in result.output


def test_manifest_reports_parity_issues(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(
        "collections:\n"
        "  - name: authors\n"
        "    fields:\n"
        "      - {name: name, required: false}\n",
        encoding="utf-8",
    )

    result = runner.invoke(app, ["manifest", str(path)])

    assert result.exit_code == 1
    assert "authors.name" in result.output
    assert "blog.*" in result.output


def test_manifest_reports_unreadable_file(tmp_path):
    result = runner.invoke(app, ["manifest", str(tmp_path / "missing.yml")])

    assert result.exit_code == 2
