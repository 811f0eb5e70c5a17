import json
import logging

import pytest

from cv_maker import cli
from cv_maker.document import (
    EditorConfig,
    get_config,
    get_draft_storage,
    get_history,
    parse_document,
    serialize,
)

RAW = """**Jane Doe**
jane@example.com | Berlin

**Experience**
* **Acme Corp** | 2020-2023
* Shipped three releases
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("CV_MAKER_STORAGE_ROOT", str(tmp_path / "data"))
    monkeypatch.setenv("CV_MAKER_DATABASE_URL", f"sqlite+pysqlite:///{tmp_path / 'data' / 'cv_maker.db'}")
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    for cached in (get_config, get_draft_storage, get_history):
        cached.cache_clear()
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for cached in (get_config, get_draft_storage, get_history):
        cached.cache_clear()


@pytest.fixture
def resume_file(tmp_path):
    path = tmp_path / "resume.md"
    path.write_text(RAW, encoding="utf-8")
    return path


def test_format_prints_canonical_text(resume_file, capsys):
    assert cli.main(["format", str(resume_file)]) == 0
    out = capsys.readouterr().out
    assert out == serialize(parse_document(RAW))
    assert serialize(parse_document(out)) == out


def test_format_in_place_and_draft(resume_file, tmp_path, capsys):
    assert cli.main(["format", str(resume_file), "--in-place", "--save-draft", "jane"]) == 0
    assert capsys.readouterr().out == ""

    text = resume_file.read_text(encoding="utf-8")
    assert text.startswith("# Jane Doe\n")
    assert (tmp_path / "data" / "drafts" / "jane.md").read_text(encoding="utf-8") == text


def test_tree_prints_json(resume_file, capsys):
    assert cli.main(["tree", str(resume_file)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [child["type"] for child in data["children"]] == ["name", "contact", "section"]
    job = data["children"][2]["children"][0]["children"][0]
    assert job == {"type": "bullet_item", "title": "Acme Corp", "subtitle": "2020-2023"}


def test_preview_writes_html(resume_file, tmp_path):
    output = tmp_path / "preview.html"
    assert cli.main(["preview", str(resume_file), "--theme", "minimal", "--output", str(output)]) == 0
    html = output.read_text(encoding="utf-8")
    assert "cv-theme-minimal" in html
    assert '<h1 class="cv-name">Jane Doe</h1>' in html


def test_missing_file_returns_error(tmp_path, capsys):
    assert cli.main(["format", str(tmp_path / "missing.md")]) == 1
    assert "Document not found" in capsys.readouterr().err


def test_history_lists_and_opens_applications(capsys):
    history = get_history()
    app_id = history.save("Company: Globex", RAW, "professional")

    assert cli.main(["history"]) == 0
    listing = capsys.readouterr().out
    assert app_id in listing
    assert "Globex" in listing

    assert cli.main(["history", "--open", app_id]) == 0
    assert capsys.readouterr().out == serialize(parse_document(RAW))

    assert cli.main(["history", "--open", "app_unknown"]) == 1


def test_config_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("CV_MAKER_MAX_APPLICATIONS", "5")
    monkeypatch.setenv("CV_MAKER_THEME", "classic")
    monkeypatch.setenv("CV_MAKER_LOG_LEVEL", "debug")
    config = EditorConfig.from_env()
    assert config.max_applications == 5
    assert config.theme == "classic"
    assert config.log_level == "DEBUG"
    assert config.storage_root == tmp_path / "data"


def test_config_rejects_bad_limit(monkeypatch):
    monkeypatch.setenv("CV_MAKER_MAX_APPLICATIONS", "many")
    with pytest.raises(ValueError):
        EditorConfig.from_env()
    monkeypatch.setenv("CV_MAKER_MAX_APPLICATIONS", "0")
    with pytest.raises(ValueError):
        EditorConfig.from_env()
