from pathlib import Path

from cv_maker.document import (
    LocalDraftStorage,
    StoragePaths,
    get_theme,
    list_themes,
    parse_document,
    render_preview,
    render_preview_text,
)

RAW = """# Jane Doe
jane@example.com | Berlin
# Experience
- **Acme Corp** | 2020-2023
- Led **three** hires
Product | 2019
# Notes
<script>alert("hi")</script>
"""


def test_preview_maps_kinds_to_markup():
    html = render_preview(parse_document(RAW))

    assert '<h1 class="cv-name">Jane Doe</h1>' in html
    assert '<p class="cv-contact">jane@example.com • Berlin</p>' in html
    assert '<h2 class="cv-section-title">Experience</h2>' in html
    assert '<li class="cv-job"><strong>Acme Corp</strong> <span class="cv-job-subtitle">2020-2023</span></li>' in html
    assert "<li>Led <strong>three</strong> hires</li>" in html
    assert '<p class="cv-job-title">Product | 2019</p>' in html


def test_preview_escapes_user_text():
    html = render_preview_text(RAW)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_preview_theme_and_fallback():
    classic = render_preview_text(RAW, theme="classic")
    assert "cv-theme-classic" in classic
    assert get_theme("classic").accent_color in classic

    fallback = render_preview_text(RAW, theme="neon")
    assert "cv-theme-modern" in fallback
    assert get_theme("neon") == get_theme("modern")
    assert [theme.id for theme in list_themes()] == ["modern", "classic", "minimal"]


def test_preview_of_empty_document():
    html = render_preview_text("")
    assert html.startswith('<div class="cv-preview cv-theme-modern"')
    assert "cv-name" in html  # only in the stylesheet
    assert "<h1" not in html


def test_draft_storage_roundtrip(tmp_path: Path):
    storage = LocalDraftStorage(StoragePaths(tmp_path))
    assert storage.list_drafts() == []
    assert storage.load_draft("resume") is None

    path = storage.save_draft("resume", RAW)
    assert path == tmp_path / "drafts" / "resume.md"
    assert storage.load_draft("resume") == RAW
    assert storage.draft_exists("resume")

    storage.save_draft("resume", "# Updated\n")
    assert storage.load_draft("resume") == "# Updated\n"

    storage.save_draft("Acme / Backend role", "# Jane\n")
    assert storage.list_drafts() == ["Acme-Backend-role", "resume"]

    storage.delete_draft("resume")
    assert not storage.draft_exists("resume")
    storage.delete_draft("resume")
    assert storage.list_drafts() == ["Acme-Backend-role"]


def test_draft_key_slugging(tmp_path: Path):
    paths = StoragePaths(tmp_path)
    assert paths.draft_path("../../etc/passwd").parent == tmp_path / "drafts"
    assert paths.draft_path("   ").name == "draft.md"
