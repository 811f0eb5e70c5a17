from datetime import datetime

from cv_maker.document import (
    ApplicationHistory,
    InMemoryApplicationRepository,
    MatchAnalysis,
    SavedApplication,
    SqlAlchemyApplicationRepository,
    extract_company_name,
)

RESUME = "# Jane Doe\njane@example.com | Berlin\n# Experience\n- **Acme** | 2020\n"
GENERATED = "# Jane Doe\n# Summary\nTailored for **TechCorp**\n"


def test_extract_company_name():
    assert extract_company_name("Software Engineer at TechCorp is hiring now") == "TechCorp"
    assert extract_company_name("Company: Globex") == "Globex"
    assert extract_company_name("Python Django Kubernetes Terraform") == "Python Django Kubernetes"
    assert extract_company_name("") == "Untitled"
    assert len(extract_company_name("Company: " + "A" * 80)) == 30


def test_save_creates_active_named_application():
    history = ApplicationHistory(InMemoryApplicationRepository())
    app_id = history.save("Software Engineer at TechCorp is hiring now", RESUME, "professional")

    assert app_id.startswith("app_")
    assert history.active_id == app_id
    active = history.active_application
    assert active.name == "TechCorp"
    assert active.resume == RESUME
    assert active.generated_content is None


def test_save_with_existing_id_updates_in_place():
    history = ApplicationHistory(InMemoryApplicationRepository())
    app_id = history.save("Company: Globex", RESUME, "friendly")
    analysis = MatchAnalysis(score=82.0, reasoning="Strong backend match", missing_keywords=["Go"])

    assert history.save("Company: Globex", RESUME, "formal", GENERATED, analysis, existing_id=app_id) == app_id
    assert len(history.applications) == 1
    stored = history.load(app_id)
    assert stored.tone == "formal"
    assert stored.generated_content == GENERATED
    assert stored.match_analysis == analysis

    history.save("ignored", RESUME, "formal", existing_id="app_missing")
    assert len(history.applications) == 1


def test_history_prunes_oldest_beyond_limit():
    history = ApplicationHistory(InMemoryApplicationRepository(), max_applications=3)
    ids = [history.save(f"Company: Firm{i}", RESUME, "professional") for i in range(5)]

    remaining = [app.id for app in history.applications]
    assert remaining == list(reversed(ids[2:]))
    assert history.active_id == ids[-1]


def test_load_delete_rename_and_clear():
    history = ApplicationHistory(InMemoryApplicationRepository())
    first = history.save("Company: Initech", RESUME, "professional")
    second = history.save("Company: Hooli", RESUME, "professional")

    assert history.load("app_unknown") is None
    assert history.active_id == second
    assert history.load(first).name == "Initech"
    assert history.active_id == first

    history.rename(first, "x" * 80)
    assert history.load(first).name == "x" * 50
    history.rename("app_unknown", "nothing")

    history.delete(first)
    assert history.active_id is None
    assert [app.id for app in history.applications] == [second]

    history.load(second)
    history.clear_active()
    assert history.active_application is None

    history.clear_all()
    assert history.applications == []


def test_open_in_editor_prefers_generated_content():
    history = ApplicationHistory(InMemoryApplicationRepository())
    plain = history.save("Company: Initech", RESUME, "professional")
    tailored = history.save("Company: Hooli", RESUME, "professional", generated_content=GENERATED)

    assert history.open_in_editor(plain).get_tree().name.text == "Jane Doe"
    editor = history.open_in_editor(tailored)
    assert editor.get_text() == "# Jane Doe\n\n# Summary\nTailored for **TechCorp**\n"
    assert history.open_in_editor("app_unknown") is None


def test_in_memory_repository_returns_copies():
    repo = InMemoryApplicationRepository()
    repo.save_application(
        SavedApplication(id="app_1", name="Acme", job_description="jd", resume=RESUME, tone="professional")
    )
    loaded = repo.get_application("app_1")
    loaded.name = "Changed"
    assert repo.get_application("app_1").name == "Acme"


def test_sqlalchemy_repository_roundtrip(tmp_path):
    url = f"sqlite+pysqlite:///{tmp_path / 'applications.db'}"
    repo = SqlAlchemyApplicationRepository(url)
    analysis = MatchAnalysis(score=71.5, reasoning="Missing cloud work", missing_keywords=["AWS", "Terraform"])
    older = SavedApplication(
        id="app_old",
        name="Initech",
        job_description="Company: Initech",
        resume=RESUME,
        tone="professional",
        created_at=datetime(2024, 1, 1, 9, 0),
        updated_at=datetime(2024, 1, 1, 9, 0),
    )
    newer = SavedApplication(
        id="app_new",
        name="Hooli",
        job_description="Company: Hooli",
        resume=RESUME,
        tone="formal",
        generated_content=GENERATED,
        match_analysis=analysis,
        created_at=datetime(2024, 2, 1, 9, 0),
        updated_at=datetime(2024, 2, 1, 9, 0),
    )
    repo.save_application(older)
    repo.save_application(newer)

    assert [app.id for app in repo.list_applications()] == ["app_new", "app_old"]
    loaded = repo.get_application("app_new")
    assert loaded.match_analysis == analysis
    assert loaded.generated_content == GENERATED
    assert loaded.created_at == datetime(2024, 2, 1, 9, 0)
    assert repo.get_application("app_old").match_analysis is None

    repo.delete_application("app_old")
    assert repo.get_application("app_old") is None
    repo.clear()
    assert repo.list_applications() == []


def test_history_over_sqlalchemy_prunes(tmp_path):
    url = f"sqlite+pysqlite:///{tmp_path / 'history.db'}"
    history = ApplicationHistory(SqlAlchemyApplicationRepository(url), max_applications=2)
    ids = [history.save(f"Company: Firm{i}", RESUME, "professional") for i in range(3)]

    assert [app.id for app in history.applications] == [ids[2], ids[1]]
    assert history.active_application.name == "Firm2"
