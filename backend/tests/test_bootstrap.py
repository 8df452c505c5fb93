from app.db import bootstrap


def test_ensure_schema_logs_missing_columns(monkeypatch, caplog):
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: None)
    monkeypatch.setattr(bootstrap, "missing_schema_items", lambda: {"lessons": ["week_type"]})

    with caplog.at_level("WARNING", logger="app.db.bootstrap"):
        bootstrap.ensure_schema()

    assert "Table lessons is missing columns week_type" in caplog.text


def test_required_tables_exist_after_startup(client):
    assert bootstrap.missing_schema_items() == {}
