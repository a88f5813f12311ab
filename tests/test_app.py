from library_app.db_objects_mssql import ensure_db_objects_mssql


def test_health(client):
    res = client.get("/health")
    assert res.get_json() == {"ok": True}


def test_stock_trigger_is_mssql_only(app):
    assert ensure_db_objects_mssql(app) is False


def test_scheduler_is_off_in_tests(app):
    assert "apscheduler" not in app.extensions


def test_home_page(client, make_book):
    make_book(title="Dune")
    res = client.get("/")
    assert res.status_code == 200
    assert b"Dune" in res.data
    assert b"Nothing borrowed yet." in res.data
