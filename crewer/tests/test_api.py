"""
API endpoint tests for the migration routes.
Uses in-memory SQLite + dependency-overridden FastAPI test client.
"""
from crewer.config import Settings, get_settings
from crewer.main import app
from crewer.models import LegacyCrewAssignment


# ===================== HEALTH / ROOT =====================


async def test_root(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


# ===================== MIGRATION STATUS =====================


async def test_status_before_migration(client, db_session, seed_data, make_show):
    ws_id = seed_data["ws"].id
    make_show(seed_data["ws"], "Morning News - Episode 1")
    make_show(seed_data["ws"], "Morning News - Episode 2")
    await db_session.commit()

    r = await client.get(f"/api/workspaces/{ws_id}/migration")
    assert r.status_code == 200
    body = r.json()
    assert body["is_migrated"] is False
    assert body["legacy_show_count"] == 2
    assert body["marker"] is None


async def test_status_unknown_workspace(client):
    r = await client.get("/api/workspaces/does-not-exist/migration")
    assert r.status_code == 404


# ===================== RUN MIGRATION =====================


async def test_run_migration(client, db_session, seed_data, make_show):
    ws_id = seed_data["ws"].id
    show = make_show(seed_data["ws"], "Morning News - Episode 1", pattern="FREQ=DAILY")
    make_show(seed_data["ws"], "Morning News - Episode 2", pattern="FREQ=DAILY")
    make_show(seed_data["ws"], "Talk Show")
    await db_session.flush()
    db_session.add(LegacyCrewAssignment(workspace_id=ws_id, show_id=show.id,
                                        crew_member_id=seed_data["john"].id, job_id=seed_data["camera"].id))
    await db_session.commit()

    r = await client.post(f"/api/workspaces/{ws_id}/migration")
    assert r.status_code == 200
    stats = r.json()["stats"]
    assert r.json()["migrated"] is True
    assert stats["productions"] == 2
    assert stats["templates"] == 1
    assert stats["events"] == 3
    assert stats["crew_assignments"] == 1

    r = await client.get(f"/api/workspaces/{ws_id}/migration")
    body = r.json()
    assert body["is_migrated"] is True
    assert body["marker"]["event_count"] == 3


async def test_run_migration_twice_conflicts(client, db_session, seed_data, make_show):
    ws_id = seed_data["ws"].id
    make_show(seed_data["ws"], "Morning News - Episode 1")
    await db_session.commit()

    r = await client.post(f"/api/workspaces/{ws_id}/migration")
    assert r.status_code == 200

    r = await client.post(f"/api/workspaces/{ws_id}/migration")
    assert r.status_code == 409


async def test_run_migration_empty_workspace(client, seed_data):
    r = await client.post(f"/api/workspaces/{seed_data['ws'].id}/migration")
    assert r.status_code == 200
    assert r.json()["migrated"] is False
    assert r.json()["stats"]["events"] == 0


async def test_run_migration_unknown_workspace(client):
    r = await client.post("/api/workspaces/does-not-exist/migration")
    assert r.status_code == 404


async def test_auto_migrate(client, db_session, seed_data, make_show):
    ws_id = seed_data["ws"].id
    make_show(seed_data["ws"], "Morning News - Episode 1")
    await db_session.commit()

    r = await client.post(f"/api/workspaces/{ws_id}/migration/auto")
    assert r.status_code == 200
    assert r.json()["migrated"] is True

    r = await client.post(f"/api/workspaces/{ws_id}/migration/auto")
    assert r.status_code == 200
    assert r.json()["migrated"] is False


# ===================== VALIDATION =====================


async def test_validation_report(client, db_session, seed_data, make_show):
    ws_id = seed_data["ws"].id
    make_show(seed_data["ws"], "Morning News - Episode 1", pattern="FREQ=DAILY")
    await db_session.commit()

    r = await client.get(f"/api/workspaces/{ws_id}/migration/validation")
    assert r.status_code == 200
    assert r.json()["passed"] is False

    await client.post(f"/api/workspaces/{ws_id}/migration")

    r = await client.get(f"/api/workspaces/{ws_id}/migration/validation")
    assert r.status_code == 200
    assert r.json()["passed"] is True
    assert all(c["passed"] for c in r.json()["checks"])


# ===================== PRODUCTIONS =====================


async def test_productions_lazily_migrate(client, db_session, seed_data, make_show):
    ws_id = seed_data["ws"].id
    make_show(seed_data["ws"], "Morning News - Episode 1", pattern="FREQ=DAILY")
    make_show(seed_data["ws"], "Morning News - Episode 2", pattern="FREQ=DAILY")
    make_show(seed_data["ws"], "Morning News (2024-04-01)")
    await db_session.commit()

    r = await client.get(f"/api/workspaces/{ws_id}/productions")
    assert r.status_code == 200
    productions = r.json()
    assert len(productions) == 1
    assert productions[0]["name"] == "Morning News"
    assert productions[0]["template_count"] == 1
    assert productions[0]["event_count"] == 3

    # Second access does not migrate again
    r = await client.get(f"/api/workspaces/{ws_id}/productions")
    assert len(r.json()) == 1


async def test_productions_without_auto_migrate(client, db_session, seed_data, make_show):
    ws_id = seed_data["ws"].id
    make_show(seed_data["ws"], "Morning News - Episode 1")
    await db_session.commit()

    app.dependency_overrides[get_settings] = lambda: Settings(AUTO_MIGRATE_ON_ACCESS=False)

    r = await client.get(f"/api/workspaces/{ws_id}/productions")
    assert r.status_code == 200
    assert r.json() == []
