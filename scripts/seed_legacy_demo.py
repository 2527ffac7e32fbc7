"""
Create a demo workspace filled with legacy (pre-migration) shows for trying
out the migration: a weekday news series, a weekly talk show with one
special, and a handful of one-off broadcasts, with crew and resources.

Usage:
    python scripts/seed_legacy_demo.py
"""
import asyncio
import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from crewer.database import AsyncSessionLocal, engine, Base
from crewer.models import (
    CrewMember,
    Job,
    LegacyCrewAssignment,
    LegacyRequiredJob,
    LegacyShow,
    LegacyShowResource,
    Resource,
    Workspace,
)

WEEKDAYS = "FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR"
MONDAYS = "FREQ=WEEKLY;BYDAY=MO"


async def seed_legacy_demo() -> str:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        workspace = Workspace(name="BBC Studios North", slug=f"bbc-studios-north-{datetime.utcnow():%Y%m%d%H%M%S}")
        session.add(workspace)
        await session.flush()
        ws = workspace.id

        camera = Job(workspace_id=ws, title="Camera Operator", description="Operates broadcast cameras")
        audio = Job(workspace_id=ws, title="Audio Engineer", description="Manages audio systems")
        director = Job(workspace_id=ws, title="Director", description="Directs the show")
        studio = Resource(workspace_id=ws, name="Studio A", type="studio", description="Main production studio")
        camera_1 = Resource(workspace_id=ws, name="Camera 1", type="equipment")
        john = CrewMember(workspace_id=ws, name="John Smith", email="john@bbc.com", phone="+44 123 456 7890")
        sarah = CrewMember(workspace_id=ws, name="Sarah Johnson", email="sarah@bbc.com", phone="+44 987 654 3210")
        session.add_all([camera, audio, director, studio, camera_1, john, sarah])
        await session.flush()

        monday = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        monday -= timedelta(days=monday.weekday())
        shows = []

        # Weekday news: recurring, numbered episodes
        for day in range(5):
            start = monday + timedelta(days=day, hours=8)
            shows.append(LegacyShow(
                workspace_id=ws, title=f"Morning News - Episode {day + 1}",
                description="Daily morning news broadcast", start_time=start,
                end_time=start + timedelta(hours=1), recurring_pattern=WEEKDAYS,
                color="#2563eb", status="scheduled",
            ))

        # Talk show: weekly plus one dated special without a pattern
        for week in range(3):
            start = monday + timedelta(weeks=week, hours=20)
            shows.append(LegacyShow(
                workspace_id=ws, title=f"Talk Show ({start:%Y-%m-%d})", start_time=start,
                end_time=start + timedelta(minutes=45), recurring_pattern=MONDAYS,
                color="#16a34a", status="scheduled",
            ))
        special = monday + timedelta(days=5, hours=21)
        shows.append(LegacyShow(
            workspace_id=ws, title=f"Talk Show - {special.month}/{special.day}/{special.year}",
            description="Saturday special", start_time=special,
            end_time=special + timedelta(minutes=90), status="draft",
        ))

        # One-offs
        gala = monday + timedelta(days=4, hours=19)
        shows.append(LegacyShow(
            workspace_id=ws, title="Charity Telethon", start_time=gala,
            end_time=gala + timedelta(hours=3), notes="Outside broadcast", status="scheduled",
        ))
        session.add_all(shows)
        await session.flush()

        for show in shows:
            session.add(LegacyCrewAssignment(workspace_id=ws, show_id=show.id, crew_member_id=john.id,
                                             job_id=camera.id, status="confirmed"))
            session.add(LegacyShowResource(workspace_id=ws, show_id=show.id, resource_id=studio.id))
        first_news = shows[0]
        session.add_all([
            LegacyRequiredJob(workspace_id=ws, show_id=first_news.id, job_id=camera.id, quantity=2,
                              notes="Two camera operators needed"),
            LegacyRequiredJob(workspace_id=ws, show_id=first_news.id, job_id=audio.id, quantity=1),
            LegacyRequiredJob(workspace_id=ws, show_id=first_news.id, job_id=director.id, quantity=1),
            LegacyCrewAssignment(workspace_id=ws, show_id=first_news.id, crew_member_id=sarah.id,
                                 job_id=audio.id),
            LegacyShowResource(workspace_id=ws, show_id=first_news.id, resource_id=camera_1.id),
        ])

        await session.commit()
        print(f"Seeded {len(shows)} legacy shows in workspace {ws}")
        return ws


if __name__ == "__main__":
    async def _run():
        try:
            await seed_legacy_demo()
        finally:
            await engine.dispose()

    asyncio.run(_run())
