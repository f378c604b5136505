"""Initialize database schema for FilmMatch.

Creates all tables and seeds the starter genres and movies.
Run this before starting the API server.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from config.genre_catalog import GENRES, MOVIES
from filmmatch import models
from filmmatch.config import settings
from filmmatch.db import AsyncSessionMaker, engine
from filmmatch.models import Base
from filmmatch.services.movie import create_movie, get_or_create_category
from sqlalchemy import func, select


async def seed_catalogue() -> int:
    """Insert starter genres and movies unless movies already exist."""
    async with AsyncSessionMaker() as session:
        existing = (await session.execute(select(func.count(models.Movie.id)))).scalar_one()
        if existing:
            print(f"✓ Catalogue already has {existing} movies, skipping seed")
            return 0

        for genre in GENRES:
            await get_or_create_category(session, genre["name"], genre.get("description"))

        for movie in MOVIES:
            data = dict(movie)
            await create_movie(session, category_names=data.pop("genres"), **data)

        await session.commit()
    print(f"✓ Seeded {len(GENRES)} genres and {len(MOVIES)} movies")
    return len(MOVIES)


async def init_database(drop: bool = False, seed: bool = True):
    """Create all database tables."""
    print(f"Initializing database: {settings.db.url.split('@')[-1]}")
    print("Creating tables...")

    async with engine.begin() as conn:
        if drop:
            # Drop all tables (for clean start)
            await conn.run_sync(Base.metadata.drop_all)
            print("✓ Dropped existing tables")

        # Create all tables
        await conn.run_sync(Base.metadata.create_all)
        print("✓ Created all tables")

    if seed:
        await seed_catalogue()

    print("\n✅ Database initialization complete!")
    print(f"Tables: {', '.join(Base.metadata.tables.keys())}")


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    parser.add_argument("--no-seed", action="store_true", help="skip the starter catalogue")
    args = parser.parse_args()

    try:
        await init_database(drop=args.drop, seed=not args.no_seed)
    except Exception as e:
        print(f"\n❌ Error initializing database: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
