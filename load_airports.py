"""Load an OurAirports airports.csv into the airports table.

Usage: python load_airports.py <airports.csv> [--include-small]
"""
import asyncio
import csv
import sys

from sqlalchemy import select

from jetquote.core.enums import AirportClass
from jetquote.db.session import AsyncSessionLocal, engine
from jetquote.models.airport import Airport
from jetquote.models.base import Base

BATCH_SIZE = 1000


def _row_to_airport(row: dict):
    try:
        latitude = float(row["latitude_deg"])
        longitude = float(row["longitude_deg"])
    except (KeyError, ValueError):
        return None
    ident = (row.get("ident") or "").strip().upper()
    if not ident or not row.get("name"):
        return None
    return Airport(
        ident=ident,
        type=row["type"],
        name=row["name"].strip(),
        municipality=(row.get("municipality") or "").strip() or None,
        iso_region=(row.get("iso_region") or "").strip() or None,
        iso_country=(row.get("iso_country") or "").strip() or None,
        latitude=latitude,
        longitude=longitude,
    )


async def load_airports(path: str, include_small: bool = False) -> int:
    wanted = {AirportClass.LARGE.value, AirportClass.MEDIUM.value}
    if include_small:
        wanted.add(AirportClass.SMALL.value)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    loaded = 0
    async with AsyncSessionLocal() as session:
        existing = set((await session.execute(select(Airport.ident))).scalars().all())

        with open(path, newline="", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                if row.get("type") not in wanted:
                    continue
                airport = _row_to_airport(row)
                if airport is None or airport.ident in existing:
                    continue
                session.add(airport)
                existing.add(airport.ident)
                loaded += 1
                if loaded % BATCH_SIZE == 0:
                    await session.commit()

        await session.commit()

    await engine.dispose()
    return loaded


def main():
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) != 1:
        print("Usage: python load_airports.py <airports.csv> [--include-small]")
        sys.exit(1)

    try:
        count = asyncio.run(load_airports(args[0], include_small="--include-small" in sys.argv))
    except (OSError, csv.Error) as e:
        print(f"Error loading airports: {e}")
        sys.exit(1)

    print(f"Loaded {count} airports")
    sys.exit(0)


if __name__ == "__main__":
    main()
