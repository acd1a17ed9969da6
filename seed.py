"""
Seed script -- populates the database with sample stations for reviewers.

Run after migrations:
    python seed.py

Creates 12 stations: a dense group in central Paris (clusters below zoom
12), a few around Lyon and Marseille, and one station with no diesel
price to show the "unknown" tier.
"""

import asyncio

from sqlalchemy import text

from fuelmap.infrastructure.database import async_session_factory, engine
from fuelmap.infrastructure.repositories import StationRepository


STATIONS = [
    # Paris
    {"station_id": "75001001", "name": "Total Access", "address": "12 rue de la République",
     "city": "Paris", "postal_code": "75001", "lat": 48.8566, "lon": 2.3522,
     "price_diesel": 1.629, "price_sp95": 1.729, "price_e10": 1.699},
    {"station_id": "75008001", "name": "Shell Station", "address": "25 avenue des Champs-Élysées",
     "city": "Paris", "postal_code": "75008", "lat": 48.8738, "lon": 2.2950,
     "price_diesel": 1.749, "price_sp95": 1.819, "price_sp98": 1.899},
    {"station_id": "75005001", "name": "BP Express", "address": "45 boulevard Saint-Germain",
     "city": "Paris", "postal_code": "75005", "lat": 48.8530, "lon": 2.3490,
     "price_diesel": 1.849, "price_sp95": 1.899},
    {"station_id": "75001002", "name": "Esso", "address": "8 rue de Rivoli",
     "city": "Paris", "postal_code": "75001", "lat": 48.8580, "lon": 2.3470,
     "price_diesel": 1.639, "price_sp95": 1.739, "price_lpg": 0.999},
    {"station_id": "75011001", "name": "Intermarché", "address": "15 avenue de la République",
     "city": "Paris", "postal_code": "75011", "lat": 48.8620, "lon": 2.3580,
     "price_diesel": 1.719, "price_sp95": 1.789, "price_e85": 0.899},
    {"station_id": "75015001", "name": "Avia", "address": "3 rue de Vaugirard",
     "city": "Paris", "postal_code": "75015", "lat": 48.8420, "lon": 2.3000,
     "price_sp95": 1.799, "price_sp98": 1.879},
    # Lyon
    {"station_id": "69002001", "name": "Leclerc", "address": "30 rue de la Paix",
     "city": "Lyon", "postal_code": "69002", "lat": 45.7640, "lon": 4.8357,
     "price_diesel": 1.659, "price_sp95": 1.759},
    {"station_id": "69003001", "name": "Carrefour", "address": "22 cours Lafayette",
     "city": "Lyon", "postal_code": "69003", "lat": 45.7578, "lon": 4.8320,
     "price_diesel": 1.689, "price_sp95": 1.779},
    {"station_id": "69007001", "name": "Auchan", "address": "5 avenue Jean Jaurès",
     "city": "Lyon", "postal_code": "69007", "lat": 45.7450, "lon": 4.8420,
     "price_diesel": 1.619, "price_e10": 1.669},
    # Marseille
    {"station_id": "13001001", "name": "Dyneff", "address": "10 la Canebière",
     "city": "Marseille", "postal_code": "13001", "lat": 43.2965, "lon": 5.3698,
     "price_diesel": 1.699, "price_sp98": 1.869},
    {"station_id": "13008001", "name": "Total Prado", "address": "120 avenue du Prado",
     "city": "Marseille", "postal_code": "13008", "lat": 43.2770, "lon": 5.3890,
     "price_diesel": 1.809, "price_sp95": 1.859},
    # Bordeaux
    {"station_id": "33000001", "name": "Système U", "address": "2 quai des Chartrons",
     "city": "Bordeaux", "postal_code": "33000", "lat": 44.8520, "lon": -0.5700,
     "price_diesel": 1.645, "price_e85": 0.879},
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM stations"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        repo = StationRepository(session)
        for s in STATIONS:
            await repo.create_station(**s)
        print(f"  Created {len(STATIONS)} stations")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
