"""
Seed script -- populates the database with sample centers for reviewers.

Run after migrations:
    python seed.py

Creates 9 centers across the Klang Valley, Penang and Johor Bahru
(a mix of diagnostic, therapy, support and education listings).
"""

import asyncio

from sqlalchemy import text

from src.domain.enums import LocationType
from src.infrastructure.database import async_session_factory, engine
from src.infrastructure.repositories import AutismCenterRepository


CENTERS = [
    # Kuala Lumpur area
    {
        "name": "KL Autism Center", "type": LocationType.THERAPY,
        "address": "Jalan Ampang, Kuala Lumpur, Malaysia",
        "latitude": 3.1478, "longitude": 101.7017, "phone": "+60 3-2161 2345",
        "services": ["ABA Therapy", "Speech Therapy", "Occupational Therapy"],
        "age_groups": ["0-3", "4-7", "8-12", "13-18"], "rating": 4.5,
    },
    {
        "name": "Petaling Jaya Developmental Center", "type": LocationType.DIAGNOSTIC,
        "address": "Petaling Jaya, Selangor, Malaysia",
        "latitude": 3.1073, "longitude": 101.6067, "phone": "+60 3-7956 1234",
        "services": ["Autism Assessment", "Developmental Evaluation"],
        "age_groups": ["0-3", "4-7", "8-12"], "rating": 4.3,
    },
    {
        "name": "Subang Special Needs Center", "type": LocationType.EDUCATION,
        "address": "Subang Jaya, Selangor, Malaysia",
        "latitude": 3.0738, "longitude": 101.5810, "phone": "+60 3-5633 2345",
        "services": ["Special Education", "Life Skills Training"],
        "age_groups": ["4-7", "8-12", "13-18"], "rating": 4.2,
    },
    {
        "name": "Bangsar Autism Support Group", "type": LocationType.SUPPORT,
        "address": "Bangsar, Kuala Lumpur, Malaysia",
        "latitude": 3.1319, "longitude": 101.6841, "phone": "+60 3-2282 5678",
        "services": ["Support Groups", "Family Counseling", "Respite Care"],
        "age_groups": ["0-3", "4-7", "8-12", "13-18"], "rating": 4.7,
    },
    {
        "name": "Mont Kiara Therapy Center", "type": LocationType.THERAPY,
        "address": "Mont Kiara, Kuala Lumpur, Malaysia",
        "latitude": 3.1728, "longitude": 101.6508, "phone": "+60 3-6201 3456",
        "services": ["Speech Therapy", "Sensory Integration"], "rating": 4.6,
    },
    {
        "name": "Shah Alam Autism Center", "type": LocationType.THERAPY,
        "address": "Shah Alam, Selangor, Malaysia",
        "latitude": 3.0733, "longitude": 101.5185, "phone": "+60 3-5511 4567",
        "rating": 4.4,
    },
    {
        "name": "Klang Valley Developmental Services", "type": LocationType.DIAGNOSTIC,
        "address": "Klang, Selangor, Malaysia",
        "latitude": 3.0319, "longitude": 101.4450, "phone": "+60 3-3371 2345",
        "rating": 4.1,
    },
    # Elsewhere
    {
        "name": "Penang Autism Foundation", "type": LocationType.SUPPORT,
        "address": "George Town, Penang, Malaysia",
        "latitude": 5.4164, "longitude": 100.3327, "phone": "+60 4-226 7890",
        "rating": 4.8,
    },
    {
        "name": "Johor Bahru Special Needs Center", "type": LocationType.EDUCATION,
        "address": "Johor Bahru, Johor, Malaysia",
        "latitude": 1.4927, "longitude": 103.7414, "phone": "+60 7-223 4567",
        "rating": 4.3,
    },
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM autism_centers"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        repo = AutismCenterRepository(session)
        for c in CENTERS:
            await repo.create_center(**c, verified=True)
        print(f"  Created {len(CENTERS)} centers")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
