"""
Seed the database with demo data: two categories, an admin, a normal user
and one idea each.

    python seed_db.py

Both accounts use the password ``password123``. Re-running is a no-op once
the admin account exists.
"""

import asyncio

from sqlalchemy import select

import ideaboard.models  # noqa: F401
from ideaboard.database import Base, async_session, engine
from ideaboard.models.category import Category
from ideaboard.models.idea import Idea
from ideaboard.models.user import Role, User
from ideaboard.services.passwords import hash_password

ADMIN_EMAIL = "john@example.com"


async def async_main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        existing = await session.execute(select(User).where(User.email == ADMIN_EMAIL))
        if existing.scalar_one_or_none():
            print("Seed data already present, nothing to do.")
            return

        password = hash_password("password123")
        admin = User(email=ADMIN_EMAIL, name="John Doe", password_hash=password, role=Role.ADMIN)
        user = User(email="jane@example.com", name="Jane Smith", password_hash=password, role=Role.USER)
        session.add_all([admin, user])
        await session.flush()

        ui = Category(name="User Interface", user_id=admin.id)
        performance = Category(name="Performance", user_id=admin.id)
        session.add_all([ui, performance])
        await session.flush()

        session.add_all([
            Idea(
                title="Dark Mode Implementation",
                description="Add a dark mode option to improve user experience in low-light environments.",
                author_id=admin.id,
                category_id=ui.id,
            ),
            Idea(
                title="Optimize Image Loading",
                description="Implement lazy loading for images to improve initial page load times.",
                author_id=user.id,
                category_id=performance.id,
            ),
        ])
        await session.commit()

    print("Seed data created successfully")
    print(f"Admin user created: {ADMIN_EMAIL}")
    print("Normal user created: jane@example.com")


if __name__ == "__main__":
    asyncio.run(async_main())
