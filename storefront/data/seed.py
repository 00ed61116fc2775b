# storefront/data/seed.py
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from storefront.data.database import SessionLocal
from storefront.data.models import GameModel
from storefront.domain.schemas import GameIn
from storefront.services.catalog_service import CatalogService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PUBLISHERS = ["FromSoftware", "CD Projekt Red", "ConcernedApe", "Psyonix"]
PLATFORMS = ["PC", "PlayStation 5", "Xbox Series", "Nintendo Switch"]
CATEGORIES = ["Action RPG", "Open World", "RPG", "Shooter", "Simulation", "Sports"]

GAMES = [
    {
        "title": "Elden Ring",
        "slug": "elden-ring",
        "price_in_cents": 5999,
        "release_date": "2022-02-25",
        "publisher": "FromSoftware",
        "platforms": ["PC", "PlayStation 5", "Xbox Series"],
        "categories": ["Action RPG", "Open World"],
        "stock": 25,
    },
    {
        "title": "Cyberpunk 2077",
        "slug": "cyberpunk-2077",
        "price_in_cents": 4999,
        "release_date": "2020-12-10",
        "publisher": "CD Projekt Red",
        "platforms": ["PC", "PlayStation 5", "Xbox Series"],
        "categories": ["RPG", "Shooter"],
        "stock": 40,
    },
    {
        "title": "Stardew Valley",
        "slug": "stardew-valley",
        "price_in_cents": 1499,
        "release_date": "2016-02-26",
        "publisher": "ConcernedApe",
        "platforms": ["PC", "Nintendo Switch"],
        "categories": ["Simulation", "RPG"],
        "stock": 100,
    },
    {
        "title": "Rocket League",
        "slug": "rocket-league",
        "price_in_cents": 1999,
        "release_date": "2015-07-07",
        "publisher": "Psyonix",
        "platforms": ["PC", "PlayStation 5", "Xbox Series", "Nintendo Switch"],
        "categories": ["Sports"],
        "stock": 60,
    },
]


def seed(session_factory: sessionmaker | None = None) -> None:
    factory = session_factory or SessionLocal
    db = factory()
    try:
        # not forcing: only seed if empty
        if db.execute(select(GameModel.id).limit(1)).first():
            logger.info("Catalog already seeded, skipping")
            return

        svc = CatalogService(db, factory)
        publishers = {name: svc.upsert_simple_entity("publisher", None, name)["id"] for name in PUBLISHERS}
        platforms = {name: svc.upsert_simple_entity("platform", None, name)["id"] for name in PLATFORMS}
        categories = {name: svc.upsert_simple_entity("category", None, name)["id"] for name in CATEGORIES}

        for game in GAMES:
            svc.upsert_game(
                None,
                GameIn(
                    title=game["title"],
                    slug=game["slug"],
                    price_in_cents=game["price_in_cents"],
                    release_date=game["release_date"],
                    publisher_id=publishers[game["publisher"]],
                    platform_ids=[platforms[p] for p in game["platforms"]],
                    category_ids=[categories[c] for c in game["categories"]],
                    stock=game["stock"],
                    is_active=True,
                ),
            )
        logger.info(f"Seeded {len(GAMES)} games")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
