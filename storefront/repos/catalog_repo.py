# storefront/repos/catalog_repo.py
import uuid
from typing import Iterable

from sqlalchemy import select, delete, update, insert, Table
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, selectinload

from storefront.data.models import (
    GameModel,
    InventoryModel,
    PublisherModel,
    PlatformModel,
    CategoryModel,
    game_platforms,
    game_categories,
)

SIMPLE_ENTITY_MODELS = {
    "publisher": PublisherModel,
    "platform": PlatformModel,
    "category": CategoryModel,
}

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    #gry
    def get_game(self, game_id: uuid.UUID) -> GameModel | None:
        return self.db.get(GameModel, game_id)

    def get_game_by_slug(self, slug: str) -> GameModel | None:
        return self.db.execute(select(GameModel).where(GameModel.slug == slug)).scalar_one_or_none()

    def list_games(self) -> list[GameModel]:
        return list(
            self.db.execute(
                select(GameModel)
                .options(selectinload(GameModel.inventory))
                .order_by(GameModel.created_at.desc())
            ).scalars()
        )

    def add_game(self, game: GameModel) -> GameModel:
        self.db.add(game)
        self.db.flush()
        return game

    def upsert_game_by_slug(self, fields: dict) -> uuid.UUID:
        """INSERT ... ON CONFLICT (slug) DO UPDATE, zwraca id istniejacej albo nowej gry."""
        dialect = self.db.get_bind().dialect.name
        dialect_insert = _UPSERT_INSERTS.get(dialect)

        if dialect_insert is None:
            existing = self.get_game_by_slug(fields["slug"])
            if existing is not None:
                self.update_game(existing.id, fields)
                return existing.id
            return self.add_game(GameModel(**fields)).id

        stmt = dialect_insert(GameModel).values(id=uuid.uuid4(), **fields)
        stmt = stmt.on_conflict_do_update(
            index_elements=[GameModel.slug],
            set_={key: stmt.excluded[key] for key in fields if key != "slug"},
        ).returning(GameModel.id)
        return self.db.execute(stmt).scalar_one()

    def update_game(self, game_id: uuid.UUID, fields: dict) -> int:
        result = self.db.execute(update(GameModel).where(GameModel.id == game_id).values(**fields))
        return result.rowcount

    def delete_game(self, game_id: uuid.UUID) -> int:
        result = self.db.execute(delete(GameModel).where(GameModel.id == game_id))
        return result.rowcount

    #linki n:m
    def platform_ids(self, game_id: uuid.UUID) -> set[uuid.UUID]:
        return self._linked_ids(game_platforms, "platform_id", game_id)

    def category_ids(self, game_id: uuid.UUID) -> set[uuid.UUID]:
        return self._linked_ids(game_categories, "category_id", game_id)

    def replace_platforms(self, game_id: uuid.UUID, platform_ids: Iterable[uuid.UUID]) -> None:
        self._replace_links(game_platforms, "platform_id", game_id, platform_ids)

    def replace_categories(self, game_id: uuid.UUID, category_ids: Iterable[uuid.UUID]) -> None:
        self._replace_links(game_categories, "category_id", game_id, category_ids)

    def _linked_ids(self, table: Table, column: str, game_id: uuid.UUID) -> set[uuid.UUID]:
        col = table.c[column]
        return set(self.db.execute(select(col).where(table.c.game_id == game_id)).scalars())

    def _replace_links(self, table: Table, column: str, game_id: uuid.UUID, wanted: Iterable[uuid.UUID]) -> None:
        """
        Zastepuje zbior linkow gry dokladnie zbiorem `wanted`.
        Diff z aktualnym stanem: kasujemy nadmiarowe, dokladamy brakujace.
        """
        col = table.c[column]
        target = set(wanted)
        current = self._linked_ids(table, column, game_id)

        to_remove = current - target
        to_add = target - current

        if to_remove:
            self.db.execute(delete(table).where(table.c.game_id == game_id, col.in_(list(to_remove))))
        if to_add:
            self.db.execute(
                insert(table),
                [{"game_id": game_id, column: linked_id} for linked_id in sorted(to_add, key=str)],
            )

    #magazyn
    def get_inventory(self, game_id: uuid.UUID, for_update: bool = False) -> InventoryModel | None:
        stmt = select(InventoryModel).where(InventoryModel.game_id == game_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def upsert_inventory(self, game_id: uuid.UUID, stock: int | None, is_active: bool | None) -> InventoryModel:
        inventory = self.get_inventory(game_id, for_update=True)
        if inventory is None:
            inventory = InventoryModel(
                game_id=game_id,
                stock=stock if stock is not None else 0,
                is_active=is_active if is_active is not None else True,
            )
            self.db.add(inventory)
        else:
            if stock is not None:
                inventory.stock = stock
            #nie podano is_active = zostaje poprzednia wartosc
            if is_active is not None:
                inventory.is_active = is_active
        self.db.flush()
        return inventory

    def decrement_stock(self, game_id: uuid.UUID, qty: int) -> int:
        """0 = za malo na stanie, nic nie zmieniono."""
        result = self.db.execute(
            update(InventoryModel)
            .where(InventoryModel.game_id == game_id, InventoryModel.stock >= qty)
            .values(stock=InventoryModel.stock - qty)
        )
        return result.rowcount

    #proste encje (publisher / platform / category)
    def list_entities(self, kind: str) -> list:
        model = SIMPLE_ENTITY_MODELS[kind]
        return list(self.db.execute(select(model).order_by(model.created_at.asc())).scalars())

    def get_entity(self, kind: str, entity_id: uuid.UUID):
        return self.db.get(SIMPLE_ENTITY_MODELS[kind], entity_id)

    def add_entity(self, kind: str, name: str):
        entity = SIMPLE_ENTITY_MODELS[kind](name=name)
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete_entity(self, kind: str, entity_id: uuid.UUID) -> int:
        model = SIMPLE_ENTITY_MODELS[kind]
        result = self.db.execute(delete(model).where(model.id == entity_id))
        return result.rowcount

    def existing_ids(self, kind: str, ids: Iterable[uuid.UUID]) -> set[uuid.UUID]:
        model = SIMPLE_ENTITY_MODELS[kind]
        wanted = set(ids)
        if not wanted:
            return set()
        return set(self.db.execute(select(model.id).where(model.id.in_(list(wanted)))).scalars())
