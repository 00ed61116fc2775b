# storefront/services/catalog_service.py
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from storefront.data.transaction import run_in_transaction
from storefront.domain.errors import (
    ServiceError,
    ValidationFailed,
    GameNotFound,
    EntityNotFound,
)
from storefront.domain.schemas import CatalogAdminIn, GameIn, SimpleEntityIn, parse_payload
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SIMPLE_KINDS = ("publisher", "platform", "category")


def _ids(values) -> list[str]:
    return sorted(str(v) for v in values)


def game_to_dict(repo: CatalogRepo, game) -> dict:
    inventory = game.inventory
    return {
        "id": game.id,
        "title": game.title,
        "slug": game.slug,
        "description": game.description,
        "price_in_cents": game.price_in_cents,
        "release_date": game.release_date,
        "publisher_id": game.publisher_id,
        "created_at": game.created_at,
        "stock": inventory.stock if inventory else None,
        "is_active": inventory.is_active if inventory else None,
        "platform_ids": _ids(repo.platform_ids(game.id)),
        "category_ids": _ids(repo.category_ids(game.id)),
    }


def entity_to_dict(entity) -> dict:
    return {"id": entity.id, "name": entity.name, "created_at": entity.created_at}


class CatalogService:
    """
    Administracja katalogiem. Kazda mutacja to jedna transakcja SERIALIZABLE.
    Gra + linki platform/kategorii + wiersz inventory zapisuja sie atomowo.
    Uprawnienia (admin) sprawdza warstwa api zanim tu trafimy.
    """

    def __init__(self, db: Session, session_factory: sessionmaker | None = None):
        self.db = db
        self.session_factory = session_factory

    def handle(self, request: CatalogAdminIn) -> dict:
        if request.entity == "game":
            return self._handle_game(request)
        return self._handle_simple(request)

    def _handle_game(self, request: CatalogAdminIn) -> dict:
        if request.operation == "list":
            return {"items": self.list_games()}

        if request.operation == "delete":
            if not request.id:
                raise ValidationFailed("id is required for delete")
            return self.delete_game(request.id)

        payload = parse_payload(GameIn, request.data)
        if request.operation == "update" and not request.id:
            raise ValidationFailed("id is required for update")

        game_id = request.id if request.operation == "update" else None
        return self.upsert_game(game_id, payload)

    def _handle_simple(self, request: CatalogAdminIn) -> dict:
        kind = request.entity

        if request.operation == "list":
            return {"items": self.list_entities(kind)}

        if request.operation == "delete":
            if not request.id:
                raise ValidationFailed("id is required for delete")
            return self.delete_entity(kind, request.id)

        payload = parse_payload(SimpleEntityIn, request.data)
        if request.operation == "create":
            return self.upsert_simple_entity(kind, None, payload.name)

        if not request.id:
            raise ValidationFailed("id is required for update")
        return self.upsert_simple_entity(kind, request.id, payload.name)

    #gry
    def list_games(self) -> list[dict]:
        repo = CatalogRepo(self.db)
        return [game_to_dict(repo, game) for game in repo.list_games()]

    def upsert_game(self, game_id: uuid.UUID | None, payload: GameIn) -> dict:
        """
        Bez id: insert, a przy konflikcie slug update w miejscu.
        Z id: update po id.
        platform_ids / category_ids podane = zastap zbior linkow (nie merge).
        stock / is_active podane = upsert wiersza inventory.
        """

        def work(session: Session) -> dict:
            repo = CatalogRepo(session)
            fields = payload.game_fields()
            self._check_references(repo, payload)

            if game_id is None:
                resolved_id = repo.upsert_game_by_slug(fields)
            else:
                taken = repo.get_game_by_slug(payload.slug)
                if taken is not None and taken.id != game_id:
                    raise ValidationFailed(f"slug '{payload.slug}' is already used by another game")
                if repo.update_game(game_id, fields) == 0:
                    raise GameNotFound()
                resolved_id = game_id

            if payload.platform_ids is not None:
                repo.replace_platforms(resolved_id, payload.platform_ids)
            if payload.category_ids is not None:
                repo.replace_categories(resolved_id, payload.category_ids)

            if payload.stock is not None or payload.is_active is not None:
                repo.upsert_inventory(resolved_id, payload.stock, payload.is_active)
            elif repo.get_inventory(resolved_id) is None:
                #kazda gra ma swoj wiersz inventory
                repo.upsert_inventory(resolved_id, 0, True)

            session.expire_all()
            game = repo.get_game(resolved_id)
            return game_to_dict(repo, game)

        record = run_in_transaction(work, session_factory=self.session_factory)
        logger.info(
            f"Game {record['id']} ({record['slug']}) saved: stock={record['stock']}, "
            f"platforms={len(record['platform_ids'])}, categories={len(record['category_ids'])}"
        )
        return record

    def delete_game(self, game_id: uuid.UUID) -> dict:
        def work(session: Session) -> None:
            CatalogRepo(session).delete_game(game_id)

        try:
            run_in_transaction(work, session_factory=self.session_factory)
        except IntegrityError:
            logger.warning(f"Game {game_id} is referenced by orders, refusing delete")
            raise ServiceError("Game is referenced by existing orders.", code="game_in_use", status_code=409)

        logger.info(f"Game {game_id} deleted")
        return {"id": game_id}

    def _check_references(self, repo: CatalogRepo, payload: GameIn) -> None:
        if payload.publisher_id is not None and repo.get_entity("publisher", payload.publisher_id) is None:
            raise ValidationFailed(f"unknown publisher_id {payload.publisher_id}")

        for kind, ids in (("platform", payload.platform_ids), ("category", payload.category_ids)):
            if not ids:
                continue
            unknown = set(ids) - repo.existing_ids(kind, ids)
            if unknown:
                raise ValidationFailed(f"unknown {kind}_ids: {', '.join(_ids(unknown))}")

    #publisher / platform / category
    def list_entities(self, kind: str) -> list[dict]:
        return [entity_to_dict(e) for e in CatalogRepo(self.db).list_entities(kind)]

    def upsert_simple_entity(self, kind: str, entity_id: uuid.UUID | None, name: str) -> dict:
        if kind not in SIMPLE_KINDS:
            raise ValidationFailed(f"unsupported entity {kind}")

        def work(session: Session) -> dict:
            repo = CatalogRepo(session)
            if entity_id is None:
                return entity_to_dict(repo.add_entity(kind, name))

            entity = repo.get_entity(kind, entity_id)
            if entity is None:
                raise EntityNotFound(f"{kind} {entity_id} does not exist.")
            entity.name = name
            session.flush()
            return entity_to_dict(entity)

        record = run_in_transaction(work, session_factory=self.session_factory)
        logger.info(f"{kind} {record['id']} saved as '{record['name']}'")
        return record

    def delete_entity(self, kind: str, entity_id: uuid.UUID) -> dict:
        if kind not in SIMPLE_KINDS:
            raise ValidationFailed(f"unsupported entity {kind}")

        def work(session: Session) -> None:
            CatalogRepo(session).delete_entity(kind, entity_id)

        run_in_transaction(work, session_factory=self.session_factory)
        logger.info(f"{kind} {entity_id} deleted")
        return {"id": entity_id}
