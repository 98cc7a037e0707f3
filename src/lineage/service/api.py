"""FastAPI application exposing read-only lookups over a loaded FamilyTree."""

from __future__ import annotations

import importlib
import os
from typing import TYPE_CHECKING, Any, cast

from starlette.requests import Request as StarletteRequest

from lineage.contracts.error import BadInputError
from lineage.genealogy import FamilyTree

from .models import (
    AncestorsResponse,
    GenerationResponse,
    PersonListResponse,
    PersonModel,
    StatsResponse,
)

if TYPE_CHECKING:
    from fastapi import FastAPI


def create_app(tree: FamilyTree) -> Any:
    """Create a FastAPI application answering name queries from ``tree``."""

    fastapi_mod = importlib.import_module("fastapi")
    responses_mod = importlib.import_module("fastapi.responses")

    fastapi_cls = fastapi_mod.FastAPI
    depends = fastapi_mod.Depends
    http_exception = fastapi_mod.HTTPException
    status = fastapi_mod.status
    json_response_cls = responses_mod.JSONResponse

    app = cast("FastAPI", fastapi_cls(title="Lineage Lookup API", version="0.1.0"))
    app.state.tree = tree

    token_value = os.getenv("LINEAGE_TOKEN")

    async def require_token(request: StarletteRequest) -> None:
        if not token_value:
            return
        authorization = request.headers.get("Authorization")
        if authorization == f"Bearer {token_value}":
            return
        if request.query_params.get("token") == token_value:
            return
        raise http_exception(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    async def bad_input_handler(request: StarletteRequest, exc: Exception) -> Any:
        return json_response_cls(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "BadInput", "detail": str(exc)},
        )

    app.add_exception_handler(BadInputError, bad_input_handler)

    def get_tree() -> FamilyTree:
        return cast(FamilyTree, app.state.tree)

    tree_dep = depends(get_tree)
    auth = [depends(require_token)]

    @app.get("/healthz", response_model=dict)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/people/{name}", response_model=PersonModel, dependencies=auth)
    def get_person(
        name: str,
        tree: FamilyTree = tree_dep,  # noqa: B008 - FastAPI dependency wiring
    ) -> PersonModel:
        person = tree.get_person(name)
        if person is None:
            raise http_exception(status_code=status.HTTP_404_NOT_FOUND, detail=f"Person not found: {name}")
        return PersonModel.from_person(person)

    @app.get("/api/people/{name}/ancestors", response_model=AncestorsResponse, dependencies=auth)
    def get_ancestors(
        name: str,
        tree: FamilyTree = tree_dep,  # noqa: B008 - FastAPI dependency wiring
    ) -> AncestorsResponse:
        if not tree.contains(name):
            raise http_exception(status_code=status.HTTP_404_NOT_FOUND, detail=f"Person not found: {name}")
        return AncestorsResponse(name=name, ancestors=tree.ancestors(name))

    @app.get("/api/search", response_model=PersonListResponse, dependencies=auth)
    def search(
        q: str,
        tree: FamilyTree = tree_dep,  # noqa: B008 - FastAPI dependency wiring
    ) -> PersonListResponse:
        people = [PersonModel.from_person(p) for p in tree.find_matches(q)]
        return PersonListResponse(query=q, people=people)

    @app.get("/api/titles", response_model=PersonListResponse, dependencies=auth)
    def titles(
        q: str,
        tree: FamilyTree = tree_dep,  # noqa: B008 - FastAPI dependency wiring
    ) -> PersonListResponse:
        people = [PersonModel.from_person(p) for p in tree.title_holders(q)]
        return PersonListResponse(query=q, people=people)

    @app.get("/api/generations/{number}", response_model=GenerationResponse, dependencies=auth)
    def generation(
        number: int,
        tree: FamilyTree = tree_dep,  # noqa: B008 - FastAPI dependency wiring
    ) -> GenerationResponse:
        members = tree.generation(number)
        return GenerationResponse(generation=number, members=members)

    @app.get("/api/stats", response_model=StatsResponse, dependencies=auth)
    def stats(
        tree: FamilyTree = tree_dep,  # noqa: B008 - FastAPI dependency wiring
    ) -> StatsResponse:
        return StatsResponse.from_stats(tree.stats())

    return app
