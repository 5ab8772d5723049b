"""API routes exposing cookbook entity operations."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Path, Request, status

from cookbook.client.base import CookbookClient
from cookbook.dispatcher import EntityDispatcher

router = APIRouter(prefix="/api/v1/entities", tags=["entities"])

TypeTag = Annotated[
    str,
    Path(description="Type tag containing com.cookbook.tutorial.service.Recipe or .Ingredient"),
]
Record = Annotated[dict[str, Any], Body(description="Entity fields as a JSON object")]


# Dependencies to get the shared client and a dispatcher around it
async def get_client(request: Request) -> CookbookClient:
    """Get the client created at application startup."""
    return request.app.state.cookbook_client


async def get_dispatcher(client: CookbookClient = Depends(get_client)) -> EntityDispatcher:
    """Get a dispatcher around the shared client."""
    return EntityDispatcher(client)


DispatcherDep = Annotated[EntityDispatcher, Depends(get_dispatcher)]


@router.get("/recent", response_model=list[dict[str, Any]])
async def get_recently_added(dispatcher: DispatcherDep) -> list[dict[str, Any]]:
    """Get the recently added recipes."""
    return await dispatcher.get_recently_added()


@router.post("/{type_tag}", status_code=status.HTTP_201_CREATED)
async def create_entity(
    type_tag: TypeTag, payload: Record, dispatcher: DispatcherDep
) -> dict[str, Any]:
    """Create a recipe or ingredient and return it with its assigned id."""
    return await dispatcher.create(type_tag, payload)


@router.put("/{type_tag}")
async def update_entity(
    type_tag: TypeTag, payload: Record, dispatcher: DispatcherDep
) -> dict[str, Any]:
    """Update a recipe or ingredient."""
    return await dispatcher.update(type_tag, payload)


@router.get("/{type_tag}/{entity_id}")
async def get_entity(type_tag: TypeTag, entity_id: int, dispatcher: DispatcherDep) -> dict:
    """Get a single recipe or ingredient by id."""
    return await dispatcher.get(type_tag, entity_id)


@router.delete("/{type_tag}/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entity(type_tag: TypeTag, entity_id: int, dispatcher: DispatcherDep) -> None:
    """Delete a recipe or ingredient by id."""
    await dispatcher.delete(type_tag, entity_id)
