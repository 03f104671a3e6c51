from typing import List

from fastapi import APIRouter, Depends, Response, status
from alias_app.schemas.alias import AliasCreate, AliasUpdate, AliasResponse, OwnerStats
from alias_app.services.alias_service import AliasService
from alias_app.dependencies import get_alias_service, get_owner_id

router = APIRouter(prefix="/aliases", tags=["aliases"])


@router.post("/", response_model=AliasResponse, status_code=status.HTTP_201_CREATED)
async def create_alias(
    alias_data: AliasCreate,
    owner_id: str = Depends(get_owner_id),
    alias_service: AliasService = Depends(get_alias_service)
):
    """Shorten a URL, optionally under a custom slug"""
    return await alias_service.shorten(
        alias_data.original_url,
        custom_slug=alias_data.custom_slug,
        owner_id=owner_id
    )


@router.get("/", response_model=List[AliasResponse])
async def list_aliases(
    owner_id: str = Depends(get_owner_id),
    alias_service: AliasService = Depends(get_alias_service)
):
    """All aliases of the calling owner, newest first"""
    return await alias_service.list_aliases(owner_id)


@router.get("/stats", response_model=OwnerStats)
async def get_owner_stats(
    owner_id: str = Depends(get_owner_id),
    alias_service: AliasService = Depends(get_alias_service)
):
    """Totals and top aliases of the calling owner"""
    return await alias_service.owner_stats(owner_id)


@router.get("/{alias}", response_model=AliasResponse)
async def get_alias_info(
    alias: str,
    alias_service: AliasService = Depends(get_alias_service)
):
    """Get information about an alias"""
    return await alias_service.get_alias(alias)


@router.put("/{alias}", response_model=AliasResponse)
async def rename_alias(
    alias: str,
    alias_data: AliasUpdate,
    owner_id: str = Depends(get_owner_id),
    alias_service: AliasService = Depends(get_alias_service)
):
    """Change the alias value (cache is updated in the same call)"""
    return await alias_service.rename(alias, alias_data.slug, owner_id)


@router.delete("/{alias}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_alias(
    alias: str,
    owner_id: str = Depends(get_owner_id),
    alias_service: AliasService = Depends(get_alias_service)
):
    """Delete an alias and drop its cache entry"""
    await alias_service.delete(alias, owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
