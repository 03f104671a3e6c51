from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from alias_app.services.alias_service import AliasService
from alias_app.dependencies import get_alias_service
from alias_app.exceptions import NotFoundError
from alias_app.config import settings

router = APIRouter(tags=["redirect"])


@router.get("/{alias}")
async def redirect_to_target(
    alias: str,
    alias_service: AliasService = Depends(get_alias_service)
):
    """
    Redirect to the target URL.

    Flow:
    1. Resolve alias (cache first, database on miss)
    2. Visit count is incremented by the service; a counting failure
       never fails the redirect
    3. Redirect with 302

    Unknown aliases are 404, or a redirect to `not_found_redirect_url`
    when one is configured.
    """
    try:
        target_url = await alias_service.resolve(alias)
    except NotFoundError:
        if settings.not_found_redirect_url:
            return RedirectResponse(
                url=settings.not_found_redirect_url,
                status_code=status.HTTP_302_FOUND
            )
        raise

    return RedirectResponse(url=target_url, status_code=status.HTTP_302_FOUND)
