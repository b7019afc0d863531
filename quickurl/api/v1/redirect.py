from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from quickurl.exceptions import URLExpiredError, URLNotFoundError
from quickurl.services.url_service import URLService
from quickurl.dependencies import get_url_service

router = APIRouter(tags=["redirect"])


@router.get("/{token}")
async def redirect_to_original_url(
    token: str,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.

    Flow:
    1. Get original URL from cache, falling back to the store
    2. Atomically increment the click counter
    3. Redirect

    Always a 302 so every visit reaches the click counter.
    """
    try:
        original_url = await url_service.resolve_redirect(token)
    except URLExpiredError:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="Short URL has expired"
        )
    except URLNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
