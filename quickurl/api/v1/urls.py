from fastapi import APIRouter, Depends, HTTPException, Query, status
from quickurl.exceptions import DuplicateTokenError, InvalidInputError, URLNotFoundError
from quickurl.schemas.url import URLCreate, URLResponse, URLListResponse
from quickurl.services.url_service import URLService
from quickurl.dependencies import get_url_service

router = APIRouter(tags=["urls"])


@router.post("/shorten", response_model=URLResponse, status_code=status.HTTP_201_CREATED)
async def create_short_url(
    url_data: URLCreate,
    url_service: URLService = Depends(get_url_service)
):
    """Create a new short URL"""
    try:
        return await url_service.create_short_url(
            url_data.url,
            title=url_data.title,
            expires_at=url_data.expires_at
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DuplicateTokenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/urls", response_model=URLListResponse)
async def list_urls(
    limit: int = Query(100, ge=0, le=1000),
    offset: int = Query(0, ge=0),
    include_expired: bool = False,
    url_service: URLService = Depends(get_url_service)
):
    """List short URLs, newest first"""
    records = await url_service.list_urls(limit=limit, offset=offset, include_expired=include_expired)
    return URLListResponse(urls=[URLResponse(**record.model_dump()) for record in records])


@router.get("/urls/{token}", response_model=URLResponse)
async def get_url_info(
    token: str,
    url_service: URLService = Depends(get_url_service)
):
    """Get information about a short URL, expired ones included"""
    try:
        return await url_service.get_url_info(token)
    except URLNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )


@router.delete("/urls/{token}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_url(
    token: str,
    url_service: URLService = Depends(get_url_service)
):
    """Delete a short URL (also invalidates the redirect cache)"""
    try:
        await url_service.delete_url(token)
    except URLNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )
