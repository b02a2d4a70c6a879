"""Member directory API routes."""

from typing import Annotated

import orjson
from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile, status

from api.dependencies.auth import CurrentMember, CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.common import ErrorResponse, MessageResponse
from api.v1.schemas.user import (
    MemberDetailResponse,
    MemberListResponse,
    MemberResponse,
    MemberUpdateRequest,
    PhotoDetailResponse,
    PhotoResponse,
    UserParamsQuery,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.pagination import PagedResult
from domain.services.profile_service import ProfileService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid token"}},
)

PAGINATION_HEADER = "Pagination"


@router.get(
    "",
    response_model=MemberListResponse,
    summary="List members",
    responses={
        200: {"description": "One page of members; metadata also in the Pagination header"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    response: Response,
    user: CurrentUser,
    query: Annotated[UserParamsQuery, Query()],
    service: ProfileService = Depends(get_profile_service),
) -> MemberListResponse:
    """
    Get one page of members, never including the caller.

    Without a `gender` filter the listing defaults to the opposite gender of
    the caller's own profile.
    """
    page = await service.list_members(user.username, query.to_params())
    meta = _pagination_meta(page)
    response.headers[PAGINATION_HEADER] = orjson.dumps(meta).decode()

    return MemberListResponse(
        data=[MemberResponse.model_validate(m) for m in page.items],
        meta=meta,
    )


@router.get(
    "/{username}",
    response_model=MemberDetailResponse,
    summary="Get a member",
    responses={
        200: {"description": "Member profile with photos"},
        403: {"description": "Caller lacks the member role"},
        404: {"description": "Member not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_member(
    request: Request,
    username: str,
    user: CurrentMember,
    service: ProfileService = Depends(get_profile_service),
) -> MemberDetailResponse:
    """Get a member's public profile."""
    member = await service.get_member(username)
    return MemberDetailResponse(data=MemberResponse.model_validate(member))


@router.put(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update own profile",
    responses={
        204: {"description": "Profile updated"},
        400: {"description": "Update could not be saved"},
        404: {"description": "Caller profile not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    body: MemberUpdateRequest,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> None:
    """Partially update the caller's profile. Omitted fields are left untouched."""
    await service.update_profile(user.username, body.to_update())
    return None


@router.post(
    "/add-photo",
    response_model=PhotoDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a photo",
    responses={
        201: {"description": "Photo uploaded and attached"},
        400: {"description": "Asset store or persistence failure"},
        404: {"description": "Caller profile not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_photo(
    request: Request,
    response: Response,
    user: CurrentUser,
    file: UploadFile = File(...),
    service: ProfileService = Depends(get_profile_service),
) -> PhotoDetailResponse:
    """
    Upload a photo to the caller's collection.

    The first photo a member uploads becomes their main photo.
    """
    content = await file.read()
    photo = await service.add_photo(user.username, content, file.filename)
    response.headers["Location"] = str(request.url_for("get_member", username=user.username).path)
    return PhotoDetailResponse(data=PhotoResponse.model_validate(photo))


@router.put(
    "/set-main-photo/{photo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Set main photo",
    responses={
        204: {"description": "Main photo changed"},
        400: {"description": "Already main, or persistence failure"},
        404: {"description": "Caller or photo not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def set_main_photo(
    request: Request,
    photo_id: int,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> None:
    """Make a photo the caller's main photo, demoting the previous one."""
    await service.set_main_photo(user.username, photo_id)
    return None


@router.delete(
    "/delete-photo/{photo_id}",
    response_model=MessageResponse,
    summary="Delete a photo",
    responses={
        200: {"description": "Photo deleted"},
        400: {"description": "Main photo, asset store or persistence failure"},
        404: {"description": "Caller or photo not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_photo(
    request: Request,
    photo_id: int,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> MessageResponse:
    """Delete one of the caller's photos. The main photo cannot be deleted."""
    await service.delete_photo(user.username, photo_id)
    return MessageResponse(message="Photo deleted")


def _pagination_meta(page: PagedResult) -> dict[str, int]:
    return {
        "currentPage": page.current_page,
        "pageSize": page.page_size,
        "totalCount": page.total_count,
        "totalPages": page.total_pages,
    }
