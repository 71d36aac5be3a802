"""
Post feed, authoring and bookmark endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Query, Response, status
from pydantic import BaseModel

from app.api.deps import CurrentUserDep, DashXDep, SessionDep
from app.models.schemas import CreatePostResponse, FeedResponse, PostResponse
from app.services.bookmark_service import BookmarkService
from app.services.feed_service import FeedService, PageParams
from app.services.post_service import PostService


router = APIRouter()


class CreatePostRequest(BaseModel):
    """New post. All fields are optional."""

    text: Optional[str] = None
    image: Optional[str] = None
    video: Optional[str] = None


@router.get("", response_model=FeedResponse)
async def list_posts(
    session: SessionDep,
    current_user: CurrentUserDep,
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
):
    """
    List all posts, newest first, with the caller's bookmark state.

    limit defaults to 30 and is capped at 100; offset defaults to 0.
    """
    feed = FeedService(session)
    posts = await feed.page(current_user.id, PageParams.normalize(limit, offset))
    return FeedResponse(posts=posts)


@router.post("", response_model=CreatePostResponse)
async def create_post(
    session: SessionDep,
    current_user: CurrentUserDep,
    dashx: DashXDep,
    request: Optional[CreatePostRequest] = None,
):
    """Create a post owned by the caller."""
    request = request or CreatePostRequest()
    posts = PostService(session, dashx)
    post = await posts.create_post(
        current_user,
        text=request.text,
        image=request.image,
        video=request.video,
    )
    return CreatePostResponse(
        message="Successfully created post.",
        post=PostResponse.model_validate(post),
    )


@router.get("/bookmarked", response_model=FeedResponse)
async def list_bookmarked_posts(
    session: SessionDep,
    current_user: CurrentUserDep,
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
):
    """List posts the caller has bookmarked, newest post first."""
    feed = FeedService(session)
    posts = await feed.page(
        current_user.id,
        PageParams.normalize(limit, offset),
        bookmarked_only=True,
    )
    return FeedResponse(posts=posts)


@router.put(
    "/{post_id}/toggle-bookmark",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def toggle_bookmark(
    post_id: str,
    session: SessionDep,
    current_user: CurrentUserDep,
    dashx: DashXDep,
):
    """Bookmark the post if it is not bookmarked, otherwise remove the bookmark."""
    bookmarks = BookmarkService(session, dashx)
    await bookmarks.toggle(current_user.id, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
