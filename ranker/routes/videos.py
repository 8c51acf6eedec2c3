"""
Video routes: list a playlist's videos and replace your own submissions.
"""

from fastapi import APIRouter, Depends, HTTPException
from typing import Any, Dict
from ranker.auth import require_user
from ranker.schemas import VideoList, VideoSubmission, VideosSubmitted
from ranker.services.errors import NotFoundError
from ranker.services.videos import video_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/videos",
    tags=["Videos"],
    dependencies=[Depends(require_user)]
)


@router.get("/my-submissions/{playlist_id}", response_model=VideoList)
async def my_submissions(playlist_id: int, user: Dict[str, Any] = Depends(require_user)):
    """List the videos the caller submitted to a playlist."""
    try:
        videos = await video_service.list_videos(playlist_id, user_id=user["id"])
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"videos": videos}


@router.get("/{playlist_id}", response_model=VideoList)
async def list_videos(playlist_id: int):
    """List every video in a playlist."""
    try:
        videos = await video_service.list_videos(playlist_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"videos": videos}


@router.post("/{playlist_id}", response_model=VideosSubmitted)
async def submit_videos(
    playlist_id: int,
    payload: VideoSubmission,
    user: Dict[str, Any] = Depends(require_user)
):
    """
    Replace the caller's submissions with a new list of links.

    The caller must own the playlist or be a contributor. Scores on the
    replaced videos are discarded.
    """
    try:
        videos = await video_service.submit_videos(playlist_id, user["id"], payload.links)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error submitting videos to playlist {playlist_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"videos": videos}
