"""
Playlist routes: CRUD and contributor management.
All routes require a bearer token.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from typing import Any, Dict
from ranker.auth import require_user
from ranker.schemas import (
    ContributorAdd,
    ContributorAdded,
    ContributorList,
    MessageResponse,
    PlaylistCreate,
    PlaylistList,
    PlaylistResponse,
    PlaylistSaved,
    PlaylistUpdate,
)
from ranker.services.errors import NotFoundError
from ranker.services.playlists import playlist_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/playlists",
    tags=["Playlists"],
    dependencies=[Depends(require_user)]
)


@router.get("/all", response_model=PlaylistList)
async def list_playlists():
    """List every playlist."""
    return {"playlists": await playlist_service.list_playlists()}


@router.get("/mine", response_model=PlaylistList)
async def list_my_playlists(user: Dict[str, Any] = Depends(require_user)):
    """List playlists the caller owns or can contribute to."""
    return {"playlists": await playlist_service.list_for_user(user["id"])}


@router.get("/{playlist_id}", response_model=PlaylistResponse)
async def get_playlist(playlist_id: int):
    """Get a single playlist."""
    try:
        playlist = await playlist_service.get_playlist(playlist_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"playlist": playlist}


@router.post("", response_model=PlaylistSaved, status_code=status.HTTP_201_CREATED)
async def create_playlist(payload: PlaylistCreate, user: Dict[str, Any] = Depends(require_user)):
    """Create a playlist owned by the caller."""
    try:
        playlist = await playlist_service.create_playlist(
            user_id=user["id"],
            name=payload.name,
            video_limit=payload.video_limit,
            does_owner_vote_count=payload.does_owner_vote_count
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating playlist: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"message": "Playlist created successfully", "playlist": playlist}


@router.patch("/{playlist_id}", response_model=PlaylistSaved)
async def update_playlist(
    playlist_id: int,
    payload: PlaylistUpdate,
    user: Dict[str, Any] = Depends(require_user)
):
    """Change a playlist's settings. Owner only."""
    try:
        playlist = await playlist_service.update_playlist(
            playlist_id,
            user["id"],
            name=payload.name,
            video_limit=payload.video_limit,
            does_owner_vote_count=payload.does_owner_vote_count
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating playlist {playlist_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"message": "Playlist updated successfully", "playlist": playlist}


@router.delete("/{playlist_id}", response_model=MessageResponse)
async def delete_playlist(playlist_id: int, user: Dict[str, Any] = Depends(require_user)):
    """Delete a playlist with its videos and scores. Owner only."""
    try:
        await playlist_service.delete_playlist(playlist_id, user["id"])
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting playlist {playlist_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"message": "Playlist deleted successfully"}


# Contributors

@router.get("/{playlist_id}/contributors", response_model=ContributorList)
async def list_contributors(playlist_id: int):
    """List users allowed to submit videos besides the owner."""
    try:
        contributors = await playlist_service.list_contributors(playlist_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"contributors": contributors}


@router.post(
    "/{playlist_id}/contributors",
    response_model=ContributorAdded,
    status_code=status.HTTP_201_CREATED
)
async def add_contributor(
    playlist_id: int,
    payload: ContributorAdd,
    user: Dict[str, Any] = Depends(require_user)
):
    """Grant another user permission to submit videos. Owner only."""
    try:
        contributor = await playlist_service.add_contributor(playlist_id, user["id"], payload.username)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error adding contributor to playlist {playlist_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"contributor": contributor}


@router.delete("/{playlist_id}/contributors/{user_id}", response_model=MessageResponse)
async def remove_contributor(
    playlist_id: int,
    user_id: int,
    user: Dict[str, Any] = Depends(require_user)
):
    """Revoke a contributor's permission. Owner only."""
    try:
        await playlist_service.remove_contributor(playlist_id, user["id"], user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error removing contributor from playlist {playlist_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"message": "Contributor removed"}
