"""
Score routes: rate videos and read playlist rankings.
"""

from fastapi import APIRouter, Depends, HTTPException
from typing import Any, Dict
from ranker.auth import require_user
from ranker.schemas import MessageResponse, Rankings, ScoreList, ScoreResponse, ScoreSaved, ScoreSubmit
from ranker.services.errors import NotFoundError
from ranker.services.scores import score_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/scores",
    tags=["Scores"],
    dependencies=[Depends(require_user)]
)


@router.get("/all/{playlist_id}", response_model=Rankings)
async def playlist_rankings(playlist_id: int):
    """
    Rank a playlist's videos by average score.

    Owner scores are excluded from averages when the playlist's
    doesOwnerVoteCount is 0.
    """
    try:
        return await score_service.get_rankings(playlist_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error ranking playlist {playlist_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/my-scores/{playlist_id}", response_model=ScoreList)
async def my_scores(playlist_id: int, user: Dict[str, Any] = Depends(require_user)):
    """List the caller's scores within a playlist."""
    try:
        scores = await score_service.list_user_scores(playlist_id, user["id"])
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error listing scores for playlist {playlist_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"scores": scores}


@router.get("/{video_id}", response_model=ScoreResponse)
async def get_score(video_id: int, user: Dict[str, Any] = Depends(require_user)):
    """Get the caller's score for a video."""
    try:
        score = await score_service.get_score(video_id, user["id"])
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error reading score for video {video_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"score": score}


@router.post("/{video_id}", response_model=ScoreSaved)
async def submit_score(
    video_id: int,
    payload: ScoreSubmit,
    user: Dict[str, Any] = Depends(require_user)
):
    """Score a video from 1 to 11, replacing any earlier score by the caller."""
    try:
        score = await score_service.submit_score(video_id, user["id"], payload.score, payload.comment)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error scoring video {video_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"score": score}


@router.delete("/{video_id}", response_model=MessageResponse)
async def delete_score(video_id: int, user: Dict[str, Any] = Depends(require_user)):
    """Withdraw the caller's score for a video."""
    try:
        await score_service.delete_score(video_id, user["id"])
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error removing score for video {video_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"message": "Score removed"}
