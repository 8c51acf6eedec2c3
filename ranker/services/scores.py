"""
Score service.
Stores one 1-11 score per user per video and builds playlist rankings.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
from ranker.database import get_db
from ranker.services.errors import NotFoundError
from ranker.services.playlists import fetch_playlist
import aiosqlite
import logging

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 11

SCORE_COLUMNS = "id, score, comment, user_id, video_id, created_at, updated_at"


def rank_videos(playlist: Dict, videos: List[Dict], scores: List[Dict]) -> List[Dict]:
    """
    Average the scores of each video and order the videos by that average.

    When the playlist's ``does_owner_vote_count`` is 0, scores given by the
    playlist owner are kept in the listing but marked ``counted: False`` and
    left out of the average and count.

    Args:
        playlist: Playlist dict (needs ``user_id`` and ``does_owner_vote_count``)
        videos: Video dicts of the playlist
        scores: Score dicts with ``video_id``, ``user_id``, ``username``,
            ``score`` and ``comment``

    Returns:
        One ranking dict per video, best average first, unscored videos last,
        ties broken by video id
    """
    exclude_owner = not playlist["does_owner_vote_count"]

    by_video: Dict[int, List[Dict]] = {video["id"]: [] for video in videos}
    for score in scores:
        if score["video_id"] not in by_video:
            continue
        counted = not (exclude_owner and score["user_id"] == playlist["user_id"])
        by_video[score["video_id"]].append({
            "user_id": score["user_id"],
            "username": score["username"],
            "score": score["score"],
            "comment": score["comment"],
            "counted": counted,
        })

    rankings = []
    for video in videos:
        entries = by_video[video["id"]]
        counted_values = [entry["score"] for entry in entries if entry["counted"]]
        average = None
        if counted_values:
            average = round(sum(counted_values) / len(counted_values), 2)
        rankings.append({
            "video_id": video["id"],
            "link": video["link"],
            "user_id": video["user_id"],
            "average": average,
            "count": len(counted_values),
            "scores": entries,
        })

    rankings.sort(key=lambda r: (r["average"] is None, -(r["average"] or 0), r["video_id"]))
    return rankings


def _validate_score(score: Optional[int]) -> int:
    if score is None:
        raise ValueError("Score is required")
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError("Score must be a whole number")
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ValueError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}")
    return score


async def _require_video(db: aiosqlite.Connection, video_id: int) -> None:
    cursor = await db.execute("SELECT id FROM videos WHERE id = ?", (video_id,))
    if not await cursor.fetchone():
        raise NotFoundError("Video not found")


class ScoreService:
    """Creates, replaces and aggregates scores."""

    async def submit_score(
        self,
        video_id: int,
        user_id: int,
        score: Optional[int],
        comment: Optional[str] = None
    ) -> Dict:
        """
        Create the user's score for a video, or replace the existing one.

        Args:
            video_id: Scored video
            user_id: Scoring user
            score: Whole number from 1 to 11
            comment: Optional free text (blank is stored as NULL)

        Returns:
            Dict with the stored score

        Raises:
            ValueError: If the score is missing or out of range
            NotFoundError: If the video does not exist
        """
        score = _validate_score(score)
        if comment is not None:
            comment = comment.strip() or None

        now = datetime.now(timezone.utc).isoformat()

        async with get_db() as db:
            await _require_video(db, video_id)

            cursor = await db.execute(
                "SELECT id, created_at FROM scores WHERE user_id = ? AND video_id = ?",
                (user_id, video_id)
            )
            existing = await cursor.fetchone()

            if existing:
                score_id = existing["id"]
                created_at = existing["created_at"]
                await db.execute(
                    "UPDATE scores SET score = ?, comment = ?, updated_at = ? WHERE id = ?",
                    (score, comment, now, score_id)
                )
                logger.info(f"User {user_id} changed score on video {video_id} to {score}")
            else:
                created_at = now
                cursor = await db.execute(
                    """
                    INSERT INTO scores (score, comment, user_id, video_id, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (score, comment, user_id, video_id, now, now)
                )
                score_id = cursor.lastrowid
                logger.info(f"User {user_id} scored video {video_id}: {score}")

            await db.commit()

        return {
            "id": score_id,
            "score": score,
            "comment": comment,
            "user_id": user_id,
            "video_id": video_id,
            "created_at": created_at,
            "updated_at": now,
        }

    async def get_score(self, video_id: int, user_id: int) -> Dict:
        """
        Get the user's own score for a video.

        Raises:
            NotFoundError: If the video does not exist or has no score from the user
        """
        async with get_db() as db:
            await _require_video(db, video_id)
            cursor = await db.execute(
                f"SELECT {SCORE_COLUMNS} FROM scores WHERE user_id = ? AND video_id = ?",
                (user_id, video_id)
            )
            row = await cursor.fetchone()

        if not row:
            raise NotFoundError("Score not found")
        return dict(row)

    async def delete_score(self, video_id: int, user_id: int) -> None:
        """
        Remove the user's score for a video.

        Raises:
            NotFoundError: If there was no score to remove
        """
        async with get_db() as db:
            cursor = await db.execute(
                "DELETE FROM scores WHERE user_id = ? AND video_id = ?",
                (user_id, video_id)
            )
            await db.commit()

            if cursor.rowcount == 0:
                raise NotFoundError("Score not found")

        logger.info(f"User {user_id} removed score on video {video_id}")

    async def list_user_scores(self, playlist_id: int, user_id: int) -> List[Dict]:
        """
        Get every score the user gave within a playlist.

        Raises:
            NotFoundError: If the playlist does not exist
        """
        async with get_db() as db:
            await fetch_playlist(db, playlist_id)
            cursor = await db.execute(
                """
                SELECT s.id, s.score, s.comment, s.user_id, s.video_id, s.created_at, s.updated_at
                FROM scores s
                JOIN videos v ON v.id = s.video_id
                WHERE v.playlist_id = ? AND s.user_id = ?
                ORDER BY s.video_id ASC
                """,
                (playlist_id, user_id)
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def get_rankings(self, playlist_id: int) -> Dict:
        """
        Build the ranking table for a playlist.

        Returns:
            Dict with ``playlist`` and ``rankings`` (see rank_videos)

        Raises:
            NotFoundError: If the playlist does not exist
        """
        async with get_db() as db:
            playlist = await fetch_playlist(db, playlist_id)

            cursor = await db.execute(
                "SELECT id, link, user_id FROM videos WHERE playlist_id = ? ORDER BY id ASC",
                (playlist_id,)
            )
            videos = [dict(row) for row in await cursor.fetchall()]

            cursor = await db.execute(
                """
                SELECT s.video_id, s.user_id, u.username, s.score, s.comment
                FROM scores s
                JOIN videos v ON v.id = s.video_id
                JOIN users u ON u.id = s.user_id
                WHERE v.playlist_id = ?
                ORDER BY s.id ASC
                """,
                (playlist_id,)
            )
            scores = [dict(row) for row in await cursor.fetchall()]

        return {"playlist": playlist, "rankings": rank_videos(playlist, videos, scores)}


# Global instance
score_service = ScoreService()
