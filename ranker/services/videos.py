"""
Video submission service.
Validates and normalizes shared links into embeddable URLs and replaces a
user's submissions for a playlist.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
from ranker.database import get_db
from ranker.services.playlists import can_contribute, fetch_playlist
import logging

logger = logging.getLogger(__name__)

YOUTUBE_WATCH_PREFIX = "https://www.youtube.com/watch?v="
YOUTUBE_SHORT_PREFIX = "https://youtu.be/"
YOUTUBE_EMBED_PREFIX = "https://www.youtube.com/embed/"
DRIVE_FILE_PREFIX = "https://drive.google.com/file/d/"

INVALID_LINK_MESSAGE = (
    'Invalid video link. Please go to the youtube video, click "Share" and copy the link, '
    "or set your google drive video to public and copy the link"
)

VIDEO_COLUMNS = "id, link, playlist_id, user_id, created_at"


def _code_after(link: str, prefix: str, stops: str) -> str:
    """Return the path segment after ``prefix``, cut at the first stop character."""
    code = link[len(prefix):]
    for stop in stops:
        code = code.split(stop, 1)[0]
    return code


def normalize_link(link: str) -> str:
    """
    Convert a shared YouTube or Google Drive link to its embeddable form.

    Args:
        link: Link as copied from the browser or a "Share" dialog

    Returns:
        Embed URL for the video

    Raises:
        ValueError: If the link is not a supported YouTube/Drive link
    """
    link = link.strip()

    if link.startswith(YOUTUBE_WATCH_PREFIX):
        code = _code_after(link, YOUTUBE_WATCH_PREFIX, "&#")
        normalized = f"{YOUTUBE_EMBED_PREFIX}{code}"
    elif link.startswith(YOUTUBE_SHORT_PREFIX):
        code = _code_after(link, YOUTUBE_SHORT_PREFIX, "?&#/")
        normalized = f"{YOUTUBE_EMBED_PREFIX}{code}"
    elif link.startswith(YOUTUBE_EMBED_PREFIX):
        code = _code_after(link, YOUTUBE_EMBED_PREFIX, "?&#/")
        normalized = f"{YOUTUBE_EMBED_PREFIX}{code}"
    elif link.startswith(DRIVE_FILE_PREFIX):
        code = _code_after(link, DRIVE_FILE_PREFIX, "?&#/")
        normalized = f"{DRIVE_FILE_PREFIX}{code}/preview"
    else:
        raise ValueError(INVALID_LINK_MESSAGE)

    if not code:
        raise ValueError(INVALID_LINK_MESSAGE)
    return normalized


class VideoService:
    """Lists and replaces the videos submitted to playlists."""

    async def list_videos(self, playlist_id: int, user_id: Optional[int] = None) -> List[Dict]:
        """
        Get the videos of a playlist, optionally only those one user submitted.

        Raises:
            NotFoundError: If the playlist does not exist
        """
        async with get_db() as db:
            await fetch_playlist(db, playlist_id)

            if user_id is None:
                cursor = await db.execute(
                    f"SELECT {VIDEO_COLUMNS} FROM videos WHERE playlist_id = ? ORDER BY id ASC",
                    (playlist_id,)
                )
            else:
                cursor = await db.execute(
                    f"SELECT {VIDEO_COLUMNS} FROM videos WHERE playlist_id = ? AND user_id = ? ORDER BY id ASC",
                    (playlist_id, user_id)
                )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def submit_videos(self, playlist_id: int, user_id: int, links: Optional[List[str]]) -> List[Dict]:
        """
        Replace a user's submissions for a playlist.

        Previously submitted videos by this user are deleted along with the
        scores they received; the new links are inserted in order. Nothing is
        written unless every link is valid.

        Args:
            playlist_id: Target playlist
            user_id: Submitting user (owner or contributor)
            links: Shared video links

        Returns:
            List of the stored video dicts

        Raises:
            NotFoundError: If the playlist does not exist
            PermissionError: If the user may not contribute to the playlist
            ValueError: If links are missing, too many, or invalid
        """
        if links is None:
            raise ValueError("Links are required")

        async with get_db() as db:
            playlist = await fetch_playlist(db, playlist_id)

            if not await can_contribute(db, user_id, playlist):
                logger.warning(f"User {user_id} denied submitting to playlist {playlist_id}")
                raise PermissionError("You don't have permission to add videos to this playlist")

            if len(links) > playlist["video_limit"]:
                raise ValueError(
                    f"Too many videos: this playlist allows {playlist['video_limit']} per user"
                )

            normalized = [normalize_link(link) for link in links]

            await db.execute(
                """
                DELETE FROM scores WHERE video_id IN
                    (SELECT id FROM videos WHERE playlist_id = ? AND user_id = ?)
                """,
                (playlist_id, user_id)
            )
            await db.execute(
                "DELETE FROM videos WHERE playlist_id = ? AND user_id = ?",
                (playlist_id, user_id)
            )

            created_at = datetime.now(timezone.utc).isoformat()
            videos = []
            for link in normalized:
                cursor = await db.execute(
                    "INSERT INTO videos (playlist_id, link, user_id, created_at) VALUES (?, ?, ?, ?)",
                    (playlist_id, link, user_id, created_at)
                )
                videos.append({
                    "id": cursor.lastrowid,
                    "link": link,
                    "playlist_id": playlist_id,
                    "user_id": user_id,
                    "created_at": created_at,
                })

            await db.commit()

        logger.info(f"User {user_id} submitted {len(videos)} video(s) to playlist {playlist_id}")
        return videos


# Global instance
video_service = VideoService()
