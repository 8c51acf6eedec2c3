"""
Playlist management service.
Handles playlist CRUD, ownership checks and contributor permissions.
"""

import aiosqlite
from datetime import datetime, timezone
from typing import Dict, List, Optional
from ranker.database import get_db
from ranker.services.errors import NotFoundError
import logging

logger = logging.getLogger(__name__)

PLAYLIST_COLUMNS = "id, name, video_limit, does_owner_vote_count, user_id, created_at"


def _validate_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValueError("Playlist name is required")
    return name


def _validate_video_limit(video_limit: Optional[int]) -> int:
    if video_limit is None or video_limit < 1:
        raise ValueError("Video limit must be at least 1")
    return video_limit


def _validate_owner_vote_flag(flag: Optional[int]) -> int:
    if flag not in (0, 1):
        raise ValueError("doesOwnerVoteCount must be 0 or 1")
    return int(flag)


async def fetch_playlist(db: aiosqlite.Connection, playlist_id: int) -> Dict:
    """
    Load a playlist row on an open connection.

    Raises:
        NotFoundError: If the playlist does not exist
    """
    cursor = await db.execute(
        f"SELECT {PLAYLIST_COLUMNS} FROM playlists WHERE id = ?",
        (playlist_id,)
    )
    row = await cursor.fetchone()
    if not row:
        raise NotFoundError("Playlist not found")
    return dict(row)


async def can_contribute(db: aiosqlite.Connection, user_id: int, playlist: Dict) -> bool:
    """The owner can always contribute; anyone else needs a contributor row."""
    if playlist["user_id"] == user_id:
        return True

    cursor = await db.execute(
        "SELECT 1 FROM playlist_contributors WHERE user_id = ? AND playlist_id = ?",
        (user_id, playlist["id"])
    )
    return await cursor.fetchone() is not None


def _require_owner(playlist: Dict, user_id: int, action: str) -> None:
    if playlist["user_id"] != user_id:
        logger.warning(f"User {user_id} denied {action} on playlist {playlist['id']}")
        raise PermissionError(f"Only the playlist owner can {action} this playlist")


class PlaylistService:
    """CRUD for playlists and their contributor list."""

    async def list_playlists(self) -> List[Dict]:
        """Get every playlist, oldest first."""
        async with get_db() as db:
            cursor = await db.execute(
                f"SELECT {PLAYLIST_COLUMNS} FROM playlists ORDER BY id ASC"
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def list_for_user(self, user_id: int) -> List[Dict]:
        """Get the playlists a user owns or may contribute to."""
        async with get_db() as db:
            cursor = await db.execute(
                f"""
                SELECT {PLAYLIST_COLUMNS} FROM playlists
                WHERE user_id = ?
                   OR id IN (SELECT playlist_id FROM playlist_contributors WHERE user_id = ?)
                ORDER BY id ASC
                """,
                (user_id, user_id)
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def get_playlist(self, playlist_id: int) -> Dict:
        """
        Get a single playlist.

        Raises:
            NotFoundError: If the playlist does not exist
        """
        async with get_db() as db:
            return await fetch_playlist(db, playlist_id)

    async def create_playlist(
        self,
        user_id: int,
        name: Optional[str],
        video_limit: Optional[int],
        does_owner_vote_count: Optional[int] = None
    ) -> Dict:
        """
        Create a playlist owned by ``user_id``.

        Args:
            user_id: Owner of the new playlist
            name: Display name
            video_limit: Maximum number of links one user may submit
            does_owner_vote_count: 1 if the owner's scores count towards
                averages, 0 to exclude them (defaults to 1)

        Returns:
            Dict with the stored playlist

        Raises:
            ValueError: If a field is missing or out of range
        """
        name = _validate_name(name)
        video_limit = _validate_video_limit(video_limit)
        if does_owner_vote_count is None:
            does_owner_vote_count = 1
        does_owner_vote_count = _validate_owner_vote_flag(does_owner_vote_count)

        created_at = datetime.now(timezone.utc).isoformat()

        async with get_db() as db:
            cursor = await db.execute(
                """
                INSERT INTO playlists (name, video_limit, does_owner_vote_count, user_id, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, video_limit, does_owner_vote_count, user_id, created_at)
            )
            await db.commit()
            playlist_id = cursor.lastrowid

        logger.info(f"Created playlist '{name}' (ID: {playlist_id}) for user {user_id}")

        return {
            "id": playlist_id,
            "name": name,
            "video_limit": video_limit,
            "does_owner_vote_count": does_owner_vote_count,
            "user_id": user_id,
            "created_at": created_at,
        }

    async def update_playlist(
        self,
        playlist_id: int,
        user_id: int,
        name: Optional[str] = None,
        video_limit: Optional[int] = None,
        does_owner_vote_count: Optional[int] = None
    ) -> Dict:
        """
        Update any of name, video limit and owner-vote flag.
        Fields left as None are unchanged.

        Raises:
            NotFoundError: If the playlist does not exist
            PermissionError: If the user is not the owner
            ValueError: If a provided field is invalid
        """
        async with get_db() as db:
            playlist = await fetch_playlist(db, playlist_id)
            _require_owner(playlist, user_id, "update")

            if name is not None:
                playlist["name"] = _validate_name(name)
            if video_limit is not None:
                playlist["video_limit"] = _validate_video_limit(video_limit)
            if does_owner_vote_count is not None:
                playlist["does_owner_vote_count"] = _validate_owner_vote_flag(does_owner_vote_count)

            await db.execute(
                "UPDATE playlists SET name = ?, video_limit = ?, does_owner_vote_count = ? WHERE id = ?",
                (playlist["name"], playlist["video_limit"], playlist["does_owner_vote_count"], playlist_id)
            )
            await db.commit()

        logger.info(f"Updated playlist {playlist_id}")
        return playlist

    async def delete_playlist(self, playlist_id: int, user_id: int) -> None:
        """
        Delete a playlist with its videos, their scores and its contributors.

        Raises:
            NotFoundError: If the playlist does not exist
            PermissionError: If the user is not the owner
        """
        async with get_db() as db:
            playlist = await fetch_playlist(db, playlist_id)
            _require_owner(playlist, user_id, "delete")

            await db.execute(
                "DELETE FROM scores WHERE video_id IN (SELECT id FROM videos WHERE playlist_id = ?)",
                (playlist_id,)
            )
            await db.execute("DELETE FROM videos WHERE playlist_id = ?", (playlist_id,))
            await db.execute("DELETE FROM playlist_contributors WHERE playlist_id = ?", (playlist_id,))
            await db.execute("DELETE FROM playlists WHERE id = ?", (playlist_id,))
            await db.commit()

        logger.info(f"Deleted playlist {playlist_id} by user {user_id}")

    async def list_contributors(self, playlist_id: int) -> List[Dict]:
        """
        Get the users granted contributor access (the owner is not listed).

        Raises:
            NotFoundError: If the playlist does not exist
        """
        async with get_db() as db:
            await fetch_playlist(db, playlist_id)
            cursor = await db.execute(
                """
                SELECT u.id, u.username
                FROM playlist_contributors pc
                JOIN users u ON u.id = pc.user_id
                WHERE pc.playlist_id = ?
                ORDER BY u.username ASC
                """,
                (playlist_id,)
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def add_contributor(self, playlist_id: int, owner_id: int, username: Optional[str]) -> Dict:
        """
        Allow another user to submit videos to a playlist.

        Returns:
            Dict with the contributor's ``id`` and ``username``

        Raises:
            NotFoundError: If the playlist or user does not exist
            PermissionError: If the caller is not the owner
            ValueError: If the username is missing, is the owner, or already contributes
        """
        username = (username or "").strip()
        if not username:
            raise ValueError("Username is required")

        async with get_db() as db:
            playlist = await fetch_playlist(db, playlist_id)
            _require_owner(playlist, owner_id, "manage contributors of")

            cursor = await db.execute(
                "SELECT id, username FROM users WHERE username = ?",
                (username,)
            )
            user = await cursor.fetchone()
            if not user:
                raise NotFoundError(f"User '{username}' not found")
            if user["id"] == playlist["user_id"]:
                raise ValueError("The playlist owner can already contribute")

            try:
                await db.execute(
                    "INSERT INTO playlist_contributors (user_id, playlist_id) VALUES (?, ?)",
                    (user["id"], playlist_id)
                )
                await db.commit()
            except aiosqlite.IntegrityError:
                raise ValueError(f"{username} is already a contributor")

        logger.info(f"User {user['id']} can now contribute to playlist {playlist_id}")
        return dict(user)

    async def remove_contributor(self, playlist_id: int, owner_id: int, user_id: int) -> None:
        """
        Revoke a user's contributor access. Videos they already submitted stay.

        Raises:
            NotFoundError: If the playlist does not exist or the user is not a contributor
            PermissionError: If the caller is not the owner
        """
        async with get_db() as db:
            playlist = await fetch_playlist(db, playlist_id)
            _require_owner(playlist, owner_id, "manage contributors of")

            cursor = await db.execute(
                "DELETE FROM playlist_contributors WHERE user_id = ? AND playlist_id = ?",
                (user_id, playlist_id)
            )
            await db.commit()

            if cursor.rowcount == 0:
                raise NotFoundError("User is not a contributor to this playlist")

        logger.info(f"User {user_id} removed from contributors of playlist {playlist_id}")


# Global instance
playlist_service = PlaylistService()
