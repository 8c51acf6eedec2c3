"""
User accounts: registration and credential checks.
"""

import asyncio
import aiosqlite
from typing import Dict, Optional
from ranker.auth import hash_password, verify_password
from ranker.database import get_db
import logging

logger = logging.getLogger(__name__)


class UserService:
    """Creates users and verifies their passwords."""

    async def create_user(self, username: Optional[str], password: Optional[str]) -> Dict:
        """
        Register a new user with a bcrypt-hashed password.

        Args:
            username: Desired username (surrounding whitespace is stripped)
            password: Plaintext password

        Returns:
            Dict with ``id`` and ``username``

        Raises:
            ValueError: If a field is missing or the username is taken
        """
        username = (username or "").strip()
        if not username or not password:
            raise ValueError("Username and password are required")

        # bcrypt is CPU-bound, keep it off the event loop
        password_hash = await asyncio.to_thread(hash_password, password)

        async with get_db() as db:
            try:
                cursor = await db.execute(
                    "INSERT INTO users (username, password) VALUES (?, ?)",
                    (username, password_hash)
                )
                await db.commit()
            except aiosqlite.IntegrityError:
                logger.warning(f"Registration rejected, username taken: {username}")
                raise ValueError("Username already registered")

            user_id = cursor.lastrowid

        logger.info(f"Registered user {username} (ID: {user_id})")
        return {"id": user_id, "username": username}

    async def authenticate(self, username: Optional[str], password: Optional[str]) -> Optional[Dict]:
        """
        Check a username/password pair.

        Returns:
            Dict with ``id`` and ``username`` on success, None on bad credentials

        Raises:
            ValueError: If a field is missing
        """
        username = (username or "").strip()
        if not username or not password:
            raise ValueError("Username and password are required")

        async with get_db() as db:
            cursor = await db.execute(
                "SELECT id, username, password FROM users WHERE username = ?",
                (username,)
            )
            row = await cursor.fetchone()

        if not row or not await asyncio.to_thread(verify_password, password, row["password"]):
            logger.warning(f"Failed login attempt for: {username}")
            return None

        logger.info(f"User logged in: {username}")
        return {"id": row["id"], "username": row["username"]}


# Global instance
user_service = UserService()
