"""
One-time Telegram link tokens.
"""

from typing import Dict, Optional

from participium.repositories.base import FirestoreRepository


class TelegramLinkTokenRepository(FirestoreRepository):
    collection_name = "telegram_link_tokens"

    def find_by_token(self, token: str) -> Optional[Dict]:
        return self.find_one_where(("token", "==", token))

    def delete_unused_for_user(self, user_id: str) -> int:
        rows = self.find_where(("user_id", "==", user_id), ("used", "==", False))
        for row in rows:
            self.delete(row["id"])
        return len(rows)


_token_repository = None


def get_telegram_token_repository() -> TelegramLinkTokenRepository:
    global _token_repository
    if _token_repository is None:
        _token_repository = TelegramLinkTokenRepository()
    return _token_repository
