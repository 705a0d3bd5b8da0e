"""
Repositories over DBStorage.

UserRepository is the credential store used by the auth service. Default
finders never load ``password_hash`` or ``refresh_fingerprint``; only the
``*_with_secret`` / ``*_with_fingerprint`` finders do.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import undefer

from models.activity import Activity
from models.user import User

SORT_COLUMNS = {
    "created_at": Activity.created_at,
    "title": Activity.title,
}


class UserRepository:
    def __init__(self, storage):
        self._storage = storage

    def _query(self):
        return self._storage.get_session().query(User)

    def find_by_email(self, email: str) -> Optional[User]:
        return self._query().filter(User.email == email).first()

    def find_by_username(self, username: str | None) -> Optional[User]:
        if not username:
            return None
        return self._query().filter(User.username == username).first()

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._storage.get(User, user_id)

    def find_by_email_with_secret(self, email: str) -> Optional[User]:
        return (
            self._query()
            .options(undefer(User.password_hash))
            .filter(User.email == email)
            .populate_existing()
            .first()
        )

    def find_by_id_with_fingerprint(self, user_id: str) -> Optional[User]:
        return (
            self._query()
            .options(undefer(User.refresh_fingerprint))
            .filter(User.id == user_id)
            .populate_existing()
            .first()
        )

    def create(self, **data) -> User:
        user = User(**data)
        self._storage.new(user)
        self._storage.save()
        return user

    def update(self, user_id: str, **values) -> int:
        """Update columns of one user and commit; returns the number of rows changed."""
        changed = self._query().filter(User.id == user_id).update(values, synchronize_session="fetch")
        self._storage.save()
        return changed

    def compare_and_set_fingerprint(self, user_id: str, expected: str, new: str) -> bool:
        """Replace the refresh fingerprint only if it still equals ``expected``."""
        changed = (
            self._query()
            .filter(User.id == user_id, User.refresh_fingerprint == expected)
            .update({"refresh_fingerprint": new}, synchronize_session="fetch")
        )
        self._storage.save()
        return changed == 1

    def count(self) -> int:
        return self._storage.count(User)

    def commit(self):
        self._storage.save()

    def rollback(self):
        self._storage.rollback()


class ActivityRepository:
    def __init__(self, storage):
        self._storage = storage

    def _query(self):
        return self._storage.get_session().query(Activity)

    def get(self, activity_id: str) -> Optional[Activity]:
        return self._storage.get(Activity, activity_id)

    def add(self, activity: Activity) -> Activity:
        self._storage.new(activity)
        self._storage.save()
        return activity

    def delete(self, activity: Activity):
        self._storage.delete(activity)
        self._storage.save()

    def count(self) -> int:
        return self._storage.count(Activity)

    def commit(self):
        self._storage.save()

    def _filtered(self, type_filter: str | None = None, user_id: str | None = None):
        query = self._query()
        if user_id:
            query = query.filter(Activity.user_id == user_id)
        if type_filter:
            # Case-insensitive substring match
            query = query.filter(func.lower(Activity.type).like(f"%{type_filter.strip().lower()}%"))
        return query

    def find_page(self, page: int, limit: int, sort_by: str = "created_at", sort_order: str = "DESC",
                  type_filter: str | None = None, user_id: str | None = None) -> Tuple[List[Activity], int]:
        query = self._filtered(type_filter, user_id)
        total = query.count()
        col = SORT_COLUMNS[sort_by]
        order = col.desc() if sort_order == "DESC" else col.asc()
        rows = query.order_by(order, Activity.id).offset((page - 1) * limit).limit(limit).all()
        return rows, total

    def find_random(self, type_filter: str | None = None) -> Optional[Activity]:
        return self._filtered(type_filter).order_by(func.random()).first()

    def distinct_types(self) -> List[str]:
        session = self._storage.get_session()
        rows = session.query(Activity.type).distinct().all()
        return [row[0] for row in rows]

    def set_contributor_name(self, user_id: str, name: str | None) -> int:
        """Rewrite contributor_name on every activity owned by the user (no commit)."""
        return (
            self._query()
            .filter(Activity.user_id == user_id)
            .update({"contributor_name": name}, synchronize_session="fetch")
        )
