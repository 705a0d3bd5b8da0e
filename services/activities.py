"""Activity CRUD, listing and discovery."""
from __future__ import annotations

import logging
import math
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.activity import Activity, CostLevel
from services.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
)

log = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "title",
    "description",
    "type",
    "participants_min",
    "participants_max",
    "cost_level",
    "duration_min",
    "duration_max",
)


def paginated(rows, total: int, page: int, limit: int) -> dict:
    return {
        "data": rows,
        "meta": {
            "totalItems": total,
            "itemCount": len(rows),
            "itemsPerPage": limit,
            "totalPages": math.ceil(total / limit) if limit else 0,
            "currentPage": page,
        },
    }


class ActivityService:
    def __init__(self, activities, max_activities: int | None = None):
        self._activities = activities
        self._max_activities = max_activities

    def create(self, data: dict, user) -> Activity:
        if not user.username:
            log.warning("User %s attempted to create activity without a username.", user.id)
            raise BadRequestError(
                "A username is required to contribute an activity. Please update your profile."
            )

        if self._max_activities is not None:
            current = self._activities.count()
            if current >= self._max_activities:
                log.warning(
                    "Activity creation limit reached. Current: %d, Max: %d", current, self._max_activities
                )
                raise ConflictError(
                    "Activity creation limit reached. Cannot create new activities at this time.",
                    reason="capacity",
                )

        activity = Activity(
            user_id=user.id,
            contributor_name=user.username,
            title=data["title"],
            description=data["description"],
            type=data["type"],
            participants_min=data["participants_min"] if "participants_min" in data else 1,
            participants_max=data.get("participants_max"),
            cost_level=data.get("cost_level") or CostLevel.FREE,
            duration_min=data.get("duration_min"),
            duration_max=data.get("duration_max"),
        )
        log.info('Creating activity "%s" for user %s', activity.title, user.id)
        return self._activities.add(activity)

    def find_one(self, activity_id: str) -> Activity:
        activity = self._activities.get(activity_id)
        if activity is None:
            log.warning("Activity with ID %s not found.", activity_id)
            raise NotFoundError(f"Activity with ID {activity_id} not found.")
        return activity

    def find_all(self, params: dict) -> dict:
        return self._page(params)

    def find_all_by_user(self, user_id: str, params: dict) -> dict:
        return self._page(params, user_id=user_id)

    def _page(self, params: dict, user_id: str | None = None) -> dict:
        page = params.get("page", 1)
        limit = params.get("limit", 10)
        rows, total = self._activities.find_page(
            page=page,
            limit=limit,
            sort_by=params.get("sort_by", "created_at"),
            sort_order=params.get("sort_order", "DESC"),
            type_filter=params.get("type"),
            user_id=user_id,
        )
        return paginated(rows, total, page, limit)

    def find_random(self, type_filter: str | None = None) -> Activity:
        activity = self._activities.find_random(type_filter)
        if activity is None:
            log.warning("No activities found for random selection (type=%r)", type_filter)
            raise NotFoundError("No activities found matching your criteria.")
        return activity

    def find_unique_types(self) -> List[str]:
        types = {t for t in self._activities.distinct_types() if t and t.strip()}
        return sorted(types)

    def update(self, activity_id: str, data: dict, user_id: str) -> Activity:
        activity = self._owned(activity_id, user_id, "update")
        for field in UPDATABLE_FIELDS:
            if field in data:
                setattr(activity, field, data[field])
        self._activities.commit()
        log.info("Activity %s updated by user %s", activity_id, user_id)
        return activity

    def remove(self, activity_id: str, user_id: str):
        activity = self._owned(activity_id, user_id, "delete")
        self._activities.delete(activity)
        log.info("Activity %s deleted by user %s", activity_id, user_id)

    def update_contributor_name_for_user(self, user_id: str, name: str | None, commit: bool = True) -> int:
        """Propagate a changed username onto the user's existing activities."""
        try:
            changed = self._activities.set_contributor_name(user_id, name)
            if commit:
                self._activities.commit()
        except IntegrityError:
            raise
        except SQLAlchemyError:
            log.exception("Failed to update contributor_name for user %s", user_id)
            raise InternalError(f"Failed to update contributor names for user {user_id}.")
        log.info("Updated contributor_name on %d activities for user %s", changed, user_id)
        return changed

    def _owned(self, activity_id: str, user_id: str, action: str) -> Activity:
        activity = self.find_one(activity_id)
        if activity.user_id != user_id:
            log.warning(
                "User %s attempted to %s activity %s owned by %s", user_id, action, activity_id, activity.user_id
            )
            raise ForbiddenError(f"You are not allowed to {action} this activity.")
        return activity
