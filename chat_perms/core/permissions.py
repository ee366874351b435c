"""Chat access decisions.

Rules, in order (first match wins):

1. eligibility: a caller below the reputation or post-count threshold, or
   whose join date lies in the future, may not chat unless they belong to an
   elevated group (administrators, Global Moderators, the allow group)
2. deny group: members of the deny group may never chat
3. identity (read hook only): reading someone else's messages requires an
   admin uid
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from chat_perms.core.errors import (
    AccessDeniedError,
    AccessForbiddenError,
    NotYetEligibleError,
)
from chat_perms.core.models import EffectiveSettings, UserProfile
from chat_perms.core.utils import coerce_uid, utc_now

if TYPE_CHECKING:
    from chat_perms.core.settings_resolver import SettingsContext
    from chat_perms.ports.host import GroupLookupPort, UserLookupPort

logger = logging.getLogger(__name__)

ADMINISTRATORS_GROUP = "administrators"
GLOBAL_MODERATORS_GROUP = "Global Moderators"


def group_names(groups: Iterable[Any] | None) -> set[str]:
    """Extract group names from mappings or objects with a ``name``."""
    names: set[str] = set()
    for group in groups or ():
        if isinstance(group, str):
            names.add(group)
            continue
        if isinstance(group, (list, tuple)):
            # per-uid nested lists, as returned by multi-uid lookups
            names |= group_names(group)
            continue
        name = group.get("name") if isinstance(group, Mapping) else getattr(group, "name", None)
        if isinstance(name, str):
            names.add(name)
    return names


def below_threshold(profile: UserProfile, settings: EffectiveSettings) -> bool:
    """Whether the profile alone does not qualify for chat."""
    joined_in_future = profile.joindate is not None and profile.joindate > utc_now()
    return (
        profile.reputation < settings.min_reputation
        or profile.postcount < settings.min_posts
        or joined_in_future
    )


def elevated_groups(settings: EffectiveSettings) -> set[str]:
    return {ADMINISTRATORS_GROUP, GLOBAL_MODERATORS_GROUP, settings.allow_chat_group}


def uid_in(uid: Any, uids: Sequence[Any]) -> bool:
    target = coerce_uid(uid)
    return any(coerce_uid(candidate) == target for candidate in uids)


class PermissionGate:
    """Evaluates chat access for a caller against the current settings."""

    def __init__(
        self,
        settings: SettingsContext,
        users: UserLookupPort,
        groups: GroupLookupPort,
    ) -> None:
        self._settings = settings
        self._users = users
        self._groups = groups

    async def check_eligibility(self, uid: Any) -> None:
        """Apply the eligibility and deny-group rules to *uid*.

        Raises:
            NotYetEligibleError: Thresholds not met and no elevating group.
            AccessDeniedError: Caller is in the deny group.
            Exception: Any user/group lookup failure, unchanged.
        """
        settings = self._settings.current
        profile = UserProfile.from_mapping(await self._users.get_user_data(uid))
        names = group_names(await self._groups.get_user_groups(uid))

        if below_threshold(profile, settings) and not (names & elevated_groups(settings)):
            logger.debug(f"uid {uid!r} below chat thresholds")
            raise NotYetEligibleError(settings.chat_not_yet_allowed_message)

        if settings.deny_chat_group in names:
            logger.debug(f"uid {uid!r} is in deny group {settings.deny_chat_group!r}")
            raise AccessDeniedError(settings.chat_denied_message)

    def check_read_access(self, caller_uid: Any, uid: Any) -> None:
        """Reading another user's messages is reserved to admin uids.

        Raises:
            AccessForbiddenError: ``caller_uid != uid`` and caller is not admin.
        """
        if coerce_uid(caller_uid) == coerce_uid(uid):
            return
        if self.is_admin(caller_uid):
            return
        logger.info(f"uid {caller_uid!r} attempted to read messages of uid {uid!r}")
        raise AccessForbiddenError(caller_uid=caller_uid, target_uid=uid)

    def is_admin(self, uid: Any) -> bool:
        return uid_in(uid, self._settings.current.admin_uids)
