"""
Community directory - neighborhood groups joined by a short code.
"""

import logging
import string
from typing import List

from barter_exchange.common import generate_code, generate_id, utcnow
from barter_exchange.error_handling.errors import (
    AlreadyMemberError,
    CommunityNotFoundError,
    UnauthorizedError,
)
from barter_exchange.models import (
    Community,
    CommunityCreate,
    CommunityMember,
    CommunityMessage,
    User,
)
from barter_exchange.store import KeyValueStore, load_model_list, save_model_list
from barter_exchange.store.records import COMMUNITIES_KEY, members_key, messages_key

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


class CommunityDirectory:
    """Create, join and chat in communities"""

    def __init__(self, store: KeyValueStore, code_length: int = 6):
        self.store = store
        self.code_length = code_length

    def _communities(self) -> List[Community]:
        return load_model_list(self.store, COMMUNITIES_KEY, Community)

    def _with_count(self, community: Community) -> Community:
        community.member_count = len(self.community_members(community.id))
        return community

    def _new_code(self, taken: set) -> str:
        while True:
            code = generate_code(self.code_length, CODE_ALPHABET)
            if code not in taken:
                return code

    def _member_record(self, user: User, is_admin: bool) -> CommunityMember:
        return CommunityMember(
            id=user.id,
            name=user.name,
            email=user.email,
            joined_at=utcnow(),
            is_admin=is_admin,
            is_online=True,
        )

    def create_community(self, creator: User, data: CommunityCreate) -> Community:
        """
        Create a community with a fresh join code; the creator becomes admin.
        """
        communities = self._communities()
        community = Community(
            **data.model_dump(),
            id=generate_id(),
            code=self._new_code({c.code for c in communities}),
            created_at=utcnow(),
            created_by=creator.id,
        )
        communities.append(community)
        save_model_list(self.store, COMMUNITIES_KEY, communities)
        save_model_list(self.store, members_key(community.id), [self._member_record(creator, True)])

        logger.info(f"Created community {community.id} ({community.code})")
        community.member_count = 1
        return community

    def join_community(self, user: User, code: str) -> Community:
        """
        Join by code (case-insensitive).

        Raises:
            CommunityNotFoundError: If no community has this code
            AlreadyMemberError: If user already belongs to it
        """
        wanted = code.strip().upper()
        community = next((c for c in self._communities() if c.code == wanted), None)
        if community is None:
            raise CommunityNotFoundError(wanted)

        key = members_key(community.id)
        members = load_model_list(self.store, key, CommunityMember)
        if any(m.id == user.id for m in members):
            raise AlreadyMemberError("You are already a member of this community")

        members.append(self._member_record(user, False))
        save_model_list(self.store, key, members)

        logger.info(f"User {user.id} joined community {community.id}")
        community.member_count = len(members)
        return community

    def community_by_id(self, community_id: str) -> Community:
        for community in self._communities():
            if community.id == community_id:
                return self._with_count(community)
        raise CommunityNotFoundError(community_id)

    def user_communities(self, user_id: str) -> List[Community]:
        result = []
        for community in self._communities():
            members = self.community_members(community.id)
            if any(m.id == user_id for m in members):
                community.member_count = len(members)
                result.append(community)
        return result

    def community_members(self, community_id: str) -> List[CommunityMember]:
        return load_model_list(self.store, members_key(community_id), CommunityMember)

    def is_member(self, community_id: str, user_id: str) -> bool:
        return any(m.id == user_id for m in self.community_members(community_id))

    def send_community_message(self, community_id: str, sender: User, content: str) -> CommunityMessage:
        """
        Post to the community board.

        Raises:
            CommunityNotFoundError: If community_id is unknown
            UnauthorizedError: If sender is not a member
        """
        self.community_by_id(community_id)
        if not self.is_member(community_id, sender.id):
            raise UnauthorizedError("Only members can post in this community")

        message = CommunityMessage(
            id=generate_id(),
            content=content,
            user_id=sender.id,
            user_name=sender.name,
            timestamp=utcnow(),
        )
        key = messages_key(community_id)
        messages = load_model_list(self.store, key, CommunityMessage)
        messages.append(message)
        save_model_list(self.store, key, messages)
        return message

    def community_messages(self, community_id: str) -> List[CommunityMessage]:
        return load_model_list(self.store, messages_key(community_id), CommunityMessage)
