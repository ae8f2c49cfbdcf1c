# services/store.py
import logging
import uuid
from typing import Dict, Optional

from core.errors import FamilyGroupNotFound, NotInFamilyGroup
from models.savings import FamilyGroup, SavingsTarget, UserProfile

logger = logging.getLogger(__name__)


class SavingsStore:
    """
    In-memory user profiles and family groups.

    One instance per app (or per test); handlers receive it explicitly.
    Nothing is persisted. Writes to the same key are last-write-wins.
    """

    def __init__(self):
        self.profiles: Dict[str, UserProfile] = {}
        self.families: Dict[str, FamilyGroup] = {}

    # -----------------------------
    # User profiles
    # -----------------------------
    def get_profile(self, user_id: str) -> UserProfile:
        profile = self.profiles.get(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id)
            self.profiles[user_id] = profile
        return profile

    def find_profile(self, user_id: str) -> Optional[UserProfile]:
        return self.profiles.get(user_id)

    def add_target(self, user_id: str, target: SavingsTarget) -> UserProfile:
        profile = self.get_profile(user_id)
        profile.targets.append(target)
        logger.info(
            f"[STORE] target stored user_id={user_id} goal={target.goal} "
            f"amount={target.amount} count={len(profile.targets)}"
        )
        return profile

    def latest_target(self, user_id: str) -> Optional[SavingsTarget]:
        profile = self.profiles.get(user_id)
        return profile.latest_target if profile else None

    def record_deposit(self, user_id: str, amount: int) -> Optional[FamilyGroup]:
        """
        Add a deposit to the user's total and, when the user belongs to a
        family, to the family total. Returns the family that was updated.
        """
        profile = self.get_profile(user_id)
        profile.total_saved += amount

        family = self.family_for_user(user_id)
        if family is not None:
            family.total_saved += amount
            logger.info(
                f"[STORE] family deposit group_id={family.group_id} "
                f"amount={amount} total={family.total_saved}"
            )
        return family

    # -----------------------------
    # Family groups
    # -----------------------------
    def create_family(
        self,
        creator: str,
        name: str = "My Family",
        group_id: Optional[str] = None,
    ) -> FamilyGroup:
        group_id = group_id or f"family_{uuid.uuid4().hex[:12]}"
        family = FamilyGroup(group_id=group_id, name=name, creator=creator, members={creator})
        self.families[group_id] = family
        self.get_profile(creator).family_group_id = group_id
        logger.info(f"[STORE] family created group_id={group_id} creator={creator}")
        return family

    def get_family(self, group_id: str) -> FamilyGroup:
        family = self.families.get(group_id)
        if family is None:
            raise FamilyGroupNotFound(group_id)
        return family

    def has_family(self, group_id: str) -> bool:
        return group_id in self.families

    def family_for_user(self, user_id: str) -> Optional[FamilyGroup]:
        profile = self.profiles.get(user_id)
        if profile is None or profile.family_group_id is None:
            return None
        return self.families.get(profile.family_group_id)

    def join_family(self, user_id: str, group_id: str) -> FamilyGroup:
        """Adding an existing member is a no-op."""
        family = self.get_family(group_id)
        family.members.add(user_id)
        self.get_profile(user_id).family_group_id = group_id
        return family

    def set_family_goal(self, group_id: str, amount: int) -> FamilyGroup:
        family = self.get_family(group_id)
        family.savings_goal = amount
        return family

    def set_heir(self, user_id: str, address: str) -> Optional[FamilyGroup]:
        profile = self.get_profile(user_id)
        profile.heir_address = address

        family = self.family_for_user(user_id)
        if family is not None:
            family.heir_address = address
        return family

    def require_family_for_user(self, user_id: str) -> FamilyGroup:
        family = self.family_for_user(user_id)
        if family is None:
            raise NotInFamilyGroup(user_id)
        return family
