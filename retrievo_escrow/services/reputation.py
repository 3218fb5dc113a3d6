from typing import Tuple
from sqlmodel import Session

from retrievo_escrow.models.user import UserProfile

FINDER_REPUTATION_REWARD = 10
OWNER_REPUTATION_REWARD = 5


def get_or_create_profile(session: Session, account: str) -> UserProfile:
    profile = session.get(UserProfile, account)

    if not profile:
        profile = UserProfile(account=account)
        session.add(profile)
        session.flush()

    return profile


def record_loss(session: Session, account: str) -> UserProfile:
    profile = get_or_create_profile(session, account)
    profile.items_lost_count += 1

    session.add(profile)
    return profile


def record_find(session: Session, account: str) -> UserProfile:
    profile = get_or_create_profile(session, account)
    profile.items_found_count += 1
    profile.reputation_score += FINDER_REPUTATION_REWARD

    session.add(profile)
    return profile


def record_return(session: Session, account: str) -> UserProfile:
    profile = get_or_create_profile(session, account)
    profile.reputation_score += OWNER_REPUTATION_REWARD

    session.add(profile)
    return profile


def get_user_reputation(session: Session, account: str) -> Tuple[int, int, int]:
    """
    Returns (items_lost, items_found, reputation_score).
    Unknown accounts read as zeros; no profile is created.
    """
    profile = session.get(UserProfile, account)

    if not profile:
        return 0, 0, 0

    return profile.items_lost_count, profile.items_found_count, profile.reputation_score
