import logging

from auth.entitlements import get_verified_credentials
from auth.profiles import ProfileRepository
from cookie.cookie import ensure_anon_session
from domain.identity import Authenticated, CallerIdentity

logger = logging.getLogger(__name__)


def resolve_identity(profiles: ProfileRepository | None = None) -> CallerIdentity:
    """
    Resolve the caller once per request.
      - verified auth credential -> Authenticated (tier from profile, created as free if absent)
      - otherwise                -> Anonymous (signed cookie, minted when missing/invalid/expired)
    """
    creds = get_verified_credentials()
    if creds:
        user_id, email = creds
        profile = (profiles or ProfileRepository()).get_or_create_profile(user_id, email)
        tier = "pro" if profile.pro else "free"
        return Authenticated(user_id=user_id, email=email or (profile.email or ""), tier=tier)

    anon = ensure_anon_session()
    if anon.is_new:
        logger.info("minted anonymous session %s", anon.session_id)
    return anon