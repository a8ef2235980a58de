import logging
from typing import Callable, Optional

from backpack.core.config import settings
from backpack.core.errors import DuplicateCodeError
from backpack.core.security import generate_referral_code
from backpack.models.local import Local
from backpack.services.eligibility import require_eligible
from backpack.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def register_local(
    store: RecordStore,
    *,
    name,
    phone,
    email,
    pincode,
    generate_code: Optional[Callable[[], str]] = None,
    attempts: Optional[int] = None,
) -> Local:
    """
    Eligibility check, code generation, insert.

    A collision reported by the store is retried with a fresh code; once the
    attempts are used up the DuplicateCodeError propagates.
    """
    require_eligible(pincode)

    if generate_code is None:
        generate_code = generate_referral_code
    if attempts is None:
        attempts = settings.REFERRAL_CODE_ATTEMPTS
    attempts = max(1, attempts)

    for attempt in range(1, attempts + 1):
        code = generate_code()
        try:
            local = store.insert_local(
                name=name,
                phone=phone,
                email=email,
                pincode=pincode,
                referral_code=code,
            )
        except DuplicateCodeError:
            if attempt == attempts:
                logger.error(f"❌ Gave up after {attempts} referral code collision(s)")
                raise
            continue

        logger.info(f"✅ Registered local {local.id} with code {local.referral_code}")
        return local
