from backpack.models.local import Local
from backpack.models.visitor import VerificationStatus, Visitor

__all__ = ["Local", "Visitor", "VerificationStatus"]
