from tanda_engine.services.protection_service import policy_from_settings
from tanda_engine.simulation.policy import PolicyLimits


def get_policy() -> PolicyLimits:
    """FastAPI dependency returning the restructuring limits currently configured."""
    return policy_from_settings()
