from varisankya.ai.prompts.subscription_insight import (
    SUBSCRIPTION_INSIGHT_SYSTEM,
    SUBSCRIPTION_INSIGHT_USER,
)

__all__ = [
    "SUBSCRIPTION_INSIGHT_SYSTEM",
    "SUBSCRIPTION_INSIGHT_USER",
]
