"""Database seeding for DualControl.

Creates the default maker and checker users.
"""

import uuid
from typing import Dict

from sqlalchemy.orm import Session

from dualcontrol.db.models import User

# Placeholder bcrypt hash; credential issuance lives outside the workflow core
PLACEHOLDER_PASSWORD_HASH = "$2b$10$4cXn4kdl6v36ARMmUZ0nvOCBGGUKtWk5X.lZRsXWLn/GgQFqaTGRe"

DEFAULT_USERS = {
    "maker": {
        "email": "maker@example.com",
        "username": "maker",
        "role": "MAKER",
        "full_name": "Default Maker",
    },
    "checker": {
        "email": "checker@example.com",
        "username": "checker",
        "role": "CHECKER",
        "full_name": "Default Checker",
    },
}


def seed_default_users(db: Session) -> Dict[str, User]:
    """
    Create the default maker and checker users.

    Idempotent - existing users (matched by email) are returned as-is.

    Args:
        db: Database session

    Returns:
        Dict mapping user key to User object
    """
    seeded = {}

    for key, user_config in DEFAULT_USERS.items():
        existing = db.query(User).filter(User.email == user_config["email"]).first()
        if existing:
            seeded[key] = existing
            continue

        user = User(
            id=uuid.uuid4(),
            email=user_config["email"],
            username=user_config["username"],
            password=PLACEHOLDER_PASSWORD_HASH,
            role=user_config["role"],
            full_name=user_config["full_name"],
        )
        db.add(user)
        seeded[key] = user

    db.flush()
    return seeded
