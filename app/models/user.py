from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Profile mirror of an identity provider account.

    Identity:
      - id: the provider's user id (JWT "sub"), used as the partition key
        for every cart and order row.

    Credentials live with the identity provider. We only mirror identity,
    email and display name.
    """

    __tablename__ = "users"

    id: str = Field(
        primary_key=True,
        index=True,
        max_length=255,
        description="Matches the identity provider user id",
    )

    email: str = Field(
        index=True,
        description="Email from the identity provider",
    )

    name: str = Field(
        max_length=100,
        description="Display name; first part of email by default",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
