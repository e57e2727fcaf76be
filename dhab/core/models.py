"""
Database models for Dhab.

Models: UserSobriety, CommunityPost, PostComment, PostReaction, ContentFlag.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class UserSobriety(Base):
    """
    Sobriety record for a single user.

    Keyed by the user's Farcaster ID. Dates and times are stored as the
    strings the user entered (YYYY-MM-DD and HH:MM).
    """

    __tablename__ = "user_sobriety"

    fid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    start_date: Mapped[str] = mapped_column(String(10), nullable=False)
    start_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    addiction: Mapped[str] = mapped_column(String(255), nullable=False)
    custom_addiction: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    daily_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("8.00"))
    motivation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    pledge_date: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    # Wallet login that last saved this record
    wallet_address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    auth_strategy: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def to_dict(self) -> dict:
        return {
            "fid": self.fid,
            "startDate": self.start_date,
            "startTime": self.start_time,
            "addiction": self.addiction,
            "customAddiction": self.custom_addiction,
            "dailyCost": float(self.daily_cost) if self.daily_cost is not None else None,
            "motivation": self.motivation,
            "pledgeDate": self.pledge_date,
            "walletAddress": self.wallet_address,
            "authStrategy": self.auth_strategy,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<UserSobriety fid={self.fid}: {self.addiction} since {self.start_date}>"


class CommunityPost(Base):
    """
    Anonymous community post.

    Scoped to a single addiction. The id and timestamp (epoch ms) are
    generated by the client that wrote the post.
    """

    __tablename__ = "community_posts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    anonymous_id: Mapped[str] = mapped_column(String(100), nullable=False)
    addiction: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    milestone: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    flag_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    comments: Mapped[list["PostComment"]] = relationship(
        "PostComment", back_populates="post", cascade="all, delete-orphan"
    )
    reactions: Mapped[list["PostReaction"]] = relationship(
        "PostReaction", back_populates="post", cascade="all, delete-orphan"
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "anonymousId": self.anonymous_id,
            "addiction": self.addiction,
            "content": self.content,
            "milestone": self.milestone,
            "timestamp": self.timestamp,
            "flagCount": self.flag_count or 0,
        }

    def __repr__(self) -> str:
        return f"<CommunityPost {self.id}: {self.anonymous_id} in {self.addiction} flags={self.flag_count}>"


class PostComment(Base):
    """Anonymous comment on a community post."""

    __tablename__ = "post_comments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    post_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("community_posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    anonymous_id: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    flag_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationship
    post: Mapped["CommunityPost"] = relationship("CommunityPost", back_populates="comments")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "postId": self.post_id,
            "anonymousId": self.anonymous_id,
            "content": self.content,
            "timestamp": self.timestamp,
            "flagCount": self.flag_count or 0,
        }

    def __repr__(self) -> str:
        return f"<PostComment {self.id}: post={self.post_id} flags={self.flag_count}>"


class PostReaction(Base):
    """
    One emoji reaction by one pseudonym on one post.

    Toggling a reaction inserts or deletes this row.
    """

    __tablename__ = "post_reactions"
    __table_args__ = (
        UniqueConstraint("post_id", "anonymous_id", "emoji", name="uq_post_reaction"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    post_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("community_posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    anonymous_id: Mapped[str] = mapped_column(String(100), nullable=False)
    emoji: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationship
    post: Mapped["CommunityPost"] = relationship("CommunityPost", back_populates="reactions")

    def __repr__(self) -> str:
        return f"<PostReaction {self.emoji} by {self.anonymous_id} on {self.post_id}>"


class FlagTarget(str, Enum):
    """Kind of content a flag points at."""
    POST = "post"
    COMMENT = "comment"


class ContentFlag(Base):
    """
    A single moderation flag.

    At most one flag per pseudonym per target; the target's flag_count
    mirrors the number of rows here.
    """

    __tablename__ = "content_flags"
    __table_args__ = (
        UniqueConstraint("target_type", "target_id", "anonymous_id", name="uq_content_flag"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    target_type: Mapped[str] = mapped_column(String(10), nullable=False)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    anonymous_id: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<ContentFlag {self.target_type}:{self.target_id} by {self.anonymous_id}>"
