"""
Anonymous community feed.

Posts are scoped to one addiction. Anyone can comment, react or flag;
content with FLAG_THRESHOLD or more flags drops out of the default feed.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError

from dhab.core.config import Config
from dhab.core.db import session_scope
from dhab.core.models import (
    CommunityPost,
    ContentFlag,
    FlagTarget,
    PostComment,
    PostReaction,
)
from dhab.core.utils import MS_PER_DAY, MS_PER_HOUR, now_ms

logger = logging.getLogger(__name__)

FLAG_THRESHOLD = 3

DEFAULT_REACTION_EMOJIS = ["👍", "❤️", "👏", "💪"]


class DuplicateContentError(ValueError):
    """A post or comment with this id already exists."""


def is_hidden(flag_count: int, threshold: int = FLAG_THRESHOLD) -> bool:
    """True once content has collected enough flags to be hidden."""
    return (flag_count or 0) >= threshold


def _require(**fields) -> None:
    missing = [
        name for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")


def _parse_target(target_type: str) -> FlagTarget:
    try:
        return FlagTarget(target_type)
    except ValueError:
        raise ValueError(f"Invalid target type: {target_type!r}")


def create_post(
    config: Config,
    post_id: str,
    anonymous_id: str,
    addiction: str,
    content: str,
    timestamp: int,
    milestone: Optional[str] = None,
) -> dict:
    """Store a new anonymous post."""
    _require(id=post_id, anonymousId=anonymous_id, addiction=addiction,
             content=content, timestamp=timestamp)

    with session_scope(config) as session:
        if session.get(CommunityPost, post_id) is not None:
            raise DuplicateContentError(f"Post {post_id} already exists")

        post = CommunityPost(
            id=post_id,
            anonymous_id=anonymous_id,
            addiction=addiction,
            content=content.strip(),
            milestone=milestone or None,
            timestamp=int(timestamp),
            flag_count=0,
        )
        session.add(post)
        session.flush()

        logger.info(f"New post {post_id} by {anonymous_id} in {addiction}")
        return post.to_dict()


def add_comment(
    config: Config,
    comment_id: str,
    post_id: str,
    anonymous_id: str,
    content: str,
    timestamp: int,
) -> dict:
    """Attach a comment to an existing post."""
    _require(id=comment_id, postId=post_id, anonymousId=anonymous_id,
             content=content, timestamp=timestamp)

    with session_scope(config) as session:
        if session.get(CommunityPost, post_id) is None:
            raise LookupError(f"Post {post_id} not found")
        if session.get(PostComment, comment_id) is not None:
            raise DuplicateContentError(f"Comment {comment_id} already exists")

        comment = PostComment(
            id=comment_id,
            post_id=post_id,
            anonymous_id=anonymous_id,
            content=content.strip(),
            timestamp=int(timestamp),
            flag_count=0,
        )
        session.add(comment)
        session.flush()

        logger.info(f"New comment {comment_id} on post {post_id} by {anonymous_id}")
        return comment.to_dict()


def toggle_reaction(config: Config, post_id: str, anonymous_id: str, emoji: str) -> bool:
    """
    Add the reaction if absent, remove it if present.

    Returns True if the reaction was added. Two concurrent adds of the
    same reaction leave one row and both report it added.
    """
    _require(postId=post_id, anonymousId=anonymous_id, emoji=emoji)

    with session_scope(config) as session:
        removed = session.execute(
            delete(PostReaction).where(
                PostReaction.post_id == post_id,
                PostReaction.anonymous_id == anonymous_id,
                PostReaction.emoji == emoji,
            )
        ).rowcount
        if removed:
            logger.debug(f"Removed {emoji} from post {post_id} by {anonymous_id}")
            return False

        if session.get(CommunityPost, post_id) is None:
            raise LookupError(f"Post {post_id} not found")

        session.add(PostReaction(post_id=post_id, anonymous_id=anonymous_id, emoji=emoji))
        try:
            session.flush()
        except IntegrityError:
            session.rollback()
            logger.debug(f"{emoji} on post {post_id} by {anonymous_id} already added")
            return True

        logger.debug(f"Added {emoji} to post {post_id} by {anonymous_id}")
        return True


def has_user_flagged(config: Config, target_type: str, target_id: str, anonymous_id: str) -> bool:
    """Check whether this pseudonym already flagged the target."""
    target = _parse_target(target_type)

    with session_scope(config) as session:
        count = (
            session.query(func.count(ContentFlag.id))
            .filter(
                ContentFlag.target_type == target.value,
                ContentFlag.target_id == target_id,
                ContentFlag.anonymous_id == anonymous_id,
            )
            .scalar()
        )
        return bool(count)


def get_user_flags(config: Config, anonymous_id: str) -> Dict[str, set]:
    """Ids of every post and comment this pseudonym has flagged."""
    flagged: Dict[str, set] = {target.value: set() for target in FlagTarget}

    with session_scope(config) as session:
        rows = (
            session.query(ContentFlag.target_type, ContentFlag.target_id)
            .filter(ContentFlag.anonymous_id == anonymous_id)
            .all()
        )
        for target_type, target_id in rows:
            flagged.setdefault(target_type, set()).add(target_id)

    return flagged


def flag_content(config: Config, target_type: str, target_id: str, anonymous_id: str) -> dict:
    """
    Flag a post or comment.

    A pseudonym can flag a target once; repeats change nothing. The
    unique flag row is written first and the target's count is bumped
    in SQL, so concurrent flags from different pseudonyms all count.

    Returns:
        Dict with already_flagged, flag_count and hidden
    """
    _require(targetType=target_type, targetId=target_id, anonymousId=anonymous_id)
    target = _parse_target(target_type)
    model = CommunityPost if target is FlagTarget.POST else PostComment

    with session_scope(config) as session:
        session.add(ContentFlag(
            target_type=target.value,
            target_id=target_id,
            anonymous_id=anonymous_id,
        ))
        try:
            session.flush()
        except IntegrityError:
            session.rollback()
            flag_count = _current_flag_count(session, model, target, target_id)
            return {
                "already_flagged": True,
                "flag_count": flag_count,
                "hidden": is_hidden(flag_count, config.flag_threshold),
            }

        updated = session.execute(
            update(model)
            .where(model.id == target_id)
            .values(flag_count=func.coalesce(model.flag_count, 0) + 1)
            .execution_options(synchronize_session=False)
        ).rowcount
        if not updated:
            # Rolls back the flag row too
            raise LookupError(f"{target.value.capitalize()} {target_id} not found")

        flag_count = _current_flag_count(session, model, target, target_id)
        hidden = is_hidden(flag_count, config.flag_threshold)
        if hidden:
            logger.warning(f"{target.value} {target_id} hidden after {flag_count} flags")
        else:
            logger.info(f"{target.value} {target_id} flagged ({flag_count})")

        return {
            "already_flagged": False,
            "flag_count": flag_count,
            "hidden": hidden,
        }


def _current_flag_count(session, model, target: FlagTarget, target_id: str) -> int:
    flag_count = session.execute(
        select(model.flag_count).where(model.id == target_id)
    ).scalar_one_or_none()
    if flag_count is None:
        raise LookupError(f"{target.value.capitalize()} {target_id} not found")
    return flag_count


def has_posts(config: Config, addiction: str) -> bool:
    """True if anything was ever posted for this addiction, hidden or not."""
    with session_scope(config) as session:
        count = (
            session.query(func.count(CommunityPost.id))
            .filter(CommunityPost.addiction == addiction)
            .scalar()
        )
        return bool(count)


def _aggregate_reactions(reactions: List[PostReaction]) -> List[dict]:
    """Group reaction rows into [{emoji, count, users}] in first-seen order."""
    grouped: Dict[str, List[str]] = {}
    for reaction in sorted(reactions, key=lambda r: r.id):
        grouped.setdefault(reaction.emoji, []).append(reaction.anonymous_id)

    return [
        {"emoji": emoji, "count": len(users), "users": users}
        for emoji, users in grouped.items()
    ]


def get_post_reactions(config: Config, post_id: str) -> List[dict]:
    """Reaction counts for a post, with the pseudonyms behind each."""
    with session_scope(config) as session:
        reactions = (
            session.query(PostReaction)
            .filter(PostReaction.post_id == post_id)
            .all()
        )
        return _aggregate_reactions(reactions)


def get_post_comments(config: Config, post_id: str, include_hidden: bool = False) -> List[dict]:
    """Comments on a post, oldest first."""
    with session_scope(config) as session:
        query = session.query(PostComment).filter(PostComment.post_id == post_id)
        if not include_hidden:
            query = query.filter(PostComment.flag_count < config.flag_threshold)
        comments = query.order_by(PostComment.timestamp.asc()).all()
        return [c.to_dict() for c in comments]


def get_posts(config: Config, addiction: str, include_hidden: bool = False) -> List[dict]:
    """
    Feed for one addiction, newest first.

    Each post carries its comments and aggregated reactions.
    """
    with session_scope(config) as session:
        query = session.query(CommunityPost).filter(CommunityPost.addiction == addiction)
        if not include_hidden:
            query = query.filter(CommunityPost.flag_count < config.flag_threshold)
        posts = query.order_by(CommunityPost.timestamp.desc()).all()

        feed = []
        for post in posts:
            comments = sorted(post.comments, key=lambda c: c.timestamp)
            if not include_hidden:
                comments = [
                    c for c in comments
                    if not is_hidden(c.flag_count, config.flag_threshold)
                ]

            item = post.to_dict()
            item["comments"] = [c.to_dict() for c in comments]
            item["reactions"] = _aggregate_reactions(post.reactions)
            feed.append(item)

        return feed


def default_reactions() -> List[dict]:
    """The four reactions every post offers, all at zero."""
    return [
        {"emoji": emoji, "count": 0, "userReacted": False}
        for emoji in DEFAULT_REACTION_EMOJIS
    ]


def merge_reactions(stored: List[dict], viewer_id: Optional[str] = None) -> List[dict]:
    """
    Lay stored reaction counts over the default set for one viewer.

    Only the default emojis are shown.
    """
    by_emoji = {r["emoji"]: r for r in stored}
    merged = []
    for reaction in default_reactions():
        found = by_emoji.get(reaction["emoji"])
        if found:
            reaction["count"] = found.get("count", 0)
            reaction["userReacted"] = viewer_id is not None and viewer_id in found.get("users", [])
        merged.append(reaction)
    return merged


def sample_posts(now: Optional[int] = None) -> List[dict]:
    """Starter posts shown when a community has nothing yet."""
    if now is None:
        now = now_ms()

    return [
        {
            "id": "1",
            "anonymousId": "SoberCC",
            "content": (
                "The idea of never drinking again still frightens me, at the same "
                "time I never want to drink again. Will just keep at it, one day "
                "after the next. I feel free right now! And like I'm on the right path."
            ),
            "milestone": None,
            "timestamp": now - MS_PER_DAY * 2,
            "reactions": [
                {"emoji": "👍", "count": 17, "userReacted": False},
                {"emoji": "😐", "count": 1, "userReacted": False},
                {"emoji": "🎉", "count": 8, "userReacted": False},
                {"emoji": "❤️", "count": 22, "userReacted": False},
            ],
            "comments": [],
            "flagCount": 0,
            "flaggedByUser": False,
        },
        {
            "id": "2",
            "anonymousId": "JohnSmith_99",
            "content": (
                "I've officially made it to 6 months sober. It hasn't been easy, but "
                "every morning waking up without a hangover makes it worth it."
            ),
            "milestone": "🎉 Milestone Reached!",
            "timestamp": now - MS_PER_HOUR * 2,
            "reactions": [
                {"emoji": "👏", "count": 45, "userReacted": False},
                {"emoji": "💪", "count": 12, "userReacted": False},
            ],
            "comments": [],
            "flagCount": 0,
            "flaggedByUser": False,
        },
        {
            "id": "3",
            "anonymousId": "AliceW",
            "content": (
                "Just checking in. Had a rough craving today but went for a run "
                "instead. Feeling much better now. Stay strong everyone!"
            ),
            "milestone": None,
            "timestamp": now - MS_PER_HOUR * 5,
            "reactions": [
                {"emoji": "❤️", "count": 8, "userReacted": False},
            ],
            "comments": [],
            "flagCount": 0,
            "flaggedByUser": False,
        },
    ]
