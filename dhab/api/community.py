"""
Community feed endpoints.

GET reads a feed (or one post's comments/reactions); POST is a single
endpoint dispatched on the "action" field.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from dhab.api.deps import get_config
from dhab.api.schemas import CommunityActionIn
from dhab.community import feed
from dhab.core.config import Config
from dhab.views.community import build_feed_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/community", tags=["community"])

REQUIRED_FIELDS = {
    "create_post": ("id", "anonymous_id", "addiction", "content", "timestamp"),
    "add_comment": ("id", "post_id", "anonymous_id", "content", "timestamp"),
    "toggle_reaction": ("post_id", "anonymous_id", "emoji"),
    "flag": ("target_type", "target_id", "anonymous_id"),
}


def _missing(payload: CommunityActionIn, fields) -> bool:
    for name in fields:
        value = getattr(payload, name)
        if value is None:
            return True
        if isinstance(value, str) and not value.strip():
            return True
    return False


@router.get("")
def get_community(
    addiction: Optional[str] = Query(None),
    post_id: Optional[str] = Query(None, alias="postId"),
    action: Optional[str] = Query(None),
    include_hidden: bool = Query(False, alias="includeHidden"),
    anonymous_id: Optional[str] = Query(None, alias="anonymousId"),
    config: Config = Depends(get_config),
):
    """
    Fetch posts for an addiction.

    With postId and action=comments|reactions, returns just that part of
    one post. With anonymousId, returns the feed as that viewer sees it.
    """
    if not addiction:
        raise HTTPException(status_code=400, detail="Addiction parameter is required")

    if post_id and action == "comments":
        comments = feed.get_post_comments(config, post_id, include_hidden=include_hidden)
        return {"comments": comments}

    if post_id and action == "reactions":
        return {"reactions": feed.get_post_reactions(config, post_id)}

    posts = feed.get_posts(config, addiction, include_hidden=include_hidden)

    if anonymous_id:
        # Samples only for a habit nobody has posted in, not one whose posts are all hidden
        stored = bool(posts) or feed.has_posts(config, addiction)
        view = build_feed_view(
            posts,
            viewer_id=anonymous_id,
            threshold=config.flag_threshold,
            user_flags=feed.get_user_flags(config, anonymous_id),
            use_samples=not stored,
        )
        return {"posts": view, "sample": not stored}

    return {"posts": posts}


@router.post("")
def post_community(payload: CommunityActionIn, config: Config = Depends(get_config)):
    """Create a post, add a comment, toggle a reaction or flag content."""
    if payload.action not in REQUIRED_FIELDS:
        raise HTTPException(status_code=400, detail="Invalid action")

    if _missing(payload, REQUIRED_FIELDS[payload.action]):
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        if payload.action == "create_post":
            feed.create_post(
                config,
                post_id=payload.id,
                anonymous_id=payload.anonymous_id,
                addiction=payload.addiction,
                content=payload.content,
                timestamp=payload.timestamp,
                milestone=payload.milestone,
            )
            return {"success": True}

        if payload.action == "add_comment":
            feed.add_comment(
                config,
                comment_id=payload.id,
                post_id=payload.post_id,
                anonymous_id=payload.anonymous_id,
                content=payload.content,
                timestamp=payload.timestamp,
            )
            return {"success": True}

        if payload.action == "toggle_reaction":
            added = feed.toggle_reaction(
                config,
                post_id=payload.post_id,
                anonymous_id=payload.anonymous_id,
                emoji=payload.emoji,
            )
            return {"success": True, "added": added}

        result = feed.flag_content(
            config,
            target_type=payload.target_type,
            target_id=payload.target_id,
            anonymous_id=payload.anonymous_id,
        )
        return {
            "success": True,
            "alreadyFlagged": result["already_flagged"],
            "flagCount": result["flag_count"],
            "hidden": result["hidden"],
        }

    except feed.DuplicateContentError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
