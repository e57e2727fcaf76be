"""
Community feed as one viewer sees it.

Reactions are laid over the default set, the viewer's own reactions and
flags are marked, and flagged-out content is dropped.
"""

from typing import Dict, List, Optional

from dhab.community.feed import FLAG_THRESHOLD, is_hidden, merge_reactions, sample_posts
from dhab.core.utils import format_time_ago


def _comment_view(comment: dict, flagged: set, now: Optional[int]) -> dict:
    return {
        "id": comment["id"],
        "anonymousId": comment["anonymousId"],
        "content": comment["content"],
        "timestamp": comment["timestamp"],
        "timeAgo": format_time_ago(comment["timestamp"], now),
        "flagCount": comment.get("flagCount") or 0,
        "flaggedByUser": comment["id"] in flagged,
    }


def build_feed_view(
    posts: List[dict],
    viewer_id: Optional[str] = None,
    threshold: int = FLAG_THRESHOLD,
    user_flags: Optional[Dict[str, set]] = None,
    now: Optional[int] = None,
    use_samples: bool = True,
) -> List[dict]:
    """
    Shape stored posts for display.

    Args:
        posts: Posts as returned by community.feed.get_posts
        viewer_id: Pseudonym of the person looking at the feed
        threshold: Flag count at which content is hidden
        user_flags: {"post": ids, "comment": ids} the viewer has flagged
        now: Epoch ms used for relative times
        use_samples: Show starter posts when there are no stored posts

    Returns:
        Visible posts, newest first
    """
    user_flags = user_flags or {}
    flagged_posts = user_flags.get("post", set())
    flagged_comments = user_flags.get("comment", set())

    if not posts and use_samples:
        samples = sample_posts(now)
        for post in samples:
            post["timeAgo"] = format_time_ago(post["timestamp"], now)
        return samples

    view = []
    for post in posts:
        if is_hidden(post.get("flagCount"), threshold):
            continue

        comments = [
            _comment_view(c, flagged_comments, now)
            for c in post.get("comments", [])
            if not is_hidden(c.get("flagCount"), threshold)
        ]

        view.append({
            "id": post["id"],
            "anonymousId": post["anonymousId"],
            "content": post["content"],
            "milestone": post.get("milestone"),
            "timestamp": post["timestamp"],
            "timeAgo": format_time_ago(post["timestamp"], now),
            "reactions": merge_reactions(post.get("reactions", []), viewer_id),
            "comments": comments,
            "flagCount": post.get("flagCount") or 0,
            "flaggedByUser": post["id"] in flagged_posts,
        })

    view.sort(key=lambda p: p["timestamp"], reverse=True)
    return view
