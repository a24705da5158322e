"""Repository factory bound to the app's Supabase client."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from supabase import Client

from ...integrations.supabase_client import supabase_ext
from .article_repo_supabase import ArticleRepositorySupabase
from .comment_repo_supabase import CommentRepositorySupabase
from .community_repo_supabase import CommunityRepositorySupabase
from .engagement_repo_supabase import FollowRepositorySupabase, LikeRepositorySupabase
from .profile_repo_supabase import ProfileRepositorySupabase


@dataclass
class Repositories:
    articles: ArticleRepositorySupabase
    profiles: ProfileRepositorySupabase
    likes: LikeRepositorySupabase
    follows: FollowRepositorySupabase
    comments: CommentRepositorySupabase
    community: CommunityRepositorySupabase


def repositories(client: Optional[Client] = None) -> Repositories:
    client = client or supabase_ext.anon
    if client is None:
        raise RuntimeError("Supabase client is not initialized; set SUPABASE_URL and SUPABASE_ANON_KEY.")
    return Repositories(
        articles=ArticleRepositorySupabase(client),
        profiles=ProfileRepositorySupabase(client),
        likes=LikeRepositorySupabase(client),
        follows=FollowRepositorySupabase(client),
        comments=CommentRepositorySupabase(client),
        community=CommunityRepositorySupabase(client),
    )
