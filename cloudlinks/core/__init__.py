from cloudlinks.core.resolver import ResolvedLink, SlugResolver, candidate_slug
from cloudlinks.core.expiration import Servability, classify, compute_expiration, is_exhausted, is_view_expired
from cloudlinks.core.accountant import HitAccountant, count_hit
from cloudlinks.core.renderer import ResponseRenderer, expired_response, merge_query, redirect_response, render_markdown
from cloudlinks.core.reset import PreviewModeError, ResetOperation


__all__ = [
    'ResolvedLink',
    'SlugResolver',
    'candidate_slug',
    'Servability',
    'classify',
    'compute_expiration',
    'is_exhausted',
    'is_view_expired',
    'HitAccountant',
    'count_hit',
    'ResponseRenderer',
    'expired_response',
    'merge_query',
    'redirect_response',
    'render_markdown',
    'PreviewModeError',
    'ResetOperation',
]
