"""
WebSocket authentication from a ``?token=<access token>`` query string.

Browsers cannot set an ``Authorization`` header on WebSocket upgrades,
so the same JWT used for the REST API is passed in the query string.
"""
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

from core.authentication import BearerAuthentication


@database_sync_to_async
def _user_for_token(raw_token):
    try:
        return BearerAuthentication().user_for_token(raw_token)
    except (InvalidToken, TokenError, AuthenticationFailed):
        return AnonymousUser()


class BearerTokenAuthMiddleware(BaseMiddleware):
    async def __call__(self, scope, receive, send):
        query = parse_qs((scope.get("query_string") or b"").decode())
        token = (query.get("token") or [None])[0]
        scope = dict(scope)
        scope["user"] = await _user_for_token(token) if token else AnonymousUser()
        return await super().__call__(scope, receive, send)
