"""
Authentication Endpoints.

Password and magic-link sign-in, session inspection and sign-out. The
browser session travels in the ``sid`` cookie (or an ``Authorization:
Bearer`` header); ``x-auth-user`` picks one user of a multi-account session.
"""

from __future__ import annotations

from typing import Optional, Union
from urllib.parse import urlencode

from fastapi import APIRouter, Query, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from affine_cloud.core.errors import (
    AuthenticationRequired,
    EarlyAccessRequired,
    InvalidEmailToken,
    MailDeliveryFailed,
)
from affine_cloud.core.logging_config import get_logger
from affine_cloud.core.models.domain.enums import TokenType
from affine_cloud.core.models.io import CurrentUser, MagicLinkSent, SessionRead, SessionsRead, SignInCredential
from affine_cloud.server.core.config import settings
from affine_cloud.server.services.deps import (
    AuthServiceDep,
    TokenServiceDep,
    extract_session_id,
    extract_user_id,
)
from affine_cloud.server.services.users import normalize_email

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


def build_magic_link(token: str, email: str, redirect_uri: str) -> str:
    query = urlencode({"token": token, "email": email, "redirect_uri": redirect_uri})
    return f"{settings.external_url.rstrip('/')}/api/auth/magic-link?{query}"


def safe_redirect(redirect_uri: Optional[str]) -> str:
    """Only same-site redirects are followed; anything else lands on ``/``."""
    if not redirect_uri:
        return "/"
    if redirect_uri.startswith("/") and not redirect_uri.startswith("//"):
        return redirect_uri
    if redirect_uri.startswith(settings.external_url.rstrip("/") + "/"):
        return redirect_uri
    return "/"


@router.post(
    "/sign-in",
    response_model=None,
    summary="Sign In",
    description="Sign in with email and password, or request a magic link by email when no password is given.",
    responses={
        200: {"description": "Signed in (user returned) or magic link sent (email returned)"},
        400: {"description": "Invalid email or wrong credentials"},
        402: {"description": "Early access required"},
        500: {"description": "Mail delivery failed"},
    },
)
async def sign_in(
    credential: SignInCredential,
    request: Request,
    response: Response,
    auth: AuthServiceDep,
    tokens: TokenServiceDep,
    callback_url: str = Query(default="/", alias="callbackUrl"),
) -> Union[CurrentUser, MagicLinkSent]:
    """
    Sign in.

    - **email**: Email address of the account.
    - **password**: Optional password. Without it, a sign-in (or sign-up)
      link valid for a limited time is emailed instead.
    """
    email = normalize_email(credential.email)
    if not await auth.can_sign_in(email):
        raise EarlyAccessRequired()

    if credential.password:
        user = await auth.sign_in(email, credential.password)
        user_session = await auth.create_user_session(user, extract_session_id(request))
        auth.set_cookie(response, user_session.session_id)
        return user

    existing = await auth.users.find_user_by_email(email)
    token = await tokens.create_token(TokenType.SIGN_IN, email)
    link = build_magic_link(token, email, callback_url)

    result = await auth.send_sign_in_email(email, link, sign_up=existing is None)
    if result.rejected:
        logger.warning(f"Magic link mail to {email} was rejected")
        raise MailDeliveryFailed()
    return MagicLinkSent(email=email)


@router.get(
    "/magic-link",
    status_code=status.HTTP_302_FOUND,
    summary="Follow Magic Link",
    description="Verify an emailed sign-in token, sign the user in and redirect.",
    responses={
        302: {"description": "Signed in, redirecting to redirect_uri"},
        400: {"description": "Invalid or expired token"},
    },
)
async def magic_link(
    request: Request,
    auth: AuthServiceDep,
    tokens: TokenServiceDep,
    token: str,
    email: str,
    redirect_uri: str = "/",
) -> RedirectResponse:
    email = normalize_email(email)
    record = await tokens.verify_token(TokenType.SIGN_IN, token, credential=email)
    if record is None:
        raise InvalidEmailToken()

    user = await auth.users.fulfill_user(email)
    user_session = await auth.create_user_session(user, extract_session_id(request))

    response = RedirectResponse(safe_redirect(redirect_uri), status_code=status.HTTP_302_FOUND)
    auth.set_cookie(response, user_session.session_id)
    return response


@router.get(
    "/session",
    response_model=SessionRead,
    summary="Current Session",
    description="Return the signed-in user of the current browser session, or null. Never answers 401.",
)
async def current_session(request: Request, response: Response, auth: AuthServiceDep) -> SessionRead:
    """
    Get the current user.

    Sessions close to expiry are extended and the cookie is re-issued.
    """
    session_id = extract_session_id(request)
    if not session_id:
        return SessionRead()

    user_session = await auth.get_user_session(session_id, extract_user_id(request))
    if user_session is None:
        return SessionRead()

    if await auth.refresh_user_session_if_needed(user_session):
        auth.set_cookie(response, session_id)

    user = await auth.users.get_user(user_session.user_id)
    return SessionRead(user=CurrentUser.from_user(user) if user is not None else None)


@router.get(
    "/sessions",
    response_model=SessionsRead,
    summary="List Session Users",
    description="List every user signed in within the current browser session.",
)
async def list_sessions(request: Request, auth: AuthServiceDep) -> SessionsRead:
    session_id = extract_session_id(request)
    if not session_id:
        return SessionsRead()
    return SessionsRead(users=await auth.get_user_list(session_id))


@router.get(
    "/sign-out",
    summary="Sign Out",
    description="Sign one user (user_id) or every user out of the current browser session.",
    responses={
        200: {"description": "Signed out"},
        302: {"description": "Signed out, redirecting to redirect_uri"},
        401: {"description": "Not signed in"},
    },
)
async def sign_out(
    request: Request,
    auth: AuthServiceDep,
    user_id: Optional[str] = None,
    redirect_uri: Optional[str] = None,
) -> Response:
    session_id = extract_session_id(request)
    if not session_id or await auth.get_user(session_id) is None:
        raise AuthenticationRequired()

    remaining = await auth.sign_out(session_id, user_id)

    response: Response
    if redirect_uri:
        response = RedirectResponse(safe_redirect(redirect_uri), status_code=status.HTTP_302_FOUND)
    else:
        response = JSONResponse(content={})
    if remaining is None:
        auth.clear_cookie(response)
    return response
