"""
Helpers para escribir las cookies de sesión y CSRF.
"""
from fastapi import Response

from app.settings import Settings

def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
    )

def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
    )

def set_csrf_cookie(response: Response, token: str, settings: Settings) -> None:
    # Legible desde JS: el cliente la copia en la cabecera x-csrf-token
    response.set_cookie(
        key=settings.CSRF_COOKIE_NAME,
        value=token,
        max_age=settings.CSRF_MAX_AGE_SECONDS,
        path="/",
        httponly=False,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
    )

def clear_csrf_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(key=settings.CSRF_COOKIE_NAME, path="/", secure=settings.COOKIE_SECURE, samesite="strict")
