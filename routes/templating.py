"""Jinja2 page templates shared by the HTML routes."""

import os

from fastapi.templating import Jinja2Templates

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

templates = Jinja2Templates(directory=TEMPLATE_DIR)

LOGIN_ERRORS = {
    "oauth_failed": "Google sign-in failed. Please try again.",
    "oauth_not_configured": "Google sign-in is not configured on this server.",
    "email_failed": "We could not send your verification code. Please try again.",
}
