"""
GitHub Webhook Handling

Signature verification, payload parsing and routing of the events the
app reacts to.
"""

import hmac
import json
import hashlib
import logging
from enum import Enum
from typing import Optional, Tuple

from pydantic import ValidationError

from ..models.events import WebhookEvent


logger = logging.getLogger(__name__)


SIGNATURE_HEADER = 'X-Hub-Signature-256'
LEGACY_SIGNATURE_HEADER = 'X-Hub-Signature'
EVENT_HEADER = 'X-GitHub-Event'


class WebhookError(Exception):
    """Webhook request that cannot be processed"""
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class EventAction(Enum):
    """What the app does in response to an event."""
    CREATE_CHECK_RUN = "create_check_run"
    RUN_CHECK = "run_check"
    IGNORE = "ignore"


def verify_signature(payload: bytes, signature: str, secret: str) -> bool:
    """
    Verify GitHub webhook signature.

    Args:
        payload: Raw request body
        signature: `sha256=<hex>` (or legacy `sha1=<hex>`) header value
        secret: Webhook secret from GitHub App settings

    Returns:
        True if signature is valid
    """
    if not signature or not secret or '=' not in signature:
        return False

    method, their_digest = signature.split('=', 1)
    if method not in ('sha256', 'sha1'):
        return False

    our_digest = hmac.new(secret.encode(), payload, getattr(hashlib, method)).hexdigest()
    return hmac.compare_digest(our_digest, their_digest)


def parse_event(payload: bytes) -> WebhookEvent:
    """
    Parse and validate a webhook body.

    Raises:
        WebhookError: If the body is not JSON or lacks a valid repository
    """
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.debug(f"Invalid JSON ({e})")
        raise WebhookError("Invalid JSON payload")

    try:
        return WebhookEvent.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Invalid webhook payload: {e}")
        raise WebhookError("Invalid webhook payload")


def route_event(event_type: str, event: WebhookEvent, app_id: Optional[int]) -> EventAction:
    """
    Decide how to react to an event.

    - `pull_request` opened: create a queued check run
    - `check_suite` requested/rerequested with a pull request: create a check run
    - `check_run` created/rerequested with a pull request: run the check

    Raises:
        WebhookError: For non pull request events sent for another app
    """
    if event_type != 'pull_request' and event.app_id_for(event_type) != app_id:
        raise WebhookError(f"Event '{event_type}' is not meant for this app")

    if event_type == 'pull_request' and event.action == 'opened' and event.pull_request:
        return EventAction.CREATE_CHECK_RUN

    if (
        event_type == 'check_suite'
        and event.action in ('requested', 'rerequested')
        and event.check_suite
        and event.check_suite.pull_requests
    ):
        return EventAction.CREATE_CHECK_RUN

    if (
        event_type == 'check_run'
        and event.action in ('created', 'rerequested')
        and event.check_run
        and event.check_run.pull_requests
    ):
        return EventAction.RUN_CHECK

    return EventAction.IGNORE


def check_run_target(event_type: str, event: WebhookEvent) -> Tuple[str, str]:
    """Repository and head SHA a new check run should be attached to."""
    if event_type == 'pull_request':
        head_sha = event.pull_request.head.sha
    else:
        head_sha = getattr(event, event_type).head_sha
    return event.repository.full_name, head_sha
