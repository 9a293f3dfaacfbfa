"""
Webhook Server

Flask application receiving GitHub App webhook events.
"""

import logging
from typing import Optional

from flask import Flask, request, jsonify

from . import __version__
from .api import TodoCheckerAPI
from .config import AppConfig
from .github.webhook import (
    EVENT_HEADER,
    LEGACY_SIGNATURE_HEADER,
    SIGNATURE_HEADER,
    EventAction,
    WebhookError,
    check_run_target,
    parse_event,
    route_event,
    verify_signature,
)
from .models.events import CheckRunRequest


logger = logging.getLogger(__name__)


def create_app(config: AppConfig, checker: Optional[TodoCheckerAPI] = None) -> Flask:
    """
    Create the webhook application.

    Args:
        config: Application configuration
        checker: TodoCheckerAPI instance; built from the configuration if omitted

    Returns:
        Flask app
    """
    app = Flask(__name__)
    checker = checker or TodoCheckerAPI(config)

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'todo-pr-checker',
            'version': __version__
        })

    @app.route('/', methods=['POST'])
    def handle_event():
        """Handle webhook events from GitHub."""
        payload = request.get_data()
        signature = request.headers.get(SIGNATURE_HEADER) or request.headers.get(LEGACY_SIGNATURE_HEADER, '')

        if not verify_signature(payload, signature, config.github.webhook_secret):
            logger.warning("Invalid webhook signature")
            return jsonify({'error': 'Invalid signature'}), 401

        event_type = request.headers.get(EVENT_HEADER, '')

        try:
            event = parse_event(payload)
            logger.debug(f"---- received event {event_type}")
            if event.action:
                logger.debug(f"----    action {event.action}")

            action = route_event(event_type, event, config.github.app_identifier)
        except WebhookError as e:
            return jsonify({'error': str(e)}), e.status_code

        if action is EventAction.CREATE_CHECK_RUN:
            full_repo_name, head_sha = check_run_target(event_type, event)
            checker.create_check_run(full_repo_name, head_sha)
            return jsonify({'status': 'check_run_created'}), 200

        if action is EventAction.RUN_CHECK:
            result = checker.run_check(CheckRunRequest.from_event(event))
            return jsonify({
                'status': 'completed',
                'conclusion': result.conclusion,
                'total_matches': result.total_matches,
            }), 200

        return '', 204

    return app
