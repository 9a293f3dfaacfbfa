#!/usr/bin/env python3
"""
Todo PR Checker Server

Runs the GitHub App webhook server.
"""

from todo_pr_checker.config import ConfigManager
from todo_pr_checker.server import create_app


config_manager = ConfigManager()
config = config_manager.config
app = create_app(config)

if __name__ == '__main__':
    print("🚀 Starting Todo PR Checker Server...")
    print(f"📍 Server will be available at: http://{config.server.host}:{config.server.port}")
    print("📋 Endpoints:")
    print("   - Health Check: GET /health")
    print("   - Webhook Events: POST /")

    app.run(
        host=config.server.host,
        port=config.server.port,
        debug=config.debug
    )
