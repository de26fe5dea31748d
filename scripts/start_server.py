#!/usr/bin/env python3
"""
Content Dedup Server Startup Script

This script starts the server using configuration from config.json
(or the file named by CONTENT_DEDUP_CONFIG).
"""

import uvicorn

from content_dedup.config import Config


def main():
    """Start the content dedup server with configuration"""
    config = Config()
    server_config = config.get_server_config()

    host = server_config.get('host', '127.0.0.1')
    port = server_config.get('port', 8080)

    print("Starting Content Dedup Server")
    print(f"Configuration loaded from: {config.config_path}")
    print(f"Similarity threshold: {config.get('deduplication', 'similarity_threshold')}")
    print(f"Server starting on: http://{host}:{port}")
    print("=" * 60)

    uvicorn.run(
        "content_dedup.main:get_app",
        factory=True,
        host=host,
        port=port,
        reload=True,
        log_level=str(config.get('logging', 'level', default='info')).lower()
    )


if __name__ == "__main__":
    main()
