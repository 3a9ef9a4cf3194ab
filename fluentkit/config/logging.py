from __future__ import annotations

import os

# Logging configuration for the fluentkit channel
channel = os.getenv('FLUENTKIT_LOG_CHANNEL', 'fluentkit')

level = os.getenv('FLUENTKIT_LOG_LEVEL', 'warning')

format = os.getenv('FLUENTKIT_LOG_FORMAT', '[%(asctime)s] %(levelname)s in %(name)s: %(message)s')

date_format = os.getenv('FLUENTKIT_LOG_DATE_FORMAT', '%Y-%m-%d %H:%M:%S')
