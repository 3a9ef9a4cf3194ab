from __future__ import annotations

import os
from typing import Any, Dict

# Format used when a DataTransferObject serializes date and datetime values
date_format = os.getenv('FLUENTKIT_DTO_DATE_FORMAT', '%Y-%m-%d %H:%M:%S')

# Extra keyword arguments passed to json.dumps by to_json()
json_options: Dict[str, Any] = {
    'ensure_ascii': False,
}
