"""
Service context extraction for log lines.

Identifies which process produced a log line when several demo instances
(e.g. two browser sessions hitting two workers) write to the same sink.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'isolation-lab')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    return f'{service_name}@{deploy_env}:{os.getpid()}'
