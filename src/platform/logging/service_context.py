"""
Service identification attached to every log line.

Scheduler instances and API replicas run the same code, so each line carries
`<service>@<env>:<host>/<pid>` to tell them apart.
"""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'showtime-reservation')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    host = os.getenv('HOSTNAME') or socket.gethostname()
    return f'{service_name}@{deploy_env}:{host[:12]}/{os.getpid()}'
