import json
import logging
import time

logger = logging.getLogger("pharma.audit")


def log_action(actor: str, action: str, metadata: dict = None):
    entry = {
        "timestamp": int(time.time()),
        "actor": actor,
        "action": action,
        "metadata": metadata or {},
    }

    logger.info(json.dumps(entry))
    return entry
