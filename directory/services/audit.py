import logging
from typing import Optional, Any, Dict

audit_logger = logging.getLogger('directory.audit')


def log_action(*, user: Optional[dict], action: str, object_type: Optional[str]=None, object_id: Optional[str]=None, detail: Optional[Dict[str, Any]]=None) -> None:
    audit_logger.info(
        'action=%s user=%s object=%s:%s detail=%s',
        action,
        (user or {}).get('email') or (user or {}).get('_id') or '-',
        object_type or '-', object_id or '-',
        detail or {},
    )
