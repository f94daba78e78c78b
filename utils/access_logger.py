# utils/access_logger.py

import logging
from datetime import datetime, timezone

from models.access_log import AccessLog
from extensions import db

logger = logging.getLogger(__name__)


def log_action(user_id, action, target, details=None):
    """
    Enregistre une action dans le journal d'audit

    Args:
        user_id (int): ID de l'utilisateur qui effectue l'action
        action (str): Type d'action (voir AccessLog.ACTION_TYPES)
        target (str): Cible de l'action, ex: "role:editor"
        details (str, optional): Détails supplémentaires

    Note: le commit est fait par la fonction appelante
    """
    log_target = f"{target} - {details}" if details else target
    if len(log_target) > 255:
        log_target = log_target[:252] + "..."

    db.session.add(AccessLog(
        user_id=user_id,
        action=action,
        target=log_target,
        timestamp=datetime.now(timezone.utc)
    ))
    logger.info("Audit: user_id=%s action=%s target=%s", user_id, action, log_target)
