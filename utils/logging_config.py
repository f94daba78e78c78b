import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Access decisions get their own logger so they can be tuned independently
decision_logger = logging.getLogger('rbac.decisions')


def configure_logging(app):
    """
    Attach a stream handler to the root logger and set the configured level.

    Must run before ``app.logger`` is first accessed so Flask does not add
    its own default handler on top of ours.
    """
    level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO)

    root = logging.getLogger()
    if not any(getattr(h, '_rbac_handler', False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._rbac_handler = True
        root.addHandler(handler)
    root.setLevel(level)

    app.logger.setLevel(level)
    return app.logger
