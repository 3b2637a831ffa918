import logging

import pytest


@pytest.fixture
def restore_logging():
    """Undo dictConfig side effects (root handlers, logger levels) after a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    loggers = {
        name: (lg.level, lg.propagate)
        for name, lg in logging.root.manager.loggerDict.items()
        if isinstance(lg, logging.Logger)
    }
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, (lvl, propagate) in loggers.items():
        lg = logging.getLogger(name)
        lg.setLevel(lvl)
        lg.propagate = propagate
