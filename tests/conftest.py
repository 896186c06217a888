from __future__ import annotations

import logging

import pytest

from histmark import HistogramNode, LinearScale


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo global logging configuration (e.g. ``histmark.logging.setup``) after each test."""
    root = logging.getLogger()
    manager = logging.Logger.manager
    saved_root = (root.level, list(root.handlers), list(root.filters), root.propagate)
    saved = {
        name: (lg.level, list(lg.handlers), lg.propagate, lg.disabled)
        for name, lg in manager.loggerDict.items()
        if isinstance(lg, logging.Logger)
    }
    yield
    root.setLevel(saved_root[0])
    root.handlers[:] = saved_root[1]
    root.filters[:] = saved_root[2]
    root.propagate = saved_root[3]
    for name, lg in list(manager.loggerDict.items()):
        if not isinstance(lg, logging.Logger):
            continue
        if name in saved:
            lg.level, handlers, lg.propagate, lg.disabled = saved[name]
            lg.handlers[:] = handlers
        else:
            lg.setLevel(logging.NOTSET)
            lg.handlers.clear()
            lg.propagate = True
            lg.disabled = False
    for lg in manager.loggerDict.values():
        if isinstance(lg, logging.Logger):
            lg._cache.clear()
    root._cache.clear()


@pytest.fixture
def x_scale():
    """Shared sample (x) scale."""
    return LinearScale(name="x")


@pytest.fixture
def y_scale():
    """Shared count (y) scale."""
    return LinearScale(name="y")


@pytest.fixture
def scales(x_scale, y_scale):
    return {"sample": x_scale, "count": y_scale}


@pytest.fixture
def make_node(scales):
    """Factory building histogram nodes on the shared scales."""

    def _make(**kwargs):
        kwargs.setdefault("scales", scales)
        return HistogramNode(**kwargs)

    return _make


@pytest.fixture
def eleven_node(make_node):
    """Integers 0..10 in five bins, the canonical example."""
    return make_node(sample=list(range(11)), bins=5, model_id="hist")
