"""Browser-facing view of a heap.

This package provides a Flask application that shows a heap's layout
and lets a client drive it over HTTP.  It is an **optional** extra —
install with::

    pip install py-heap[web]

The ``create_app`` factory in ``app.py`` builds one heap and serves:

- ``GET /`` — plain-text table and strip of the current layout.
- ``GET /api/layout`` — the layout and its summary as JSON.
- ``GET /api/log`` — the allocation event log.
- ``POST /api/allocate`` — allocate ``{"size": n}`` cells.
- ``POST /api/release`` — release ``{"handle": id}``.
- ``POST /api/compact`` — compact the heap.
"""
