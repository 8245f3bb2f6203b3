"""Flask application factory for the heap web view.

The ``create_app`` function builds a heap from the app config
(``HEAP_SIZE`` and ``HEAP_STRATEGY``) and returns a Flask app that
renders its layout and accepts allocate, release, and compact requests.

Handles cannot travel over HTTP, so clients refer to allocations by
the handle's serial number; the app keeps the serial → handle table.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict
from typing import Any

from flask import Flask, Response, jsonify, request

from py_heap.logging import Logger
from py_heap.memory.errors import InvalidSizeError, OutOfMemoryError
from py_heap.memory.handle import Handle
from py_heap.memory.heap import DEFAULT_HEAP_SIZE, Heap, Strategy
from py_heap.memory.render import format_bar, format_table
from py_heap.memory.stats import summarize

_HTTP_BAD_REQUEST = 400
_HTTP_CONFLICT = 409


def create_app(config: Mapping[str, Any] | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Optional overrides for ``HEAP_SIZE`` and ``HEAP_STRATEGY``
            (and any other Flask setting).

    Returns:
        A configured Flask application ready to serve.

    """
    app = Flask(__name__)
    app.config.update(HEAP_SIZE=DEFAULT_HEAP_SIZE, HEAP_STRATEGY=Strategy.BEST_FIT.value)
    if config is not None:
        app.config.update(config)

    logger = Logger()
    heap = Heap(size=app.config["HEAP_SIZE"], strategy=app.config["HEAP_STRATEGY"], logger=logger)
    handles: dict[int, Handle] = {}

    @app.route("/")
    def index() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Render the layout as plain text."""
        layout = heap.layout()
        text = f"{heap.strategy} heap, {heap.total_size} cells\n\n{format_table(layout)}\n\n{format_bar(layout)}\n"
        return Response(text, mimetype="text/plain")

    @app.route("/api/layout")
    def layout() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the layout and its summary.

        Returns:
            JSON with ``strategy``, ``size``, ``regions`` and ``summary``.

        """
        entries = heap.layout()
        regions = [{"start": e.start, "length": e.length, "status": str(e.status)} for e in entries]
        return jsonify(
            {
                "strategy": str(heap.strategy),
                "size": heap.total_size,
                "regions": regions,
                "summary": asdict(summarize(entries)),
            }
        )

    @app.route("/api/log")
    def log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the event log, oldest first."""
        return jsonify({"entries": [str(entry) for entry in logger.entries]})

    @app.route("/api/allocate", methods=["POST"])
    def allocate() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Allocate cells.

        Expects JSON body: ``{"size": n}``

        Returns:
            JSON with ``handle``, ``address`` and ``size``.

        """
        data = request.get_json(silent=True)
        if data is None or "size" not in data:
            return jsonify({"error": "Missing 'size' field"}), _HTTP_BAD_REQUEST
        try:
            handle = heap.allocate(data["size"])
        except InvalidSizeError as e:
            return jsonify({"error": str(e)}), _HTTP_BAD_REQUEST
        except OutOfMemoryError as e:
            return jsonify({"error": str(e)}), _HTTP_CONFLICT
        handles[handle.serial] = handle
        return jsonify({"handle": handle.serial, "address": handle.address, "size": data["size"]})

    @app.route("/api/release", methods=["POST"])
    def release() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Release an allocation.

        Expects JSON body: ``{"handle": id}``

        """
        data = request.get_json(silent=True)
        if data is None or "handle" not in data:
            return jsonify({"error": "Missing 'handle' field"}), _HTTP_BAD_REQUEST
        serial = data["handle"]
        handle = handles.pop(serial, None) if isinstance(serial, int) else None
        if handle is None:
            return jsonify({"error": f"Unknown handle {data['handle']!r}"}), _HTTP_BAD_REQUEST
        heap.release(handle)
        return jsonify({"released": data["handle"]})

    @app.route("/api/compact", methods=["POST"])
    def compact() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Compact the heap and report every move."""
        moves = heap.compact()
        return jsonify(
            {
                "moves": [
                    {
                        "handle": m.handle.serial,
                        "source": m.source,
                        "destination": m.destination,
                        "size": m.size,
                    }
                    for m in moves
                ]
            }
        )

    return app
