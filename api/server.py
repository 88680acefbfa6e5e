"""
HTTP API for the Resource Allocation Graph simulator.

Thin Flask layer over an AllocationEngine. State lives in memory for the
lifetime of the app; every route goes through the engine, which serialises
access with its own lock.
"""

from flask import Flask, jsonify, request
from flask_cors import CORS

from algorithms.allocation import AllocationEngine
from analysis.events import EventLog
from models.errors import (
    AllocationError,
    DuplicateProcess,
    DuplicateResource,
    InsufficientAllocation,
    InvalidCapacity,
    InvalidUnits,
    UnknownProcess,
    UnknownResource,
)
from utils import config

STATUS_CODES = {
    DuplicateProcess: 409,
    DuplicateResource: 409,
    InsufficientAllocation: 409,
    UnknownProcess: 404,
    UnknownResource: 404,
    InvalidCapacity: 422,
    InvalidUnits: 422,
}

ID_FIELDS = ("id", "process", "resource")


def _error(kind: str, message: str, status: int):
    return jsonify({"error": kind, "message": message}), status


def _payload(*fields):
    """Pull required fields from the JSON body, or return an error response."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, _error("InvalidRequest", "Request body must be a JSON object", 422)
    missing = [f for f in fields if data.get(f) is None]
    if missing:
        return None, _error("InvalidRequest", f"Missing field(s): {', '.join(missing)}", 422)
    bad_ids = [f for f in fields if f in ID_FIELDS and not isinstance(data[f], str)]
    if bad_ids:
        return None, _error("InvalidRequest", f"Field(s) must be strings: {', '.join(bad_ids)}", 422)
    return data, None


def create_app(engine: AllocationEngine = None) -> Flask:
    """
    Build the Flask app.

    Args:
        engine: Engine to serve; a fresh one is created if omitted

    Returns:
        Configured Flask application (engine available as app.config['ENGINE'])
    """
    if engine is None:
        engine = AllocationEngine(event_log=EventLog(max_events=config.EVENT_HISTORY))

    app = Flask(__name__)
    CORS(app)
    app.config['ENGINE'] = engine

    @app.errorhandler(AllocationError)
    def handle_allocation_error(error: AllocationError):
        return jsonify(error.to_dict()), STATUS_CODES.get(type(error), 400)

    @app.route('/processes', methods=['POST'])
    def add_process():
        """Create a process"""
        data, err = _payload('id')
        if err:
            return err
        engine.create_process(data['id'])
        return jsonify({"id": data['id']}), 201

    @app.route('/resources', methods=['POST'])
    def add_resource():
        """Create a resource with a fixed number of units"""
        data, err = _payload('id', 'totalUnits')
        if err:
            return err
        engine.create_resource(data['id'], data['totalUnits'])
        return jsonify({"id": data['id'], "totalUnits": data['totalUnits']}), 201

    @app.route('/requests', methods=['POST'])
    def request_resource():
        """Process requests units of a resource"""
        data, err = _payload('process', 'resource', 'units')
        if err:
            return err
        granted = engine.request(data['process'], data['resource'], data['units'])
        return jsonify({"granted": granted})

    @app.route('/releases', methods=['POST'])
    def release_resource():
        """Process releases units of a resource"""
        data, err = _payload('process', 'resource', 'units')
        if err:
            return err
        woken = engine.release(data['process'], data['resource'], data['units'])
        return jsonify({"released": data['units'], "granted": woken})

    @app.route('/deadlock', methods=['GET'])
    def get_deadlock():
        """Run deadlock detection on the current state"""
        cycle = engine.detect()
        return jsonify({"deadlocked": cycle is not None, "cycle": cycle or []})

    @app.route('/resources/<rid>/available', methods=['GET'])
    def get_available(rid):
        """Available units of one resource"""
        return jsonify({"available": engine.available_units(rid)})

    @app.route('/state', methods=['GET'])
    def get_state():
        return jsonify(engine.snapshot())

    @app.route('/log', methods=['GET'])
    def get_log():
        """Most recent engine events, oldest first"""
        limit = request.args.get('limit', default=config.LOG_ENDPOINT_LIMIT, type=int)
        return jsonify([e.to_dict() for e in engine.events.recent(limit)])

    @app.route('/reset', methods=['POST'])
    def reset():
        engine.reset()
        return jsonify({"success": True})

    return app
