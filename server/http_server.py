#!/usr/bin/env python3
"""
HTTP Server for the Elevator Dispatch Service
Exposes call, status and audit-log endpoints over an ElevatorService
"""
import traceback

from flask import Flask, jsonify, request
from flask_cors import CORS

from controller.service import ElevatorService


def _is_floor_number(value):
    # bool is an int subclass; JSON true/false are not floors
    return isinstance(value, int) and not isinstance(value, bool)


def create_app(service: ElevatorService) -> Flask:
    """
    Build the Flask application

    Args:
        service: ElevatorService every route delegates to
    """
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes
    app.config['ELEVATOR_SERVICE'] = service

    @app.route('/api/elevator/call', methods=['POST'])
    def call_elevator():
        """
        Call an elevator from one floor to another
        Body: {"start_floor": int, "end_floor": int}
        202 on dispatch, 400 on invalid input or rejected call
        """
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        start_floor = body.get('start_floor')
        end_floor = body.get('end_floor')

        if not _is_floor_number(start_floor) or not _is_floor_number(end_floor):
            return jsonify({'error': 'Start and end floors must be numbers.'}), 400

        try:
            result = service.call_elevator(start_floor, end_floor)
        except Exception:
            traceback.print_exc()
            return jsonify({'error': 'Internal server error.'}), 500

        if result['success']:
            return jsonify(result), 202
        return jsonify({'error': result['message']}), 400

    @app.route('/api/elevator/status')
    def elevator_status():
        """
        Real-time status of the fleet
        Query params:
            - elevator_id: optional, restricts the result to one elevator
        """
        raw_id = request.args.get('elevator_id')
        try:
            if raw_id is None or raw_id == '':
                status = service.get_elevator_status()
            else:
                try:
                    elevator_id = int(raw_id)
                except ValueError:
                    return jsonify([]), 200
                status = service.get_elevator_status(elevator_id)
        except Exception:
            traceback.print_exc()
            return jsonify({'error': 'Internal server error.'}), 500

        return jsonify(status), 200

    @app.route('/api/elevator/logs')
    def elevator_logs():
        """Audit event trail and elevator read log, oldest first"""
        try:
            logs = service.get_logs()
        except Exception:
            traceback.print_exc()
            return jsonify({'error': 'Internal server error.'}), 500
        return jsonify(logs), 200

    return app


def run_server(service: ElevatorService, host='127.0.0.1', port=3000, debug=False):
    """Run the Flask server with the simulation clock ticking in the background"""
    app = create_app(service)
    print(f"Starting HTTP server on http://{host}:{port}")
    print(f"API endpoints:")
    print(f"  - POST /api/elevator/call")
    print(f"  - GET  /api/elevator/status?elevator_id=<id>")
    print(f"  - GET  /api/elevator/logs")

    service.start_clock()
    try:
        app.run(host=host, port=port, debug=debug, threaded=True, use_reloader=False)
    finally:
        service.stop_clock()
