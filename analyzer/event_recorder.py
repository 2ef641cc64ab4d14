import re
import json
from datetime import datetime


class EventRecorder:
    """
    Listens to the broker's broadcast pipe as an independent "recorder".

    Keeps every audit event that crosses the broker, a per-elevator floor
    trajectory built from state_update events, and writes the whole stream
    as JSON Lines for offline inspection.
    """
    EVENT_TOPIC = re.compile(r'elevator/(\d+)/events')

    def __init__(self, env, broadcast_pipe):
        self.env = env
        self.broadcast_pipe = broadcast_pipe
        self.event_log = []  # events in arrival order
        self.elevator_trajectories = {}  # {elevator_id: [(time, floor), ...]}
        self.simulation_metadata = {}

    def set_simulation_metadata(self, metadata):
        """
        Set metadata written as the first line of the log.

        Args:
            metadata (dict): Run configuration (floors, elevators, timings, ...)
        """
        self.simulation_metadata = {
            "format_version": "1.0",
            "timestamp": datetime.now().isoformat(),
            "config": metadata
        }

    def start_listening(self):
        """SimPy process: consume the broadcast pipe forever."""
        while True:
            data = yield self.broadcast_pipe.get()
            self.record(data.get('topic', ''), data.get('message', {}))

    def record(self, topic, message):
        """Record one broadcast message; non-event topics are ignored."""
        match = self.EVENT_TOPIC.fullmatch(topic)
        if not match:
            return
        elevator_id = int(match.group(1))
        self.event_log.append(message)

        details = message.get('details', {})
        if message.get('event_type') == 'state_update':
            trajectory = self.elevator_trajectories.setdefault(elevator_id, [])
            point = (message.get('timestamp'), details.get('current_floor'))
            # Skip duplicates of the last data point
            if not trajectory or trajectory[-1] != point:
                trajectory.append(point)

    def event_counts(self):
        """Number of recorded events per event type"""
        counts = {}
        for event in self.event_log:
            counts[event.get('event_type')] = counts.get(event.get('event_type'), 0) + 1
        return counts

    def print_summary(self):
        print("\n" + "=" * 60)
        print("   EVENT SUMMARY")
        print("=" * 60)
        for event_type, count in sorted(self.event_counts().items()):
            print(f"  {event_type:<14} {count:>6}")
        for elevator_id, trajectory in sorted(self.elevator_trajectories.items()):
            floors = [floor for _, floor in trajectory]
            print(f"  Elevator {elevator_id}: {len(trajectory)} updates, floors visited {min(floors)}-{max(floors)}")
        print("=" * 60)

    def save_event_log(self, filename='dispatch_log.jsonl'):
        """
        Save the event log to a JSON Lines file.

        Args:
            filename (str): Name of the output file (default: 'dispatch_log.jsonl')
        """
        print(f"\nSaving event log to {filename}...")

        with open(filename, 'w', encoding='utf-8') as f:
            if self.simulation_metadata:
                f.write(json.dumps({
                    "type": "metadata",
                    "data": self.simulation_metadata
                }) + '\n')

            for event in self.event_log:
                f.write(json.dumps(event, ensure_ascii=False) + '\n')

        print(f"Event log saved: {len(self.event_log)} events written to {filename}")
        return filename
