import simpy

from ..core.elevator import EventRecord


class MessageBroker:
    """
    Topic-based publish hub between the dispatch core and its observers.

    Every audit event written by the state machine is published here on
    'elevator/<id>/events'. Messages go to a single broadcast pipe as
    {'topic', 'message'} pairs so a recorder sees the whole stream in order.
    """
    def __init__(self, env: simpy.Environment, verbose: bool = True):
        """
        Args:
            env (simpy.Environment): SimPy environment
            verbose (bool): Print a line for every publish
        """
        self.env = env
        self.verbose = verbose
        self.broadcast_pipe = simpy.Store(self.env)

    @staticmethod
    def event_topic(elevator_id: int) -> str:
        return f"elevator/{elevator_id}/events"

    def put(self, topic: str, message):
        """Publish a message on a topic"""
        if self.verbose:
            print(f"{self.env.now:.2f} [Broker] Publish on '{topic}': {message}")
        return self.broadcast_pipe.put({'topic': topic, 'message': message})

    def publish_event(self, event: EventRecord):
        """Publish an audit event on its elevator's event topic"""
        return self.put(self.event_topic(event.elevator_id), event.to_dict())

    def get_broadcast_pipe(self) -> simpy.Store:
        return self.broadcast_pipe
