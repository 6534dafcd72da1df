from .sample import Origin, Sample
from .delivery import CallbackToken, DeliveryContext, Scheduler
from .producers import AccelerometerProducer, Producer, SimulatedProducer
from .session import SessionState, StreamSessionManager
from .sinks import ChannelEventSink

__all__ = [
    "Origin",
    "Sample",
    "CallbackToken",
    "DeliveryContext",
    "Scheduler",
    "Producer",
    "AccelerometerProducer",
    "SimulatedProducer",
    "SessionState",
    "StreamSessionManager",
    "ChannelEventSink",
]
