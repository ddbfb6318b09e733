from .event_emitter import EventEmitter, EventListener


__all__ = (
    'EventEmitter',
    'EventListener',
)
