"""
Event system for the casinojack engine.

This package provides the event bus that transitions and the table engine
publish round activity on.
"""

from casinojack.events.emitter import (
    EventEmitter,
    EventBus,
    EventPriority,
    EngineEventType,
)

__all__ = ["EventEmitter", "EventBus", "EventPriority", "EngineEventType"]
