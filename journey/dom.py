"""
Page Environment

A small model of the parts of a browser page the tracker reads: the current
location, referrer, viewport and a document-level event target. Host
applications (server-rendered pages, kiosks, test harnesses) keep it in sync
with what the visitor sees.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class Location:
    pathname: str = "/"


@dataclass
class Viewport:
    width: int = 1920
    height: int = 1080


@dataclass
class Element:
    """A clicked DOM element"""
    tag_name: str = "DIV"
    id: str = ""
    class_name: str = ""
    text_content: Optional[str] = None


@dataclass
class MouseEvent:
    target: Element
    client_x: int = 0
    client_y: int = 0
    type: str = "click"


Listener = Callable[[MouseEvent], None]


@dataclass
class Document:
    """
    Document-level event target plus page context

    Capture-phase listeners run before bubble-phase ones. A listener that
    raises is logged and the remaining listeners still run.
    """
    location: Location = field(default_factory=Location)
    viewport: Viewport = field(default_factory=Viewport)
    referrer: str = ""
    _listeners: list = field(default_factory=list, repr=False)

    def add_event_listener(self, event_type: str, listener: Listener, capture: bool = False):
        entry = (event_type, listener, capture)
        if entry not in self._listeners:
            self._listeners.append(entry)

    def remove_event_listener(self, event_type: str, listener: Listener, capture: bool = False):
        entry = (event_type, listener, capture)
        if entry in self._listeners:
            self._listeners.remove(entry)

    def listener_count(self, event_type: Optional[str] = None) -> int:
        return sum(1 for t, _, _ in self._listeners if event_type is None or t == event_type)

    def dispatch_event(self, event: MouseEvent):
        ordered = [e for e in self._listeners if e[2]] + [e for e in self._listeners if not e[2]]
        for event_type, listener, _ in ordered:
            if event_type != event.type:
                continue
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Unhandled error in {event.type} listener: {e}")

    def click(self, target: Element, x: int = 0, y: int = 0):
        """Simulate a user click on an element"""
        self.dispatch_event(MouseEvent(target=target, client_x=x, client_y=y))

    def navigate(self, pathname: str):
        """Client-side route change (no page reload)"""
        self.location.pathname = pathname
