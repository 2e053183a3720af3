"""Forwarding of live page input events into a selection controller."""

from typing import Any

from playwright.async_api import JSHandle, Page

from ..logging import get_logger
from ..selection.controller import SelectionController
from ..selection.events import SelectionEvent
from .interfaces import FLOATING_TOOLBAR, TOOL_MARKER_ATTRIBUTE
from .playwright_surface import handles_from_array

logger = get_logger(__name__)

BINDING_NAME = "__pixelcheckEvent"

_LISTEN = """([binding, attribute, toolbar]) => {
    if (window.__pixelcheckListening) return;
    window.__pixelcheckListening = true;
    const send = (event) => {
        const path = event.composedPath ? event.composedPath() : [];
        const elements = path.filter((node) => node instanceof Element);
        window[binding]({
            type: event.type,
            clientX: event.clientX || 0,
            clientY: event.clientY || 0,
            button: event.button || 0,
            key: event.key || null,
            target: event.target instanceof Element ? event.target : null,
            path: elements,
            onToolbar: elements.some((el) => el.getAttribute(attribute) === toolbar),
        });
    };
    const pointer = ['pointermove', 'pointerdown', 'pointerup', 'click', 'contextmenu'];
    for (const type of pointer) {
        window.addEventListener(type, (event) => {
            if (type === 'contextmenu') event.preventDefault();
            send(event);
        }, true);
    }
    window.addEventListener('keydown', send, true);
    window.addEventListener('scroll', send, true);
    window.addEventListener('resize', send);
}"""

_SCALARS = """(payload) => ({
    type: payload.type,
    clientX: payload.clientX,
    clientY: payload.clientY,
    button: payload.button,
    key: payload.key,
    onToolbar: payload.onToolbar,
})"""


class PageEventBridge:
    """Delivers page events, with element handles for target and composed
    path, to ``controller.handle_event``."""

    def __init__(self, page: Page, controller: SelectionController) -> None:
        self.page = page
        self.controller = controller
        self.delivered = 0
        self._bound = False

    async def attach(self) -> None:
        if not self._bound:
            await self.page.expose_binding(BINDING_NAME, self._on_event, handle=True)
            self._bound = True
        await self.page.evaluate(_LISTEN, [BINDING_NAME, TOOL_MARKER_ATTRIBUTE, FLOATING_TOOLBAR])
        logger.debug("event_bridge_attached", url=self.page.url)

    async def _on_event(self, source: Any, payload: JSHandle) -> None:
        data = await payload.evaluate(_SCALARS)
        target = (await payload.get_property("target")).as_element()
        path = await handles_from_array(await payload.get_property("path"))
        event = SelectionEvent.from_dict(data, target=target, path=tuple(path))

        await self.controller.handle_event(event)
        if data.get("onToolbar") and data.get("type") in ("pointerdown", "click"):
            self.controller.notify_toolbar_interaction()
        self.delivered += 1
