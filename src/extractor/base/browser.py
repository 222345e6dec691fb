"""Capture a PageContext from a live botasaurus browser session."""

import logging
from collections.abc import Iterable

from botasaurus.browser import Driver

from .context import PageContext

logger = logging.getLogger(__name__)

# Serializes one window global, null when absent or not serializable
_GLOBAL_SNAPSHOT_JS = """
const name = %s;
try {
    if (!Object.prototype.hasOwnProperty.call(window, name)) {
        return null;
    }
    return JSON.parse(JSON.stringify(window[name]));
} catch (e) {
    return null;
}
"""

# Same-origin frames carry their markup, cross-origin frames a null html
_FRAMES_SNAPSHOT_JS = """
const frames = [];
document.querySelectorAll('iframe').forEach((frame) => {
    let html = null;
    let readyState = 'complete';
    try {
        if (frame.contentDocument !== null) {
            html = frame.contentDocument.documentElement.outerHTML;
            readyState = frame.contentDocument.readyState;
        }
    } catch (e) {
        html = null;
    }
    frames.push({id: frame.id, src: frame.src, html: html, readyState: readyState});
});
return frames;
"""


def capture_page_context(
    driver: Driver,
    script_globals: Iterable[str] = (),
    debug: bool = False,
) -> PageContext:
    """Snapshot the driver's current page.

    Args:
    ----
        driver: Botasaurus browser driver positioned on the page
        script_globals: Names of window globals to serialize
        debug: Debug flag carried by the context

    Returns:
    -------
        PageContext holding the page, its globals and its frames

    """
    url = driver.current_url
    ready_state = driver.run_js("return document.readyState;") or "loading"

    script_state = {}
    for name in script_globals:
        value = driver.run_js(_GLOBAL_SNAPSHOT_JS % _js_string(name))
        if value is not None:
            script_state[name] = value

    frames: dict[str, PageContext | None] = {}
    for frame in driver.run_js(_FRAMES_SNAPSHOT_JS) or []:
        key = frame.get("id") or frame.get("src")
        if not key:
            continue
        if frame.get("html") is None:
            frames[key] = None
        else:
            frames[key] = PageContext.from_html(
                url=frame.get("src") or url,
                html=frame["html"],
                ready_state=frame.get("readyState", "complete"),
                debug=debug,
            )

    logger.debug(
        f"Captured {url}: state={ready_state}, globals={sorted(script_state)}, "
        f"frames={len(frames)}"
    )
    return PageContext.from_html(
        url=url,
        html=driver.page_html,
        ready_state=ready_state,
        script_state=script_state,
        frames=frames,
        debug=debug,
    )


def _js_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"
