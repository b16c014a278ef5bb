#!/usr/bin/env python3
"""
Frame Queries Example
=====================

This example shows how element references remember the frame they were
found in. Elements from the page and from an iframe can be used in any
order; the run switches the driver into the right document for each call.

Usage:
    python examples/frame_queries.py
"""

from urllib.parse import quote

from framescope import RunConfig
from framescope.core.driver_factory import open_run

FRAME_DOC = "<p id='frame2_text'>Hello from the frame</p>"
PAGE = (
    "<div id='top'><span id='child'>Hello from the page</span></div>"
    f"<iframe id='topframe' srcdoc=\"{FRAME_DOC}\"></iframe>"
)


def main():
    """Query the top document and an iframe alternately."""

    print("=" * 60)
    print("🖼️ framescope - Frame Queries Example")
    print("=" * 60)
    print()

    config = RunConfig(headless=False, action_wait_ms=250)

    with open_run(config) as run:
        browser = run.browser()
        browser.navigate_to_url("data:text/html;charset=utf-8," + quote(PAGE))

        # Found in the top document
        top = browser.first("#top")

        # Entering a frame returns a new scope; the driver is now inside it
        frame = browser.enter_frame("#topframe")
        frame.wait_for(lambda: frame.first_or_default("#frame2_text") is not None,
                       message="Frame content never loaded.")
        print(f"Frame text: {frame.first('#frame2_text').get_text()}")

        # Back to the top document without any explicit switch_to call
        child = top.first("#child")
        print(f"Page text:  {child.get_text()}")
        print(f"Selector:   {child.full_selector}")

        # And into the frame again
        print(f"Frame path: {frame.frame_path}")
        print(f"Frame text: {frame.first('#frame2_text').get_text()}")


if __name__ == "__main__":
    main()
