"""
Driver Factory - WebDriver creation for test runs.

Creates a Chrome WebDriver with the usual stability options and pairs it
with a ``RunContext`` so that every run owns its driver, its active scope
marker and its reference tree.
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions

from framescope.core.config import RunConfig
from framescope.core.scope import RunContext

# Type alias for driver - can be extended to support other browsers
WebDriverType = webdriver.Chrome


def create_driver(
    headless: bool = False,
    profile_path: Optional[str] = None,
    window_size: Optional[Tuple[int, int]] = (1920, 1080),
) -> WebDriverType:
    """
    Create a Chrome WebDriver.

    Args:
        headless: Run browser in headless mode
        profile_path: Path to browser profile for session persistence
        window_size: Initial window size, or None for the browser default

    Example:
        >>> driver = create_driver(headless=True)
        >>> driver.get("https://example.com")
    """
    options = ChromeOptions()

    if headless:
        options.add_argument("--headless=new")

    if profile_path:
        options.add_argument(f"--user-data-dir={profile_path}")

    if window_size:
        options.add_argument(f"--window-size={window_size[0]},{window_size[1]}")

    # Common stability options
    options.add_argument("--disable-extensions")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--disable-gpu")
    options.add_experimental_option("excludeSwitches", ["enable-automation"])

    return webdriver.Chrome(options=options)


@contextmanager
def open_run(config: Optional[RunConfig] = None, driver: Optional[WebDriverType] = None) -> Iterator[RunContext]:
    """
    Open a test run: driver + run context. The driver is quit on exit.

    Example:
        >>> with open_run(RunConfig(base_url="http://localhost:8000")) as run:
        ...     browser = run.browser()
        ...     browser.navigate_to_url()
    """
    config = config or RunConfig.from_env()
    if driver is None:
        driver = create_driver(headless=config.headless)
    try:
        run = RunContext(driver, config)
        if config.page_load_timeout_s is not None or config.implicit_wait_s is not None:
            run.browser().set_timeouts(config.page_load_timeout_s, config.implicit_wait_s)
        yield run
    finally:
        driver.quit()
