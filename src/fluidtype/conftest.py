import pytest
import subprocess
import time
import socket
from contextlib import closing
import sys
from pathlib import Path
import httpx
from playwright.sync_api import sync_playwright

from fluidtype.model import Token, TypographyModel


# ##################################################################
# find free port
# binds to port 0 to let the os assign an available port
def find_free_port():
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ##################################################################
# body model
# the three-breakpoint scenario with a single body token
@pytest.fixture
def body_model():
    return TypographyModel(
        base_rem_px=16,
        tokens=[
            Token(
                name="body",
                sizes={"min": 16, "mid": 18, "max": 20},
                lh={"min": 1.4, "mid": 1.4, "max": 1.4},
            )
        ],
    )


# ##################################################################
# scale model
# a heading scale with mixed line-height conventions and growth factors
@pytest.fixture
def scale_model():
    return TypographyModel(
        base_rem_px=16,
        tokens=[
            Token(name="h1", sizes={"min": 32, "mid": 40, "max": 56}, lh={"min": 38, "mid": 48, "max": 64}, grow_factor_lg=1.5),
            Token(name="h2", sizes={"min": 24, "mid": 30, "max": 36}, lh={"min": 1.2, "mid": 1.2, "max": 1.15}),
            Token(name="body", sizes={"min": 16, "mid": 16, "max": 18}, lh={"min": 24, "mid": 24, "max": 28}),
            Token(name="caption", sizes={"min": 12, "mid": 12, "max": 12}, lh={"min": 1.3, "mid": 1.3, "max": 1.3}, grow_factor_lg=0),
        ],
    )


# ##################################################################
# server port fixture
# provides a free port for the test server session
@pytest.fixture(scope="session")
def server_port():
    return find_free_port()


# ##################################################################
# server fixture
# starts fastapi server as subprocess and yields url when ready
@pytest.fixture(scope="session")
def server(server_port):
    src_root = Path(__file__).parent.parent

    proc = subprocess.Popen(
        [
            sys.executable, "-m", "uvicorn",
            "fluidtype.server:app",
            "--host", "127.0.0.1",
            "--port", str(server_port),
        ],
        cwd=src_root,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )

    server_url = f"http://127.0.0.1:{server_port}"
    max_attempts = 30
    for _ in range(max_attempts):
        try:
            response = httpx.get(f"{server_url}/health", timeout=1.0)
            if response.status_code == 200:
                break
        except httpx.HTTPError:
            pass
        time.sleep(0.5)
    else:
        proc.terminate()
        raise RuntimeError(f"Server failed to start on port {server_port}")

    yield server_url

    proc.terminate()
    try:
        proc.wait(timeout=3)
    except subprocess.TimeoutExpired:
        proc.kill()
        proc.wait(timeout=2)


# ##################################################################
# shared browser fixture
# single chromium instance reused across browser tests, skipped when not installed
@pytest.fixture(scope="session")
def shared_browser():
    pw = None
    try:
        pw = sync_playwright().start()
        browser = pw.chromium.launch(headless=True)
    except Exception as e:
        if pw is not None:
            pw.stop()
        pytest.skip(f"chromium not available: {e}")
    yield browser
    browser.close()
    pw.stop()
