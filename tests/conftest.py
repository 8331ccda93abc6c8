import os
from pathlib import Path

import pytest


@pytest.fixture
def pty_pair():
    """A pseudo-terminal: the master fd plays the terminal emulator, the slave path is the tty."""

    master, slave = os.openpty()
    yield master, Path(os.ttyname(slave))
    os.close(master)
    os.close(slave)
