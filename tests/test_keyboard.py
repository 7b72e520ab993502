from __future__ import annotations

import os

import pytest

from zenplotter import keyboard as kb

posix_only = pytest.mark.skipif(os.name == "nt", reason="select() on pipes is POSIX only")


def test_normalize():
    assert kb.normalize("q") == "Q"
    assert kb.normalize("7") == "7"
    assert kb.normalize("\x03") is None
    assert kb.normalize("") is None


@pytest.fixture
def pipe_keyboard():
    read_fd, write_fd = os.pipe()
    stream = os.fdopen(read_fd, "rb", buffering=0)
    yield kb.ConsoleKeyboard(stream), write_fd
    stream.close()
    os.close(write_fd)


@posix_only
def test_nothing_pending(pipe_keyboard):
    keys, _ = pipe_keyboard
    assert not keys.key_pending()
    assert keys.read_key() is None


@posix_only
def test_reads_characters_and_arrows(pipe_keyboard):
    keys, write_fd = pipe_keyboard
    os.write(write_fd, b"p\x1b[A\x1b[D3")
    assert keys.key_pending()
    assert keys.read_key() == "P"
    assert keys.read_key() == kb.UP
    assert keys.read_key() == kb.LEFT
    assert keys.read_key() == "3"
    assert not keys.key_pending()


@posix_only
def test_context_manager_leaves_pipes_alone(pipe_keyboard):
    keys, _ = pipe_keyboard
    with keys as entered:
        assert entered is keys
