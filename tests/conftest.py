from __future__ import annotations

import pytest

from tests.utils.fakes import ScriptedKeyboard
from zenplotter.config import PlotterSettings
from zenplotter.controller import PlotterController
from zenplotter.device import MockSerialLink


@pytest.fixture
def settings() -> PlotterSettings:
    return PlotterSettings(command_delay_s=0.0)


@pytest.fixture
def keyboard() -> ScriptedKeyboard:
    return ScriptedKeyboard()


@pytest.fixture
def link() -> MockSerialLink:
    return MockSerialLink()


@pytest.fixture
def controller(settings, link, keyboard):
    ctrl = PlotterController(settings, link=link, keyboard=keyboard)
    assert ctrl.open()
    yield ctrl
    ctrl.close()
