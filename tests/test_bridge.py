import json

from quizbrowser import bridge
from quizbrowser.bridge import ACTION_BINDING, MESSAGE_BINDING, NOTIFY_BINDING, bind_click, install_bridge


class RecordingPage:
    def __init__(self):
        self.exposed = {}
        self.init_scripts = []
        self.evaluated = []

    def expose_function(self, name, callback):
        self.exposed[name] = callback

    def add_init_script(self, script=None, path=None):
        self.init_scripts.append(script)

    def evaluate(self, expression, arg=None):
        self.evaluated.append((expression, arg))


class RecordingNode:
    def __init__(self):
        self.evaluated = []

    def evaluate(self, expression, arg=None):
        self.evaluated.append((expression, arg))


def test_install_exposes_bindings_and_script():
    page = RecordingPage()
    seen = []
    install_bridge(page, on_notify=seen.append, on_message=seen.append, on_action=seen.append)

    assert set(page.exposed) == {NOTIFY_BINDING, MESSAGE_BINDING, ACTION_BINDING}
    page.exposed[NOTIFY_BINDING]("mutation")
    assert seen == ["mutation"]

    assert len(page.init_scripts) == 1
    script = page.init_scripts[0]
    assert json.dumps(bridge.bridge_config()) in script
    assert page.evaluated == [(bridge.BRIDGE_JS, bridge.bridge_config())]


def test_binding_rejections_are_caught_in_page():
    # exposed bindings return promises
    for js in (bridge.BRIDGE_JS, bridge._BIND_CLICK_JS):
        assert "Promise.resolve(" in js
        assert ".catch(() => {})" in js


def test_bind_click_passes_action():
    node = RecordingNode()
    bind_click(node, "export")
    assert node.evaluated == [(bridge._BIND_CLICK_JS, {"binding": ACTION_BINDING, "action": "export"})]
