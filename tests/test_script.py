import pytest

from geopick.widget.script import load_script


def test_load_script(tmp_path):
    path = tmp_path / "session.yaml"
    path.write_text(
        "widget:\n"
        "  radius_meters: 2000\n"
        "geolocation:\n"
        "  error_code: 1\n"
        "steps:\n"
        "  - click: [40.73061, -73.935242]\n"
        "  - drag: [40.74, -73.99]\n"
        "  - radius: 8000\n"
        "  - wait: 0\n"
        "  - geolocate: true\n"
        "  - clear: true\n"
        "  - teardown: true\n",
        encoding="utf-8",
    )
    script = load_script(path)
    assert [step.action for step in script.steps] == [
        "click", "drag", "radius", "wait", "geolocate", "clear", "teardown",
    ]
    assert script.steps[0].click == (40.73061, -73.935242)
    assert script.widget == {"radius_meters": 2000}
    assert script.geolocation.error_code == 1


@pytest.mark.parametrize(
    "body",
    [
        "steps:\n  - click: [40.0, -73.0]\n    clear: true\n",
        "steps:\n  - {}\n",
        "steps:\n  - click: [95.0, 0.0]\n",
        "steps:\n  - radius: -5\n",
        "geolocation:\n  latitude: 10.0\nsteps: []\n",
        "widget: {}\n",
    ],
)
def test_invalid_scripts(tmp_path, body):
    path = tmp_path / "bad.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError):
        load_script(path)
