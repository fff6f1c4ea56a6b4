import json

from georadius import cli
from georadius.core.errors import GeocodeNotFound
from georadius.core.geo import Coordinate


def test_cli_confirm_json(capsys):
    code = cli.main(["confirm", "--lat", "51.5072", "--lon", "-0.1276", "--radius", "5000.4", "--json"])
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["deep_link_uri"] == "myapp://location-picker?lat=51.5072&lng=-0.1276&radius=5000"


def test_cli_confirm_text_clamps_radius(capsys):
    assert cli.main(["confirm", "--lat", "0", "--lon", "0", "--radius", "-5"]) == 0
    out = capsys.readouterr().out
    assert "Radius: 100m" in out
    assert "Deep Link URL: myapp://location-picker?lat=0&lng=0&radius=100" in out


def test_cli_circle_geojson(capsys):
    assert cli.main(["circle", "--lat", "10", "--lon", "20", "--radius", "1000", "--points", "6", "--geojson"]) == 0
    data = json.loads(capsys.readouterr().out)
    ring = data["features"][0]["geometry"]["coordinates"][0]
    assert len(ring) == 7


def test_cli_circle_text(capsys):
    assert cli.main(["circle", "--lat", "10", "--lon", "20", "--radius", "2500"]) == 0
    out = capsys.readouterr().out
    assert "Radius: 2.50 km" in out
    assert "Polygon: 64 vertices" in out


class _StubGeocoder:
    def __init__(self, settings) -> None:
        pass

    async def geocode(self, address: str) -> Coordinate:
        if address == "Atlantis":
            raise GeocodeNotFound("no match")
        return Coordinate(35.6586, 139.7454)


def test_cli_geocode(monkeypatch, capsys):
    monkeypatch.setattr(cli, "NominatimGeocoder", _StubGeocoder)

    assert cli.main(["geocode", "Tokyo Tower"]) == 0
    assert capsys.readouterr().out.strip() == "35.658600, 139.745400"

    assert cli.main(["geocode", "Atlantis"]) == 1
    assert "Geocoding error" in capsys.readouterr().out

    assert cli.main(["geocode", "xx"]) == 2


def test_cli_log_level_flag_is_applied(monkeypatch, capsys):
    levels = []
    monkeypatch.setattr(cli, "configure_logging", levels.append)
    assert cli.main(["--log-level", "DEBUG", "circle", "--lat", "0", "--lon", "0", "--radius", "1000"]) == 0
    assert levels == ["DEBUG"]
